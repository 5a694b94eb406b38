"""Tests for web.py — query handling and the JSON endpoints."""
import json
import logging

import pytest

from settings import save_settings
from web import QueryError, _handle_query, _parse_int, _serve_queries, app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


class FakeSocket:
    """Stands in for a flask-sock connection: replays messages, records replies."""

    def __init__(self, *messages):
        self.incoming = list(messages)
        self.sent = []

    def receive(self):
        if not self.incoming:
            return None
        message = self.incoming.pop(0)
        if isinstance(message, Exception):
            raise message
        return message

    def send(self, data):
        self.sent.append(json.loads(data))


# ── _handle_query ────────────────────────────────────────────────────────────

class TestHandleQuery:

    def test_170_double_out(self):
        payload = _handle_query({"score": 170, "mode": "double_out"})
        assert payload["score"] == 170
        assert payload["mode"] == "double_out"
        assert payload["max_score"] == 170
        assert payload["count"] == 1
        labels = [t["label"] for t in payload["paths"][0]["throws"]]
        assert labels == ["T20", "T20", "BULL"]

    def test_string_fields_from_query_args(self):
        payload = _handle_query({"score": "60", "mode": "single-out", "limit": "3"})
        assert payload["mode"] == "single_out"
        assert len(payload["paths"]) == 3

    def test_limit_defaults_to_settings(self, isolated_settings):
        save_settings({"mode": "master_out", "max_paths": 4, "dark_mode": False},
                      path=isolated_settings)
        payload = _handle_query({"score": 100})
        assert payload["mode"] == "master_out"
        assert len(payload["paths"]) == 4
        assert payload["count"] > 4

    def test_bogey_is_an_empty_answer(self):
        payload = _handle_query({"score": 169, "mode": "double_out"})
        assert payload["count"] == 0
        assert payload["paths"] == []

    def test_out_of_range_is_an_empty_answer(self):
        assert _handle_query({"score": 0})["paths"] == []
        assert _handle_query({"score": 999})["paths"] == []

    @pytest.mark.parametrize("query", [
        {},
        {"score": None},
        {"score": "abc"},
        {"score": True},
        {"score": 40, "mode": "triple_out"},
        {"score": 40, "limit": 0},
        {"score": 40, "limit": "lots"},
    ])
    def test_bad_queries_raise(self, query):
        with pytest.raises(QueryError):
            _handle_query(query)


class TestParseInt:

    def test_int_passes_through(self):
        assert _parse_int(7, "score") == 7

    def test_string_is_parsed(self):
        assert _parse_int(" 121 ", "score") == 121

    def test_float_string_rejected(self):
        with pytest.raises(QueryError):
            _parse_int("12.5", "score")


# ── Endpoints ────────────────────────────────────────────────────────────────

class TestEndpoints:

    def test_index(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"Darts Checkout" in resp.data
        assert b"double_out" in resp.data

    def test_api_checkouts(self, client):
        resp = client.get("/api/checkouts?score=40&mode=double_out&limit=2")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["paths"][0]["throws"][0]["label"] == "D20"
        assert len(data["paths"]) == 2

    def test_api_checkouts_bad_mode(self, client):
        resp = client.get("/api/checkouts?score=40&mode=nope")
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_api_checkouts_missing_score(self, client):
        resp = client.get("/api/checkouts")
        assert resp.status_code == 400

    def test_api_bogeys(self, client):
        resp = client.get("/api/bogeys?mode=double_out")
        assert resp.status_code == 200
        assert resp.get_json()["bogeys"] == [1, 159, 162, 163, 165, 166, 168, 169]

    def test_api_bogeys_bad_mode(self, client):
        resp = client.get("/api/bogeys?mode=nope")
        assert resp.status_code == 400

    def test_payload_is_json_serialisable(self):
        payload = _handle_query({"score": 121, "mode": "master_out"})
        assert json.loads(json.dumps(payload)) == payload


# ── WebSocket ────────────────────────────────────────────────────────────────

class TestWebSocket:

    def test_query_gets_payload(self):
        ws = FakeSocket(json.dumps({"score": 170, "mode": "double_out"}))
        _serve_queries(ws)
        assert len(ws.sent) == 1
        assert ws.sent[0]["count"] == 1
        assert [t["label"] for t in ws.sent[0]["paths"][0]["throws"]] == ["T20", "T20", "BULL"]

    def test_bad_query_gets_error_reply(self):
        ws = FakeSocket(json.dumps({"score": 40, "mode": "triple_out"}))
        _serve_queries(ws)
        assert ws.sent == [{"error": "unknown mode: 'triple_out'"}]

    def test_invalid_json_is_skipped(self, caplog):
        caplog.set_level(logging.WARNING, logger="web")
        ws = FakeSocket("{not json", json.dumps({"score": 40}))
        _serve_queries(ws)
        assert len(ws.sent) == 1
        assert ws.sent[0]["score"] == 40
        assert "Invalid JSON" in caplog.text

    def test_non_object_is_skipped(self, caplog):
        caplog.set_level(logging.WARNING, logger="web")
        ws = FakeSocket("[170]", "42", json.dumps({"score": 32, "mode": "double_out"}))
        _serve_queries(ws)
        assert len(ws.sent) == 1
        assert ws.sent[0]["paths"][0]["throws"][0]["label"] == "D16"
        assert caplog.text.count("non-object") == 2

    def test_one_reply_per_query_in_order(self):
        ws = FakeSocket(
            json.dumps({"score": 169, "mode": "double_out"}),
            json.dumps({"mode": "double_out"}),
            json.dumps({"score": 2, "mode": "single_out", "limit": 1}),
        )
        _serve_queries(ws)
        assert ws.sent[0]["count"] == 0
        assert ws.sent[1] == {"error": "score is required"}
        assert len(ws.sent[2]["paths"]) == 1

    def test_connection_error_ends_loop(self, caplog):
        ws = FakeSocket(json.dumps({"score": 40}), ConnectionError("gone"), json.dumps({"score": 32}))
        _serve_queries(ws)
        assert len(ws.sent) == 1
        assert "WebSocket receive error" in caplog.text
        assert ws.incoming == [json.dumps({"score": 32})]
