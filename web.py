#!/usr/bin/env python3
"""
Checkout Web — Flask JSON API + WebSocket server for browser lookups.

Every request is answered straight from the checkout resolver; there is no
per-connection state beyond the socket itself.
"""
import json
import logging

logger = logging.getLogger(__name__)

from flask import Flask, jsonify, render_template, request
from flask_sock import Sock

from board import FinishingRule, describe_rule, max_score, parse_rule
from checkout import path_to_dict
from checkout_tables import BOGEY_NUMBERS, checkouts_for
from settings import load_settings

app = Flask(__name__)
sock = Sock(app)


class QueryError(ValueError):
    """A client query that can't be answered (bad score, mode or limit)."""


@app.route("/")
def index():
    """Landing page with the score/mode form."""
    settings = load_settings()
    return render_template(
        "index.html",
        modes=[(rule.value, describe_rule(rule)) for rule in FinishingRule],
        default_mode=settings["mode"],
        default_limit=settings["max_paths"],
    )


@app.route("/api/checkouts")
def api_checkouts():
    """Ranked checkouts for ?score=N&mode=M&limit=K as JSON."""
    try:
        payload = _handle_query(request.args)
    except QueryError as exc:
        logger.warning("Bad checkout query %s: %s", dict(request.args), exc)
        return jsonify({"error": str(exc)}), 400
    return jsonify(payload)


@app.route("/api/bogeys")
def api_bogeys():
    """Scores with no checkout under ?mode=M."""
    rule = parse_rule(request.args.get("mode", load_settings()["mode"]))
    if rule is None:
        return jsonify({"error": "unknown mode"}), 400
    return jsonify({"mode": rule.value, "bogeys": list(BOGEY_NUMBERS[rule])})


@sock.route("/ws")
def websocket(ws):
    """WebSocket handler — each JSON query message gets one JSON reply."""
    _serve_queries(ws)


def _serve_queries(ws):
    """Answer queries from `ws` until the client closes the connection."""
    try:
        while True:
            data = ws.receive()
            if data is None:
                break
            try:
                query = json.loads(data)
            except json.JSONDecodeError:
                logger.warning("Invalid JSON from client: %s", data)
                continue
            if not isinstance(query, dict):
                logger.warning("Ignoring non-object query: %s", data)
                continue

            try:
                reply = _handle_query(query)
            except QueryError as exc:
                reply = {"error": str(exc)}
            ws.send(json.dumps(reply))
    except Exception:
        logger.error("WebSocket receive error", exc_info=True)


def _parse_int(value, name):
    """Parse an int query field, rejecting bools and junk."""
    if isinstance(value, bool):
        raise QueryError(f"{name} must be an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise QueryError(f"{name} must be an integer") from None


def _handle_query(query):
    """
    Resolve a checkout query into a JSON-ready payload

    Args:
        query: Mapping with "score", optional "mode" and "limit"

    Returns:
        Dict with score, mode, rule description, total path count and the
        top `limit` ranked paths

    Raises:
        QueryError: if the score is missing or not an integer, the mode is
            unknown, or the limit is not positive
    """
    settings = load_settings()

    if query.get("score") is None:
        raise QueryError("score is required")
    score = _parse_int(query.get("score"), "score")

    rule = parse_rule(query.get("mode", settings["mode"]))
    if rule is None:
        raise QueryError(f"unknown mode: {query.get('mode')!r}")

    limit = _parse_int(query.get("limit", settings["max_paths"]), "limit")
    if limit < 1:
        raise QueryError("limit must be positive")

    paths = checkouts_for(score, rule)
    return {
        "score": score,
        "mode": rule.value,
        "rule": describe_rule(rule),
        "max_score": max_score(rule),
        "count": len(paths),
        "paths": [path_to_dict(p) for p in paths[:limit]],
    }


def main(argv=None):
    """Entry point for the web server."""
    import argparse
    parser = argparse.ArgumentParser(description="Darts Checkout Web Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper())
    print(f"Starting checkout web server at http://{args.host}:{args.port}")
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
