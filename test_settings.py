"""
Settings Test Suite

Tests for persistent settings load/save.

Sections:
    1. Load — missing file, corrupt file, partial, unknown keys, bad values
    2. Save — round-trip, bad path
    3. Atomic Writes
"""
import json

from settings import DEFAULTS, load_settings, save_settings

# ── 1. Load ──────────────────────────────────────────────────────────────────


def test_load_missing_file_returns_defaults(tmp_path):
    """Loading from a nonexistent file returns DEFAULTS."""
    path = tmp_path / "no_such_file.json"
    result = load_settings(path=path)
    assert result == DEFAULTS


def test_load_corrupt_file_returns_defaults(tmp_path):
    """Loading from a corrupt (non-JSON) file returns DEFAULTS."""
    path = tmp_path / "bad.json"
    path.write_text("not json at all {{{")
    result = load_settings(path=path)
    assert result == DEFAULTS


def test_load_non_object_returns_defaults(tmp_path):
    path = tmp_path / "list.json"
    path.write_text(json.dumps(["double_out"]))
    assert load_settings(path=path) == DEFAULTS


def test_defaults_are_a_copy(tmp_path):
    result = load_settings(path=tmp_path / "missing.json")
    result["max_paths"] = 99
    assert DEFAULTS["max_paths"] == 10


def test_partial_file_fills_missing_keys(tmp_path):
    """A file with only some keys gets missing ones filled from DEFAULTS."""
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"mode": "master_out"}))
    result = load_settings(path=path)
    assert result["mode"] == "master_out"
    assert result["max_paths"] == DEFAULTS["max_paths"]
    assert result["dark_mode"] == DEFAULTS["dark_mode"]


def test_unknown_keys_ignored(tmp_path):
    """Unknown keys in the file are dropped, not passed through."""
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"dark_mode": True, "unknown_key": 42}))
    result = load_settings(path=path)
    assert "unknown_key" not in result
    assert result["dark_mode"] is True


def test_invalid_values_fall_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"mode": "triple_out", "max_paths": 0, "dark_mode": "yes"}))
    assert load_settings(path=path) == DEFAULTS


def test_bool_is_not_a_path_limit(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"max_paths": True}))
    assert load_settings(path=path)["max_paths"] == DEFAULTS["max_paths"]


def test_mode_is_normalised(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"mode": "Single-Out"}))
    assert load_settings(path=path)["mode"] == "single_out"


# ── 2. Save ──────────────────────────────────────────────────────────────────


def test_save_load_round_trip(tmp_path):
    """Settings survive a save/load round trip."""
    path = tmp_path / "settings.json"
    settings = {"mode": "single_out", "max_paths": 25, "dark_mode": True}
    save_settings(settings, path=path)
    loaded = load_settings(path=path)
    assert loaded == settings


def test_save_to_bad_path_does_not_raise(tmp_path):
    """Writing to an invalid path silently fails."""
    bad_path = tmp_path / "nonexistent_dir" / "nested" / "settings.json"
    # Should not raise
    save_settings({"dark_mode": True}, path=bad_path)
    assert not bad_path.exists()


# ── 3. Atomic Writes ────────────────────────────────────────────────────────


def test_atomic_write_preserves_existing_settings(tmp_path):
    """Existing settings survive even if a .tmp file is left over from a crash."""
    path = tmp_path / "settings.json"
    save_settings({"mode": "master_out", "max_paths": 5, "dark_mode": True}, path=path)

    # Simulate a crashed partial write
    tmp_file = tmp_path / "settings.json.tmp"
    tmp_file.write_text("corrupted garbage")

    # Original should still load correctly
    loaded = load_settings(path=path)
    assert loaded["mode"] == "master_out"
    assert loaded["max_paths"] == 5


def test_save_leaves_no_temp_files(tmp_path):
    path = tmp_path / "settings.json"
    save_settings(dict(DEFAULTS), path=path)
    assert [p.name for p in tmp_path.iterdir()] == ["settings.json"]
