"""Persistent settings for the checkout resolver.

Stores user preferences in ~/.darts_checkout_settings.json.
No frontend dependency — shared by the CLI, TUI and web server.
"""

import json
import os
import tempfile
from pathlib import Path

from board import parse_rule

DEFAULTS = {
    "mode": "double_out",
    "max_paths": 10,
    "dark_mode": False,
}


def _default_path():
    """Return the default path for the settings file."""
    return Path.home() / ".darts_checkout_settings.json"


def _valid(key, value):
    """Check a stored value is usable for its key."""
    if key == "mode":
        return parse_rule(value) is not None
    if key == "max_paths":
        return isinstance(value, int) and not isinstance(value, bool) and value > 0
    if key == "dark_mode":
        return isinstance(value, bool)
    return False


def load_settings(path=None):
    """Load settings from JSON file. Returns DEFAULTS on missing/corrupt.

    Merges with DEFAULTS so missing keys get default values.
    Unknown keys are ignored, and so are known keys with unusable values.
    """
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        data = json.loads(path.read_text())
        if not isinstance(data, dict):
            return dict(DEFAULTS)
        # Merge: only keep known, valid keys, fill the rest from defaults
        result = dict(DEFAULTS)
        for key in DEFAULTS:
            if key in data and _valid(key, data[key]):
                result[key] = data[key]
        result["mode"] = parse_rule(result["mode"]).value
        return result
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return dict(DEFAULTS)


def save_settings(settings, path=None):
    """Write settings dict to JSON atomically. Silently ignores write errors."""
    if path is None:
        path = _default_path()
    path = Path(path)
    raw = json.dumps(settings, indent=2).encode()
    try:
        fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        closed = False
        try:
            os.write(fd, raw)
            os.close(fd)
            closed = True
            os.replace(tmp, path)
        except BaseException:
            if not closed:
                os.close(fd)
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise
    except OSError:
        pass  # Silently fail — settings are best-effort
