"""Shared pytest fixtures."""
import pytest

import settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the default settings file at a temp dir so tests never read ~."""
    path = tmp_path / "darts_checkout_settings.json"
    monkeypatch.setattr(settings, "_default_path", lambda: path)
    return path
