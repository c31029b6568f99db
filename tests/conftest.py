import pytest
from tuimark.config import reset_config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config loading at an empty directory and clear TUIMARK_* overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    for key in ("TUIMARK_INDENT", "TUIMARK_MAX_DEPTH", "TUIMARK_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield tmp_path
    reset_config()
