import importlib

from src.config import config


def test_debug_is_off_unless_enabled(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.setattr("dotenv.load_dotenv", lambda *args, **kwargs: False)
    try:
        reloaded = importlib.reload(config)
        assert reloaded.ENVIRONMENT == "production"
        assert reloaded.DEBUG is False

        monkeypatch.setenv("DEBUG", "true")
        assert importlib.reload(config).DEBUG is True
    finally:
        monkeypatch.undo()
        importlib.reload(config)
