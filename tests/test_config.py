import pytest
from streamlit.errors import StreamlitSecretNotFoundError

from app import config


class _Secrets:
    def __init__(self, error=None, data=None):
        self._error = error
        self._data = data or {}

    @property
    def secrets(self):
        if self._error is not None:
            raise self._error
        return self._data


def test_missing_secrets_fall_back_to_defaults(monkeypatch):
    monkeypatch.setattr(config, "st", _Secrets(StreamlitSecretNotFoundError("no secrets.toml")))
    monkeypatch.delenv("BUDGET_CURRENCY", raising=False)
    monkeypatch.delenv("BUDGET_USER_ID", raising=False)
    monkeypatch.delenv("BUDGET_SEED_PATH", raising=False)

    assert config.load_config() == config.AppConfig()


def test_missing_secrets_file(monkeypatch):
    monkeypatch.setattr(config, "st", _Secrets(FileNotFoundError("secrets.toml")))
    monkeypatch.setenv("BUDGET_CURRENCY", "EUR")

    assert config.load_config().currency == "EUR"


def test_broken_secrets_are_not_hidden(monkeypatch):
    monkeypatch.setattr(config, "st", _Secrets(ValueError("bad toml")))

    with pytest.raises(ValueError):
        config.load_config()


def test_secrets_app_section(monkeypatch):
    monkeypatch.setattr(config, "st", _Secrets(data={"app": {"user_id": "alice", "extended_categories": True}}))
    monkeypatch.delenv("BUDGET_USER_ID", raising=False)

    cfg = config.load_config()
    assert cfg.user_id == "alice"
    assert cfg.extended_categories is True
