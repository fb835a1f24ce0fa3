import pytest
from pydantic import ValidationError

from app.config import Settings


def _settings(**env):
    return Settings(_env_file=None, **env)


def test_defaults(monkeypatch):
    monkeypatch.delenv("AMADEUS_ENV", raising=False)
    s = _settings(AMADEUS_CLIENT_ID="id", AMADEUS_CLIENT_SECRET="secret")

    assert s.AMADEUS_ENV == "test"
    assert s.amadeus_host == "https://test.api.amadeus.com"
    assert s.AMADEUS_TOKEN_MARGIN_SECONDS == 30
    assert s.AMADEUS_DEFAULT_TOKEN_LIFETIME == 1500
    assert s.DEFAULT_CURRENCY == "THB"
    assert s.DEFAULT_MAX_OFFERS == 50
    assert s.MAX_OFFERS_CAP == 250


def test_production_host():
    s = _settings(AMADEUS_CLIENT_ID="id", AMADEUS_CLIENT_SECRET="secret", AMADEUS_ENV="production")
    assert s.amadeus_host == "https://api.amadeus.com"


@pytest.mark.parametrize("env", ["sandbox", "staging", "PRODUCTION"])
def test_anything_but_production_uses_test_host(env):
    s = _settings(AMADEUS_CLIENT_ID="id", AMADEUS_CLIENT_SECRET="secret", AMADEUS_ENV=env)
    assert s.amadeus_host == "https://test.api.amadeus.com"


def test_api_key_env_names_are_accepted(monkeypatch):
    monkeypatch.delenv("AMADEUS_CLIENT_ID", raising=False)
    monkeypatch.delenv("AMADEUS_CLIENT_SECRET", raising=False)
    monkeypatch.setenv("AMADEUS_API_KEY", "key-from-edge")
    monkeypatch.setenv("AMADEUS_API_SECRET", "secret-from-edge")

    s = _settings()

    assert s.AMADEUS_CLIENT_ID == "key-from-edge"
    assert s.AMADEUS_CLIENT_SECRET == "secret-from-edge"


def test_credentials_are_required(monkeypatch):
    for name in ("AMADEUS_CLIENT_ID", "AMADEUS_CLIENT_SECRET", "AMADEUS_API_KEY", "AMADEUS_API_SECRET"):
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(ValidationError):
        _settings()
