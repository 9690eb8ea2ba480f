import pytest

RELAY_ENV_KEYS = (
    "SPOTIFY_CLIENT_ID",
    "SPOTIFY_CLIENT_SECRET",
    "SPOTIFY_REDIRECT_URI",
    "SPOTIFY_SCOPES",
    "PORT",
    "RELAY_PORT",
    "RELAY_HOST",
    "RELAY_RESPONSE_MODE",
    "RELAY_APP_URL",
    "RELAY_ERROR_URL",
    "RELAY_TOKEN_TIMEOUT",
    "RELAY_CORS_ORIGINS",
    "RELAY_PATH_PREFIX",
    "RELAY_DEBUG",
)


@pytest.fixture
def relay_env(monkeypatch) -> pytest.MonkeyPatch:
    for key in RELAY_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "spotify-client")
    monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "spotify-secret")
    monkeypatch.setenv("SPOTIFY_REDIRECT_URI", "https://relay.example.com/callback")
    monkeypatch.setenv("SPOTIFY_SCOPES", "user-read-private user-read-email")
    return monkeypatch
