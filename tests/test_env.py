import pytest

from relay import env


def test_load_config_from_env(relay_env) -> None:
    config = env.load_config()

    assert config.client_id == "spotify-client"
    assert config.client_secret == "spotify-secret"
    assert config.redirect_uri == "https://relay.example.com/callback"
    assert config.scopes == ("user-read-private", "user-read-email")
    assert config.host == "127.0.0.1"
    assert config.port == 8888
    assert config.response_mode == "json"
    assert config.token_timeout == 10.0
    assert config.cors_origins == frozenset({"*"})
    assert config.path_prefix == ""


def test_config_is_immutable(relay_env) -> None:
    config = env.load_config()

    with pytest.raises(AttributeError):
        config.client_id = "other"


def test_port_prefers_platform_port(relay_env) -> None:
    relay_env.setenv("RELAY_PORT", "9000")
    relay_env.setenv("PORT", "5000")

    assert env.load_config().port == 5000


def test_relay_port_used_without_platform_port(relay_env) -> None:
    relay_env.setenv("RELAY_PORT", "9000")

    assert env.load_config().port == 9000


def test_optional_settings(relay_env) -> None:
    relay_env.setenv("RELAY_RESPONSE_MODE", "Redirect")
    relay_env.setenv("RELAY_APP_URL", "https://app.example.com/")
    relay_env.setenv("RELAY_ERROR_URL", "https://app.example.com/error")
    relay_env.setenv("RELAY_TOKEN_TIMEOUT", "2.5")
    relay_env.setenv("RELAY_CORS_ORIGINS", "https://a.example, https://b.example")
    relay_env.setenv("RELAY_PATH_PREFIX", "/spotify-auth")

    config = env.load_config()

    assert config.response_mode == "redirect"
    assert config.app_url == "https://app.example.com/"
    assert config.error_url == "https://app.example.com/error"
    assert config.token_timeout == 2.5
    assert config.cors_origins == frozenset({"https://a.example", "https://b.example"})
    assert config.route("/login") == "/spotify-auth/login"


def test_validate_env_missing_vars(relay_env) -> None:
    relay_env.delenv("SPOTIFY_CLIENT_ID")
    relay_env.delenv("SPOTIFY_CLIENT_SECRET")
    relay_env.delenv("SPOTIFY_REDIRECT_URI")

    with pytest.raises(RuntimeError) as excinfo:
        env.validate_env()

    message = str(excinfo.value)
    assert "SPOTIFY_CLIENT_ID" in message
    assert "SPOTIFY_CLIENT_SECRET" in message
    assert "SPOTIFY_REDIRECT_URI" in message


def test_validate_env_rejects_relative_redirect_uri(relay_env) -> None:
    relay_env.setenv("SPOTIFY_REDIRECT_URI", "/callback")

    with pytest.raises(RuntimeError, match="SPOTIFY_REDIRECT_URI"):
        env.validate_env()


def test_validate_env_rejects_unknown_response_mode(relay_env) -> None:
    relay_env.setenv("RELAY_RESPONSE_MODE", "carrier-pigeon")

    with pytest.raises(RuntimeError, match="RELAY_RESPONSE_MODE"):
        env.validate_env()


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_invalid_timeout(relay_env, raw: str) -> None:
    relay_env.setenv("RELAY_TOKEN_TIMEOUT", raw)

    with pytest.raises(RuntimeError, match="RELAY_TOKEN_TIMEOUT"):
        env.load_config()


def test_invalid_port(relay_env) -> None:
    relay_env.setenv("PORT", "eighty")

    with pytest.raises(RuntimeError, match="PORT must be an integer"):
        env.load_config()


def test_empty_scopes_warns(relay_env, caplog) -> None:
    relay_env.setenv("SPOTIFY_SCOPES", "")

    with caplog.at_level("WARNING", logger="relay"):
        env.validate_env()

    assert "SPOTIFY_SCOPES is empty" in caplog.text


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("yes", True), (" ON ", True), ("0", False), ("", False), (None, False)],
)
def test_is_truthy(raw, expected) -> None:
    assert env.is_truthy(raw) is expected
