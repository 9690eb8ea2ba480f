from starlette.testclient import TestClient

from auth.errors import UpstreamExchangeError
from auth.models import RelayConfig
from auth.spotify_oauth2 import TokenResponse
from server import create_app


def _build_config(**overrides) -> RelayConfig:
    values = {
        "client_id": "spotify-client",
        "client_secret": "spotify-secret",
        "redirect_uri": "https://relay.example.com/callback",
        "scopes": ("user-read-private", "user-read-email"),
    }
    values.update(overrides)
    return RelayConfig(**values)


class ExchangeRecorder:
    """Stands in for the token endpoint; records every call it receives."""

    def __init__(self, result: TokenResponse | None = None, error: Exception | None = None):
        self.calls: list[dict] = []
        self._result = result
        self._error = error

    async def __call__(self, **kwargs) -> TokenResponse:
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        assert self._result is not None
        return self._result


def _default_exchange() -> ExchangeRecorder:
    return ExchangeRecorder(
        TokenResponse(access_token="AT", refresh_token="RT", expires_in=3600)
    )


def _default_refresh() -> ExchangeRecorder:
    return ExchangeRecorder(TokenResponse(access_token="AT2", expires_in=1800))


def _failing_exchange() -> ExchangeRecorder:
    return ExchangeRecorder(error=UpstreamExchangeError("boom"))


def _build_relay_client(*, config=None, exchange_code_fn=None, refresh_token_fn=None, **kwargs):
    exchange = exchange_code_fn or _default_exchange()
    refresh = refresh_token_fn or _default_refresh()
    app = create_app(
        config or _build_config(),
        exchange_code_fn=exchange,
        refresh_token_fn=refresh,
        **kwargs,
    )
    return TestClient(app), exchange, refresh


def _login(test_client: TestClient) -> str:
    response = test_client.get("/login", follow_redirects=False)
    return response.cookies["spotify_auth_state"]
