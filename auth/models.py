from __future__ import annotations

from dataclasses import dataclass, field

from relay.constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TOKEN_TIMEOUT,
    RESPONSE_MODE_JSON,
)


@dataclass(frozen=True)
class RelayConfig:
    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: tuple[str, ...] = ()
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    response_mode: str = RESPONSE_MODE_JSON
    app_url: str = "/"
    error_url: str = "/error"
    token_timeout: float = DEFAULT_TOKEN_TIMEOUT
    cors_origins: frozenset[str] = field(default_factory=lambda: frozenset({"*"}))
    path_prefix: str = ""

    def route(self, path: str) -> str:
        return f"{self.path_prefix.rstrip('/')}{path}"
