from __future__ import annotations

import contextlib
from typing import AsyncIterator

import httpx
import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from auth.models import RelayConfig
from auth.oauth_relay import OAuthRelay
from relay.constants import APP_VERSION, LOGGER
from relay.env import load_config, load_env, setup_logging


async def health_route(request: Request) -> Response:
    del request
    return JSONResponse({"status": "ok", "version": APP_VERSION})


def create_app(config: RelayConfig | None = None, **relay_kwargs) -> Starlette:
    """Build the relay application.

    Without an explicit ``config`` the environment (and ``.env``) is read once
    here; nothing downstream looks at the environment again. Extra keyword
    arguments are forwarded to ``OAuthRelay`` so callers can swap the token
    exchange functions or the delivery strategy.
    """
    if config is None:
        load_env()
        setup_logging()
        config = load_config()

    oauth_relay = OAuthRelay(config, **relay_kwargs)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        del app
        if oauth_relay.http_client is not None:
            yield
            return
        async with httpx.AsyncClient(timeout=config.token_timeout) as client:
            oauth_relay.http_client = client
            try:
                yield
            finally:
                oauth_relay.http_client = None

    routes = [
        *oauth_relay.routes(),
        Route("/health", health_route, methods=["GET"]),
    ]
    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.oauth_relay = oauth_relay
    LOGGER.info(
        "Relay configured mode=%s login=%s callback=%s refresh=%s",
        config.response_mode,
        config.route("/login"),
        config.route("/callback"),
        config.route("/refresh"),
    )
    return app


def main() -> None:
    load_env()
    setup_logging()
    config = load_config()
    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
