from __future__ import annotations

import httpx
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.routing import Route

from auth import spotify_oauth2
from auth.cors import apply_cors_response, cors_preflight_response
from auth.delivery import JSONDelivery, ResponseDelivery, build_delivery
from auth.errors import (
    MissingRefreshTokenError,
    StateMismatchError,
    UpstreamExchangeError,
)
from auth.models import RelayConfig
from auth.state import generate_random_string
from relay.constants import LOGGER, STATE_COOKIE_KEY, STATE_LENGTH


class OAuthRelay:
    def __init__(
        self,
        config: RelayConfig,
        *,
        delivery: ResponseDelivery | None = None,
        http_client: httpx.AsyncClient | None = None,
        exchange_code_fn=spotify_oauth2.exchange_code,
        refresh_token_fn=spotify_oauth2.refresh_token,
        state_fn=generate_random_string,
    ) -> None:
        self.config = config
        self.delivery = delivery or build_delivery(config)
        self.http_client = http_client

        self._json = JSONDelivery()
        self._exchange_code_fn = exchange_code_fn
        self._refresh_token_fn = refresh_token_fn
        self._state_fn = state_fn

    # -- routes ----------------------------------------------------------------

    def routes(self) -> list[Route]:
        login_path = self.config.route("/login")
        callback_path = self.config.route("/callback")
        refresh_path = self.config.route("/refresh")

        routes = [
            Route(login_path, self._handle_login, methods=["GET"]),
            Route(callback_path, self._handle_callback, methods=["GET"]),
            Route(refresh_path, self._handle_refresh, methods=["GET", "POST"]),
        ]
        for path in (login_path, callback_path, refresh_path):
            routes.append(Route(path, self._handle_preflight, methods=["OPTIONS"]))
        return routes

    # -- handlers --------------------------------------------------------------

    async def _handle_login(self, request: Request) -> Response:
        state = self._state_fn(STATE_LENGTH)
        authorize_url = spotify_oauth2.build_authorization_url(
            client_id=self.config.client_id,
            redirect_uri=self.config.redirect_uri,
            scopes=self.config.scopes,
            state=state,
        )

        response = RedirectResponse(url=authorize_url, status_code=302)
        response.set_cookie(STATE_COOKIE_KEY, state, httponly=True, samesite="lax")
        LOGGER.info("Issued authorization redirect scopes=%s", " ".join(self.config.scopes))
        return self._cors(request, response)

    async def _handle_callback(self, request: Request) -> Response:
        code = request.query_params.get("code") or ""
        state = request.query_params.get("state")
        stored_state = request.cookies.get(STATE_COOKIE_KEY)

        if not self._state_matches(state, stored_state):
            LOGGER.warning(
                "Rejected callback: state mismatch (state_present=%s cookie_present=%s)",
                bool(state),
                bool(stored_state),
            )
            return self._cors(request, self.delivery.failure(StateMismatchError()))

        try:
            if request.query_params.get("error"):
                LOGGER.warning(
                    "Spotify returned an authorization error: %s",
                    request.query_params.get("error"),
                )
                raise UpstreamExchangeError("Authorization was not granted.")

            exchanged = await self._exchange_code_fn(
                client_id=self.config.client_id,
                client_secret=self.config.client_secret,
                code=code,
                redirect_uri=self.config.redirect_uri,
                client=self.http_client,
                timeout=self.config.token_timeout,
            )
        except UpstreamExchangeError as error:
            response = self.delivery.failure(error)
        else:
            response = self.delivery.success(
                {
                    "accessToken": exchanged.access_token,
                    "refreshToken": exchanged.refresh_token,
                    "expiresIn": exchanged.expires_in,
                }
            )

        response.delete_cookie(STATE_COOKIE_KEY, httponly=True, samesite="lax")
        return self._cors(request, response)

    async def _handle_refresh(self, request: Request) -> Response:
        try:
            token = await self._read_refresh_token(request)
            if not token:
                raise MissingRefreshTokenError()

            refreshed = await self._refresh_token_fn(
                client_id=self.config.client_id,
                client_secret=self.config.client_secret,
                refresh_token=token,
                client=self.http_client,
                timeout=self.config.token_timeout,
            )
        except MissingRefreshTokenError as error:
            LOGGER.info("Rejected refresh without refreshToken.")
            return self._cors(request, self._json.failure(error))
        except UpstreamExchangeError as error:
            return self._cors(request, self._json.failure(error))

        return self._cors(
            request,
            self._json.success(
                {
                    "accessToken": refreshed.access_token,
                    "expiresIn": refreshed.expires_in,
                }
            ),
        )

    async def _handle_preflight(self, request: Request) -> Response:
        return cors_preflight_response(request, self.config.cors_origins)

    # -- helpers ---------------------------------------------------------------

    @staticmethod
    def _state_matches(state: str | None, stored_state: str | None) -> bool:
        return bool(state) and bool(stored_state) and state == stored_state

    async def _read_refresh_token(self, request: Request) -> str | None:
        token = request.query_params.get("refreshToken")
        if token or request.method != "POST":
            return token

        content_type = request.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            try:
                payload = await request.json()
            except ValueError:
                return None
            if isinstance(payload, dict):
                value = payload.get("refreshToken")
                return value if isinstance(value, str) else None
            return None

        if content_type.startswith(
            ("application/x-www-form-urlencoded", "multipart/form-data")
        ):
            try:
                form = await request.form()
            except (MultiPartException, HTTPException):
                return None
            value = form.get("refreshToken")
            return value if isinstance(value, str) else None

        return None

    def _cors(self, request: Request, response: Response) -> Response:
        return apply_cors_response(request, response, self.config.cors_origins)
