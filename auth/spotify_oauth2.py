from __future__ import annotations

import base64
import urllib.parse
from dataclasses import dataclass
from typing import Sequence

import httpx

from relay.constants import DEFAULT_TOKEN_TIMEOUT, LOGGER

from .errors import UpstreamExchangeError

SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"

_MAX_LOGGED_BODY = 500


@dataclass
class TokenResponse:
    access_token: str
    expires_in: int
    refresh_token: str | None = None
    scope: str = ""
    token_type: str = "Bearer"

    @classmethod
    def from_payload(cls, payload: object) -> "TokenResponse":
        if not isinstance(payload, dict):
            raise UpstreamExchangeError("Token response must be a JSON object.")

        access_token = payload.get("access_token")
        expires_in = payload.get("expires_in")
        refresh_token = payload.get("refresh_token")
        scope = payload.get("scope", "")
        token_type = payload.get("token_type", "Bearer")

        if not isinstance(access_token, str) or not access_token:
            raise UpstreamExchangeError("Token response missing access_token.")
        if not isinstance(expires_in, int) or isinstance(expires_in, bool):
            raise UpstreamExchangeError("Token response missing expires_in.")
        if refresh_token is not None and not isinstance(refresh_token, str):
            raise UpstreamExchangeError("Token response refresh_token must be a string.")

        return cls(
            access_token=access_token,
            expires_in=expires_in,
            refresh_token=refresh_token or None,
            scope=scope if isinstance(scope, str) else "",
            token_type=token_type if isinstance(token_type, str) else "Bearer",
        )


def basic_auth_header(client_id: str, client_secret: str) -> str:
    credentials = f"{client_id}:{client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    scopes: Sequence[str],
    state: str,
) -> str:
    query = {
        "response_type": "code",
        "client_id": client_id,
        "scope": " ".join(scopes),
        "redirect_uri": redirect_uri,
        "state": state,
    }
    encoded = urllib.parse.urlencode(query, quote_via=urllib.parse.quote)
    return f"{SPOTIFY_AUTHORIZE_URL}?{encoded}"


def _truncate(text: str) -> str:
    if len(text) > _MAX_LOGGED_BODY:
        return text[:_MAX_LOGGED_BODY] + "...<truncated>"
    return text


async def _token_request(
    payload: dict[str, str],
    *,
    authorization: str,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TOKEN_TIMEOUT,
) -> TokenResponse:
    own_client = client is None
    http_client = client or httpx.AsyncClient()
    grant_type = payload.get("grant_type")

    try:
        response = await http_client.post(
            SPOTIFY_TOKEN_URL,
            data=payload,
            headers={"Authorization": authorization},
            timeout=timeout,
        )
        response.raise_for_status()
        body = response.json()
    except httpx.HTTPStatusError as error:
        LOGGER.warning(
            "Spotify token request failed grant=%s status=%s body=%s",
            grant_type,
            error.response.status_code,
            _truncate(error.response.text),
        )
        raise UpstreamExchangeError(
            f"Token request failed with status {error.response.status_code}."
        ) from error
    except httpx.HTTPError as error:
        LOGGER.warning(
            "Spotify token request failed grant=%s error=%s",
            grant_type,
            type(error).__name__,
        )
        raise UpstreamExchangeError(f"Token request failed: {type(error).__name__}.") from error
    except ValueError as error:
        LOGGER.warning("Spotify token response was not JSON grant=%s", grant_type)
        raise UpstreamExchangeError("Token response was not valid JSON.") from error
    finally:
        if own_client:
            await http_client.aclose()

    token = TokenResponse.from_payload(body)
    LOGGER.info(
        "Spotify token request succeeded grant=%s expires_in=%s",
        grant_type,
        token.expires_in,
    )
    return token


async def exchange_code(
    client_id: str,
    client_secret: str,
    code: str,
    redirect_uri: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TOKEN_TIMEOUT,
) -> TokenResponse:
    return await _token_request(
        {
            "code": code,
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
        },
        authorization=basic_auth_header(client_id, client_secret),
        client=client,
        timeout=timeout,
    )


async def refresh_token(
    client_id: str,
    client_secret: str,
    refresh_token: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TOKEN_TIMEOUT,
) -> TokenResponse:
    return await _token_request(
        {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        },
        authorization=basic_auth_header(client_id, client_secret),
        client=client,
        timeout=timeout,
    )
