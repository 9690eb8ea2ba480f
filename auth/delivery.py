"""How the callback hands its outcome back to the calling application.

Browser-driven deployments want the relay to bounce the user back to the
application with the result in the query string; API-driven deployments want
a JSON body. Both are expressed as a ``ResponseDelivery`` so the handlers in
``auth.oauth_relay`` stay free of mode checks.
"""

from __future__ import annotations

import urllib.parse
from abc import ABC, abstractmethod

from starlette.responses import JSONResponse, RedirectResponse, Response

from auth.errors import RelayError
from auth.models import RelayConfig
from relay.constants import RESPONSE_MODE_JSON, RESPONSE_MODE_REDIRECT


def _with_query(url: str, params: dict[str, str]) -> str:
    parsed = urllib.parse.urlsplit(url)
    query = [
        (key, value)
        for key, value in urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
        if key not in params
    ]
    query.extend(params.items())
    return urllib.parse.urlunsplit(parsed._replace(query=urllib.parse.urlencode(query)))


class ResponseDelivery(ABC):
    @abstractmethod
    def success(self, payload: dict) -> Response:
        raise NotImplementedError

    @abstractmethod
    def failure(self, error: RelayError) -> Response:
        raise NotImplementedError


class JSONDelivery(ResponseDelivery):
    def success(self, payload: dict) -> Response:
        return JSONResponse(payload, status_code=200)

    def failure(self, error: RelayError) -> Response:
        return JSONResponse({"code": error.code}, status_code=error.status_code)


class RedirectDelivery(ResponseDelivery):
    def __init__(self, app_url: str = "/", error_url: str = "/error") -> None:
        self.app_url = app_url
        self.error_url = error_url

    def success(self, payload: dict) -> Response:
        params = {key: str(value) for key, value in payload.items() if value is not None}
        return RedirectResponse(url=_with_query(self.app_url, params), status_code=302)

    def failure(self, error: RelayError) -> Response:
        return RedirectResponse(
            url=_with_query(self.error_url, {"error": error.code}),
            status_code=302,
        )


def build_delivery(config: RelayConfig) -> ResponseDelivery:
    if config.response_mode == RESPONSE_MODE_REDIRECT:
        return RedirectDelivery(app_url=config.app_url, error_url=config.error_url)
    if config.response_mode == RESPONSE_MODE_JSON:
        return JSONDelivery()
    raise RuntimeError(f"Unknown response mode: {config.response_mode!r}")
