from __future__ import annotations

from typing import AbstractSet

from starlette.requests import Request
from starlette.responses import Response

WILDCARD_ORIGIN = "*"


def _allowed_origin_header(origin: str | None, allowed_origins: AbstractSet[str]) -> str | None:
    if not origin:
        return None
    if origin in allowed_origins:
        return origin
    if WILDCARD_ORIGIN in allowed_origins:
        return WILDCARD_ORIGIN
    return None


def apply_cors_response(
    request: Request,
    response: Response,
    allowed_origins: AbstractSet[str],
) -> Response:
    allow_origin = _allowed_origin_header(request.headers.get("origin"), allowed_origins)
    if allow_origin is None:
        return response

    response.headers["Access-Control-Allow-Origin"] = allow_origin
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    # Credentials only for explicitly listed origins, never for the wildcard.
    if allow_origin != WILDCARD_ORIGIN:
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Vary"] = "Origin"
    return response


def cors_preflight_response(request: Request, allowed_origins: AbstractSet[str]) -> Response:
    return apply_cors_response(request, Response(status_code=204), allowed_origins)
