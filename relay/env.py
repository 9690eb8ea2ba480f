from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from auth.models import RelayConfig

from .constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TOKEN_TIMEOUT,
    LOGGER,
    RESPONSE_MODE_JSON,
    RESPONSE_MODES,
)

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_csv_env(key: str, default: str = "") -> set[str]:
    raw = os.getenv(key, default)
    if not raw.strip():
        return set()
    return {item.strip() for item in raw.split(",") if item.strip()}


def _get_env_int(key: str, default: int) -> int:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be an integer value.")


def _get_env_float(key: str, default: float) -> float:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number.")
    if value <= 0:
        raise RuntimeError(f"{key} must be greater than zero.")
    return value


def load_env() -> None:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if not env_path.exists():
        return
    load_dotenv(env_path, override=True)


def validate_env() -> None:
    required = (
        "SPOTIFY_CLIENT_ID",
        "SPOTIFY_CLIENT_SECRET",
        "SPOTIFY_REDIRECT_URI",
    )
    missing = [key for key in required if not os.getenv(key, "").strip()]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    redirect_uri = os.getenv("SPOTIFY_REDIRECT_URI", "").strip()
    try:
        _HTTP_URL.validate_python(redirect_uri)
    except ValidationError as error:
        raise RuntimeError(
            "SPOTIFY_REDIRECT_URI must be an absolute http(s) URL (for example: "
            "https://relay.example.com/callback)."
        ) from error

    response_mode = os.getenv("RELAY_RESPONSE_MODE", RESPONSE_MODE_JSON).strip().lower()
    if response_mode not in RESPONSE_MODES:
        raise RuntimeError(
            f"RELAY_RESPONSE_MODE must be one of: {', '.join(sorted(RESPONSE_MODES))}."
        )

    if not os.getenv("SPOTIFY_SCOPES", "").split():
        LOGGER.warning("SPOTIFY_SCOPES is empty; Spotify will grant only public access.")


def load_config() -> RelayConfig:
    validate_env()

    # PORT wins over RELAY_PORT.
    port = _get_env_int("PORT", _get_env_int("RELAY_PORT", DEFAULT_PORT))

    return RelayConfig(
        client_id=os.getenv("SPOTIFY_CLIENT_ID", "").strip(),
        client_secret=os.getenv("SPOTIFY_CLIENT_SECRET", "").strip(),
        redirect_uri=os.getenv("SPOTIFY_REDIRECT_URI", "").strip(),
        scopes=tuple(os.getenv("SPOTIFY_SCOPES", "").split()),
        host=os.getenv("RELAY_HOST", DEFAULT_HOST),
        port=port,
        response_mode=os.getenv("RELAY_RESPONSE_MODE", RESPONSE_MODE_JSON).strip().lower(),
        app_url=os.getenv("RELAY_APP_URL", "/"),
        error_url=os.getenv("RELAY_ERROR_URL", "/error"),
        token_timeout=_get_env_float("RELAY_TOKEN_TIMEOUT", DEFAULT_TOKEN_TIMEOUT),
        cors_origins=frozenset(parse_csv_env("RELAY_CORS_ORIGINS", "*")),
        path_prefix=os.getenv("RELAY_PATH_PREFIX", "").strip(),
    )


def setup_logging() -> bool:
    debug_enabled = is_truthy(os.getenv("RELAY_DEBUG", "1"))
    if debug_enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return debug_enabled
