from __future__ import annotations

import logging

LOGGER = logging.getLogger("relay")
APP_VERSION = "0.1.0"

STATE_COOKIE_KEY = "spotify_auth_state"
STATE_LENGTH = 16

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8888
DEFAULT_TOKEN_TIMEOUT = 10.0

RESPONSE_MODE_JSON = "json"
RESPONSE_MODE_REDIRECT = "redirect"
RESPONSE_MODES = {RESPONSE_MODE_JSON, RESPONSE_MODE_REDIRECT}
