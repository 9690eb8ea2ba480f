from __future__ import annotations


class RelayError(RuntimeError):
    code = "relay_error"
    status_code = 500

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


class StateMismatchError(RelayError):
    code = "state_mismatch"
    status_code = 403


class MissingRefreshTokenError(RelayError):
    code = "refresh_token_required"
    status_code = 400


class UpstreamExchangeError(RelayError):
    code = "spotify_communication_error"
    status_code = 500
