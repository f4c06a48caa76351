"""
Backend error taxonomy.

    NetworkError      no response at all (connection refused, DNS, reset)
    ApiError          error response; carries the server message when present
    ApplicationError  HTTP 2xx with {"success": false}

Call sites catch ApiError and turn it into a toast with error_message().
"""

from __future__ import annotations

from typing import Any

NETWORK_ERROR_MESSAGE = "네트워크 연결을 확인해주세요."
GENERIC_ERROR_MESSAGE = "요청을 처리하는 중 오류가 발생했습니다."


class ApiError(Exception):
    """A backend call that did not succeed."""

    def __init__(self, status: int | None, payload: Any = None, message: str | None = None):
        self.status = status
        self.payload = payload
        self.message = message if message is not None else _server_message(payload)
        super().__init__(self.message or f"backend request failed (status={status})")

    @property
    def is_forbidden(self) -> bool:
        return self.status == 403

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401


class ApplicationError(ApiError):
    """HTTP 2xx with an application-level failure ({"success": false})."""


class NetworkError(ApiError):
    """The backend could not be reached."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(status=None, payload=None, message=None)

    def __str__(self) -> str:
        return f"backend unreachable: {self.cause}"


def _server_message(payload: Any) -> str | None:
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


def error_message(exc: ApiError, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
    """
    Pick the user-visible message for a failed call.

    Network failures get the connection hint, server messages are shown
    verbatim, anything else gets the call site's fallback.
    """
    if isinstance(exc, NetworkError):
        return NETWORK_ERROR_MESSAGE
    if exc.message:
        return exc.message
    return fallback
