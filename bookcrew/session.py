"""
Session cookie handling.

The backend's access token is wrapped in a signed JWT and kept in an
HTTP-only cookie. Toasts that must survive a redirect ride in a short-lived
signed flash cookie.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Request, Response

from bookcrew import config
from bookcrew.state.toast import Toast

logger = logging.getLogger(__name__)

FLASH_MAX_AGE_SECONDS = 60


def _expiry_hours(auto_login: bool) -> int:
    if auto_login:
        return config.settings.AUTO_LOGIN_EXPIRY_HOURS
    return config.settings.SESSION_EXPIRY_HOURS


def create_session_token(access_token: str, auto_login: bool = False) -> str:
    """
    Wrap a backend access token in a signed session JWT.

    Args:
        access_token: Token issued by the backend login call
        auto_login: Use the long-lived expiry

    Returns:
        Signed JWT string
    """
    now = datetime.now(UTC)
    payload = {
        "sub": access_token,
        "exp": now + timedelta(hours=_expiry_hours(auto_login)),
        "iat": now,
    }
    return jwt.encode(
        payload, config.settings.SESSION_SECRET, algorithm=config.settings.SESSION_ALGORITHM
    )


def decode_session_token(session: str | None) -> str | None:
    """Return the backend access token, or None for a missing or bad cookie."""
    if not session:
        return None
    try:
        payload = jwt.decode(
            session,
            config.settings.SESSION_SECRET,
            algorithms=[config.settings.SESSION_ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        logger.info("session cookie expired")
        return None
    except jwt.InvalidTokenError:
        logger.info("invalid session cookie")
        return None
    return payload.get("sub")


def access_token(request: Request) -> str | None:
    return decode_session_token(request.cookies.get(config.settings.SESSION_COOKIE_NAME))


def set_session_cookie(response: Response, token: str, auto_login: bool = False) -> None:
    response.set_cookie(
        key=config.settings.SESSION_COOKIE_NAME,
        value=create_session_token(token, auto_login),
        httponly=True,
        secure=config.settings.SECURE_COOKIES,
        samesite="lax",
        max_age=_expiry_hours(auto_login) * 3600,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    # Clear cookie by setting it to expired
    response.set_cookie(
        key=config.settings.SESSION_COOKIE_NAME,
        value="",
        httponly=True,
        secure=config.settings.SECURE_COOKIES,
        samesite="lax",
        max_age=0,
        path="/",
    )


# ── flash toasts ────────────────────────────────────────────────────────────


def set_flash(response: Response, toasts: list[Toast]) -> None:
    """Carry toasts to the page the response redirects to."""
    if not toasts:
        return
    value = jwt.encode(
        {
            "toasts": [t.to_dict() for t in toasts],
            "exp": datetime.now(UTC) + timedelta(seconds=FLASH_MAX_AGE_SECONDS),
        },
        config.settings.SESSION_SECRET,
        algorithm=config.settings.SESSION_ALGORITHM,
    )
    response.set_cookie(
        key=config.settings.FLASH_COOKIE_NAME,
        value=value,
        httponly=True,
        secure=config.settings.SECURE_COOKIES,
        samesite="lax",
        max_age=FLASH_MAX_AGE_SECONDS,
        path="/",
    )


def read_flash(request: Request) -> list[Toast]:
    raw = request.cookies.get(config.settings.FLASH_COOKIE_NAME)
    if not raw:
        return []
    try:
        payload = jwt.decode(
            raw,
            config.settings.SESSION_SECRET,
            algorithms=[config.settings.SESSION_ALGORITHM],
        )
    except jwt.InvalidTokenError:
        return []
    return [Toast.from_dict(t) for t in payload.get("toasts", [])]


def clear_flash(response: Response) -> None:
    response.delete_cookie(config.settings.FLASH_COOKIE_NAME, path="/")
