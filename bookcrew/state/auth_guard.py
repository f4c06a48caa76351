"""
Auth guard for protected pages.

CHECKING -> AUTHENTICATED | UNAUTHENTICATED. The outcome is terminal for
the page. There is no retry: a network blip on the "who am I" call looks
exactly like a logged-out session and sends the user to the login page.
"""

from __future__ import annotations

import logging
from enum import Enum
from urllib.parse import quote, urlsplit

from bookcrew.api import ApiError, BookCrewApi
from bookcrew.models import User

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
PUBLIC_PATHS = frozenset({"/login", "/signup"})


class AuthState(str, Enum):
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


def login_url(return_to: str | None = None) -> str:
    """Login route, carrying the originating path when there is one."""
    if not return_to or return_to == "/" or return_to in PUBLIC_PATHS:
        return LOGIN_PATH
    return f"{LOGIN_PATH}?next={quote(return_to, safe='')}"


def safe_return_path(candidate: str | None, default: str = "/workspace-join") -> str:
    """
    Only same-origin absolute paths are accepted as return targets.

    Browsers read a backslash as a slash, so `/\\host` counts as `//host`.
    """
    if not candidate or not candidate.startswith("/"):
        return default
    if any(ord(ch) < 0x20 or ch == "\x7f" for ch in candidate):
        return default
    parts = urlsplit(candidate.replace("\\", "/"))
    if parts.scheme or parts.netloc or parts.path.startswith("//"):
        return default
    return candidate


class AuthGuard:
    """Resolves the session user for one page visit."""

    def __init__(self, api: BookCrewApi, path: str):
        self.api = api
        self.path = path
        self.state = AuthState.CHECKING
        self.user: User | None = None
        self.redirect_to: str | None = None

    @property
    def is_public(self) -> bool:
        return self.path in PUBLIC_PATHS

    @property
    def is_loading(self) -> bool:
        return self.state is AuthState.CHECKING

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    async def check(self) -> AuthState:
        """Ask the backend who the caller is. Runs once per guard."""
        if self.state is not AuthState.CHECKING:
            return self.state

        if self.is_public:
            # Public pages never redirect, or login would bounce to itself
            self.state = AuthState.UNAUTHENTICATED
            return self.state

        try:
            self.user = await self.api.me()
        except ApiError as e:
            logger.info("auth check failed for %s: %s", self.path, e)
            self.state = AuthState.UNAUTHENTICATED
            self.redirect_to = login_url(self.path)
            return self.state

        self.state = AuthState.AUTHENTICATED
        return self.state
