"""
BookCrew configuration: all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


def _flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings from environment variables."""

    # Backend
    BACKEND_API_URL: str = os.environ.get("BACKEND_API_URL", "http://localhost:3000").rstrip("/")

    # Session
    SESSION_SECRET: str = os.environ.get("SESSION_SECRET", "")
    SESSION_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "session"
    SESSION_EXPIRY_HOURS: int = int(os.environ.get("SESSION_EXPIRY_HOURS", "24"))
    AUTO_LOGIN_EXPIRY_HOURS: int = 24 * 30
    FLASH_COOKIE_NAME: str = "flash"
    SIDEBAR_COOKIE_NAME: str = "sidebar"

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")

    # UI timing (milliseconds)
    FILTER_DEBOUNCE_MS: int = 500
    MEMBER_SEARCH_DEBOUNCE_MS: int = 300
    LOGIN_REDIRECT_DELAY_MS: int = 1000
    SIGNUP_REDIRECT_DELAY_MS: int = 1500

    # Paging
    MEMBERS_PER_PAGE: int = 10
    RECENT_BOOKS_LIMIT: int = 15

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def LOG_LEVEL(self) -> str:
        level = os.environ.get("LOG_LEVEL")
        if level:
            return level.upper()
        return "DEBUG" if self.is_development else "WARNING"

    @property
    def SECURE_COOKIES(self) -> bool:
        return _flag("SECURE_COOKIES", not self.is_development)


# Singleton instance
settings = Settings()

if settings.ENVIRONMENT == "production" and not settings.SESSION_SECRET:
    raise RuntimeError("SESSION_SECRET environment variable is required")

if not settings.SESSION_SECRET:
    # Development only: sessions do not survive a restart.
    settings.SESSION_SECRET = os.urandom(32).hex()
