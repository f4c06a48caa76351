"""Logging setup for the BookCrew front end."""

from __future__ import annotations

import logging

from bookcrew import config

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure the root logger.

    Verbose in development, warnings and above elsewhere, unless LOG_LEVEL
    says otherwise. Safe to call more than once.
    """
    logging.basicConfig(format=_FORMAT, force=True)
    logging.getLogger().setLevel(level or config.settings.LOG_LEVEL)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
