"""Common state for page objects."""

from __future__ import annotations

import logging

from bookcrew.api import ApiError, BookCrewApi, error_message
from bookcrew.state.debounce import Debouncer
from bookcrew.state.toast import Navigation, Toast, ToastKind

logger = logging.getLogger(__name__)


class PageState:
    """
    UI state of one page: loading flag, toasts and a pending navigation.

    Handlers never raise backend errors; they turn them into toasts and
    leave form fields as the user entered them.
    """

    def __init__(self, api: BookCrewApi):
        self.api = api
        self.is_loading = False
        self.toasts: list[Toast] = []
        self.navigation: Navigation | None = None
        self.mounted = True
        self._debouncers: list[Debouncer] = []

    def show_toast(self, message: str, kind: ToastKind | str = ToastKind.SUCCESS) -> None:
        self.toasts.append(Toast(message=message, kind=ToastKind(kind)))

    def show_error(self, message: str) -> None:
        self.show_toast(message, ToastKind.ERROR)

    def fail(self, exc: ApiError, fallback: str) -> None:
        """Report a failed backend call."""
        logger.warning("%s: %s", type(self).__name__, exc)
        self.show_error(error_message(exc, fallback))

    def navigate(self, url: str, delay_ms: int = 0, replace: bool = False) -> None:
        self.navigation = Navigation(url=url, delay_ms=delay_ms, replace=replace)

    def debouncer(self, delay_ms: int, fn) -> Debouncer:
        debouncer = Debouncer(delay_ms, fn)
        self._debouncers.append(debouncer)
        return debouncer

    def unmount(self) -> None:
        """Stop pending work; late results are ignored from here on."""
        self.mounted = False
        for debouncer in self._debouncers:
            debouncer.cancel()
