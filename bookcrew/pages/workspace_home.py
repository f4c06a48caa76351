"""Workspace dashboard: next meeting, latest meetings and the bookshelf."""

from __future__ import annotations

import logging
from datetime import date

from bookcrew import config
from bookcrew.api import ApiError
from bookcrew.models import Book, MeetingSummary
from bookcrew.pages.base import PageState

logger = logging.getLogger(__name__)

BOOK_COVERS = (
    "#3b82f6", "#ef4444", "#a855f7", "#10b981", "#f97316",
    "#14b8a6", "#6366f1", "#22c55e", "#ec4899", "#06b6d4",
    "#f43f5e", "#f59e0b", "#8b5cf6", "#d946ef", "#0ea5e9",
)


def _int32(n: int) -> int:
    n &= 0xFFFFFFFF
    return n - (1 << 32) if n & 0x80000000 else n


def book_color(book_id: str, title: str) -> str:
    """Stable cover colour for a book, from a 31-multiplier string hash."""
    data = (book_id + title).encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = unit + (_int32(_int32(h) << 5) - h)
    return BOOK_COVERS[abs(h) % len(BOOK_COVERS)]


def format_date(value: str | None) -> str:
    """ISO date or datetime -> '2024년 3월 5일'. Unparseable input is returned as is."""
    if not value:
        return ""
    try:
        d = date.fromisoformat(value[:10])
    except ValueError:
        return value
    return f"{d.year}년 {d.month}월 {d.day}일"


class WorkspaceHomePage(PageState):
    """Dashboard. Each section fails on its own without blanking the page."""

    def __init__(self, api, workspace_id: str):
        super().__init__(api)
        self.workspace_id = workspace_id
        self.next_meeting: MeetingSummary | None = None
        self.latest_meetings: list[MeetingSummary] = []
        self.recent_books: list[Book] = []
        self.all_books: list[Book] = []
        self.is_bookshelf_open = False

    async def load(self) -> None:
        self.is_loading = True
        try:
            try:
                self.next_meeting = await self.api.next_meeting(self.workspace_id)
            except ApiError as e:
                if not e.is_not_found:
                    logger.error("Failed to fetch next meeting: %s", e)
                self.next_meeting = None

            try:
                self.latest_meetings = await self.api.latest_meetings(self.workspace_id)
            except ApiError as e:
                logger.error("Failed to fetch latest meetings: %s", e)

            try:
                self.recent_books = await self.api.list_books(
                    self.workspace_id, limit=config.settings.RECENT_BOOKS_LIMIT
                )
            except ApiError as e:
                logger.error("Failed to fetch recent books: %s", e)
        finally:
            self.is_loading = False

    async def open_bookshelf(self) -> None:
        try:
            self.all_books = await self.api.list_books(self.workspace_id)
        except ApiError as e:
            self.fail(e, "전체 책 목록을 불러오는데 실패했습니다.")
        self.is_bookshelf_open = True

    def close_bookshelf(self) -> None:
        self.is_bookshelf_open = False
