"""Meeting documents, attendees and books."""

from __future__ import annotations

from pydantic import Field

from bookcrew.models.base import WireModel


class Book(WireModel):
    """A book read by a workspace."""

    id: str
    title: str
    author: str | None = None
    created_at: str | None = None


class Attendee(WireModel):
    """Join record between a meeting and a member. Owns one note."""

    id: str | None = None
    member_id: str
    name: str
    role: str | None = None
    user_id: str | None = None
    note: str | None = None


class Meeting(WireModel):
    """Full meeting document from POST /meetings/detail."""

    id: str | None = None
    title: str
    meeting_date: str
    book_id: str | None = None
    book_title: str | None = None
    attendees: list[Attendee] = Field(default_factory=list)


class MeetingSummary(WireModel):
    """A row of the meeting list and the dashboard cards."""

    id: str
    title: str
    meeting_date: str
    book_title: str | None = None
    attendee_count: int = 0
    created_at: str | None = None


class MeetingPage(WireModel):
    """One page of the meeting list."""

    items: list[MeetingSummary] = Field(default_factory=list)
    total_page: int = 1
    total_count: int = 0
