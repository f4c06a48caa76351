"""
Pydantic models for BookCrew.

All data shapes exchanged with the backend. No imports from api, pages, or routes.
"""

from bookcrew.models.meeting import Attendee, Book, Meeting, MeetingPage, MeetingSummary
from bookcrew.models.user import User
from bookcrew.models.workspace import (
    MANAGER_ROLES,
    ROLE_OPTIONS,
    Workspace,
    WorkspaceMember,
    WorkspaceUpdate,
)

__all__ = [
    # User models
    "User",
    # Workspace models
    "Workspace",
    "WorkspaceMember",
    "WorkspaceUpdate",
    "MANAGER_ROLES",
    "ROLE_OPTIONS",
    # Meeting models
    "Attendee",
    "Book",
    "Meeting",
    "MeetingPage",
    "MeetingSummary",
]
