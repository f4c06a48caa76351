"""
Page state for every BookCrew screen.

Each class holds one page's form fields, flags and toasts, and exposes the
async handlers its buttons trigger. Routes render these objects; tests
drive them directly.
"""

from bookcrew.pages.base import PageState
from bookcrew.pages.login import LoginPage
from bookcrew.pages.meeting_detail import MeetingDetailPage, NoteRegion
from bookcrew.pages.meetings import MeetingCreateForm, MeetingListPage, MemberPicker
from bookcrew.pages.members import MemberListPage
from bookcrew.pages.settings import SettingsPage
from bookcrew.pages.signup import SignupPage
from bookcrew.pages.workspace_home import WorkspaceHomePage, book_color, format_date
from bookcrew.pages.workspace_join import WorkspaceJoinPage
from bookcrew.pages.workspace_layout import WorkspaceLayout

__all__ = [
    "PageState",
    "LoginPage",
    "SignupPage",
    "WorkspaceJoinPage",
    "WorkspaceLayout",
    "WorkspaceHomePage",
    "MeetingListPage",
    "MeetingCreateForm",
    "MemberPicker",
    "MeetingDetailPage",
    "NoteRegion",
    "MemberListPage",
    "SettingsPage",
    "book_color",
    "format_date",
]
