"""
Meeting document editor.

Two independent save paths:

    save_info   title, date, book and the attendee list (bulk edit)
    save_note   the viewer's own note, one attendee row

They are separate backend calls so that one member's note is never
overwritten by another member's metadata edit. A note region is editable
only when its attendee maps to the session user; this is UI gating, the
backend enforces the real rule.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bookcrew.api import ApiError, ApplicationError
from bookcrew.models import Book, Meeting, User, WorkspaceMember
from bookcrew.pages.base import PageState
from bookcrew.pages.meetings import MemberPicker
from bookcrew.state.optimistic import optimistic_update

logger = logging.getLogger(__name__)

NOTE_PLACEHOLDER = "아직 작성된 내용이 없습니다."


@dataclass
class NoteRegion:
    """One attendee's note area."""

    member_id: str
    member_name: str
    content: str = ""
    attendee_id: str | None = None
    user_id: str | None = None


class MeetingDetailPage(PageState):
    """State of /workspace/{id}/meetings/{meetingId}."""

    def __init__(self, api, workspace_id: str, meeting_id: str):
        super().__init__(api)
        self.workspace_id = workspace_id
        self.meeting_id = meeting_id
        self.current_user: User | None = None
        self.meeting: Meeting | None = None

        # Info form
        self.is_editing_info = False
        self.title = ""
        self.meeting_date = ""
        self.selected_book: Book | None = None
        self.books: list[Book] = []
        self.show_book_selector = False
        self.new_book_title = ""
        self.picker = MemberPicker(self, workspace_id)

        self.notes: list[NoteRegion] = []
        self.is_saving = False

    @property
    def list_url(self) -> str:
        return f"/workspace/{self.workspace_id}/meetings"

    @property
    def participants(self) -> list[WorkspaceMember]:
        return self.picker.selected

    # ── loading ─────────────────────────────────────────────────────────────

    async def load(self) -> None:
        await self.load_current_user()
        await self.load_meeting()

    async def load_current_user(self) -> None:
        try:
            user = await self.api.me()
        except ApiError as e:
            logger.error("Failed to fetch current user: %s", e)
            return
        if self.mounted:
            self.current_user = user

    async def load_meeting(self) -> bool:
        self.is_loading = True
        try:
            meeting = await self.api.meeting_detail(self.workspace_id, self.meeting_id)
        except ApplicationError:
            self.show_error("존재하지 않는 미팅이거나 접근 권한이 없습니다.")
            self.navigate(self.list_url, replace=True)
            return False
        except ApiError as e:
            if e.is_not_found:
                self.show_error("존재하지 않는 미팅입니다.")
                self.navigate(self.list_url, replace=True)
            else:
                self.fail(e, "미팅 정보를 불러오는 중 오류가 발생했습니다.")
            return False
        finally:
            self.is_loading = False

        if self.mounted:
            self._apply(meeting)
        return True

    def _apply(self, meeting: Meeting) -> None:
        self.meeting = meeting
        self.title = meeting.title
        self.meeting_date = meeting.meeting_date
        self.selected_book = (
            Book(id=meeting.book_id, title=meeting.book_title or "Unknown Book")
            if meeting.book_id
            else None
        )
        self.picker.selected = [
            WorkspaceMember(id=a.member_id, name=a.name, role=a.role or "MEMBER", user_id=a.user_id)
            for a in meeting.attendees
        ]
        self.notes = [
            NoteRegion(
                member_id=a.member_id,
                member_name=a.name,
                content=a.note or "",
                attendee_id=a.id,
                user_id=a.user_id,
            )
            for a in meeting.attendees
        ]

    # ── note permissions ────────────────────────────────────────────────────

    def is_editable(self, region: NoteRegion) -> bool:
        """Only the session user's own attendee row is writable."""
        return (
            self.current_user is not None
            and region.user_id is not None
            and region.user_id == self.current_user.user_id
        )

    @property
    def editable_regions(self) -> list[NoteRegion]:
        return [r for r in self.notes if self.is_editable(r)]

    @property
    def own_region(self) -> NoteRegion | None:
        regions = self.editable_regions
        return regions[0] if regions else None

    def update_note(self, member_id: str, content: str) -> bool:
        """Typing into a note area; ignored for anyone else's region."""
        for region in self.notes:
            if region.member_id == member_id:
                if not self.is_editable(region):
                    return False
                region.content = content
                return True
        return False

    async def save_note(self) -> bool:
        if self.current_user is None:
            self.show_error("로그인이 필요합니다.")
            return False

        region = self.own_region
        if region is None:
            self.show_error("참석자 명단에서 본인 정보를 찾을 수 없습니다.")
            return False
        if not region.attendee_id:
            self.show_error("참석자 정보가 저장되지 않았습니다. 먼저 미팅 정보를 저장해주세요.")
            return False

        self.is_saving = True
        try:
            await self.api.save_note(
                self.workspace_id, self.meeting_id, region.attendee_id, region.content
            )
        except ApiError as e:
            self.fail(e, "저장 중 오류가 발생했습니다.")
            return False
        finally:
            self.is_saving = False

        if self.meeting is not None:
            for attendee in self.meeting.attendees:
                if attendee.id == region.attendee_id:
                    attendee.note = region.content
        self.show_toast("노트가 저장되었습니다.")
        return True

    # ── info edit ───────────────────────────────────────────────────────────

    def start_info_edit(self) -> None:
        self.is_editing_info = True

    def add_attendee(self, member: WorkspaceMember) -> bool:
        if not self.picker.add(member):
            return False
        if not any(r.member_id == member.id for r in self.notes):
            self.notes.append(
                NoteRegion(member_id=member.id, member_name=member.name, user_id=member.user_id)
            )
        return True

    def remove_attendee(self, member_id: str) -> None:
        self.picker.remove(member_id)
        self.notes = [r for r in self.notes if r.member_id != member_id]

    async def open_book_selector(self) -> None:
        self.show_book_selector = True
        try:
            self.books = await self.api.list_books(self.workspace_id)
        except ApiError as e:
            self.fail(e, "책 목록을 불러오는 중 오류가 발생했습니다.")

    def close_book_selector(self) -> None:
        self.show_book_selector = False

    def select_book(self, book: Book) -> None:
        self.selected_book = book
        self.show_book_selector = False

    async def create_book(self, title: str) -> Book | None:
        self.new_book_title = title
        if not title.strip():
            return None
        try:
            book = await self.api.create_book(self.workspace_id, title)
        except ApiError as e:
            self.fail(e, "책 등록 중 오류가 발생했습니다.")
            return None

        self.books = [book, *self.books]
        self.selected_book = book
        self.new_book_title = ""
        self.show_book_selector = False
        self.show_toast("책을 등록했습니다.")
        return book

    def info_error(self) -> str | None:
        if not self.title.strip():
            return "제목을 입력해주세요."
        if self.selected_book is None:
            return "책을 선택해주세요."
        if not self.meeting_date:
            return "진행 일자를 선택해주세요."
        if not self.participants:
            return "최소 1명의 참석자를 선택해주세요."
        return None

    async def save_info(self) -> bool:
        """
        Bulk-save title, date, book and attendees.

        The header shows the new values at once and falls back to the
        previous record if the call fails; the form keeps what was typed.
        """
        error = self.info_error()
        if error:
            self.show_error(error)
            return False

        book = self.selected_book
        title, meeting_date = self.title, self.meeting_date
        attendee_ids = [m.id for m in self.participants]

        def apply(meeting: Meeting | None) -> Meeting | None:
            if meeting is None:
                return None
            return meeting.model_copy(
                update={
                    "title": title,
                    "meeting_date": meeting_date,
                    "book_id": book.id,
                    "book_title": book.title,
                }
            )

        def store(meeting: Meeting | None) -> None:
            self.meeting = meeting

        self.is_saving = True
        try:
            await optimistic_update(
                self.meeting,
                apply,
                lambda: self.api.update_meeting(
                    self.workspace_id, self.meeting_id, title, meeting_date, book.id, attendee_ids
                ),
                store,
            )
        except ApiError as e:
            self.fail(e, "수정 중 오류가 발생했습니다.")
            return False
        finally:
            self.is_saving = False

        self.show_toast("미팅 정보가 수정되었습니다.")
        self.is_editing_info = False
        await self.load_meeting()
        return True

    async def cancel_info_edit(self) -> None:
        """Discard in-memory edits by reloading the canonical record."""
        self.is_editing_info = False
        await self.load_meeting()
