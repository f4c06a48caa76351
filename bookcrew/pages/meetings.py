"""Meeting list with filters, pagination and the create-meeting modal."""

from __future__ import annotations

import logging

from bookcrew import config
from bookcrew.api import ApiError, ApplicationError
from bookcrew.models import Book, MeetingSummary, WorkspaceMember
from bookcrew.pages.base import PageState
from bookcrew.state.debounce import LatestOnly

logger = logging.getLogger(__name__)


class MemberPicker:
    """
    Debounced member-name search plus the list of picked members.

    Shared by the create-meeting modal and the meeting editor.
    """

    def __init__(self, page: PageState, workspace_id: str):
        self.page = page
        self.workspace_id = workspace_id
        self.query = ""
        self.results: list[WorkspaceMember] = []
        self.selected: list[WorkspaceMember] = []
        self.is_searching = False
        self._gate = LatestOnly()
        self._debounce = page.debouncer(
            config.settings.MEMBER_SEARCH_DEBOUNCE_MS, self._search_current
        )

    def set_query(self, query: str) -> None:
        """Keystroke handler: schedules a search once typing pauses."""
        self.query = query
        if not query.strip() or not self.workspace_id:
            self._debounce.cancel()
            self._gate.invalidate()
            self.results = []
            self.is_searching = False
            return
        self._debounce.trigger()

    async def _search_current(self) -> None:
        await self.search(self.query)

    async def search(self, query: str) -> list[WorkspaceMember]:
        """Search now; the result is dropped if a newer search was issued."""
        self.query = query
        if not query.strip():
            self.results = []
            return self.results

        ticket = self._gate.begin()
        self.is_searching = True
        try:
            results = await self.page.api.search_members(self.workspace_id, query)
        except ApiError as e:
            logger.error("Failed to search members: %s", e)
            results = None
        finally:
            if self._gate.is_current(ticket):
                self.is_searching = False

        if results is not None and self.page.mounted and self._gate.is_current(ticket):
            self.results = results
        return self.results

    def is_selected(self, member_id: str) -> bool:
        return any(m.id == member_id for m in self.selected)

    def add(self, member: WorkspaceMember) -> bool:
        added = not self.is_selected(member.id)
        if added:
            self.selected.append(member)
        self.query = ""
        self.results = []
        self._gate.invalidate()
        return added

    def remove(self, member_id: str) -> None:
        self.selected = [m for m in self.selected if m.id != member_id]

    def reset(self) -> None:
        self.query = ""
        self.results = []
        self.selected = []
        self._gate.invalidate()


class MeetingCreateForm:
    """State of the create-meeting modal."""

    def __init__(self, page: PageState, workspace_id: str):
        self.page = page
        self.workspace_id = workspace_id
        self.is_open = False
        self.title = ""
        self.meeting_date = ""
        self.book_id = ""
        self.book_title = ""
        self.books: list[Book] = []
        self.is_adding_book = False
        self.new_book_title = ""
        self.show_book_dropdown = False
        self.picker = MemberPicker(page, workspace_id)
        self.is_submitting = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def reset(self) -> None:
        self.title = ""
        self.meeting_date = ""
        self.book_id = ""
        self.book_title = ""
        self.picker.reset()

    def select_book(self, book_id: str) -> bool:
        for book in self.books:
            if book.id == book_id:
                self.book_id = book.id
                self.book_title = book.title
                self.show_book_dropdown = False
                return True
        return False

    def dismiss_book_dropdown(self) -> None:
        """Outside click: close the dropdown and drop the half-typed title."""
        self.show_book_dropdown = False
        self.is_adding_book = False
        self.new_book_title = ""

    async def add_book(self, title: str) -> Book | None:
        self.new_book_title = title
        if not title.strip():
            self.page.show_error("책 제목을 입력해주세요.")
            return None

        try:
            book = await self.page.api.create_book(self.workspace_id, title.strip())
        except ApiError as e:
            self.page.fail(e, "책 등록 중 오류가 발생했습니다.")
            return None

        self.books.append(book)
        self.book_id = book.id
        self.book_title = book.title
        self.new_book_title = ""
        self.is_adding_book = False
        self.show_book_dropdown = False
        self.page.show_toast("새 책이 추가되었습니다.")
        return book

    def validation_error(self) -> str | None:
        if not self.title.strip():
            return "문서 제목을 입력해주세요."
        if not self.meeting_date:
            return "진행 일자를 선택해주세요."
        if not self.book_id:
            return "책을 선택해주세요."
        if not self.picker.selected:
            return "최소 1명의 참가자를 선택해주세요."
        return None

    async def submit(self) -> str | None:
        """Create the meeting; returns its id and navigates there on success."""
        error = self.validation_error()
        if error:
            self.page.show_error(error)
            return None

        self.is_submitting = True
        try:
            meeting_id = await self.page.api.create_meeting(
                self.workspace_id,
                self.title,
                self.meeting_date,
                self.book_id,
                [m.id for m in self.picker.selected],
            )
        except ApiError as e:
            self.page.fail(e, "미팅 생성 중 오류가 발생했습니다.")
            return None
        finally:
            self.is_submitting = False

        self.page.show_toast("미팅 문서가 생성되었습니다.")
        self.close()
        self.reset()
        self.page.navigate(f"/workspace/{self.workspace_id}/meetings/{meeting_id}")
        return meeting_id


class MeetingListPage(PageState):
    """
    Server-filtered, server-paginated meeting list.

    Filter edits are debounced; any filter change goes back to page 1.
    """

    def __init__(self, api, workspace_id: str):
        super().__init__(api)
        self.workspace_id = workspace_id
        self.meetings: list[MeetingSummary] = []
        self.current_page = 1
        self.total_pages = 1
        self.total_count = 0
        self.search_title = ""
        self.start_date = ""
        self.end_date = ""
        self.create_form = MeetingCreateForm(self, workspace_id)
        self._gate = LatestOnly()
        self._filter_debounce = self.debouncer(
            config.settings.FILTER_DEBOUNCE_MS, self._reload_first_page
        )

    @property
    def filters(self) -> tuple[str, str, str]:
        return (self.search_title, self.start_date, self.end_date)

    async def load(self, page: int | None = None) -> None:
        page = page or self.current_page
        ticket = self._gate.begin()
        self.is_loading = True
        try:
            result = await self.api.list_meetings(
                self.workspace_id,
                page,
                keyword=self.search_title,
                start_date=self.start_date,
                end_date=self.end_date,
            )
        except ApplicationError as e:
            # An empty search is not worth a toast
            logger.info("meeting list returned success=false: %s", e)
            if self.mounted and self._gate.is_current(ticket):
                self.meetings = []
            return
        except ApiError as e:
            if self.mounted and self._gate.is_current(ticket):
                self.fail(e, "미팅 목록을 불러오는 중 오류가 발생했습니다.")
            return
        finally:
            if self._gate.is_current(ticket):
                self.is_loading = False

        if not self.mounted or not self._gate.is_current(ticket):
            return
        self.meetings = result.items
        self.current_page = page
        self.total_pages = max(result.total_page, 1)
        self.total_count = result.total_count

    def set_filters(
        self,
        title: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> None:
        """Input handler: record the new filters and schedule a reload."""
        before = self.filters
        if title is not None:
            self.search_title = title
        if start_date is not None:
            self.start_date = start_date
        if end_date is not None:
            self.end_date = end_date
        if self.filters != before:
            self._filter_debounce.trigger()

    async def _reload_first_page(self) -> None:
        self.current_page = 1
        await self.load(1)

    async def apply_filters(
        self,
        title: str = "",
        start_date: str = "",
        end_date: str = "",
        page: int = 1,
        previous: tuple[str, str, str] | None = None,
    ) -> None:
        """
        Load with filters already settled (a submitted form).

        `previous` are the filters the requested page belonged to; if they
        differ, the page number is stale and page 1 is loaded instead.
        """
        self.search_title, self.start_date, self.end_date = title, start_date, end_date
        if previous is not None and previous != self.filters:
            page = 1
        self.current_page = max(page, 1)
        await self.load(self.current_page)

    async def go_to_page(self, page: int) -> None:
        page = min(max(page, 1), self.total_pages)
        self.current_page = page
        await self.load(page)

    def reset_filters(self) -> None:
        self.set_filters(title="", start_date="", end_date="")
        self.show_toast("필터가 초기화되었습니다.")

    async def load_books(self) -> None:
        try:
            self.create_form.books = await self.api.list_books(self.workspace_id)
        except ApiError as e:
            self.fail(e, "책 목록을 불러오는 중 오류가 발생했습니다.")

    def open_meeting(self, meeting_id: str) -> None:
        self.navigate(f"/workspace/{self.workspace_id}/meetings/{meeting_id}")
