"""Member management: search, role change and removal."""

from __future__ import annotations

import math

from bookcrew import config
from bookcrew.api import ApiError, error_message
from bookcrew.models import WorkspaceMember
from bookcrew.pages.base import PageState
from bookcrew.state.optimistic import optimistic_update

NO_PERMISSION = "권한이 없습니다."


class MemberListPage(PageState):
    """
    Workspace member table.

    Role changes are optimistic; removals are optimistic only after the
    confirmation modal. Both roll back on failure. The viewer's own row
    never offers either action.
    """

    def __init__(self, api, workspace_id: str, viewer: WorkspaceMember | None):
        super().__init__(api)
        self.workspace_id = workspace_id
        self.viewer = viewer
        self.members: list[WorkspaceMember] = []
        self.search_query = ""
        self.current_page = 1
        self.pending_removal: WorkspaceMember | None = None

    async def load(self) -> None:
        self.is_loading = True
        try:
            members = await self.api.list_members(self.workspace_id)
        except ApiError as e:
            self.fail(e, "멤버 목록을 불러오는데 실패했습니다.")
            return
        finally:
            self.is_loading = False
        if self.mounted:
            self.members = members

    # ── view ────────────────────────────────────────────────────────────────

    def is_self(self, member: WorkspaceMember) -> bool:
        if self.viewer is None:
            return False
        if member.id == self.viewer.id:
            return True
        return member.user_id is not None and member.user_id == self.viewer.user_id

    def can_manage(self, member: WorkspaceMember) -> bool:
        """Role/remove controls: admins only, never on their own row."""
        if self.viewer is None or not self.viewer.is_admin:
            return False
        return not self.is_self(member)

    def set_search(self, query: str) -> None:
        self.search_query = query
        self.current_page = 1

    @property
    def filtered_members(self) -> list[WorkspaceMember]:
        q = self.search_query.strip().lower()
        if not q:
            return list(self.members)
        return [
            m
            for m in self.members
            if q in m.name.lower() or q in (m.email or "").lower()
        ]

    @property
    def total_pages(self) -> int:
        per_page = config.settings.MEMBERS_PER_PAGE
        return max(math.ceil(len(self.filtered_members) / per_page), 1)

    @property
    def page_members(self) -> list[WorkspaceMember]:
        per_page = config.settings.MEMBERS_PER_PAGE
        start = (self.current_page - 1) * per_page
        return self.filtered_members[start : start + per_page]

    def go_to_page(self, page: int) -> None:
        self.current_page = min(max(page, 1), self.total_pages)

    def _find(self, member_id: str) -> WorkspaceMember | None:
        return next((m for m in self.members if m.id == member_id), None)

    def _set_members(self, members: list[WorkspaceMember]) -> None:
        self.members = members

    def _report(self, exc: ApiError, fallback: str) -> None:
        if exc.is_forbidden:
            self.show_error(exc.message or NO_PERMISSION)
        else:
            self.show_error(error_message(exc, fallback))

    # ── role ────────────────────────────────────────────────────────────────

    async def change_role(self, member_id: str, role: str) -> bool:
        member = self._find(member_id)
        if member is None or not self.can_manage(member):
            return False
        if member.role == role:
            return True

        def apply(members: list[WorkspaceMember]) -> list[WorkspaceMember]:
            return [m.model_copy(update={"role": role}) if m.id == member_id else m for m in members]

        try:
            await optimistic_update(
                self.members,
                apply,
                lambda: self.api.change_role(self.workspace_id, member_id, role),
                self._set_members,
            )
        except ApiError as e:
            self._report(e, "권한 변경에 실패했습니다.")
            return False

        self.show_toast("권한이 변경되었습니다.")
        return True

    # ── removal ─────────────────────────────────────────────────────────────

    def request_remove(self, member_id: str) -> bool:
        """Open the confirmation modal; nothing changes yet."""
        member = self._find(member_id)
        if member is None or not self.can_manage(member):
            return False
        self.pending_removal = member
        return True

    def cancel_remove(self) -> None:
        self.pending_removal = None

    async def confirm_remove(self) -> bool:
        member = self.pending_removal
        self.pending_removal = None
        if member is None or not self.can_manage(member):
            return False

        def apply(members: list[WorkspaceMember]) -> list[WorkspaceMember]:
            return [m for m in members if m.id != member.id]

        try:
            await optimistic_update(
                self.members,
                apply,
                lambda: self.api.remove_member(self.workspace_id, member.id),
                self._set_members,
            )
        except ApiError as e:
            self._report(e, "멤버 삭제에 실패했습니다.")
            return False

        self.go_to_page(self.current_page)
        self.show_toast("멤버가 삭제되었습니다.")
        return True
