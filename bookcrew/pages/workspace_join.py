"""Workspace list: enter, create, search and join reading clubs."""

from __future__ import annotations

from bookcrew.api import ApiError
from bookcrew.models import Workspace
from bookcrew.pages.base import PageState
from bookcrew.pages.validation import MIN_WORKSPACE_NAME_LENGTH


class WorkspaceJoinPage(PageState):
    """The landing page after login."""

    def __init__(self, api):
        super().__init__(api)
        self.workspaces: list[Workspace] = []
        self.workspace_name = ""
        self.workspace_description = ""
        self.is_create_modal_open = False
        self.is_join_modal_open = False
        self.search_query = ""
        self.search_results: list[Workspace] = []
        self.selected_workspace: Workspace | None = None
        self.join_code = ""
        self.is_searching = False

    async def load(self) -> None:
        self.is_loading = True
        try:
            self.workspaces = await self.api.list_workspaces()
        except ApiError as e:
            self.fail(e, "모임 목록을 불러오는데 실패했습니다.")
        finally:
            self.is_loading = False

    async def create_workspace(self, name: str, description: str = "") -> Workspace | None:
        self.workspace_name = name
        self.workspace_description = description
        self.is_create_modal_open = True

        if not name.strip():
            self.show_error("모임명을 입력해주세요.")
            return None
        if len(name.strip()) < MIN_WORKSPACE_NAME_LENGTH:
            self.show_error(f"모임명은 최소 {MIN_WORKSPACE_NAME_LENGTH}자 이상이어야 합니다.")
            return None

        try:
            workspace = await self.api.create_workspace(name, description)
        except ApiError as e:
            self.fail(e, "모임 생성에 실패했습니다.")
            return None

        self.show_toast(f'"{workspace.name}" 모임이 생성되었습니다!')
        self.is_create_modal_open = False
        self.workspace_name = ""
        self.workspace_description = ""
        self.navigate(f"/workspace/{workspace.id}")
        return workspace

    async def search(self, query: str) -> list[Workspace]:
        self.search_query = query
        self.is_join_modal_open = True
        if not query.strip():
            return []

        self.is_searching = True
        self.search_results = []
        self.selected_workspace = None
        try:
            self.search_results = await self.api.search_workspaces(query)
        except ApiError as e:
            self.fail(e, "모임 검색에 실패했습니다.")
        else:
            if not self.search_results:
                self.show_error("검색 결과가 없습니다.")
        finally:
            self.is_searching = False
        return self.search_results

    def select(self, workspace: Workspace) -> None:
        self.selected_workspace = workspace
        self.join_code = ""

    async def join(self, code: str) -> bool:
        self.join_code = code
        workspace = self.selected_workspace
        if workspace is None:
            self.show_error("참여할 모임을 선택해주세요.")
            return False
        if not code.strip():
            self.show_error("참여 코드를 입력해주세요.")
            return False

        try:
            await self.api.join_workspace(workspace.id, code)
        except ApiError as e:
            self.fail(e, "참여 코드가 올바르지 않거나 가입에 실패했습니다.")
            return False

        self.show_toast(f'"{workspace.name}" 모임에 가입되었습니다!')
        self.is_join_modal_open = False
        self.join_code = ""
        self.selected_workspace = None
        self.search_query = ""
        self.search_results = []
        self.navigate(f"/workspace/{workspace.id}")
        return True

    def enter(self, workspace_id: str) -> None:
        self.navigate(f"/workspace/{workspace_id}")

    async def logout(self) -> None:
        """Leave for the login page even when the backend call fails."""
        try:
            await self.api.logout()
        except ApiError as e:
            self.fail(e, "로그아웃 중 오류가 발생했습니다.")
        else:
            self.show_toast("로그아웃되었습니다.")
        self.navigate("/login")
