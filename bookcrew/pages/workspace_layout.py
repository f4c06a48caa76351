"""Workspace shell: access check, sidebar and header."""

from __future__ import annotations

from dataclasses import dataclass

from bookcrew.api import ApiError
from bookcrew.models import Workspace
from bookcrew.pages.base import PageState


@dataclass(frozen=True)
class NavItem:
    name: str
    href: str
    active: bool


class WorkspaceLayout(PageState):
    """
    Wraps every /workspace/{id} page.

    Access is confirmed with GET /workspaces/{id}; on failure the user is
    sent back to the workspace list. The sidebar collapse flag is passed in
    explicitly by the caller.
    """

    def __init__(self, api, workspace_id: str, sidebar_collapsed: bool = False):
        super().__init__(api)
        self.workspace_id = workspace_id
        self.workspace: Workspace | None = None
        self.is_authorized = False
        self.sidebar_collapsed = sidebar_collapsed

    async def authorize(self) -> bool:
        self.is_loading = True
        try:
            self.workspace = await self.api.get_workspace(self.workspace_id)
        except ApiError as e:
            if e.is_forbidden:
                self.show_error("워크스페이스에 접근할 권한이 없습니다.")
            elif e.is_not_found:
                self.show_error("존재하지 않는 워크스페이스입니다.")
            else:
                self.show_error("워크스페이스 정보를 불러오는데 실패했습니다.")
            self.navigate("/workspace-join", replace=True)
            return False
        finally:
            self.is_loading = False

        self.is_authorized = True
        return True

    @property
    def workspace_name(self) -> str:
        return self.workspace.name if self.workspace else ""

    def nav_items(self, current_path: str) -> list[NavItem]:
        base = f"/workspace/{self.workspace_id}"
        entries = [
            ("홈", base),
            ("독서 모임", f"{base}/meetings"),
            ("멤버", f"{base}/members"),
            ("설정", f"{base}/settings"),
        ]
        items = []
        for name, href in entries:
            if href == base:
                active = current_path.rstrip("/") == base
            else:
                active = current_path == href or current_path.startswith(href + "/")
            items.append(NavItem(name=name, href=href, active=active))
        return items
