"""Settings: the member's own display name and, for admins, the workspace."""

from __future__ import annotations

from bookcrew.api import ApiError
from bookcrew.models import Workspace
from bookcrew.pages.base import PageState
from bookcrew.state.membership import WorkspaceMemberProvider


class SettingsPage(PageState):
    def __init__(self, api, workspace_id: str, membership: WorkspaceMemberProvider):
        super().__init__(api)
        self.workspace_id = workspace_id
        self.membership = membership
        self.workspace: Workspace | None = None

        self.edited_name = ""
        self.is_editing_name = False

        self.edited_workspace_name = ""
        self.edited_description = ""
        self.edited_cover_image = ""
        self.is_editing_workspace = False

        self.is_delete_modal_open = False
        self.is_saving = False

    @property
    def base_url(self) -> str:
        return f"/workspace/{self.workspace_id}/settings"

    @property
    def is_admin(self) -> bool:
        member = self.membership.member
        return member is not None and member.is_admin

    async def load(self) -> None:
        self.is_loading = True
        try:
            if self.membership.is_loading:
                await self.membership.load()
            if self.membership.member is not None:
                self.edited_name = self.membership.member.name
            try:
                self.workspace = await self.api.get_workspace(self.workspace_id)
            except ApiError as e:
                self.fail(e, "설정을 불러오는데 실패했습니다.")
                return
        finally:
            self.is_loading = False

        self.edited_workspace_name = self.workspace.name
        self.edited_description = self.workspace.description or ""
        self.edited_cover_image = self.workspace.cover_image or ""

    async def save_profile(self, name: str) -> bool:
        self.edited_name = name
        self.is_editing_name = True
        if not name.strip():
            self.show_error("이름을 입력해주세요.")
            return False

        self.is_saving = True
        try:
            await self.api.update_my_name(self.workspace_id, name.strip())
        except ApiError as e:
            self.fail(e, "프로필 저장에 실패했습니다.")
            return False
        finally:
            self.is_saving = False

        await self.membership.refresh()
        self.is_editing_name = False
        self.show_toast("프로필이 저장되었습니다.")
        return True

    async def save_workspace(self, name: str, description: str = "", cover_image: str = "") -> bool:
        self.edited_workspace_name = name
        self.edited_description = description
        self.edited_cover_image = cover_image
        self.is_editing_workspace = True

        if not self.is_admin:
            self.show_error("권한이 없습니다.")
            return False
        if not name.strip():
            self.show_error("워크스페이스 이름을 입력해주세요.")
            return False

        self.is_saving = True
        try:
            updated = await self.api.update_workspace(
                self.workspace_id, name.strip(), description or None, cover_image or None
            )
        except ApiError as e:
            self.fail(e, "워크스페이스 설정 저장에 실패했습니다.")
            return False
        finally:
            self.is_saving = False

        if updated is not None:
            self.workspace = updated
        elif self.workspace is not None:
            self.workspace = self.workspace.model_copy(
                update={
                    "name": name.strip(),
                    "description": description or None,
                    "cover_image": cover_image or None,
                }
            )
        self.is_editing_workspace = False
        self.show_toast("워크스페이스 설정이 저장되었습니다.")
        return True

    def request_delete(self) -> None:
        if self.is_admin:
            self.is_delete_modal_open = True

    def cancel_delete(self) -> None:
        self.is_delete_modal_open = False

    async def confirm_delete(self) -> bool:
        self.is_delete_modal_open = False
        if not self.is_admin:
            self.show_error("권한이 없습니다.")
            return False
        try:
            await self.api.delete_workspace(self.workspace_id)
        except ApiError as e:
            self.fail(e, "워크스페이스 삭제에 실패했습니다.")
            return False

        self.show_toast("워크스페이스가 삭제되었습니다.")
        self.navigate("/workspace-join")
        return True
