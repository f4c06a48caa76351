"""
Tests for the workspace list, layout access check, dashboard and settings.
"""

from __future__ import annotations

from bookcrew.models import Workspace
from bookcrew.pages import (
    SettingsPage,
    WorkspaceHomePage,
    WorkspaceJoinPage,
    WorkspaceLayout,
    book_color,
    format_date,
)
from bookcrew.pages.workspace_home import BOOK_COVERS
from bookcrew.state import WorkspaceMemberProvider
from bookcrew.tests.conftest import err


class TestWorkspaceJoinPage:
    async def test_lists_joined_workspaces(self, api):
        page = WorkspaceJoinPage(api)

        await page.load()

        assert [w.id for w in page.workspaces] == ["ws1"]

    async def test_create_workspace(self, fake, api):
        page = WorkspaceJoinPage(api)

        workspace = await page.create_workspace("새 모임", "소개")

        assert workspace.id in fake.workspaces
        assert page.navigation.url == f"/workspace/{workspace.id}"
        assert page.toasts[-1].message == '"새 모임" 모임이 생성되었습니다!'

    async def test_create_workspace_name_too_short(self, fake, api):
        page = WorkspaceJoinPage(api)

        assert await page.create_workspace("가") is None

        assert page.toasts[-1].message == "모임명은 최소 2자 이상이어야 합니다."
        assert page.is_create_modal_open

    async def test_search_and_join(self, fake, api):
        page = WorkspaceJoinPage(api)
        results = await page.search("철학")
        page.select(results[0])

        assert await page.join("plato")

        assert any(m["userId"] == "abc123" for m in fake.members["ws2"])
        assert page.navigation.url == "/workspace/ws2"

    async def test_join_with_wrong_code(self, api):
        page = WorkspaceJoinPage(api)
        page.select(Workspace(id="ws2", name="철학 읽기"))

        assert not await page.join("wrong")

        assert page.toasts[-1].message == "참여 코드가 일치하지 않습니다."
        assert page.navigation is None

    async def test_empty_search_result_toast(self, api):
        page = WorkspaceJoinPage(api)

        assert await page.search("없는 모임") == []

        assert page.toasts[-1].message == "검색 결과가 없습니다."

    async def test_logout_always_leaves(self, fake, api):
        fake.offline = True
        page = WorkspaceJoinPage(api)

        await page.logout()

        assert page.navigation.url == "/login"


class TestWorkspaceLayout:
    """Access check for /workspace/{id} pages."""

    async def test_member_authorized(self, api):
        layout = WorkspaceLayout(api, "ws1")

        assert await layout.authorize()

        assert layout.workspace_name == "책읽는 밤"

    async def test_forbidden(self, api):
        layout = WorkspaceLayout(api, "ws2")

        assert not await layout.authorize()

        assert layout.toasts[-1].message == "워크스페이스에 접근할 권한이 없습니다."
        assert layout.navigation.url == "/workspace-join"
        assert layout.navigation.replace

    async def test_not_found(self, api):
        layout = WorkspaceLayout(api, "nope")

        assert not await layout.authorize()

        assert layout.toasts[-1].message == "존재하지 않는 워크스페이스입니다."

    def test_nav_items_mark_active(self, api):
        layout = WorkspaceLayout(api, "ws1")

        items = layout.nav_items("/workspace/ws1/meetings/mtg1")

        assert [i.name for i in items if i.active] == ["독서 모임"]
        assert [i.active for i in layout.nav_items("/workspace/ws1")] == [True, False, False, False]


class TestWorkspaceHome:
    async def test_dashboard_sections(self, api):
        """No upcoming meeting (404) is not an error."""
        page = WorkspaceHomePage(api, "ws1")

        await page.load()

        assert page.next_meeting is None
        assert [m.id for m in page.latest_meetings] == ["mtg-sapiens", "mtg11", "mtg10"]
        assert [b.id for b in page.recent_books] == ["b1", "b2"]
        assert page.toasts == []

    async def test_recent_books_limited(self, fake, api):
        page = WorkspaceHomePage(api, "ws1")

        await page.load()

        assert fake.last_json("POST", "/books")["limit"] == 15

    async def test_bookshelf(self, api):
        page = WorkspaceHomePage(api, "ws1")

        await page.open_bookshelf()

        assert page.is_bookshelf_open
        assert len(page.all_books) == 2

        page.close_bookshelf()
        assert not page.is_bookshelf_open

    def test_book_color_is_stable(self):
        color = book_color("b1", "사피엔스")

        assert color in BOOK_COVERS
        assert book_color("b1", "사피엔스") == color

    def test_book_color_matches_string_hash(self):
        # "a": h = 97, 97 % 15 == 7
        assert book_color("a", "") == BOOK_COVERS[7]

    def test_format_date(self):
        assert format_date("2024-03-05") == "2024년 3월 5일"
        assert format_date("2024-12-10T09:00:00Z") == "2024년 12월 10일"
        assert format_date("") == ""
        assert format_date("언젠가") == "언젠가"


async def _settings(api, workspace_id: str = "ws1") -> SettingsPage:
    membership = WorkspaceMemberProvider(api, workspace_id)
    page = SettingsPage(api, workspace_id, membership)
    await page.load()
    return page


class TestSettings:
    async def test_load(self, api):
        page = await _settings(api)

        assert page.edited_name == "독서왕"
        assert page.edited_workspace_name == "책읽는 밤"
        assert page.is_admin

    async def test_save_profile_refreshes_membership(self, fake, api):
        page = await _settings(api)

        assert await page.save_profile("책벌레")

        assert fake.last_json("PATCH", "/workspaces/ws1/me") == {"name": "책벌레"}
        assert page.membership.member.name == "책벌레"
        assert page.toasts[-1].message == "프로필이 저장되었습니다."

    async def test_empty_name(self, fake, api):
        page = await _settings(api)

        assert not await page.save_profile("   ")

        assert page.toasts[-1].message == "이름을 입력해주세요."
        assert fake.calls("PATCH", "/workspaces/ws1/me") == []

    async def test_admin_updates_workspace(self, fake, api):
        page = await _settings(api)

        assert await page.save_workspace("책읽는 새벽", "새 소개")

        assert fake.workspaces["ws1"]["name"] == "책읽는 새벽"
        assert page.workspace.name == "책읽는 새벽"
        assert page.toasts[-1].message == "워크스페이스 설정이 저장되었습니다."

    async def test_member_cannot_update_workspace(self, fake, member_api):
        page = await _settings(member_api)

        assert not page.is_admin
        assert not await page.save_workspace("탈취")

        assert fake.workspaces["ws1"]["name"] == "책읽는 밤"

    async def test_delete_workspace(self, fake, api):
        page = await _settings(api)
        page.request_delete()
        assert page.is_delete_modal_open

        assert await page.confirm_delete()

        assert "ws1" not in fake.workspaces
        assert page.navigation.url == "/workspace-join"

    async def test_delete_failure(self, fake, api):
        fake.fail("DELETE", "/workspaces/ws1", err(500))
        page = await _settings(api)
        page.request_delete()

        assert not await page.confirm_delete()

        assert page.navigation is None
        assert page.toasts[-1].message == "워크스페이스 삭제에 실패했습니다."
