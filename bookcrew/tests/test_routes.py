"""
Tests for the HTTP surface: guards, redirects, cookies and rendered pages.
"""

from __future__ import annotations

from bookcrew import config
from bookcrew.session import decode_session_token, read_flash
from bookcrew.tests.conftest import err


class TestHealth:
    async def test_health(self, client):
        """GET /health returns {"status": "ok"}."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAuthGuardRoutes:
    """Protected pages require a session."""

    async def test_protected_page_redirects_to_login(self, client):
        response = await client.get("/workspace/ws1/meetings")

        assert response.status_code == 303
        assert response.headers["location"] == "/login?next=%2Fworkspace%2Fws1%2Fmeetings"

    async def test_login_page_renders_without_session(self, client):
        response = await client.get("/login")

        assert response.status_code == 200
        assert 'name="user_id"' in response.text

    async def test_root_goes_to_workspace_list(self, client):
        response = await client.get("/")

        assert response.status_code == 303
        assert response.headers["location"] == "/workspace-join"


class TestLoginRoute:
    async def test_login_sets_session_and_refreshes(self, client):
        """Successful login: cookie set, toast shown, delayed refresh to the target."""
        response = await client.post(
            "/login",
            data={"user_id": "abc123", "password": "secret1", "next": "/workspace/ws1"},
        )

        assert response.status_code == 200
        assert "로그인에 성공했습니다!" in response.text
        assert 'http-equiv="refresh" content="1;url=/workspace/ws1"' in response.text
        cookie = response.cookies[config.settings.SESSION_COOKIE_NAME]
        assert decode_session_token(cookie) == "tok-abc123"

    async def test_login_failure_keeps_form(self, client):
        response = await client.post("/login", data={"user_id": "abc123", "password": "nope"})

        assert response.status_code == 200
        assert "아이디 또는 비밀번호가 일치하지 않습니다." in response.text
        assert 'value="abc123"' in response.text
        assert config.settings.SESSION_COOKIE_NAME not in response.cookies

    async def test_logout_clears_cookie(self, client, login):
        login()

        response = await client.post("/logout")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert "Max-Age=0" in response.headers["set-cookie"]


class TestSignupRoute:
    async def test_check_then_signup(self, client, fake):
        check = await client.post(
            "/signup", data={"user_id": "newreader", "action": "check"}
        )
        assert "사용 가능한 아이디입니다." in check.text
        assert 'name="verified_user_id" value="newreader"' in check.text

        response = await client.post(
            "/signup",
            data={
                "user_id": "newreader",
                "verified_user_id": "newreader",
                "password": "secret9",
                "password_confirm": "secret9",
                "action": "signup",
            },
        )

        assert "회원가입이 완료되었습니다!" in response.text
        assert "url=/login" in response.text
        assert "newreader" in fake.users


class TestWorkspaceRoutes:
    async def test_workspace_list(self, client, login):
        login()

        response = await client.get("/workspace-join")

        assert response.status_code == 200
        assert "책읽는 밤" in response.text

    async def test_forbidden_workspace_redirects_with_toast(self, client, login):
        login()

        response = await client.get("/workspace/ws2")

        assert response.status_code == 303
        assert response.headers["location"] == "/workspace-join"
        toasts = read_flash(_FakeRequest(response.cookies))
        assert toasts[0].message == "워크스페이스에 접근할 권한이 없습니다."

    async def test_dashboard_renders_sidebar(self, client, login):
        login()

        response = await client.get("/workspace/ws1")

        assert response.status_code == 200
        assert 'href="/workspace/ws1/meetings"' in response.text
        assert "예정된 모임이 없습니다." in response.text

    async def test_sidebar_toggle(self, client, login):
        login()

        response = await client.post("/ui/sidebar", data={"next": "/workspace/ws1"})

        assert response.status_code == 303
        assert response.headers["location"] == "/workspace/ws1"
        assert response.cookies[config.settings.SIDEBAR_COOKIE_NAME] == "collapsed"

        page = await client.get("/workspace/ws1")
        assert 'class="sidebar collapsed"' in page.text

    async def test_sidebar_toggle_rejects_offsite_next(self, client, login):
        login()
        response = await client.post("/ui/sidebar", data={"next": "/\\evil.example"})

        assert response.status_code == 303
        assert response.headers["location"] == "/workspace-join"


class TestMeetingRoutes:
    async def test_list_with_search(self, client, login):
        login()

        response = await client.get(
            "/workspace/ws1/meetings",
            params={"title": "사피엔스", "page": "3", "applied_title": ""},
        )

        assert response.status_code == 200
        assert "사피엔스 읽기" in response.text
        assert "모임 11" not in response.text

    async def test_detail_marks_own_note_editable(self, client, login):
        login()

        response = await client.get("/workspace/ws1/meetings/mtg-sapiens")

        assert response.status_code == 200
        assert response.text.count('action="/workspace/ws1/meetings/mtg-sapiens/note"') == 1
        assert "첫 노트" in response.text
        assert "아직 작성된 내용이 없습니다." in response.text

    async def test_note_save_redirects(self, client, login, fake):
        login()

        response = await client.post(
            "/workspace/ws1/meetings/mtg-sapiens/note", data={"content": "새 노트"}
        )

        assert response.status_code == 303
        assert fake.meetings["ws1"]["mtg-sapiens"]["attendees"][0]["note"] == "새 노트"

    async def test_missing_meeting_redirects_to_list(self, client, login):
        login()

        response = await client.get("/workspace/ws1/meetings/nope")

        assert response.status_code == 303
        assert response.headers["location"] == "/workspace/ws1/meetings"

    async def test_create_meeting(self, client, login, fake):
        login()

        response = await client.post(
            "/workspace/ws1/meetings/create",
            data={
                "title": "4월 모임",
                "meeting_date": "2025-04-01",
                "book_id": "b1",
                "attendee_ids": ["m1", "m3"],
                "action": "create",
            },
        )

        assert response.status_code == 303
        meeting_id = response.headers["location"].rsplit("/", 1)[1]
        assert [a["memberId"] for a in fake.meetings["ws1"][meeting_id]["attendees"]] == ["m1", "m3"]


class TestMemberRoutes:
    async def test_role_change_forbidden_flashes_error(self, client, login, fake):
        login()
        fake.fail("PATCH", "/members/role", err(403))

        response = await client.post("/workspace/ws1/members/m2/role", data={"role": "ADMIN"})

        assert response.status_code == 303
        toasts = read_flash(_FakeRequest(response.cookies))
        assert toasts[0].message == "권한이 없습니다."

    async def test_member_list_hides_controls_on_own_row(self, client, login):
        login()

        response = await client.get("/workspace/ws1/members")

        assert 'action="/workspace/ws1/members/m2/role"' in response.text
        assert 'action="/workspace/ws1/members/m1/role"' not in response.text

    async def test_remove_confirm_modal(self, client, login):
        login()

        response = await client.get("/workspace/ws1/members", params={"remove": "m2"})

        assert '"김하나" 님을 워크스페이스에서 삭제하시겠습니까?' in response.text


class TestProxy:
    async def test_forwards_with_bearer(self, client, login, fake):
        login()

        response = await client.post("/api/proxy/members/me", json={"workspaceId": "ws1"})

        assert response.status_code == 200
        assert response.json()["data"]["id"] == "m1"
        assert fake.calls("POST", "/members/me")[-1].headers["authorization"] == "Bearer tok-abc123"

    async def test_passes_errors_through(self, client):
        response = await client.get("/api/proxy/users/me")

        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_backend_down(self, client, fake):
        fake.offline = True

        response = await client.get("/api/proxy/users/me")

        assert response.status_code == 502
        assert response.json()["message"] == "네트워크 연결을 확인해주세요."


class TestNotFound:
    async def test_unknown_route(self, client):
        response = await client.get("/definitely/not/here")

        assert response.status_code == 404
        assert "페이지를 찾을 수 없습니다." in response.text


class _FakeRequest:
    """Just enough of a Request for read_flash()."""

    def __init__(self, cookies):
        self.cookies = dict(cookies)
