"""
Pytest configuration and fixtures for BookCrew tests.

Backend calls are answered by FakeBackend, an in-memory stand-in for the
BookCrew REST API mounted as an httpx.MockTransport.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("SESSION_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECURE_COOKIES", "false")
os.environ.setdefault("BACKEND_API_URL", "http://backend.test")

import copy  # noqa: E402
import itertools  # noqa: E402
import json  # noqa: E402
from typing import Any  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from bookcrew import config  # noqa: E402
from bookcrew.api import ApiClient, BookCrewApi  # noqa: E402
from bookcrew.main import app  # noqa: E402
from bookcrew.session import create_session_token  # noqa: E402

BACKEND = config.settings.BACKEND_API_URL
MEETINGS_PER_PAGE = 5


def ok(data: Any = None, status: int = 200, **extra) -> httpx.Response:
    return httpx.Response(status, json={"success": True, "data": data, **extra})


def err(status: int, message: str | None = None) -> httpx.Response:
    body: dict[str, Any] = {"success": False}
    if message is not None:
        body["message"] = message
    return httpx.Response(status, json=body)


def token_for(user_id: str) -> str:
    return f"tok-{user_id}"


class FakeBackend:
    """
    In-memory BookCrew backend.

    Records every request. `fail(method, path, response)` forces the next
    matching calls to return a canned response; `offline = True` makes every
    call a connection error.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.forced: dict[tuple[str, str], httpx.Response] = {}
        self.offline = False
        self._ids = itertools.count(100)

        self.users = {
            "abc123": {"userId": "abc123", "name": "독서왕", "password": "secret1"},
            "reader2": {"userId": "reader2", "name": "김하나", "password": "secret2"},
            "reader3": {"userId": "reader3", "name": "이두리", "password": "secret3"},
        }
        self.workspaces = {
            "ws1": {
                "id": "ws1",
                "name": "책읽는 밤",
                "description": "매주 목요일 독서 모임",
                "password": "join-me",
            },
            "ws2": {"id": "ws2", "name": "철학 읽기", "description": "", "password": "plato"},
        }
        self.members = {
            "ws1": [
                {"id": "m1", "name": "독서왕", "role": "ADMIN", "userId": "abc123",
                 "email": "abc@example.com", "joinDate": "2024-01-02"},
                {"id": "m2", "name": "김하나", "role": "MEMBER", "userId": "reader2",
                 "email": "hana@example.com", "joinDate": "2024-02-03"},
                {"id": "m3", "name": "이두리", "role": "MEMBER", "userId": "reader3",
                 "email": "duri@example.com", "joinDate": "2024-03-04"},
            ],
            "ws2": [
                {"id": "m9", "name": "철학자", "role": "ADMIN", "userId": "reader3",
                 "email": "duri@example.com", "joinDate": "2024-01-01"},
            ],
        }
        self.books = {
            "ws1": [
                {"id": "b1", "title": "사피엔스", "author": "유발 하라리"},
                {"id": "b2", "title": "코스모스", "author": "칼 세이건"},
            ],
            "ws2": [],
        }
        self.meetings: dict[str, dict[str, dict]] = {"ws1": {}, "ws2": {}}
        for n in range(1, 12):
            self._add_meeting("ws1", f"mtg{n}", f"모임 {n}", f"2024-{n:02d}-10", "b2", [])
        self._add_meeting(
            "ws1",
            "mtg-sapiens",
            "사피엔스 읽기",
            "2024-12-10",
            "b1",
            [
                {"id": "a1", "memberId": "m1", "name": "독서왕", "role": "ADMIN",
                 "userId": "abc123", "note": "첫 노트"},
                {"id": "a2", "memberId": "m2", "name": "김하나", "role": "MEMBER",
                 "userId": "reader2", "note": ""},
            ],
        )

    # ── helpers ─────────────────────────────────────────────────────────────

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def api(self, user_id: str | None = "abc123") -> BookCrewApi:
        token = token_for(user_id) if user_id else None
        return BookCrewApi(ApiClient(BACKEND, token=token, transport=self.transport))

    def fail(self, method: str, path: str, response: httpx.Response) -> None:
        self.forced[(method, path)] = response

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def last_json(self, method: str, path: str) -> Any:
        return json.loads(self.calls(method, path)[-1].content)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}{next(self._ids)}"

    def _add_meeting(self, ws, meeting_id, title, date, book_id, attendees):
        book = next(b for b in self.books[ws] if b["id"] == book_id)
        self.meetings[ws][meeting_id] = {
            "id": meeting_id,
            "title": title,
            "meetingDate": date,
            "bookId": book_id,
            "bookTitle": book["title"],
            "attendees": attendees,
        }

    def _summary(self, meeting: dict) -> dict:
        return {
            "id": meeting["id"],
            "title": meeting["title"],
            "meetingDate": meeting["meetingDate"],
            "bookTitle": meeting["bookTitle"],
            "attendeeCount": len(meeting["attendees"]),
        }

    def _caller(self, request: httpx.Request) -> str | None:
        auth = request.headers.get("authorization", "")
        if not auth.startswith("Bearer tok-"):
            return None
        user_id = auth.removeprefix("Bearer tok-")
        return user_id if user_id in self.users else None

    def _member(self, ws: str, user_id: str | None) -> dict | None:
        return next((m for m in self.members.get(ws, []) if m["userId"] == user_id), None)

    # ── dispatch ────────────────────────────────────────────────────────────

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("backend offline", request=request)

        key = (request.method, request.url.path)
        if key in self.forced:
            return self.forced[key]

        body = json.loads(request.content) if request.content else {}
        path = request.url.path
        method = request.method

        if path == "/users/login":
            return self._login(body)
        if path == "/users/signup":
            if body["userId"] in self.users:
                return err(409, "이미 존재하는 아이디입니다.")
            self.users[body["userId"]] = {"userId": body["userId"], "name": None,
                                          "password": body["password"]}
            return ok(status=201)
        if path == "/users/check-userid":
            return ok({"available": body["userId"] not in self.users})

        user = self._caller(request)
        if user is None:
            return err(401, "로그인이 필요합니다.")

        if path == "/users/me":
            u = self.users[user]
            return ok({"userId": u["userId"], "name": u["name"]})
        if path == "/users/logout":
            return ok()
        if path.startswith("/workspaces"):
            return self._workspaces(method, path, request, body, user)
        if path.startswith("/members"):
            return self._members(method, path, body, user)
        if path.startswith("/meetings"):
            return self._meetings(method, path, request, body, user)
        if path.startswith("/books"):
            return self._books(path, body)
        return err(404, "Not Found")

    def _login(self, body: dict) -> httpx.Response:
        u = self.users.get(body.get("userId"))
        if u is None or u["password"] != body.get("password"):
            return err(401, "아이디 또는 비밀번호가 일치하지 않습니다.")
        return ok({"accessToken": token_for(u["userId"])})

    def _workspace_view(self, ws: dict, user: str) -> dict:
        member = self._member(ws["id"], user)
        view = {k: v for k, v in ws.items() if k != "password"}
        view["role"] = member["role"] if member else None
        return view

    def _workspaces(self, method, path, request, body, user) -> httpx.Response:
        parts = path.strip("/").split("/")
        if path == "/workspaces" and method == "GET":
            return ok([self._workspace_view(w, user) for w in self.workspaces.values()
                       if self._member(w["id"], user)])
        if path == "/workspaces" and method == "POST":
            ws_id = self._next_id("ws")
            self.workspaces[ws_id] = {"id": ws_id, "name": body["workspaceName"],
                                      "description": body.get("description"), "password": "x"}
            self.members[ws_id] = [{"id": self._next_id("m"), "name": self.users[user]["name"],
                                    "role": "ADMIN", "userId": user}]
            self.books[ws_id] = []
            self.meetings[ws_id] = {}
            return ok(self._workspace_view(self.workspaces[ws_id], user), status=201)
        if path == "/workspaces/search":
            q = request.url.params.get("search", "")
            return ok([self._workspace_view(w, user) for w in self.workspaces.values()
                       if q in w["name"]])
        if path == "/workspaces/join":
            ws = self.workspaces.get(body["workspaceId"])
            if ws is None or ws["password"] != body["workspacePassword"]:
                return err(400, "참여 코드가 일치하지 않습니다.")
            self.members[ws["id"]].append({"id": self._next_id("m"), "name": user,
                                           "role": "MEMBER", "userId": user})
            return ok()

        ws = self.workspaces.get(parts[1])
        if ws is None:
            return err(404, "워크스페이스를 찾을 수 없습니다.")
        viewer = self._member(ws["id"], user)
        if viewer is None:
            return err(403, "접근 권한이 없습니다.")

        if len(parts) == 3 and parts[2] == "me":
            viewer["name"] = body["name"]
            return ok()
        if method == "GET":
            return ok(self._workspace_view(ws, user))
        if viewer["role"] not in ("ADMIN", "OWNER"):
            return err(403, "권한이 없습니다.")
        if method == "PATCH":
            ws.update({"name": body["name"], "description": body.get("description"),
                       "coverImage": body.get("coverImage")})
            return ok(self._workspace_view(ws, user))
        if method == "DELETE":
            del self.workspaces[ws["id"]]
            return ok()
        return err(405)

    def _members(self, method, path, body, user) -> httpx.Response:
        ws = body.get("workspaceId")
        if ws not in self.workspaces:
            return err(404, "워크스페이스를 찾을 수 없습니다.")
        viewer = self._member(ws, user)
        if viewer is None and path == "/members/me":
            return ok(None, success=False, message="워크스페이스 멤버가 아닙니다.")
        if viewer is None:
            return err(403, "접근 권한이 없습니다.")

        members = self.members[ws]
        if path == "/members" and method == "POST":
            return ok(copy.deepcopy(members))
        if path == "/members/search":
            kw = body.get("keyword", "")
            return ok([m for m in members if kw in m["name"]])
        if path == "/members/me":
            return ok(copy.deepcopy(viewer))

        if viewer["role"] not in ("ADMIN", "OWNER"):
            return err(403, "관리자만 멤버를 관리할 수 있습니다.")
        target = next((m for m in members if m["id"] == body.get("memberId")), None)
        if target is None:
            return err(404, "멤버를 찾을 수 없습니다.")
        if path == "/members/role":
            target["role"] = body["role"]
            return ok()
        if path == "/members" and method == "DELETE":
            members.remove(target)
            return ok()
        return err(405)

    def _meetings(self, method, path, request, body, user) -> httpx.Response:
        ws = body.get("workspaceId")
        if self._member(ws, user) is None:
            return err(403, "접근 권한이 없습니다.")
        meetings = self.meetings[ws]

        if path == "/meetings":
            rows = sorted(meetings.values(), key=lambda m: m["meetingDate"], reverse=True)
            if body.get("keyword"):
                rows = [m for m in rows if body["keyword"] in m["title"]]
            if body.get("startDate"):
                rows = [m for m in rows if m["meetingDate"] >= body["startDate"]]
            if body.get("endDate"):
                rows = [m for m in rows if m["meetingDate"] <= body["endDate"]]
            page = int(request.url.params.get("page", "1"))
            start = (page - 1) * MEETINGS_PER_PAGE
            total_page = max(-(-len(rows) // MEETINGS_PER_PAGE), 1)
            return ok(
                [self._summary(m) for m in rows[start:start + MEETINGS_PER_PAGE]],
                meta={"totalPage": total_page, "totalCount": len(rows)},
            )
        if path == "/meetings/create":
            meeting_id = self._next_id("mtg")
            attendees = [self._attendee(ws, mid) for mid in body["attendees"]]
            self._add_meeting(ws, meeting_id, body["title"], body["meetingDate"], body["bookId"], attendees)
            return ok({"id": meeting_id}, status=201)
        if path == "/meetings/next":
            return err(404, "예정된 모임이 없습니다.")
        if path == "/meetings/latest":
            rows = sorted(meetings.values(), key=lambda m: m["meetingDate"], reverse=True)
            return ok([self._summary(m) for m in rows[:3]])

        if path == "/meetings/detail/note":
            meeting = meetings.get(body["meetingId"])
            attendee = next((a for a in meeting["attendees"] if a["id"] == body["attendeeId"]), None)
            if attendee is None or attendee["userId"] != user:
                return err(403, "본인의 노트만 수정할 수 있습니다.")
            attendee["note"] = body["note"]
            return ok()

        meeting_id = request.url.params.get("id") or body.get("meetingId")
        meeting = meetings.get(meeting_id)
        if meeting is None:
            return err(404, "미팅을 찾을 수 없습니다.")
        if method == "POST":
            return ok(copy.deepcopy(meeting))
        if method == "PATCH":
            book = next(b for b in self.books[ws] if b["id"] == body["bookId"])
            kept = {a["memberId"]: a for a in meeting["attendees"]}
            meeting.update({
                "title": body["title"],
                "meetingDate": body["meetingDate"],
                "bookId": book["id"],
                "bookTitle": book["title"],
                "attendees": [kept.get(mid) or self._attendee(ws, mid) for mid in body["attendees"]],
            })
            return ok()
        return err(405)

    def _attendee(self, ws: str, member_id: str) -> dict:
        member = next(m for m in self.members[ws] if m["id"] == member_id)
        return {"id": self._next_id("a"), "memberId": member_id, "name": member["name"],
                "role": member["role"], "userId": member["userId"], "note": ""}

    def _books(self, path, body) -> httpx.Response:
        books = self.books[body["workspaceId"]]
        if path == "/books/create":
            book = {"id": self._next_id("b"), "title": body["title"], "author": None}
            books.append(book)
            return ok(book, status=201)
        limit = body.get("limit")
        return ok(books[:limit] if limit else list(books))


@pytest.fixture
def fake() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def api(fake: FakeBackend) -> BookCrewApi:
    """Backend access as abc123, an ADMIN of ws1."""
    return fake.api("abc123")


@pytest.fixture
def member_api(fake: FakeBackend) -> BookCrewApi:
    """Backend access as reader2, a plain MEMBER of ws1."""
    return fake.api("reader2")


@pytest.fixture
def fast_debounce(monkeypatch):
    """Shrink debounce delays so tests do not sleep for half a second."""
    monkeypatch.setattr(config.settings, "FILTER_DEBOUNCE_MS", 20)
    monkeypatch.setattr(config.settings, "MEMBER_SEARCH_DEBOUNCE_MS", 20)


@pytest_asyncio.fixture
async def client(fake: FakeBackend):
    """ASGI client for the app, with backend calls served by the fake."""
    app.state.http = httpx.AsyncClient(transport=fake.transport)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    await app.state.http.aclose()


@pytest.fixture
def login(client: httpx.AsyncClient):
    """Attach a session cookie for the given user to the test client."""

    def _login(user_id: str = "abc123") -> None:
        client.cookies.set(config.settings.SESSION_COOKIE_NAME, create_session_token(token_for(user_id)))

    return _login
