"""
Typed access to the BookCrew backend.

One method per endpoint. Page-state objects depend on this class only, so
tests can point it at a fake backend without touching page code.
"""

from __future__ import annotations

from typing import Any

from bookcrew.api.client import ApiClient
from bookcrew.models import (
    Book,
    Meeting,
    MeetingPage,
    MeetingSummary,
    User,
    Workspace,
    WorkspaceMember,
)


class BookCrewApi:
    """Data access for the BookCrew front end."""

    def __init__(self, client: ApiClient):
        self.client = client

    # ── identity ────────────────────────────────────────────────────────────

    async def me(self) -> User:
        res = await self.client.get("/users/me")
        return User.model_validate(res.body)

    async def login(self, user_id: str, password: str, auto_login: bool) -> str | None:
        """Log in and return the access token issued by the backend, if any."""
        res = await self.client.post(
            "/users/login",
            {"userId": user_id, "password": password, "isAutoLogin": auto_login},
        )
        body = res.body
        if isinstance(body, dict):
            return body.get("accessToken")
        return None

    async def signup(self, user_id: str, password: str) -> None:
        await self.client.post("/users/signup", {"userId": user_id, "password": password})

    async def check_user_id(self, user_id: str) -> bool:
        """True when the login handle is still free."""
        res = await self.client.post("/users/check-userid", {"userId": user_id})
        body = res.body
        if isinstance(body, dict) and "available" in body:
            return bool(body["available"])
        return True

    async def logout(self) -> None:
        await self.client.post("/users/logout")

    # ── workspaces ──────────────────────────────────────────────────────────

    async def list_workspaces(self) -> list[Workspace]:
        res = await self.client.get("/workspaces")
        return [Workspace.model_validate(w) for w in res.body or []]

    async def create_workspace(self, name: str, description: str) -> Workspace:
        res = await self.client.post(
            "/workspaces", {"workspaceName": name, "description": description}
        )
        return Workspace.model_validate(res.body)

    async def search_workspaces(self, query: str) -> list[Workspace]:
        res = await self.client.get("/workspaces/search", params={"search": query})
        return [Workspace.model_validate(w) for w in res.body or []]

    async def join_workspace(self, workspace_id: str, password: str) -> None:
        await self.client.post(
            "/workspaces/join",
            {"workspaceId": workspace_id, "workspacePassword": password},
        )

    async def get_workspace(self, workspace_id: str) -> Workspace:
        res = await self.client.get(f"/workspaces/{workspace_id}")
        return Workspace.model_validate(res.body)

    async def update_workspace(
        self,
        workspace_id: str,
        name: str,
        description: str | None,
        cover_image: str | None,
    ) -> Workspace | None:
        res = await self.client.patch(
            f"/workspaces/{workspace_id}",
            {"name": name, "description": description, "coverImage": cover_image},
        )
        return Workspace.model_validate(res.body) if isinstance(res.body, dict) else None

    async def delete_workspace(self, workspace_id: str) -> None:
        await self.client.delete(f"/workspaces/{workspace_id}")

    async def update_my_name(self, workspace_id: str, name: str) -> None:
        await self.client.patch(f"/workspaces/{workspace_id}/me", {"name": name})

    # ── members ─────────────────────────────────────────────────────────────

    async def list_members(self, workspace_id: str) -> list[WorkspaceMember]:
        res = await self.client.post("/members", {"workspaceId": workspace_id})
        return [WorkspaceMember.model_validate(m) for m in res.body or []]

    async def search_members(self, workspace_id: str, keyword: str) -> list[WorkspaceMember]:
        res = await self.client.post(
            "/members/search", {"workspaceId": workspace_id, "keyword": keyword}
        )
        return [WorkspaceMember.model_validate(m) for m in res.body or []]

    async def my_membership(self, workspace_id: str) -> WorkspaceMember:
        res = await self.client.post("/members/me", {"workspaceId": workspace_id})
        return WorkspaceMember.model_validate(res.body)

    async def change_role(self, workspace_id: str, member_id: str, role: str) -> None:
        await self.client.patch(
            "/members/role",
            {"workspaceId": workspace_id, "memberId": member_id, "role": role},
        )

    async def remove_member(self, workspace_id: str, member_id: str) -> None:
        await self.client.delete("/members", {"workspaceId": workspace_id, "memberId": member_id})

    # ── meetings ────────────────────────────────────────────────────────────

    async def list_meetings(
        self,
        workspace_id: str,
        page: int,
        keyword: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> MeetingPage:
        filters = {
            "workspaceId": workspace_id,
            "keyword": keyword or None,
            "startDate": start_date or None,
            "endDate": end_date or None,
        }
        res = await self.client.post(
            "/meetings",
            {k: v for k, v in filters.items() if v is not None},
            params={"page": page},
        )
        meta = res.meta
        return MeetingPage(
            items=[MeetingSummary.model_validate(m) for m in res.body or []],
            total_page=meta.get("totalPage", 1) or 1,
            total_count=meta.get("totalCount", 0) or 0,
        )

    async def meeting_detail(self, workspace_id: str, meeting_id: str) -> Meeting:
        res = await self.client.post(
            "/meetings/detail", {"workspaceId": workspace_id}, params={"id": meeting_id}
        )
        return Meeting.model_validate(res.body)

    async def create_meeting(
        self,
        workspace_id: str,
        title: str,
        meeting_date: str,
        book_id: str,
        attendee_ids: list[str],
    ) -> str:
        """Create a meeting with its attendee rows and return the new id."""
        res = await self.client.post(
            "/meetings/create",
            {
                "workspaceId": workspace_id,
                "title": title,
                "meetingDate": meeting_date,
                "bookId": book_id,
                "attendees": attendee_ids,
            },
        )
        return str(res.body["id"])

    async def update_meeting(
        self,
        workspace_id: str,
        meeting_id: str,
        title: str,
        meeting_date: str,
        book_id: str,
        attendee_ids: list[str],
    ) -> None:
        """Replace meeting info. The attendee list is replaced wholesale."""
        await self.client.patch(
            "/meetings/detail",
            {
                "workspaceId": workspace_id,
                "meetingId": meeting_id,
                "title": title,
                "meetingDate": meeting_date,
                "bookId": book_id,
                "attendees": attendee_ids,
            },
        )

    async def save_note(
        self, workspace_id: str, meeting_id: str, attendee_id: str, note: str
    ) -> None:
        await self.client.put(
            "/meetings/detail/note",
            {
                "workspaceId": workspace_id,
                "meetingId": meeting_id,
                "attendeeId": attendee_id,
                "note": note,
            },
        )

    async def next_meeting(self, workspace_id: str) -> MeetingSummary | None:
        res = await self.client.post("/meetings/next", {"workspaceId": workspace_id})
        return MeetingSummary.model_validate(res.body) if res.body else None

    async def latest_meetings(self, workspace_id: str) -> list[MeetingSummary]:
        res = await self.client.post("/meetings/latest", {"workspaceId": workspace_id})
        return [MeetingSummary.model_validate(m) for m in res.body or []]

    # ── books ───────────────────────────────────────────────────────────────

    async def list_books(self, workspace_id: str, limit: int | None = None) -> list[Book]:
        payload: dict[str, Any] = {"workspaceId": workspace_id}
        if limit is not None:
            payload["limit"] = limit
        res = await self.client.post("/books", payload)
        return [Book.model_validate(b) for b in res.body or []]

    async def create_book(self, workspace_id: str, title: str) -> Book:
        res = await self.client.post("/books/create", {"workspaceId": workspace_id, "title": title})
        return Book.model_validate(res.body)
