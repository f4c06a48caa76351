"""Workspace list (join/create/search) and the workspace dashboard."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, Response

from bookcrew.api import BookCrewApi
from bookcrew.models import Book, MeetingSummary, User, Workspace
from bookcrew.pages import WorkspaceHomePage, WorkspaceJoinPage, book_color, format_date
from bookcrew.render import redirect, respond
from bookcrew.routes.deps import WorkspaceContext, get_api, require_user, workspace_context

router = APIRouter(tags=["workspaces"])


def _workspace_row(w: Workspace, selected: Workspace | None = None) -> dict:
    return {
        "id": w.id,
        "name": w.name,
        "description": w.description or "",
        "role": w.role or "",
        "selected": selected is not None and selected.id == w.id,
    }


def _join_context(page: WorkspaceJoinPage, user: User) -> dict:
    selected = page.selected_workspace
    return {
        "user_name": user.display_name,
        "workspaces": [_workspace_row(w) for w in page.workspaces],
        "has_workspaces": bool(page.workspaces),
        "create_modal": (
            {
                "title": "새 모임 만들기",
                "close_href": "/workspace-join",
                "workspace_name": page.workspace_name,
                "workspace_description": page.workspace_description,
            }
            if page.is_create_modal_open
            else None
        ),
        "join_modal": (
            {
                "title": "모임 참여하기",
                "close_href": "/workspace-join",
                "query": page.search_query,
                "results": [_workspace_row(w, selected) for w in page.search_results],
                "selected": _workspace_row(selected) if selected else None,
            }
            if page.is_join_modal_open
            else None
        ),
    }


@router.get("/workspace-join", response_class=HTMLResponse)
async def workspace_join(
    request: Request,
    api: Annotated[BookCrewApi, Depends(get_api)],
    user: Annotated[User, Depends(require_user)],
    create: bool = False,
    join: bool = False,
    q: str | None = None,
    select: str | None = None,
) -> Response:
    page = WorkspaceJoinPage(api)
    await page.load()
    page.is_create_modal_open = create
    if q is not None:
        await page.search(q)
        if select:
            match = next((w for w in page.search_results if w.id == select), None)
            if match is not None:
                page.select(match)
    elif join:
        page.is_join_modal_open = True
    return respond(request, page, "workspace_join", _join_context(page, user), title="내 모임")


@router.post("/workspace-join/create", response_class=HTMLResponse)
async def workspace_create(
    request: Request,
    api: Annotated[BookCrewApi, Depends(get_api)],
    user: Annotated[User, Depends(require_user)],
    name: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
) -> Response:
    page = WorkspaceJoinPage(api)
    if await page.create_workspace(name, description) is None:
        await page.load()
    return respond(request, page, "workspace_join", _join_context(page, user), title="내 모임")


@router.post("/workspace-join/join", response_class=HTMLResponse)
async def workspace_join_submit(
    request: Request,
    api: Annotated[BookCrewApi, Depends(get_api)],
    user: Annotated[User, Depends(require_user)],
    workspace_id: Annotated[str, Form()],
    workspace_name: Annotated[str, Form()] = "",
    code: Annotated[str, Form()] = "",
    q: Annotated[str, Form()] = "",
) -> Response:
    page = WorkspaceJoinPage(api)
    page.is_join_modal_open = True
    page.search_query = q
    page.select(Workspace(id=workspace_id, name=workspace_name or workspace_id))
    if not await page.join(code):
        await page.load()
    return respond(request, page, "workspace_join", _join_context(page, user), title="내 모임")


# ── dashboard ───────────────────────────────────────────────────────────────


def _meeting_card(workspace_id: str, m: MeetingSummary) -> dict:
    return {
        "id": m.id,
        "title": m.title,
        "date": format_date(m.meeting_date),
        "book_title": m.book_title or "",
        "attendee_count": m.attendee_count,
        "href": f"/workspace/{workspace_id}/meetings/{m.id}",
    }


def _book_tile(b: Book) -> dict:
    return {"id": b.id, "title": b.title, "author": b.author or "", "color": book_color(b.id, b.title)}


def _home_context(page: WorkspaceHomePage, ws: WorkspaceContext) -> dict:
    return {
        "workspace_id": ws.workspace_id,
        "workspace_name": ws.layout.workspace_name,
        "next_meeting": _meeting_card(ws.workspace_id, page.next_meeting) if page.next_meeting else None,
        "latest_meetings": [_meeting_card(ws.workspace_id, m) for m in page.latest_meetings],
        "recent_books": [_book_tile(b) for b in page.recent_books],
        "bookshelf": (
            {"title": "전체 책장", "close_href": f"/workspace/{ws.workspace_id}", "books": [_book_tile(b) for b in page.all_books]}
            if page.is_bookshelf_open
            else None
        ),
    }


@router.get("/workspace/{workspace_id}", response_class=HTMLResponse)
async def workspace_home(
    request: Request,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    bookshelf: bool = False,
) -> Response:
    page = WorkspaceHomePage(ws.api, ws.workspace_id)
    await page.load()
    if bookshelf:
        await page.open_bookshelf()
    return respond(
        request, page, "workspace_home", _home_context(page, ws), title=ws.layout.workspace_name, workspace=ws
    )


@router.get("/")
async def index() -> Response:
    return redirect("/workspace-join")
