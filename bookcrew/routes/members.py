"""Member management pages."""

from __future__ import annotations

from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, Response

from bookcrew.models import ROLE_OPTIONS
from bookcrew.pages import MemberListPage, format_date
from bookcrew.render import redirect, respond
from bookcrew.routes.deps import WorkspaceContext, workspace_context

router = APIRouter(prefix="/workspace/{workspace_id}/members", tags=["members"])


def _members_context(page: MemberListPage) -> dict:
    base = f"/workspace/{page.workspace_id}/members"
    pending = page.pending_removal
    return {
        "base": base,
        "q": page.search_query,
        "page_href": f"{base}?{urlencode({'q': page.search_query})}&page=",
        "current_page": page.current_page,
        "total_pages": page.total_pages,
        "pages": [
            {"number": n, "current": n == page.current_page}
            for n in range(1, page.total_pages + 1)
        ],
        "members": [
            {
                "id": m.id,
                "name": m.name,
                "email": m.email or "",
                "role": m.role,
                "join_date": format_date(m.join_date),
                "is_self": page.is_self(m),
                "can_manage": page.can_manage(m),
                "roles": [{"value": r, "selected": r == m.role} for r in ROLE_OPTIONS],
            }
            for m in page.page_members
        ],
        "has_members": bool(page.page_members),
        "confirm_modal": (
            {
                "title": "멤버 삭제",
                "close_href": base,
                "member_id": pending.id,
                "member_name": pending.name,
            }
            if pending is not None
            else None
        ),
    }


async def _page(ws: WorkspaceContext) -> MemberListPage:
    page = MemberListPage(ws.api, ws.workspace_id, ws.membership.member)
    await page.load()
    return page


@router.get("", response_class=HTMLResponse)
async def member_list(
    request: Request,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    q: str = "",
    page: int = 1,
    remove: str | None = None,
) -> Response:
    state = await _page(ws)
    state.set_search(q)
    state.go_to_page(page)
    if remove:
        state.request_remove(remove)
    return respond(request, state, "members", _members_context(state), title="멤버", workspace=ws)


@router.post("/{member_id}/role")
async def member_change_role(
    member_id: str,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    role: Annotated[str, Form()],
    q: Annotated[str, Form()] = "",
) -> Response:
    state = await _page(ws)
    await state.change_role(member_id, role)
    return redirect(_back(ws.workspace_id, q), state)


@router.post("/{member_id}/remove")
async def member_remove(
    member_id: str,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    q: Annotated[str, Form()] = "",
) -> Response:
    """Confirmed removal; the confirmation modal is the GET ?remove= view."""
    state = await _page(ws)
    if state.request_remove(member_id):
        await state.confirm_remove()
    return redirect(_back(ws.workspace_id, q), state)


def _back(workspace_id: str, q: str) -> str:
    base = f"/workspace/{workspace_id}/members"
    if q:
        return f"{base}?{urlencode({'q': q})}"
    return base
