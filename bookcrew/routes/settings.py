"""Workspace settings page."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, Response

from bookcrew.pages import SettingsPage
from bookcrew.render import redirect, respond
from bookcrew.routes.deps import WorkspaceContext, workspace_context

router = APIRouter(prefix="/workspace/{workspace_id}/settings", tags=["settings"])


def _settings_context(page: SettingsPage) -> dict:
    member = page.membership.member
    return {
        "base": page.base_url,
        "name": page.edited_name,
        "user_id": member.user_id if member and member.user_id else "",
        "role": member.role if member else "",
        "is_admin": page.is_admin,
        "workspace_name": page.edited_workspace_name,
        "description": page.edited_description,
        "cover_image": page.edited_cover_image,
        "delete_modal": (
            {"title": "워크스페이스 삭제", "close_href": page.base_url}
            if page.is_delete_modal_open
            else None
        ),
    }


def _render(request: Request, page: SettingsPage, ws: WorkspaceContext) -> Response:
    return respond(request, page, "settings", _settings_context(page), title="설정", workspace=ws)


async def _page(ws: WorkspaceContext) -> SettingsPage:
    page = SettingsPage(ws.api, ws.workspace_id, ws.membership)
    await page.load()
    return page


@router.get("", response_class=HTMLResponse)
async def settings_page(
    request: Request,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    delete: bool = False,
) -> Response:
    page = await _page(ws)
    if delete:
        page.request_delete()
    return _render(request, page, ws)


@router.post("/profile", response_class=HTMLResponse)
async def settings_profile(
    request: Request,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    name: Annotated[str, Form()] = "",
) -> Response:
    page = await _page(ws)
    if await page.save_profile(name):
        return redirect(page.base_url, page)
    return _render(request, page, ws)


@router.post("/workspace", response_class=HTMLResponse)
async def settings_workspace(
    request: Request,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
    name: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    cover_image: Annotated[str, Form()] = "",
) -> Response:
    page = await _page(ws)
    if await page.save_workspace(name, description, cover_image):
        return redirect(page.base_url, page)
    return _render(request, page, ws)


@router.post("/delete", response_class=HTMLResponse)
async def settings_delete(
    request: Request,
    ws: Annotated[WorkspaceContext, Depends(workspace_context)],
) -> Response:
    page = await _page(ws)
    page.request_delete()
    await page.confirm_delete()
    return _render(request, page, ws)
