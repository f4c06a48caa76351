"""UI preferences kept in cookies."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Form, Request
from fastapi.responses import RedirectResponse, Response

from bookcrew import config
from bookcrew.routes.deps import sidebar_collapsed
from bookcrew.state.auth_guard import safe_return_path

router = APIRouter(prefix="/ui", tags=["ui"])


@router.post("/sidebar")
async def toggle_sidebar(request: Request, next: Annotated[str | None, Form()] = None) -> Response:
    """Flip the sidebar collapse flag and go back to the page it was toggled on."""
    collapsed = not sidebar_collapsed(request)
    response = RedirectResponse(safe_return_path(next, "/workspace-join"), status_code=303)
    response.set_cookie(
        key=config.settings.SIDEBAR_COOKIE_NAME,
        value="collapsed" if collapsed else "expanded",
        httponly=True,
        secure=config.settings.SECURE_COOKIES,
        samesite="lax",
        max_age=365 * 24 * 3600,
        path="/",
    )
    return response
