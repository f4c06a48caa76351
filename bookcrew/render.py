"""
Renderer: page state -> HTML response.

Templates are Mustache files under templates/, presentational primitives
(button, input, modal, toast...) are partials under templates/partials/.
A page body is rendered first, wrapped in the workspace shell when it has
one, then in the document layout.
"""

from __future__ import annotations

import math
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any

import chevron
from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from bookcrew import config
from bookcrew.pages.base import PageState
from bookcrew.session import clear_flash, read_flash, set_flash

if TYPE_CHECKING:
    from bookcrew.routes.deps import WorkspaceContext

TEMPLATES_DIR = Path(__file__).parent / "templates"
PARTIALS_DIR = TEMPLATES_DIR / "partials"

APP_TITLE = "BookCrew"


@lru_cache(maxsize=None)
def _load(name: str) -> str:
    return (TEMPLATES_DIR / f"{name}.mustache").read_text(encoding="utf-8")


def render_template(name: str, context: dict[str, Any]) -> str:
    """Render one template. Pure function: no request, no IO beyond reading templates."""
    return chevron.render(
        _load(name),
        context,
        partials_path=str(PARTIALS_DIR),
        partials_ext="mustache",
    )


def _shell_context(ws: WorkspaceContext, path: str) -> dict[str, Any]:
    member = ws.membership.member
    return {
        "workspace_id": ws.layout.workspace_id,
        "workspace_name": ws.layout.workspace_name,
        "collapsed": ws.layout.sidebar_collapsed,
        "nav": [
            {"name": item.name, "href": item.href, "active": item.active}
            for item in ws.layout.nav_items(path)
        ],
        "member_name": member.name if member else ws.user.display_name,
        "member_role": member.role if member else "",
        "member_error": ws.membership.error,
        "path": path,
    }


def respond(
    request: Request,
    page: PageState,
    template: str,
    context: dict[str, Any],
    *,
    title: str | None = None,
    workspace: WorkspaceContext | None = None,
    status_code: int = 200,
) -> Response:
    """
    Turn a handled page into a response.

    An immediate navigation becomes a 303 redirect carrying the page's
    toasts; a delayed one renders the page and refreshes after the delay.
    The page is unmounted once rendered.
    """
    try:
        nav = page.navigation
        if nav is not None and nav.delay_ms <= 0:
            response: Response = RedirectResponse(nav.url, status_code=303)
            set_flash(response, page.toasts)
            return response

        toasts = read_flash(request) + page.toasts
        body = render_template(template, context)
        if workspace is not None:
            body = render_template(
                "workspace_shell", {**_shell_context(workspace, request.url.path), "body": body}
            )

        html = render_template(
            "layout",
            {
                "title": f"{title} | {APP_TITLE}" if title else APP_TITLE,
                "body": body,
                "toasts": [t.to_dict() for t in toasts],
                "is_loading": page.is_loading,
                "refresh": (
                    {"seconds": math.ceil(nav.delay_ms / 1000), "url": nav.url}
                    if nav is not None
                    else None
                ),
            },
        )
        response = HTMLResponse(html, status_code=status_code)
        if request.cookies.get(config.settings.FLASH_COOKIE_NAME):
            clear_flash(response)
        return response
    finally:
        page.unmount()


def redirect(url: str, page: PageState | None = None) -> Response:
    """POST-redirect-GET, keeping the handler's toasts for the next page."""
    response = RedirectResponse(url, status_code=303)
    if page is not None:
        set_flash(response, page.toasts)
        page.unmount()
    return response
