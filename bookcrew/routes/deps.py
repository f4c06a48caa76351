"""Per-request dependencies: backend access, auth guard, workspace scope."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Request

from bookcrew import config
from bookcrew.api import ApiClient, BookCrewApi
from bookcrew.models import User
from bookcrew.pages.workspace_layout import WorkspaceLayout
from bookcrew.session import access_token
from bookcrew.state.auth_guard import AuthGuard, login_url
from bookcrew.state.membership import WorkspaceMemberProvider
from bookcrew.state.toast import Toast


class PageRedirect(Exception):
    """Abort page handling and send the browser elsewhere."""

    def __init__(self, url: str, toasts: list[Toast] | None = None):
        self.url = url
        self.toasts = toasts or []
        super().__init__(url)


def get_api(request: Request) -> BookCrewApi:
    """Backend access bound to the caller's session token."""
    client = ApiClient(
        config.settings.BACKEND_API_URL,
        token=access_token(request),
        http=request.app.state.http,
    )
    return BookCrewApi(client)


def sidebar_collapsed(request: Request) -> bool:
    return request.cookies.get(config.settings.SIDEBAR_COOKIE_NAME) == "collapsed"


def _return_path(request: Request) -> str:
    if request.url.query:
        return f"{request.url.path}?{request.url.query}"
    return request.url.path


async def require_user(request: Request, api: BookCrewApi = Depends(get_api)) -> User:
    """Run the auth guard; unauthenticated callers go to the login page."""
    guard = AuthGuard(api, request.url.path)
    await guard.check()
    if not guard.is_authenticated:
        raise PageRedirect(login_url(_return_path(request)))
    return guard.user


@dataclass
class WorkspaceContext:
    """Everything a /workspace/{id} page shares."""

    api: BookCrewApi
    user: User
    layout: WorkspaceLayout
    membership: WorkspaceMemberProvider

    @property
    def workspace_id(self) -> str:
        return self.layout.workspace_id


async def workspace_context(
    workspace_id: str,
    request: Request,
    api: BookCrewApi = Depends(get_api),
    user: User = Depends(require_user),
) -> WorkspaceContext:
    layout = WorkspaceLayout(api, workspace_id, sidebar_collapsed=sidebar_collapsed(request))
    if not await layout.authorize():
        raise PageRedirect(layout.navigation.url, layout.toasts)

    membership = WorkspaceMemberProvider(api, workspace_id)
    await membership.load()
    return WorkspaceContext(api=api, user=user, layout=layout, membership=membership)
