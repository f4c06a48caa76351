"""Login, signup and logout pages."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, Response

from bookcrew.api import BookCrewApi
from bookcrew.pages import LoginPage, SignupPage, WorkspaceJoinPage
from bookcrew.render import redirect, respond
from bookcrew.routes.deps import get_api
from bookcrew.session import clear_session_cookie, set_session_cookie

router = APIRouter(tags=["auth"])


def _login_context(page: LoginPage) -> dict:
    return {
        "next": page.return_to,
        "user_id_input": {"label": "아이디", "name": "user_id", "value": page.user_id, "autocomplete": "username"},
        "password_input": {"label": "비밀번호", "name": "password", "type": "password", "value": "", "autocomplete": "current-password"},
        "auto_login_checkbox": {"label": "자동 로그인", "name": "auto_login", "checked": page.auto_login},
        "submit": {"label": "로그인", "type": "submit", "variant": "primary", "disabled": page.is_loading},
    }


@router.get("/login", response_class=HTMLResponse)
async def login_form(
    request: Request,
    api: Annotated[BookCrewApi, Depends(get_api)],
    next: str | None = None,
) -> Response:
    page = LoginPage(api, return_to=next)
    return respond(request, page, "login", _login_context(page), title="로그인")


@router.post("/login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    api: Annotated[BookCrewApi, Depends(get_api)],
    user_id: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    auto_login: Annotated[bool, Form()] = False,
    next: Annotated[str | None, Form()] = None,
) -> Response:
    """
    Log in with the backend.

    On success the backend's access token is stored in the session cookie
    and the browser moves on after the success toast has been shown.
    """
    page = LoginPage(api, return_to=next)
    await page.submit(user_id, password, auto_login)
    response = respond(request, page, "login", _login_context(page), title="로그인")
    if page.authenticated and page.access_token:
        set_session_cookie(response, page.access_token, auto_login=auto_login)
    return response


def _signup_context(page: SignupPage) -> dict:
    user_id_hint = None
    if page.user_id_available is True:
        user_id_hint = ("사용 가능한 아이디입니다.", "ok")
    elif page.user_id_available is False:
        user_id_hint = ("사용할 수 없는 아이디입니다.", "error")

    match_hint = None
    if page.password_matched is True:
        match_hint = ("비밀번호가 일치합니다.", "ok")
    elif page.password_matched is False:
        match_hint = ("비밀번호가 일치하지 않습니다.", "error")

    return {
        "verified_user_id": page.verified_user_id or "",
        "user_id_input": _field("아이디", "user_id", page.user_id, user_id_hint, placeholder="영문 소문자, 숫자 3자 이상"),
        "password_input": _field("비밀번호", "password", page.password, None, type="password", placeholder="6자 이상"),
        "password_confirm_input": _field("비밀번호 확인", "password_confirm", page.password_confirm, match_hint, type="password"),
        "check": {"label": "중복 확인", "type": "submit", "variant": "secondary", "name": "action", "value": "check"},
        "submit": {"label": "회원가입", "type": "submit", "variant": "primary", "name": "action", "value": "signup"},
    }


def _field(label: str, name: str, value: str, hint: tuple[str, str] | None, **extra) -> dict:
    field = {"label": label, "name": name, "value": value, **extra}
    if hint is not None:
        field["hint"], field["hint_kind"] = hint
    return field


@router.get("/signup", response_class=HTMLResponse)
async def signup_form(request: Request, api: Annotated[BookCrewApi, Depends(get_api)]) -> Response:
    page = SignupPage(api)
    return respond(request, page, "signup", _signup_context(page), title="회원가입")


@router.post("/signup", response_class=HTMLResponse)
async def signup_submit(
    request: Request,
    api: Annotated[BookCrewApi, Depends(get_api)],
    user_id: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    password_confirm: Annotated[str, Form()] = "",
    verified_user_id: Annotated[str | None, Form()] = None,
    action: Annotated[str, Form()] = "signup",
) -> Response:
    """Both the availability check and the final submit post the whole form."""
    page = SignupPage(api)
    page.set_user_id(user_id)
    page.restore_verification(verified_user_id)
    page.password = password
    page.password_confirm = password_confirm

    if action == "check":
        await page.check_user_id()
    else:
        await page.submit()
    return respond(request, page, "signup", _signup_context(page), title="회원가입")


@router.post("/logout")
async def logout(api: Annotated[BookCrewApi, Depends(get_api)]) -> Response:
    page = WorkspaceJoinPage(api)
    await page.logout()
    response = redirect(page.navigation.url, page)
    clear_session_cookie(response)
    return response
