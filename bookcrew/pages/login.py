"""Login page."""

from __future__ import annotations

from bookcrew import config
from bookcrew.api import ApiError
from bookcrew.pages.base import PageState
from bookcrew.pages.validation import user_id_error
from bookcrew.state.auth_guard import safe_return_path

WORKSPACE_JOIN_PATH = "/workspace-join"


class LoginPage(PageState):
    """Login form. On success the route stores `access_token` in the session."""

    def __init__(self, api, return_to: str | None = None):
        super().__init__(api)
        self.return_to = safe_return_path(return_to, WORKSPACE_JOIN_PATH)
        self.user_id = ""
        self.password = ""
        self.auto_login = False
        self.authenticated = False
        self.access_token: str | None = None

    async def submit(self, user_id: str, password: str, auto_login: bool = False) -> bool:
        self.user_id = user_id
        self.password = password
        self.auto_login = auto_login

        if not user_id or not password:
            self.show_error("아이디와 비밀번호를 입력해주세요.")
            return False

        error = user_id_error(user_id, check_length=False)
        if error:
            self.show_error(error)
            return False

        self.is_loading = True
        try:
            token = await self.api.login(user_id, password, auto_login)
        except ApiError as e:
            self.fail(e, "아이디 또는 비밀번호가 올바르지 않습니다.")
            return False
        finally:
            self.is_loading = False

        self.authenticated = True
        self.access_token = token
        self.password = ""
        self.show_toast("로그인에 성공했습니다!")
        self.navigate(self.return_to, delay_ms=config.settings.LOGIN_REDIRECT_DELAY_MS)
        return True
