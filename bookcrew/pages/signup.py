"""Signup page with login-handle availability check."""

from __future__ import annotations

from bookcrew import config
from bookcrew.api import ApiError, ApplicationError
from bookcrew.pages.base import PageState
from bookcrew.pages.validation import password_error, user_id_error

USER_ID_TAKEN = "이미 사용 중인 아이디입니다."


class SignupPage(PageState):
    """
    Signup form.

    The handle must pass the availability check before submit; editing the
    handle afterwards clears the check.
    """

    def __init__(self, api):
        super().__init__(api)
        self.user_id = ""
        self.password = ""
        self.password_confirm = ""
        self.user_id_available: bool | None = None
        self.verified_user_id: str | None = None

    def set_user_id(self, user_id: str) -> None:
        if user_id != self.user_id:
            self.user_id = user_id
            self.user_id_available = None
            self.verified_user_id = None

    def restore_verification(self, verified_user_id: str | None) -> None:
        """
        Carry a completed check across a form round-trip.

        UI-only gating: the hidden field is client-supplied, the backend
        still rejects a taken handle on signup.
        """
        if verified_user_id and verified_user_id == self.user_id:
            self.verified_user_id = verified_user_id
            self.user_id_available = True

    @property
    def password_matched(self) -> bool | None:
        """Live match indicator; None until both fields are filled."""
        if not self.password or not self.password_confirm:
            return None
        return self.password == self.password_confirm

    async def check_user_id(self) -> bool:
        if not self.user_id:
            self.show_error("아이디를 입력해주세요.")
            return False

        error = user_id_error(self.user_id)
        if error:
            self.user_id_available = False
            self.show_error(error)
            return False

        try:
            available = await self.api.check_user_id(self.user_id)
        except ApplicationError as e:
            self.user_id_available = False
            self.show_error(e.message or USER_ID_TAKEN)
            return False
        except ApiError as e:
            if e.status == 409:
                self.user_id_available = False
                self.show_error(e.message or USER_ID_TAKEN)
            else:
                self.fail(e, "아이디 확인 중 오류가 발생했습니다.")
            return False

        self.user_id_available = available
        if available:
            self.verified_user_id = self.user_id
            self.show_toast("사용 가능한 아이디입니다.")
        else:
            self.show_error(USER_ID_TAKEN)
        return available

    async def submit(self) -> bool:
        if not self.user_id or not self.password or not self.password_confirm:
            self.show_error("모든 필드를 입력해주세요.")
            return False

        error = user_id_error(self.user_id)
        if error:
            self.show_error(error)
            return False

        if self.verified_user_id != self.user_id:
            self.show_error("아이디 중복 확인을 완료해주세요.")
            return False

        error = password_error(self.password)
        if error:
            self.show_error(error)
            return False

        if self.password != self.password_confirm:
            self.show_error("비밀번호가 일치하지 않습니다.")
            return False

        self.is_loading = True
        try:
            await self.api.signup(self.user_id, self.password)
        except ApiError as e:
            self.fail(e, "회원가입에 실패했습니다.")
            return False
        finally:
            self.is_loading = False

        self.show_toast("회원가입이 완료되었습니다!")
        self.navigate("/login", delay_ms=config.settings.SIGNUP_REDIRECT_DELAY_MS)
        return True
