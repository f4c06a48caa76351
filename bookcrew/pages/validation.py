"""Client-side form rules. The server remains the authority."""

from __future__ import annotations

import re

USER_ID_PATTERN = re.compile(r"^[a-z0-9]+$")
MIN_USER_ID_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
MIN_WORKSPACE_NAME_LENGTH = 2

USER_ID_FORMAT_ERROR = "아이디는 영문 소문자와 숫자만 입력 가능합니다."
USER_ID_LENGTH_ERROR = f"아이디는 최소 {MIN_USER_ID_LENGTH}자 이상이어야 합니다."
PASSWORD_LENGTH_ERROR = f"비밀번호는 최소 {MIN_PASSWORD_LENGTH}자 이상이어야 합니다."


def user_id_error(user_id: str, check_length: bool = True) -> str | None:
    """Return why a login handle is unacceptable, or None."""
    if not USER_ID_PATTERN.fullmatch(user_id):
        return USER_ID_FORMAT_ERROR
    if check_length and len(user_id) < MIN_USER_ID_LENGTH:
        return USER_ID_LENGTH_ERROR
    return None


def password_error(password: str) -> str | None:
    if len(password) < MIN_PASSWORD_LENGTH:
        return PASSWORD_LENGTH_ERROR
    return None
