"""User identity as returned by GET /users/me."""

from __future__ import annotations

from bookcrew.models.base import WireModel


class User(WireModel):
    """The session user. `user_id` is the unique login handle."""

    user_id: str
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.user_id
