"""Workspace and membership models."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from bookcrew.models.base import WireModel

Role = Literal["ADMIN", "OWNER", "MEMBER"]
ROLE_OPTIONS: tuple[str, ...] = ("ADMIN", "MEMBER")
MANAGER_ROLES = frozenset({"ADMIN", "OWNER"})


class Workspace(WireModel):
    """A reading club."""

    id: str
    name: str
    description: str | None = None
    cover_image: str | None = None
    created_at: str | None = None
    role: str | None = None
    is_joined: bool | None = None

    @property
    def is_admin(self) -> bool:
        return (self.role or "").upper() in MANAGER_ROLES


class WorkspaceMember(WireModel):
    """Join record between a user and a workspace."""

    id: str
    name: str
    role: str = "MEMBER"
    user_id: str | None = None
    email: str | None = None
    join_date: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role.upper() in MANAGER_ROLES


class WorkspaceUpdate(WireModel):
    """Body of PATCH /workspaces/:id."""

    name: str = Field(min_length=1)
    description: str | None = None
    cover_image: str | None = None
