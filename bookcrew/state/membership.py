"""
The caller's membership record in one workspace.

Fetched once per workspace visit and re-fetched only on request. Pages read
it; only the provider writes it.
"""

from __future__ import annotations

import logging

from bookcrew.api import ApiError, ApplicationError, BookCrewApi, NetworkError
from bookcrew.models import WorkspaceMember

logger = logging.getLogger(__name__)

MEMBER_UNAVAILABLE = "멤버 정보를 불러올 수 없습니다."
MEMBER_FETCH_FAILED = "멤버 정보를 불러오는 중 오류가 발생했습니다."


class WorkspaceMemberProvider:
    """
    Scoped membership state.

    `member is None and not is_loading` means the fetch failed or the
    caller is not a member of the workspace.
    """

    def __init__(self, api: BookCrewApi, workspace_id: str):
        self.api = api
        self.workspace_id = workspace_id
        self.member: WorkspaceMember | None = None
        self.is_loading = True
        self.error: str | None = None

    async def load(self) -> WorkspaceMember | None:
        """Fetch the membership record for the current workspace."""
        if not self.workspace_id:
            return None

        workspace_id = self.workspace_id
        self.is_loading = True
        try:
            member = await self.api.my_membership(workspace_id)
        except ApplicationError as e:
            member, error = None, e.message or MEMBER_UNAVAILABLE
        except (NetworkError, ApiError) as e:
            logger.error("Failed to fetch workspace member info: %s", e)
            member, error = None, MEMBER_FETCH_FAILED
        else:
            error = None

        if workspace_id != self.workspace_id:
            # The workspace changed while this call was in flight
            return self.member

        self.member = member
        self.error = error
        self.is_loading = False
        return member

    async def set_workspace(self, workspace_id: str) -> WorkspaceMember | None:
        """Switch workspace; reloads only when the id actually changes."""
        if workspace_id == self.workspace_id and not self.is_loading:
            return self.member
        self.workspace_id = workspace_id
        self.member = None
        self.error = None
        return await self.load()

    async def refresh(self) -> WorkspaceMember | None:
        """Manual refetch, e.g. after the member renamed themselves."""
        return await self.load()
