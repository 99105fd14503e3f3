"""In-memory usage repository implementation."""

from copy import deepcopy
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional

from domain.menu.core.entities.user_account import UserAccount


class InMemoryUsageRepository:
    """
    In-memory implementation of IUsageRepository port.

    User accounts and anonymous session counters live in two dicts.
    """

    def __init__(self) -> None:
        """Initialize repository with empty storage."""
        self._users: Dict[str, UserAccount] = {}
        self._sessions: Dict[str, int] = {}

    async def get_user(self, user_id: str) -> Optional[UserAccount]:
        user = self._users.get(user_id)
        return deepcopy(user) if user is not None else None

    async def upsert_user(self, user: UserAccount) -> UserAccount:
        self._users[user.id] = deepcopy(user)
        return deepcopy(user)

    async def increment_user_usage(self, user_id: str) -> int:
        user = self._users.get(user_id) or UserAccount(id=user_id)
        updated = replace(
            user,
            usage_count=user.usage_count + 1,
            updated_at=datetime.now(timezone.utc),
        )
        self._users[user_id] = updated
        return updated.usage_count

    async def increment_session_usage(self, session_id: str) -> int:
        self._sessions[session_id] = self._sessions.get(session_id, 0) + 1
        return self._sessions[session_id]

    async def get_usage_count(
        self,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> int:
        if user_id:
            user = self._users.get(user_id)
            return user.usage_count if user is not None else 0
        if session_id:
            return self._sessions.get(session_id, 0)
        return 0

    def clear(self) -> None:
        """Utility method for testing - not part of the port."""
        self._users.clear()
        self._sessions.clear()
