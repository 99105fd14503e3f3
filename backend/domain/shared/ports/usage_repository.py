"""Usage repository port (interface).

Keeps the free-tier counters for signed-in users and anonymous sessions.
"""

from typing import Optional, Protocol

from domain.menu.core.entities.user_account import UserAccount


class IUsageRepository(Protocol):
    """Interface for user accounts and usage counters."""

    async def get_user(self, user_id: str) -> Optional[UserAccount]:
        ...

    async def upsert_user(self, user: UserAccount) -> UserAccount:
        """Create the account or replace its stored state."""
        ...

    async def increment_user_usage(self, user_id: str) -> int:
        """
        Count one analysis for a user (creating the account if needed).

        Returns:
            New usage count
        """
        ...

    async def increment_session_usage(self, session_id: str) -> int:
        """
        Count one analysis for an anonymous session.

        Returns:
            New usage count
        """
        ...

    async def get_usage_count(
        self,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> int:
        """
        Analyses performed so far.

        The user counter takes precedence when both ids are given.
        Returns 0 when neither id is known.
        """
        ...
