"""Free-tier usage gate.

Signed-in users and anonymous sessions get a fixed number of free
analyses; admins and premium users are never limited.
"""

import logging
from typing import FrozenSet, Iterable, Optional

from domain.menu.core.exceptions.domain_errors import UsageLimitExceededError
from domain.shared.ports.usage_repository import IUsageRepository

logger = logging.getLogger(__name__)

DEFAULT_FREE_LIMIT = 3


class UsageGate:
    """
    Check whether a caller may run one more analysis.

    Example:
        >>> gate = UsageGate(usage_repository, free_limit=3)
        >>> await gate.check(user_id=None, session_id="sess-1")
    """

    def __init__(
        self,
        usage_repository: IUsageRepository,
        free_limit: int = DEFAULT_FREE_LIMIT,
        admin_user_ids: Iterable[str] = (),
    ):
        if free_limit < 0:
            raise ValueError("free_limit cannot be negative")
        self._usage = usage_repository
        self._free_limit = free_limit
        self._admins: FrozenSet[str] = frozenset(admin_user_ids)

    async def check(self, user_id: Optional[str], session_id: Optional[str]) -> int:
        """
        Enforce the free-tier limit.

        Args:
            user_id: Signed-in user (takes precedence over the session)
            session_id: Anonymous session

        Returns:
            Current usage count

        Raises:
            UsageLimitExceededError: Anonymous caller over the limit
                (requires_auth) or signed-in non-premium user over the
                limit (requires_payment)
        """
        usage_count = await self._usage.get_usage_count(user_id=user_id, session_id=session_id)

        if usage_count < self._free_limit or (user_id and user_id in self._admins):
            return usage_count

        if not user_id:
            logger.info(
                "Anonymous usage limit reached",
                extra={"session_id": session_id, "usage_count": usage_count},
            )
            raise UsageLimitExceededError(usage_count, self._free_limit, requires_auth=True)

        user = await self._usage.get_user(user_id)
        if user is not None and user.is_premium:
            return usage_count

        logger.info(
            "Free usage limit reached",
            extra={"user_id": user_id, "usage_count": usage_count},
        )
        raise UsageLimitExceededError(usage_count, self._free_limit, requires_payment=True)

    async def record(self, user_id: Optional[str], session_id: Optional[str]) -> None:
        """Count one served analysis for the caller."""
        if user_id:
            await self._usage.increment_user_usage(user_id)
        elif session_id:
            await self._usage.increment_session_usage(session_id)
