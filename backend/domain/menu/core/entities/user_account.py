"""UserAccount entity - usage counter and premium flag of a caller."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass
class UserAccount:
    """
    Entity: Signed-in user as seen by the usage gate.

    Authentication itself happens upstream; the backend only receives the
    user id and keeps the free-tier counter and premium status.
    """

    id: str
    email: Optional[str] = None
    usage_count: int = 0
    is_premium: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("User id cannot be empty")
        if self.usage_count < 0:
            raise ValueError(f"usage_count cannot be negative, got {self.usage_count}")
