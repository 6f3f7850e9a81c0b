"""
Ownership policy for record edits.

Staff may edit any record at any time. A member may edit a record only if
they created it and the edit happens inside the grace window
[created_at, created_at + grace_period). Everything else is denied.
"""

from datetime import datetime, timedelta
from typing import Optional

from .clock import as_utc
from .config import PolicyConfig
from .schema import Actor, Decision, DenyReason, OwnedRecord, Role


class OwnershipPolicy:
    """Pure decision function over (actor, record, now). Holds no per-request state."""

    def __init__(self, config: Optional[PolicyConfig] = None):
        self.config = config or PolicyConfig()

    @property
    def grace_period(self) -> timedelta:
        return self.config.grace_period

    def window_end(self, record: OwnedRecord) -> datetime:
        """First instant at which the creator no longer has self-edit rights."""
        return as_utc(record.created_at) + self.grace_period

    def decide(self, actor: Actor, record: OwnedRecord, now: datetime) -> Decision:
        if actor.role is Role.STAFF:
            return Decision.allow()

        if actor.role is Role.MEMBER:
            is_creator = actor.id == record.created_by_id
            if is_creator and as_utc(now) < self.window_end(record):
                return Decision.allow()
            return Decision.deny(DenyReason.INSUFFICIENT_PRIVILEGES)

        # Unknown role: fail closed
        return Decision.deny(DenyReason.INSUFFICIENT_PRIVILEGES)
