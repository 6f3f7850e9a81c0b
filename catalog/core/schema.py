"""
Record, actor and decision types shared by the policy, stores and projection.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, List, Optional, Protocol, Tuple


class Role(str, Enum):
    MEMBER = "member"
    STAFF = "staff"


@dataclass(frozen=True)
class Actor:
    """Authenticated caller for the duration of one request."""
    id: int
    role: Role


class OwnedRecord(Protocol):
    """The only view of a record the ownership policy is allowed to see."""

    @property
    def created_by_id(self) -> int: ...

    @property
    def created_at(self) -> datetime: ...


class Outcome(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class DenyReason(str, Enum):
    INSUFFICIENT_PRIVILEGES = "insufficient_privileges"


@dataclass(frozen=True)
class Decision:
    outcome: Outcome
    reason: Optional[DenyReason] = None

    @property
    def allowed(self) -> bool:
        return self.outcome is Outcome.ALLOW

    @classmethod
    def allow(cls) -> 'Decision':
        return cls(Outcome.ALLOW)

    @classmethod
    def deny(cls, reason: DenyReason) -> 'Decision':
        return cls(Outcome.DENY, reason)


@dataclass
class Artist:
    KIND: ClassVar[str] = "artist"
    EDITABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "description", "pictures")

    id: int
    name: str
    description: str
    created_by_id: int
    created_at: datetime
    pictures: List[str] = field(default_factory=list)


@dataclass
class TorrentRequestComment:
    KIND: ClassVar[str] = "torrent_request_comment"
    EDITABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("content",)

    id: int
    torrent_request_id: int
    user_id: int
    content: str
    created_at: datetime
    updated_at: datetime

    @property
    def created_by_id(self) -> int:
        return self.user_id


@dataclass(frozen=True)
class UserLite:
    """Public display identity. Carries no role or authorization state."""
    id: int
    username: str
