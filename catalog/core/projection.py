"""
Read-side decoration of records with their creator's public display identity.

This module never consults the ownership policy and exposes nothing about
whether, or until when, a record is editable.
"""

from dataclasses import dataclass
from typing import Generic, Iterable, List, TypeVar

from .schema import UserLite

T = TypeVar('T')

DELETED_USERNAME = "[deleted]"


@dataclass(frozen=True)
class CreatorView(Generic[T]):
    record: T
    created_by: UserLite


def project_creators(records: Iterable[T], users) -> List[CreatorView[T]]:
    """Pair each record with the display identity of its creator.

    `users` only needs `get_user_lites(ids) -> {id: UserLite}`. Creators that no
    longer resolve are shown under a placeholder handle.
    """
    records = list(records)
    lites = users.get_user_lites(r.created_by_id for r in records)
    return [
        CreatorView(
            record=r,
            created_by=lites.get(r.created_by_id, UserLite(id=r.created_by_id, username=DELETED_USERNAME))
        )
        for r in records
    ]


def project_creator(record: T, users) -> CreatorView[T]:
    return project_creators([record], users)[0]
