"""
Error taxonomy for catalog record edits.
Every error here is terminal for the current request.
"""

from typing import Optional


class CatalogError(Exception):
    """Base error for the catalog edit guard."""


class NotFound(CatalogError):
    """The requested record does not exist."""

    def __init__(self, kind: str, record_id: int):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class InsufficientPrivileges(CatalogError):
    """The ownership policy denied the mutation.

    The message is deliberately fixed: it must not reveal who the creator is
    or whether the grace window was the deciding factor.
    """

    def __init__(self, reason: Optional[object] = None):
        self.reason = reason
        super().__init__("insufficient privileges")


class StoreUnavailable(CatalogError):
    """The record store could not complete a read or write."""


class AuthenticationError(CatalogError):
    """No valid actor could be resolved from the request credentials."""
