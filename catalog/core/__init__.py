"""
Core policy, persistence and orchestration for catalog record edits.
"""

from .clock import FixedClock, SystemClock
from .errors import CatalogError, InsufficientPrivileges, NotFound, StoreUnavailable
from .pipeline import MutationPipeline
from .policy import OwnershipPolicy
from .schema import Actor, Decision, DenyReason, Outcome, Role

__all__ = [
    'Actor',
    'CatalogError',
    'Decision',
    'DenyReason',
    'FixedClock',
    'InsufficientPrivileges',
    'MutationPipeline',
    'NotFound',
    'Outcome',
    'OwnershipPolicy',
    'Role',
    'StoreUnavailable',
    'SystemClock'
]
