"""
Edit orchestration: load, decide, merge, persist.

The policy decision is always made before any write is attempted. A denied or
missing record never reaches the store's update path.
"""

from dataclasses import replace
from typing import Any, Generic, Mapping, TypeVar

from util.logging import logger, sanitize_payload

from .clock import SystemClock
from .dao import RecordStore
from .errors import InsufficientPrivileges, NotFound
from .policy import OwnershipPolicy
from .schema import Actor

T = TypeVar('T')


def merge_changes(record: T, changes: Mapping[str, Any]) -> T:
    """Copy the record with only its editable fields taken from `changes`.

    Identity, creator and creation fields always come from the stored record.
    """
    editable = getattr(type(record), "EDITABLE_FIELDS", ())
    updates = {name: changes[name] for name in editable if name in changes}
    return replace(record, **updates)


class MutationPipeline(Generic[T]):
    """Runs one edit request end to end against a single record store."""

    def __init__(self, store: RecordStore[T], policy: OwnershipPolicy, clock=None):
        self.store = store
        self.policy = policy
        self.clock = clock or SystemClock()

    def edit(self, record_id: int, changes: Mapping[str, Any], actor: Actor) -> T:
        """Apply `changes` to record `record_id` on behalf of `actor`.

        Raises:
            NotFound: the record does not exist.
            InsufficientPrivileges: the ownership policy denied the edit.
            StoreUnavailable: the store failed before anything was committed.
        """
        kind = self.store.kind
        logger.debug(f"Edit requested for {kind} {record_id} by actor {actor.id}: {sanitize_payload(dict(changes))}")

        current = self.store.get(record_id)
        if current is None:
            logger.log_operation(f"{kind}.edit", "not_found", {"record_id": record_id, "actor_id": actor.id})
            raise NotFound(kind, record_id)

        decision = self.policy.decide(actor, current, self.clock.now())
        logger.log_policy_decision(
            kind, record_id, actor.id, actor.role.value, decision.allowed,
            decision.reason.value if decision.reason else None
        )
        if not decision.allowed:
            logger.log_mutation(kind, record_id, actor.id, [], status="denied")
            raise InsufficientPrivileges(decision.reason)

        merged = merge_changes(current, changes)
        persisted = self.store.update(merged)

        changed = [name for name in getattr(type(current), "EDITABLE_FIELDS", ()) if name in changes]
        logger.log_mutation(kind, record_id, actor.id, changed)
        return persisted
