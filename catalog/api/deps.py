"""
Request-scoped dependencies: stores, clock, policy and the authenticated actor.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from ..core.clock import SystemClock
from ..core.dao import ArtistStore, CommentStore, UserStore
from ..core.errors import AuthenticationError
from ..core.policy import OwnershipPolicy
from ..core.schema import Actor


def get_clock():
    return SystemClock()


def get_policy(request: Request) -> OwnershipPolicy:
    """The process-wide policy built at startup."""
    return request.app.state.policy


def get_user_store() -> UserStore:
    return UserStore()


def get_artist_store(clock=Depends(get_clock)) -> ArtistStore:
    return ArtistStore(clock=clock)


def get_comment_store(clock=Depends(get_clock)) -> CommentStore:
    return CommentStore(clock=clock)


def _extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_actor(
    authorization: Optional[str] = Header(None),
    users: UserStore = Depends(get_user_store),
) -> Actor:
    """Resolve the caller from `Authorization: Bearer <token>`."""
    token = _extract_bearer(authorization)
    if token is None:
        raise AuthenticationError("missing bearer token")

    actor = users.get_actor_by_token(token)
    if actor is None:
        raise AuthenticationError("invalid bearer token")
    return actor
