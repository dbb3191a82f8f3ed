"""
Identity adapters.

The pipeline never authenticates anyone; these adapters only hand an
already-resolved actor to the orchestrator.
"""

from __future__ import annotations

from uuid import UUID

from pressroom.core.entities import Actor, ActorRole


class StaticIdentity:
    """IdentityPort that always returns the same actor."""

    def __init__(self, user_id: UUID, role: ActorRole = "author") -> None:
        self._actor = Actor(user_id=user_id, role=role)

    def current_actor(self) -> Actor:
        return self._actor


def identity_from_headers(user_id: str | None, role: str | None = None) -> StaticIdentity:
    """
    Build an identity from headers set by an upstream auth proxy.

    Raises:
        ValueError: If the user id is missing or not a UUID, or the role is unknown
    """
    if not user_id:
        raise ValueError("Missing user id")
    actor = Actor(user_id=UUID(user_id), role=role or "author")
    return StaticIdentity(actor.user_id, actor.role)
