"""Identity collaborator port."""

from __future__ import annotations

from typing import Protocol

from pressroom.core.entities import Actor


class IdentityPort(Protocol):
    """Supplies the acting user; the pipeline never resolves identity itself."""

    def current_actor(self) -> Actor:
        """Return the acting user id and role."""
        ...
