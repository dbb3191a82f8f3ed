"""
Domain entities for the publishing pipeline.

All entities are request-scoped: created and discarded within a single
publish or upload call.
"""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

DocumentStatus = Literal["draft", "published", "archived"]
ActorRole = Literal["user", "author", "admin"]


class ContentDocument(BaseModel):
    """
    A user-authored document on its way to persistence.

    Invariants:
    - sanitized_body is only set after validation succeeded
    - title/excerpt bounds are enforced by the sanitizer, not the model
    """

    raw_body: str
    title: str
    excerpt: str | None = None
    slug: str | None = None
    status: DocumentStatus = "draft"
    category_id: str | None = None
    featured_image: str | None = None
    existing_image_count: int = Field(default=0, ge=0)
    sanitized_body: str | None = None


class Actor(BaseModel):
    """Acting user supplied by the identity collaborator."""

    user_id: UUID
    role: ActorRole = "author"
