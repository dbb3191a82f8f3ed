"""
Publish component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from pressroom.core.entities import ContentDocument

PublishMode = Literal["create", "update"]


class PublishStep(str, Enum):
    """Coarse publish progress steps."""

    ANALYZING = "analyzing"
    PREPARING = "preparing"
    PROCESSING = "processing"
    PERSISTING = "persisting"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in (PublishStep.DONE, PublishStep.FAILED, PublishStep.TIMED_OUT)


@dataclass(frozen=True)
class PublishProgress:
    """Progress notification emitted to the caller."""

    step: PublishStep
    percent: int


@dataclass
class PublishAttempt:
    """
    Bookkeeping for one publish/update call.

    Created when the call starts and discarded when it resolves; never
    persisted. Percent only moves forward.
    """

    content_size_bytes: int
    timeout_ms: int
    attempt_number: int = 0
    progress: PublishProgress = field(
        default_factory=lambda: PublishProgress(PublishStep.ANALYZING, 0)
    )

    def advance(self, step: PublishStep, percent: int | None = None) -> PublishProgress:
        """Move to step, never lowering the reported percent."""
        current = self.progress.percent
        target = current if percent is None else max(current, min(100, percent))
        self.progress = PublishProgress(step, target)
        return self.progress


# --- Input Models ---


@dataclass(frozen=True)
class MediaItem:
    """Image to ingest through the image gate before persistence."""

    data: bytes
    mime_type: str
    context: str = "content"


@dataclass(frozen=True)
class PublishInput:
    """Input for creating or updating a document."""

    document: ContentDocument
    tags: tuple[str, ...] | None = None
    mode: PublishMode = "create"
    media: tuple[MediaItem, ...] = ()
    document_id: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class PublishOutput:
    """
    Single typed result of a publish call.

    error_code is one of the pipeline error codes when success is False.
    Warnings (paste cleanup, association failures) never flip success.
    """

    success: bool
    id: str | None = None
    error: str | None = None
    error_code: str | None = None
    warnings: list[str] = field(default_factory=list)
    media: tuple[str, ...] = ()
    attempts: int = 0
    progress: PublishProgress | None = None
    document: ContentDocument | None = None
