"""
Publish component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from pressroom.components.imagegate.models import IngestImageOutput
from pressroom.core.ports import ClockPort, DocumentRepoPort, IdentityPort, SleeperPort


class MediaUploaderPort(Protocol):
    """Gate-then-store capability for media attached to a publish call."""

    def upload(
        self,
        data: bytes,
        mime_type: str,
        context: str,
        current_count: int = 0,
        document_id: str | None = None,
    ) -> IngestImageOutput:
        """Validate, compress and store one image."""
        ...


class RulesPort(Protocol):
    """Port for accessing publish rules configuration."""

    def get_max_attempts(self) -> int:
        """Get total persistence attempts per call."""
        ...

    def get_base_delay_ms(self) -> int:
        """Get the first backoff delay in milliseconds."""
        ...

    def get_fast_path_threshold_bytes(self) -> int:
        """Get the body size above which only scripts are stripped."""
        ...

    def get_timeout_tiers(self) -> tuple[tuple[int | None, int], ...]:
        """Get (below_bytes, timeout_ms) tiers; None marks the ceiling."""
        ...


__all__ = [
    "ClockPort",
    "DocumentRepoPort",
    "IdentityPort",
    "MediaUploaderPort",
    "RulesPort",
    "SleeperPort",
]
