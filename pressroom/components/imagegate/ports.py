"""
Image gate component port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol

from pressroom.core.ports.clock import ClockPort
from pressroom.core.ports.storage import StoragePort


class ImageCodecPort(Protocol):
    """
    Decode/resize/encode capability.

    Image handles are opaque to the gate; only the codec inspects them.
    """

    def decode(self, data: bytes) -> Any:
        """
        Decode image bytes.

        Raises:
            ImageDecodeError: If the bytes are not a readable image
        """
        ...

    def dimensions(self, image: Any) -> tuple[int, int]:
        """Return (width, height)."""
        ...

    def resize(self, image: Any, width: int, height: int) -> Any:
        """Return a resized copy of the image."""
        ...

    def encode(self, image: Any, mime_type: str, quality: float) -> bytes:
        """Encode the image as mime_type at quality in (0, 1]."""
        ...


class RulesPort(Protocol):
    """Port for accessing image gate rules configuration."""

    def get_allowed_mime_types(self) -> tuple[str, ...]:
        """Get allowed image MIME types."""
        ...

    def get_min_quality(self) -> float:
        """Get the lowest quality a second pass may use."""
        ...

    def get_context_budgets(self) -> dict[str, dict[str, Any]]:
        """Get per-context budgets keyed by context name."""
        ...


__all__ = ["ClockPort", "ImageCodecPort", "RulesPort", "StoragePort"]
