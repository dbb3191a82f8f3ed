"""
ImageGate - per-context image budgets and bounded compression.

Key behaviors:
- MIME allow-list and per-document quota are checked before any decode
- Images already within budget pass through untouched
- At most two encode passes; the second scales quality by the overshoot
- Dimensions only ever shrink, preserving aspect ratio
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pressroom.core.errors import (
    CompressionBudgetExceeded,
    QuotaExceeded,
    UnsupportedImageType,
)

from .models import ContextBudget, ImageAsset
from .ports import ImageCodecPort

logger = logging.getLogger(__name__)

MAX_ENCODE_PASSES = 2

MIME_ALIASES = {
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
}

MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

# --- Configuration ---


@dataclass(frozen=True)
class ImageGateConfig:
    """Image gate configuration from rules."""

    allowed_mime_types: tuple[str, ...] = (
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
    )
    min_quality: float = 0.1
    contexts: dict[str, ContextBudget] = field(
        default_factory=lambda: {
            "profile": ContextBudget(
                max_size_kb=50, max_width=400, max_height=400, quality=0.7
            ),
            "content": ContextBudget(
                max_size_kb=100,
                max_width=1920,
                max_height=1080,
                quality=0.8,
                max_per_document=2,
            ),
        }
    )


DEFAULT_CONFIG = ImageGateConfig()

# --- Pure Helpers ---


def normalize_mime_type(mime_type: str) -> str:
    mime = (mime_type or "").split(";")[0].strip().lower()
    return MIME_ALIASES.get(mime, mime)


def extension_for(mime_type: str) -> str:
    return MIME_EXTENSIONS.get(normalize_mime_type(mime_type), "bin")


def format_file_size(size_bytes: int) -> str:
    """
    Human-readable size with 1024-based units.

    Trailing zeros are dropped: 0 -> "0 Bytes", 122880 -> "120 KB",
    1572864 -> "1.5 MB".
    """
    if size_bytes <= 0:
        return "0 Bytes"

    units = ("Bytes", "KB", "MB", "GB")
    exponent = 0
    while size_bytes >= 1024 ** (exponent + 1) and exponent < len(units) - 1:
        exponent += 1
    value = round(size_bytes / 1024**exponent, 2)
    return f"{value:g} {units[exponent]}"


def fit_dimensions(
    width: int,
    height: int,
    max_width: int,
    max_height: int,
) -> tuple[int, int]:
    """Scale (width, height) down to fit the box, keeping aspect ratio."""
    if width <= max_width and height <= max_height:
        return width, height

    ratio = min(max_width / width, max_height / height)
    return max(1, round(width * ratio)), max(1, round(height * ratio))


def second_pass_quality(
    quality: float,
    target_bytes: int,
    actual_bytes: int,
    min_quality: float,
) -> float:
    """Quality for the retry pass, proportional to the overshoot."""
    return max(min_quality, quality * (target_bytes / actual_bytes))


# --- Service Class ---


class ImageGate:
    """
    Stateless image gate.

    One instance can serve concurrent uploads; all state lives in the
    ImageAsset returned per call.
    """

    def __init__(
        self,
        codec: ImageCodecPort,
        config: ImageGateConfig | None = None,
    ) -> None:
        self._codec = codec
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> ImageGateConfig:
        """Get configuration."""
        return self._config

    def budget_for(self, context: str) -> ContextBudget:
        """Look up the budget for a context."""
        try:
            return self._config.contexts[context]
        except KeyError:
            known = ", ".join(sorted(self._config.contexts))
            raise ValueError(f"Unknown image context '{context}' (expected one of: {known})")

    def check_quota(self, context: str, current_count: int) -> None:
        """Raise QuotaExceeded if the document already holds its maximum."""
        limit = self.budget_for(context).max_per_document
        if limit is not None and current_count >= limit:
            raise QuotaExceeded(context, limit)

    def ingest(
        self,
        data: bytes,
        mime_type: str,
        context: str,
        current_count: int = 0,
    ) -> ImageAsset:
        """
        Validate an image and compress it into its context budget.

        Raises:
            UnsupportedImageType: MIME type not in the allow-list
            QuotaExceeded: document already at its per-context maximum
            ImageDecodeError: bytes are not a readable image
            CompressionBudgetExceeded: still over budget after two passes
        """
        mime = normalize_mime_type(mime_type)
        if mime not in self._config.allowed_mime_types:
            raise UnsupportedImageType(mime_type, self._config.allowed_mime_types)

        budget = self.budget_for(context)
        self.check_quota(context, current_count)

        image = self._codec.decode(data)
        width, height = self._codec.dimensions(image)
        original_label = format_file_size(len(data))

        if len(data) <= budget.max_bytes:
            return ImageAsset(
                original_bytes=data,
                mime_type=mime,
                context=context,
                width=width,
                height=height,
                target_max_size_kb=budget.max_size_kb,
                target_max_dimensions=(budget.max_width, budget.max_height),
                compressed_bytes=data,
                was_compressed=False,
                original_size_label=original_label,
                new_size_label=original_label,
                encode_passes=0,
            )

        new_width, new_height = fit_dimensions(width, height, budget.max_width, budget.max_height)
        if (new_width, new_height) != (width, height):
            image = self._codec.resize(image, new_width, new_height)

        quality = budget.quality
        encoded = self._codec.encode(image, mime, quality)
        passes = 1

        if len(encoded) > budget.max_bytes and passes < MAX_ENCODE_PASSES:
            quality = second_pass_quality(
                quality, budget.max_bytes, len(encoded), self._config.min_quality
            )
            logger.info(
                "Image over %s budget after first pass (%d > %d bytes), retrying at quality %.2f",
                context,
                len(encoded),
                budget.max_bytes,
                quality,
            )
            encoded = self._codec.encode(image, mime, quality)
            passes += 1

        if len(encoded) > budget.max_bytes:
            raise CompressionBudgetExceeded(budget.max_bytes, len(encoded), passes)

        logger.info(
            "Compressed %s image from %s to %s in %d pass(es)",
            context,
            original_label,
            format_file_size(len(encoded)),
            passes,
        )
        return ImageAsset(
            original_bytes=data,
            mime_type=mime,
            context=context,
            width=new_width,
            height=new_height,
            target_max_size_kb=budget.max_size_kb,
            target_max_dimensions=(budget.max_width, budget.max_height),
            compressed_bytes=encoded,
            was_compressed=True,
            original_size_label=original_label,
            new_size_label=format_file_size(len(encoded)),
            encode_passes=passes,
        )


# --- Factory ---


def create_image_gate(
    codec: ImageCodecPort,
    config: ImageGateConfig | None = None,
) -> ImageGate:
    """Create an ImageGate with optional configuration."""
    return ImageGate(codec=codec, config=config)
