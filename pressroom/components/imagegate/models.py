"""
Image gate component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# --- Validation Error ---


@dataclass(frozen=True)
class ImageGateError:
    """Image rejection with a stable code and actionable message."""

    code: str
    message: str
    field: str = "file"


# --- Domain Models ---


@dataclass(frozen=True)
class ContextBudget:
    """Size and dimension budget for one usage context."""

    max_size_kb: int
    max_width: int
    max_height: int
    quality: float
    max_per_document: int | None = None

    @property
    def max_bytes(self) -> int:
        return self.max_size_kb * 1024


@dataclass(frozen=True)
class ImageAsset:
    """
    Result of passing an image through the gate.

    When the original already fits the budget, compressed_bytes is the
    original bytes object and was_compressed is False.
    """

    original_bytes: bytes
    mime_type: str
    context: str
    width: int
    height: int
    target_max_size_kb: int
    target_max_dimensions: tuple[int, int]
    compressed_bytes: bytes
    was_compressed: bool
    original_size_label: str
    new_size_label: str
    encode_passes: int = 0

    @property
    def original_size(self) -> int:
        return len(self.original_bytes)

    @property
    def new_size(self) -> int:
        return len(self.compressed_bytes)


# --- Input Models ---


@dataclass(frozen=True)
class IngestImageInput:
    """Input for validating, compressing and storing an image."""

    data: bytes
    mime_type: str
    context: str
    current_count: int = 0
    document_id: str | None = None


@dataclass(frozen=True)
class DeleteImageInput:
    """Input for removing a stored image."""

    url: str


# --- Output Models ---


@dataclass(frozen=True)
class IngestImageOutput:
    """Output for image ingestion."""

    url: str | None
    was_compressed: bool
    original_size_label: str | None
    new_size_label: str | None
    asset: ImageAsset | None
    errors: list[ImageGateError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class DeleteImageOutput:
    """Output for image deletion."""

    deleted: bool
    errors: list[ImageGateError] = field(default_factory=list)
    success: bool = True
