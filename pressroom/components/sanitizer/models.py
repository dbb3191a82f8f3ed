"""
Sanitizer component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ProvenanceSource(str, Enum):
    """Authoring tool class that pasted markup appears to come from."""

    WORD_PROCESSOR = "word-processor"
    CLOUD_DOCUMENT = "cloud-document"
    WEB_CONTENT = "web-content"
    RICH_TEXT_EDITOR = "rich-text-editor"

    @property
    def display_name(self) -> str:
        return {
            ProvenanceSource.WORD_PROCESSOR: "Word processor",
            ProvenanceSource.CLOUD_DOCUMENT: "Online document editor",
            ProvenanceSource.WEB_CONTENT: "Web content",
            ProvenanceSource.RICH_TEXT_EDITOR: "Rich text editor",
        }[self]


@dataclass(frozen=True)
class ProvenanceGuess:
    """Advisory guess at where markup was pasted from."""

    is_pasted: bool
    confidence: float
    sources: frozenset[ProvenanceSource] = frozenset()

    def ordered_sources(self) -> list[ProvenanceSource]:
        """Sources in a stable, declaration order."""
        return [s for s in ProvenanceSource if s in self.sources]


@dataclass(frozen=True)
class MarkupPolicy:
    """Allow-list handed to the markup parser."""

    allowed_tags: frozenset[str]
    allowed_attrs: frozenset[str]
    drop_with_content: frozenset[str]
    forbidden_protocols: frozenset[str]
    url_attrs: frozenset[str] = frozenset({"href", "src"})


# --- Input Models ---


@dataclass(frozen=True)
class SanitizeOptions:
    """Per-call processing switches."""

    sanitize: bool = True
    validate_size: bool = True
    strip_empty_tags: bool = True


@dataclass(frozen=True)
class ValidateContentInput:
    """Input for validating and sanitizing a document body."""

    raw_body: str
    options: SanitizeOptions = field(default_factory=SanitizeOptions)


@dataclass(frozen=True)
class ValidateMetadataInput:
    """Input for validating title, excerpt and slug."""

    title: str
    excerpt: str | None = None
    slug: str | None = None


@dataclass(frozen=True)
class DetectProvenanceInput:
    """Input for paste provenance detection."""

    raw_body: str


# --- Output Models ---


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of content or metadata validation.

    is_valid is True exactly when errors is empty; warnings never
    affect validity.
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    processed_content: str | None = None
    provenance: ProvenanceGuess | None = None
