"""
Sanitizer component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from .models import MarkupPolicy


class MarkupParserPort(Protocol):
    """
    Injected markup-parsing capability.

    The sanitizer never reaches for a global document model; everything
    that needs a real parse goes through this port.
    """

    def clean(self, markup: str, policy: MarkupPolicy) -> str:
        """Restrict markup to the policy allow-list and serialize it."""
        ...

    def prune_empty(self, markup: str, tags: frozenset[str]) -> str:
        """Remove elements in tags that hold no text and no media."""
        ...

    def text_content(self, markup: str) -> str:
        """Return the visible text of the markup."""
        ...


class RulesPort(Protocol):
    """Port for accessing sanitizer rules configuration."""

    def get_allowed_tags(self) -> frozenset[str]:
        """Get allowed HTML tags."""
        ...

    def get_allowed_attrs(self) -> frozenset[str]:
        """Get allowed HTML attributes."""
        ...

    def get_drop_with_content(self) -> frozenset[str]:
        """Get tags removed together with their content."""
        ...

    def get_forbidden_protocols(self) -> frozenset[str]:
        """Get forbidden URL protocols."""
        ...

    def get_limits(self) -> dict[str, int]:
        """Get size/length limits."""
        ...

    def get_slug_pattern(self) -> str:
        """Get the slug regex."""
        ...

    def get_paste_threshold(self) -> float:
        """Get the confidence above which content counts as pasted."""
        ...
