"""
BeautifulSoup markup parser adapter.

Implements the sanitizer MarkupParserPort on top of bs4 with the
stdlib "html.parser" tree builder, so malformed input is repaired the
same way everywhere.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from bs4.element import PreformattedString, Tag

from pressroom.components.sanitizer.models import MarkupPolicy

# Elements that keep an otherwise empty container alive
MEDIA_TAGS = ("img", "br", "hr")

# Browsers ignore embedded whitespace and control characters in URLs
_URL_NOISE = re.compile(r"[\s\x00-\x1f]+")


def _has_forbidden_protocol(value: str, protocols: frozenset[str]) -> bool:
    compact = _URL_NOISE.sub("", value).lower()
    return any(compact.startswith(p) for p in protocols)


def _ensure_safe_rel(tag: Tag) -> None:
    """Links opening a new browsing context get noopener and noreferrer."""
    if tag.get("target") != "_blank":
        return
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    parts = list(rel)
    for value in ("noopener", "noreferrer"):
        if value not in parts:
            parts.append(value)
    tag["rel"] = parts


class SoupMarkupParser:
    """MarkupParserPort backed by BeautifulSoup."""

    def __init__(self, features: str = "html.parser") -> None:
        self._features = features

    def _parse(self, markup: str) -> BeautifulSoup:
        return BeautifulSoup(markup, self._features)

    def clean(self, markup: str, policy: MarkupPolicy) -> str:
        """Restrict markup to the policy allow-list and serialize it."""
        soup = self._parse(markup)

        for tag in soup.find_all(list(policy.drop_with_content)):
            if not tag.decomposed:
                tag.decompose()

        # Comments, doctypes, CDATA and processing instructions
        for node in list(soup.descendants):
            if isinstance(node, PreformattedString):
                node.extract()

        for tag in soup.find_all(True):
            if tag.name not in policy.allowed_tags:
                tag.unwrap()
                continue

            attrs = {}
            for name, value in tag.attrs.items():
                name = name.lower()
                if name not in policy.allowed_attrs:
                    continue
                if name in policy.url_attrs and _has_forbidden_protocol(
                    str(value), policy.forbidden_protocols
                ):
                    continue
                attrs[name] = value
            tag.attrs = attrs

            if tag.name == "a":
                _ensure_safe_rel(tag)

        return str(soup)

    def prune_empty(self, markup: str, tags: frozenset[str]) -> str:
        """Remove elements in tags that hold no text and no media."""
        soup = self._parse(markup)

        # Reverse document order visits children before their parents
        for tag in reversed(soup.find_all(list(tags))):
            if tag.decomposed:
                continue
            if tag.find(MEDIA_TAGS) is None and not tag.get_text(strip=True):
                tag.decompose()

        return str(soup)

    def text_content(self, markup: str) -> str:
        """Return the visible text of the markup."""
        return self._parse(markup).get_text(" ", strip=True)
