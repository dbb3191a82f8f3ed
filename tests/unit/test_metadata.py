"""
Tests for metadata validation and text helpers.
"""

from __future__ import annotations

from pressroom.adapters.soup_parser import SoupMarkupParser
from pressroom.components.sanitizer import (
    ContentSanitizer,
    ValidateMetadataInput,
    calculate_reading_time,
    estimate_processing_time_ms,
    generate_unique_slug,
    run,
    run_validate_metadata,
    slugify,
)


def _sanitizer() -> ContentSanitizer:
    return ContentSanitizer(SoupMarkupParser())


class TestTitle:
    """Title problems are hard errors."""

    def test_missing_title(self) -> None:
        result = _sanitizer().validate_metadata("   ")
        assert not result.is_valid
        assert result.errors == ["Title is required"]

    def test_title_too_long(self) -> None:
        result = _sanitizer().validate_metadata("t" * 201)
        assert result.errors == ["Title is too long (201/200 characters)"]

    def test_title_at_limit(self) -> None:
        assert _sanitizer().validate_metadata("t" * 200).is_valid


class TestExcerptAndSlug:
    """Excerpt length and slug shape only warn."""

    def test_long_excerpt_warns(self) -> None:
        result = _sanitizer().validate_metadata("Title", excerpt="e" * 501)
        assert result.is_valid
        assert result.warnings == ["Excerpt is quite long (501/500 characters)"]

    def test_bad_slug_warns(self) -> None:
        result = _sanitizer().validate_metadata("Title", slug="Bad Slug")
        assert result.is_valid
        assert result.warnings == [
            "Slug should only contain lowercase letters, numbers, and hyphens"
        ]

    def test_good_slug(self) -> None:
        result = _sanitizer().validate_metadata("Title", slug="good-slug-2")
        assert result.warnings == []

    def test_entry_point(self, parser, rules) -> None:
        result = run_validate_metadata(
            ValidateMetadataInput(title="", excerpt=None), parser=parser, rules=rules
        )
        assert result.errors == ["Title is required"]

    def test_dispatcher(self, parser) -> None:
        result = run(ValidateMetadataInput(title="Fine"), parser=parser)
        assert result.is_valid


class TestSlugs:
    def test_slugify(self) -> None:
        assert slugify("Hello World!") == "hello-world"
        assert slugify("Rock & Roll") == "rock-and-roll"
        assert slugify("Caf\u00e9 au lait") == "cafe-au-lait"
        assert slugify("__init__") == "init"
        assert slugify("  many   spaces  ") == "many-spaces"

    def test_unique_slug(self) -> None:
        assert generate_unique_slug("Hello", []) == "hello"
        assert generate_unique_slug("Hello", ["hello", "hello-1"]) == "hello-2"


class TestReadingTime:
    def test_minimum_one_minute(self) -> None:
        assert calculate_reading_time("") == 1

    def test_rounds_up(self) -> None:
        assert calculate_reading_time(" ".join(["word"] * 460)) == 2
        assert calculate_reading_time(" ".join(["word"] * 461)) == 3

    def test_markup_ignored(self) -> None:
        assert calculate_reading_time("<p>word</p>" * 230) == 1

    def test_processing_estimate(self) -> None:
        assert estimate_processing_time_ms("x") == 1000
        assert estimate_processing_time_ms('<img src="a">' * 4) >= 2000
