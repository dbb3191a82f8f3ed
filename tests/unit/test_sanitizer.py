"""
Tests for ContentSanitizer.

Covers script removal, allow-list sanitization, typography, pruning,
the size ceiling and idempotence.
"""

from __future__ import annotations

import pytest

from pressroom.adapters.soup_parser import SoupMarkupParser
from pressroom.components.sanitizer import (
    ContentSanitizer,
    SanitizeOptions,
    SanitizerConfig,
    ValidateContentInput,
    count_images,
    find_unbalanced_tags,
    normalize_typography,
    run_validate,
    strip_foreign_markup,
    strip_script_constructs,
)
from pressroom.components.sanitizer._impl import MALFORMED_WARNING

# --- Fixtures ---


@pytest.fixture
def sanitizer() -> ContentSanitizer:
    return ContentSanitizer(SoupMarkupParser())


def _body(sanitizer: ContentSanitizer, raw: str, **options) -> str:
    result = sanitizer.validate(raw, SanitizeOptions(**options))
    assert result.is_valid, result.errors
    assert result.processed_content is not None
    return result.processed_content


# --- Script removal ---


class TestScriptRemoval:
    """Script-bearing constructs never survive."""

    def test_script_element_removed_with_content(self, sanitizer) -> None:
        out = _body(sanitizer, "<p>Hello</p><script>alert(1)</script>")
        assert out == "<p>Hello</p>"

    def test_event_handler_removed(self, sanitizer) -> None:
        out = _body(sanitizer, '<p onclick="evil()">Hi</p>')
        assert out == "<p>Hi</p>"

    def test_javascript_href_removed(self, sanitizer) -> None:
        out = _body(sanitizer, '<a href="javascript:alert(1)">x</a>')
        assert "javascript" not in out
        assert "x" in out

    def test_obfuscated_javascript_href_removed(self, sanitizer) -> None:
        out = _body(sanitizer, '<a href=" JaVa\tScRiPt:alert(1)">x</a>')
        assert "alert" not in out

    def test_data_url_image_source_removed(self, sanitizer) -> None:
        out = _body(sanitizer, '<p>a<img src="data:image/png;base64,AAAA" alt="x"></p>')
        assert "data:" not in out
        assert 'alt="x"' in out

    @pytest.mark.parametrize(
        "tag",
        ["iframe", "style", "object", "form", "svg"],
    )
    def test_dangerous_elements_dropped_with_content(self, sanitizer, tag) -> None:
        out = _body(sanitizer, f"<p>keep</p><{tag}>secret</{tag}>")
        assert out == "<p>keep</p>"

    def test_unsanitized_path_still_strips_scripts(self, sanitizer) -> None:
        raw = "<p onclick='x()'>Hi</p><script>bad()</script>"
        out = _body(sanitizer, raw, sanitize=False)
        assert out == "<p>Hi</p>"


# --- Allow-list ---


class TestAllowList:
    """Unknown markup is unwrapped, known markup is kept."""

    def test_unknown_tags_unwrapped(self, sanitizer) -> None:
        assert _body(sanitizer, "<section><p>x</p></section>") == "<p>x</p>"
        assert _body(sanitizer, '<font color="red">hi</font>') == "hi"

    def test_disallowed_attributes_removed(self, sanitizer) -> None:
        out = _body(sanitizer, '<p lang="en" title="t">x</p>')
        assert out == '<p title="t">x</p>'

    def test_comments_removed(self, sanitizer) -> None:
        assert _body(sanitizer, "<p>a<!-- hidden --></p>") == "<p>a</p>"

    def test_blank_target_gets_safe_rel(self, sanitizer) -> None:
        out = _body(sanitizer, '<a href="https://example.com" target="_blank">x</a>')
        assert 'rel="noopener noreferrer"' in out
        assert 'href="https://example.com"' in out

    def test_class_kept_for_typed_content(self, sanitizer) -> None:
        out = _body(sanitizer, '<p class="lead">x</p>')
        assert out == '<p class="lead">x</p>'

    def test_pasted_content_loses_class_and_id(self, sanitizer) -> None:
        raw = '<p class="MsoNormal">x</p><p class="lead" id="p2">y</p>'
        assert _body(sanitizer, raw) == "<p>x</p><p>y</p>"


# --- Normalization ---


class TestTypography:
    """Typographic artifacts become plain ASCII."""

    def test_smart_punctuation(self) -> None:
        raw = "\u201cHi\u201d \u2014 it\u2019s\u2026"
        assert normalize_typography(raw) == "\"Hi\" -- it's..."

    def test_nbsp_char_and_entities(self) -> None:
        assert normalize_typography("a\u00a0b&nbsp;c&#160;d") == "a b c d"

    def test_invisible_characters_removed(self) -> None:
        assert normalize_typography("a\u200bb\ufeffc\u00add") == "abcd"

    def test_whitespace(self) -> None:
        assert normalize_typography("a\r\n\r\n\r\n\r\nb") == "a\n\nb"
        assert normalize_typography("  x  \t y  ") == "x y"

    def test_idempotent(self) -> None:
        raw = "  line one \n\n\n\n  line\u00a0two \t\n"
        once = normalize_typography(raw)
        assert normalize_typography(once) == once


class TestForeignMarkup:
    """Vendor-specific markup is stripped before parsing."""

    def test_office_namespaces_and_classes(self) -> None:
        raw = '<p class="MsoNormal" style="mso-line-height:1">Hi<o:p></o:p></p>'
        assert strip_foreign_markup(raw) == "<p>Hi</p>"

    def test_conditional_comments_and_xml_islands(self) -> None:
        raw = "<!--[if gte mso 9]><xml>x</xml><![endif]--><xml><w:Word/></xml><p>a</p>"
        assert strip_foreign_markup(raw) == "<p>a</p>"

    def test_google_docs_wrapper(self) -> None:
        raw = '<b style="font-weight:normal;" id="docs-internal-guid-abc"><p>Text</p></b>'
        assert strip_foreign_markup(raw) == "<p>Text</p></b>"


class TestScriptConstructs:
    """Fast-path stripping."""

    def test_reassembled_script_tag_removed(self) -> None:
        out = strip_script_constructs("<scr<script></script>ipt>alert(1)</script>")
        assert "<script" not in out.lower()

    def test_unquoted_handler_removed(self) -> None:
        assert strip_script_constructs("<img src=x onerror=alert(1)>") == "<img src=x>"

    def test_script_url_removed(self) -> None:
        out = strip_script_constructs("<a href='vbscript:msgbox(1)'>x</a>")
        assert out == "<a>x</a>"


# --- Pruning ---


class TestEmptyTagPruning:
    """Empty containers collapse, innermost first."""

    def test_nested_empty_containers_removed(self, sanitizer) -> None:
        raw = "<p></p><div><span> </span></div><p>Keep</p>"
        assert _body(sanitizer, raw) == "<p>Keep</p>"

    def test_media_keeps_container(self, sanitizer) -> None:
        out = _body(sanitizer, '<p><img src="a.png"></p>')
        assert out == '<p><img src="a.png"/></p>'

    def test_pruning_can_be_disabled(self, sanitizer) -> None:
        assert _body(sanitizer, "<p></p>", strip_empty_tags=False) == "<p></p>"


# --- Size ceiling ---


class TestSizeCeiling:
    """Oversized bodies produce exactly one error."""

    def test_five_mib_rejected_with_single_error(self, sanitizer) -> None:
        raw = "a" * (5 * 1024 * 1024)
        result = sanitizer.validate(raw)

        assert not result.is_valid
        assert len(result.errors) == 1
        assert "exceeds maximum allowed size (5120KB)" in result.errors[0]
        assert result.processed_content is None

    def test_just_under_limit_accepted(self) -> None:
        sanitizer = ContentSanitizer(SoupMarkupParser(), SanitizerConfig(max_content_bytes=100))
        assert sanitizer.validate("a" * 99).is_valid
        assert not sanitizer.validate("a" * 100).is_valid

    def test_size_counts_bytes_not_characters(self) -> None:
        sanitizer = ContentSanitizer(SoupMarkupParser(), SanitizerConfig(max_content_bytes=100))
        # 50 characters, 100 bytes
        assert not sanitizer.validate("\u00e9" * 50).is_valid

    def test_size_check_can_be_disabled(self) -> None:
        sanitizer = ContentSanitizer(SoupMarkupParser(), SanitizerConfig(max_content_bytes=10))
        result = sanitizer.validate("a" * 50, SanitizeOptions(validate_size=False))
        assert result.is_valid

    def test_whitespace_padding_measured_before_normalising(self, sanitizer) -> None:
        raw = "<p>a" + " " * (6 * 1024 * 1024) + "b</p>"
        result = sanitizer.validate(raw)

        assert not result.is_valid
        assert len(result.errors) == 1
        assert result.processed_content is None

    def test_stripped_attributes_measured_before_cleaning(self, sanitizer) -> None:
        raw = '<p style="color:red">x</p>' * 300000
        result = sanitizer.validate(raw)

        assert not result.is_valid
        assert len(result.errors) == 1

    def test_raw_size_counts_even_when_clean_output_fits(self) -> None:
        sanitizer = ContentSanitizer(SoupMarkupParser(), SanitizerConfig(max_content_bytes=100))
        result = sanitizer.validate("<p>" + " " * 200 + "x</p>")
        assert not result.is_valid


def test_extract_text_drops_markup(sanitizer) -> None:
    assert sanitizer.extract_text('<p>Hello <b>big</b> <a href="/x">world</a></p>') == "Hello big world"


# --- Warnings ---


class TestWarnings:
    """Quality problems warn but never invalidate."""

    def test_malformed_markup_warns(self, sanitizer) -> None:
        result = sanitizer.validate("<p><strong>bold</p>")
        assert result.is_valid
        assert MALFORMED_WARNING in result.warnings
        assert result.processed_content == "<p><strong>bold</strong></p>"

    def test_balanced_markup_does_not_warn(self, sanitizer) -> None:
        result = sanitizer.validate("<p>a<br>b</p><img src='x.png'/>")
        assert MALFORMED_WARNING not in result.warnings

    def test_many_images_warn(self, sanitizer) -> None:
        raw = '<img src="x.png">' * 11
        result = sanitizer.validate(raw)
        assert result.is_valid
        assert "Content contains 11 images, which may slow down loading" in result.warnings

    def test_paste_warning(self, sanitizer) -> None:
        result = sanitizer.validate('<p class="MsoNormal">x</p>')
        assert result.warnings[0] == (
            "Detected content from: Word processor. Auto-cleaning applied."
        )


# --- Idempotence ---


class TestIdempotence:
    """Processing processed content changes nothing."""

    @pytest.mark.parametrize(
        "raw",
        [
            "<p>Hello</p><script>alert(1)</script>",
            '<p class="MsoNormal" style="margin:0">Hello\u00a0world<o:p></o:p></p>',
            '<b style="font-weight:normal;" id="docs-internal-guid-1"><p>Text</p></b>',
            '<div data-id="1" role="note"><p>A &amp; B &lt;tag&gt;</p></div>',
            "<p><strong>bold</p><ul><li>one<li>two</ul>",
            '<a href="https://x.test" target="_blank">link</a>\n\n\n\n<p> spaced </p>',
            "<p>caf\u00e9 \u2014 \u201cquoted\u201d</p><p></p>",
        ],
    )
    def test_validate_twice_is_stable(self, sanitizer, raw) -> None:
        first = _body(sanitizer, raw)
        second = sanitizer.validate(first)

        assert second.errors == []
        assert second.processed_content == first


# --- Helpers ---


class TestHelpers:
    def test_find_unbalanced_tags(self) -> None:
        assert find_unbalanced_tags("<p><b>x</p>") == ["b"]
        assert find_unbalanced_tags("<p>x</p></div>") == ["div"]
        assert find_unbalanced_tags("<p>a<br>b<img src='x'/></p>") == []

    def test_count_images(self) -> None:
        assert count_images('<p><img src="a"><IMG src="b"/></p>') == 2


class TestComponentEntryPoint:
    def test_run_validate_uses_rules(self, parser, rules) -> None:
        result = run_validate(
            ValidateContentInput(raw_body="<p>x</p><script>y</script>"),
            parser=parser,
            rules=rules,
        )
        assert result.is_valid
        assert result.processed_content == "<p>x</p>"
