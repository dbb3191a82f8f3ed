"""
Sanitizer component - Paste-aware content validation and sanitization.

Turns untrusted markup into a safe, normalized document body and checks
document metadata.

Invariants:
- Output contains no script elements, event handlers or script URLs
- Processing an already-processed body yields the same body
- Only the size ceiling and title problems are errors
"""

from __future__ import annotations

from ._impl import ContentSanitizer, SanitizerConfig
from .models import (
    DetectProvenanceInput,
    ProvenanceGuess,
    ValidateContentInput,
    ValidateMetadataInput,
    ValidationResult,
)
from .ports import MarkupParserPort, RulesPort


def _build_config(rules: RulesPort | None) -> SanitizerConfig:
    """Build sanitizer config from rules port."""
    if rules is None:
        return SanitizerConfig()

    limits = rules.get_limits()
    return SanitizerConfig(
        allowed_tags=rules.get_allowed_tags(),
        allowed_attrs=rules.get_allowed_attrs(),
        drop_with_content=rules.get_drop_with_content(),
        forbidden_protocols=rules.get_forbidden_protocols(),
        max_content_bytes=limits["max_content_bytes"],
        max_title_length=limits["max_title_length"],
        max_excerpt_length=limits["max_excerpt_length"],
        max_images_before_warning=limits["max_images_before_warning"],
        slug_pattern=rules.get_slug_pattern(),
        paste_threshold=rules.get_paste_threshold(),
    )


def create_sanitizer(
    parser: MarkupParserPort,
    rules: RulesPort | None = None,
) -> ContentSanitizer:
    """Create a sanitizer service configured from rules."""
    return ContentSanitizer(parser=parser, config=_build_config(rules))


# --- Component Entry Points ---


def run_validate(
    inp: ValidateContentInput,
    *,
    parser: MarkupParserPort,
    rules: RulesPort | None = None,
) -> ValidationResult:
    """
    Validate and sanitize a document body.

    Args:
        inp: Input containing the raw body and processing options.
        parser: Markup parser port.
        rules: Optional rules port for configuration.

    Returns:
        ValidationResult with the processed body or errors.
    """
    sanitizer = create_sanitizer(parser, rules)
    return sanitizer.validate(inp.raw_body, inp.options)


def run_validate_metadata(
    inp: ValidateMetadataInput,
    *,
    parser: MarkupParserPort,
    rules: RulesPort | None = None,
) -> ValidationResult:
    """
    Validate title, excerpt and slug.

    Args:
        inp: Input containing the metadata fields.
        parser: Markup parser port.
        rules: Optional rules port for configuration.

    Returns:
        ValidationResult with errors and warnings.
    """
    sanitizer = create_sanitizer(parser, rules)
    return sanitizer.validate_metadata(inp.title, inp.excerpt, inp.slug)


def run_detect_provenance(
    inp: DetectProvenanceInput,
    *,
    parser: MarkupParserPort,
    rules: RulesPort | None = None,
) -> ProvenanceGuess:
    """Guess whether a body was pasted from an external tool."""
    sanitizer = create_sanitizer(parser, rules)
    return sanitizer.detect_provenance(inp.raw_body)


def run(
    inp: ValidateContentInput | ValidateMetadataInput | DetectProvenanceInput,
    *,
    parser: MarkupParserPort,
    rules: RulesPort | None = None,
) -> ValidationResult | ProvenanceGuess:
    """
    Main entry point for the sanitizer component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ValidateContentInput):
        return run_validate(inp, parser=parser, rules=rules)
    elif isinstance(inp, ValidateMetadataInput):
        return run_validate_metadata(inp, parser=parser, rules=rules)
    elif isinstance(inp, DetectProvenanceInput):
        return run_detect_provenance(inp, parser=parser, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
