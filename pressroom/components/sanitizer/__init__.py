"""
Sanitizer component - Paste-aware content validation and sanitization.
"""

from ._impl import (
    DEFAULT_CONFIG,
    ContentSanitizer,
    SanitizerConfig,
    calculate_reading_time,
    content_size_bytes,
    count_images,
    detect_provenance,
    estimate_processing_time_ms,
    find_unbalanced_tags,
    generate_unique_slug,
    normalize_typography,
    size_error,
    slugify,
    strip_foreign_markup,
    strip_script_constructs,
)
from .component import (
    create_sanitizer,
    run,
    run_detect_provenance,
    run_validate,
    run_validate_metadata,
)
from .models import (
    DetectProvenanceInput,
    MarkupPolicy,
    ProvenanceGuess,
    ProvenanceSource,
    SanitizeOptions,
    ValidateContentInput,
    ValidateMetadataInput,
    ValidationResult,
)
from .ports import MarkupParserPort, RulesPort

__all__ = [
    # Entry points
    "create_sanitizer",
    "run",
    "run_detect_provenance",
    "run_validate",
    "run_validate_metadata",
    # Input models
    "DetectProvenanceInput",
    "SanitizeOptions",
    "ValidateContentInput",
    "ValidateMetadataInput",
    # Output models
    "MarkupPolicy",
    "ProvenanceGuess",
    "ProvenanceSource",
    "ValidationResult",
    # Ports
    "MarkupParserPort",
    "RulesPort",
    # Service and helpers
    "DEFAULT_CONFIG",
    "ContentSanitizer",
    "SanitizerConfig",
    "calculate_reading_time",
    "content_size_bytes",
    "count_images",
    "detect_provenance",
    "estimate_processing_time_ms",
    "find_unbalanced_tags",
    "generate_unique_slug",
    "normalize_typography",
    "size_error",
    "slugify",
    "strip_foreign_markup",
    "strip_script_constructs",
]
