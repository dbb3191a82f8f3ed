"""
ContentSanitizer - paste-aware markup sanitizer and validator.

Handles provenance detection, typographic normalization, foreign-markup
stripping, allow-list sanitization and size/metadata validation.

Key behaviors:
- Provenance is a weighted, capped sum of matched pattern classes
- Every processing step is idempotent and never raises for str input
- Only the size ceiling and a missing/over-length title are hard errors;
  everything else degrades to a warning and a best-effort body
- Script-bearing constructs are removed unconditionally
"""

from __future__ import annotations

import math
import re
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field

from .models import (
    MarkupPolicy,
    ProvenanceGuess,
    ProvenanceSource,
    SanitizeOptions,
    ValidationResult,
)
from .ports import MarkupParserPort

# --- Configuration ---


@dataclass(frozen=True)
class SanitizerConfig:
    """Sanitizer configuration from rules."""

    allowed_tags: frozenset[str] = field(
        default_factory=lambda: frozenset(
            [
                "h1",
                "h2",
                "h3",
                "h4",
                "h5",
                "h6",
                "p",
                "br",
                "strong",
                "em",
                "u",
                "s",
                "blockquote",
                "ul",
                "ol",
                "li",
                "a",
                "img",
                "figure",
                "figcaption",
                "table",
                "thead",
                "tbody",
                "tr",
                "th",
                "td",
                "code",
                "pre",
                "hr",
                "div",
                "span",
            ]
        )
    )

    allowed_attrs: frozenset[str] = field(
        default_factory=lambda: frozenset(
            ["href", "src", "alt", "title", "class", "id", "width", "height", "target", "rel"]
        )
    )

    # Removed together with everything inside them
    drop_with_content: frozenset[str] = field(
        default_factory=lambda: frozenset(
            [
                "script",
                "style",
                "iframe",
                "frame",
                "frameset",
                "object",
                "embed",
                "applet",
                "noscript",
                "template",
                "svg",
                "math",
                "form",
                "input",
                "button",
                "select",
                "textarea",
                "link",
                "meta",
                "base",
                "head",
                "title",
                "xml",
            ]
        )
    )

    forbidden_protocols: frozenset[str] = field(
        default_factory=lambda: frozenset(["javascript:", "vbscript:", "data:"])
    )

    # Limits
    max_content_bytes: int = 5 * 1024 * 1024
    max_title_length: int = 200
    max_excerpt_length: int = 500
    max_images_before_warning: int = 10

    slug_pattern: str = r"^[a-z0-9]+(-[a-z0-9]+)*$"
    paste_threshold: float = 0.1


DEFAULT_CONFIG = SanitizerConfig()

# Attributes dropped on top of the allow-list when content looks pasted
AGGRESSIVE_DROP_ATTRS = frozenset(["class", "id"])

# Containers that collapse away when they hold nothing
PRUNABLE_TAGS = frozenset(["p", "div", "span", "strong", "em", "u", "s", "blockquote"])

MALFORMED_WARNING = "Content contains malformed HTML that was auto-corrected"

# --- Provenance Detection ---

PROVENANCE_PATTERNS: dict[ProvenanceSource, tuple[re.Pattern[str], ...]] = {
    ProvenanceSource.WORD_PROCESSOR: (
        re.compile(r'class="?Mso', re.IGNORECASE),
        re.compile(r"<o:p>", re.IGNORECASE),
        re.compile(r'style="[^"]*mso-', re.IGNORECASE),
        re.compile(r"MsoNormal", re.IGNORECASE),
    ),
    ProvenanceSource.CLOUD_DOCUMENT: (
        re.compile(r"docs-internal-guid", re.IGNORECASE),
        re.compile(r"google-docs", re.IGNORECASE),
        re.compile(r'<b style="font-weight:\s*normal;?"', re.IGNORECASE),
    ),
    ProvenanceSource.WEB_CONTENT: (
        re.compile(r"data-[a-z-]+=", re.IGNORECASE),
        re.compile(r"aria-[a-z-]+=", re.IGNORECASE),
        re.compile(r'class="[^"]*wp-', re.IGNORECASE),
        re.compile(r'role="[^"]*"', re.IGNORECASE),
    ),
    ProvenanceSource.RICH_TEXT_EDITOR: (
        re.compile("[\u2018\u2019\u201c\u201d\u2013\u2014]"),
        re.compile("\u00a0"),
        re.compile("[\u200b-\u200d]"),
    ),
}

PROVENANCE_WEIGHTS: dict[ProvenanceSource, float] = {
    ProvenanceSource.WORD_PROCESSOR: 0.4,
    ProvenanceSource.CLOUD_DOCUMENT: 0.3,
    ProvenanceSource.WEB_CONTENT: 0.2,
    ProvenanceSource.RICH_TEXT_EDITOR: 0.1,
}


def detect_provenance(
    raw_body: str,
    config: SanitizerConfig = DEFAULT_CONFIG,
) -> ProvenanceGuess:
    """
    Guess whether markup was pasted and from which tool class.

    Confidence is the sum of matched class weights, capped at 1.0.
    Content counts as pasted only above the configured threshold, so
    typographic artifacts alone are not enough.
    """
    if not raw_body:
        return ProvenanceGuess(is_pasted=False, confidence=0.0)

    sources: set[ProvenanceSource] = set()
    score = 0.0
    for source, patterns in PROVENANCE_PATTERNS.items():
        if any(p.search(raw_body) for p in patterns):
            sources.add(source)
            score += PROVENANCE_WEIGHTS[source]

    confidence = min(score, 1.0)
    return ProvenanceGuess(
        is_pasted=confidence > config.paste_threshold,
        confidence=confidence,
        sources=frozenset(sources),
    )


def provenance_warning(guess: ProvenanceGuess) -> str:
    """User-facing warning for pasted content."""
    names = ", ".join(s.display_name for s in guess.ordered_sources())
    return f"Detected content from: {names}. Auto-cleaning applied."


# --- Typographic Normalization ---

_TYPOGRAPHIC_REPLACEMENTS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile("[\u2018\u2019]"), "'"),
    (re.compile("[\u201c\u201d]"), '"'),
    (re.compile("\u2013"), "-"),
    (re.compile("\u2014"), "--"),
    (re.compile("\u2026"), "..."),
    (re.compile("\u00a0|&nbsp;|&#160;|&#x0*a0;", re.IGNORECASE), " "),
)

# Zero-width, BOM, soft hyphen, C0/C1 controls (tab/LF/CR kept), private use
_INVISIBLE_CHARS = re.compile(
    r"[\u200b-\u200d\ufeff\u00ad\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ue000-\uf8ff]"
)
_HORIZONTAL_RUNS = re.compile(r"[ \t]+")
_LINE_EDGES = re.compile(r"^[ \t]+|[ \t]+$", re.MULTILINE)
_BLANK_LINE_RUNS = re.compile(r"\n{3,}")


def normalize_typography(text: str) -> str:
    """
    Replace typographic artifacts with ASCII and normalize whitespace.

    Line trimming runs before blank-line collapsing so the result is a
    fixed point.
    """
    if not text:
        return ""

    for pattern, replacement in _TYPOGRAPHIC_REPLACEMENTS:
        text = pattern.sub(replacement, text)
    text = _INVISIBLE_CHARS.sub("", text)

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HORIZONTAL_RUNS.sub(" ", text)
    text = _LINE_EDGES.sub("", text)
    text = _BLANK_LINE_RUNS.sub("\n\n", text)
    return text.strip()


# --- Foreign Markup ---

_FOREIGN_MARKUP: tuple[re.Pattern[str], ...] = (
    # Office conditional comments and XML islands
    re.compile(r"<!--\[if[\s\S]*?<!\[endif\]-->", re.IGNORECASE),
    re.compile(r"<xml\b[\s\S]*?</xml\s*>", re.IGNORECASE),
    # Office namespaced tags (o:p, w:*, m:*, v:*)
    re.compile(r"</?(?:o|w|m|v):[^>]*>", re.IGNORECASE),
    re.compile(r"""\s+class=(?:"Mso[^"]*"|'Mso[^']*'|Mso[\w-]*)""", re.IGNORECASE),
    # Google Docs wrappers
    re.compile(
        r"""\s+id=(?:"docs-internal-guid-[^"]*"|'docs-internal-guid-[^']*')""",
        re.IGNORECASE,
    ),
    re.compile(
        r"""<b\s+style=(?:"font-weight:\s*normal;?"|'font-weight:\s*normal;?')[^>]*>""",
        re.IGNORECASE,
    ),
    # Inline styling of any vendor
    re.compile(r"""\s+style=(?:"[^"]*"|'[^']*')""", re.IGNORECASE),
)


def strip_foreign_markup(markup: str) -> str:
    """Remove vendor-specific tags, attributes, namespaces and inline styles."""
    for pattern in _FOREIGN_MARKUP:
        markup = pattern.sub("", markup)
    return markup


# --- Script Constructs (fast path) ---

_SCRIPT_BLOCK = re.compile(r"<script\b[^>]*>[\s\S]*?</script\s*>", re.IGNORECASE)
_SCRIPT_TAG = re.compile(r"</?script\b[^>]*>?", re.IGNORECASE)
_EVENT_HANDLER_ATTR = re.compile(
    r"""\s+on[a-z]+\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+)""", re.IGNORECASE
)
_SCRIPT_URL_ATTR = re.compile(
    r"""\s+(?:href|src)\s*=\s*(?:"\s*(?:javascript|vbscript):[^"]*"|'\s*(?:javascript|vbscript):[^']*'|(?:javascript|vbscript):[^\s>]*)""",
    re.IGNORECASE,
)


def strip_script_constructs(markup: str) -> str:
    """
    Remove script elements, event-handler attributes and script URLs.

    Repeats until nothing changes so that fragments which reassemble
    into a script tag after one pass (``<scr<script></script>ipt>``)
    are caught as well.
    """
    previous = None
    while previous != markup:
        previous = markup
        markup = _SCRIPT_BLOCK.sub("", markup)
        markup = _SCRIPT_TAG.sub("", markup)
        markup = _EVENT_HANDLER_ATTR.sub("", markup)
        markup = _SCRIPT_URL_ATTR.sub("", markup)
    return markup


# --- Structure Checks ---

_TAG_TOKEN = re.compile(r"<(/?)([a-zA-Z][\w:-]*)\b[^>]*?(/?)>")
_IMG_TAG = re.compile(r"<img\b[^>]*>", re.IGNORECASE)

VOID_ELEMENTS = frozenset(
    [
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    ]
)


def find_unbalanced_tags(markup: str) -> list[str]:
    """
    Return tag names that are never closed or closed without being opened.

    Pattern-based; used only to decide whether to warn that the parser
    had to repair the markup.
    """
    stack: list[str] = []
    problems: list[str] = []

    for match in _TAG_TOKEN.finditer(markup):
        is_closing, name, self_closing = match.group(1), match.group(2).lower(), match.group(3)
        if name in VOID_ELEMENTS or self_closing:
            continue
        if not is_closing:
            stack.append(name)
            continue
        if name not in stack:
            problems.append(name)
            continue
        while stack:
            top = stack.pop()
            if top == name:
                break
            problems.append(top)

    problems.extend(stack)
    return problems


def count_images(markup: str) -> int:
    """Count <img> tags in markup."""
    return len(_IMG_TAG.findall(markup))


def content_size_bytes(markup: str) -> int:
    """Serialized size of markup in bytes."""
    return len(markup.encode("utf-8"))


def size_error(size: int, limit: int) -> str:
    return (
        f"Content size ({round(size / 1024)}KB) exceeds maximum allowed size "
        f"({round(limit / 1024)}KB)"
    )


# --- Slugs and Text ---

WORDS_PER_MINUTE = 230

_TAG_ANY = re.compile(r"<[^>]*>")
_WORD = re.compile(r"\w+")


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated ASCII slug."""
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = ascii_text.lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = slug.replace("&", "-and-")
    slug = slug.replace("_", "-")
    slug = re.sub(r"[^a-z0-9-]+", "", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


def generate_unique_slug(title: str, existing_slugs: Iterable[str]) -> str:
    """Slugify title, suffixing -1, -2, ... until it is not taken."""
    taken = set(existing_slugs)
    slug = slugify(title)
    unique = slug
    counter = 1
    while unique in taken:
        unique = f"{slug}-{counter}"
        counter += 1
    return unique


def calculate_reading_time(content: str) -> int:
    """Reading time in whole minutes at 230 words per minute, at least 1."""
    text = content
    if "<" in content and ">" in content:
        text = _TAG_ANY.sub(" ", content)
    word_count = len(_WORD.findall(text))
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def estimate_processing_time_ms(content: str) -> int:
    """Rough processing time for user feedback (size and image weighted)."""
    return max(1000, int(len(content) * 0.01 + count_images(content) * 500))


# --- Service Class ---


class ContentSanitizer:
    """
    Content sanitizer/validator.

    Stateless apart from its configuration; safe to share between
    concurrent publish calls.
    """

    def __init__(
        self,
        parser: MarkupParserPort,
        config: SanitizerConfig | None = None,
    ) -> None:
        """Initialize with an injected markup parser and optional configuration."""
        self._parser = parser
        self._config = config or DEFAULT_CONFIG
        self._slug_re = re.compile(self._config.slug_pattern)

    @property
    def config(self) -> SanitizerConfig:
        """Get configuration."""
        return self._config

    def policy(self, *, aggressive: bool = False) -> MarkupPolicy:
        """Build the allow-list policy, narrower for pasted content."""
        attrs = self._config.allowed_attrs
        if aggressive:
            attrs = attrs - AGGRESSIVE_DROP_ATTRS
        return MarkupPolicy(
            allowed_tags=self._config.allowed_tags,
            allowed_attrs=attrs,
            drop_with_content=self._config.drop_with_content,
            forbidden_protocols=self._config.forbidden_protocols,
        )

    def detect_provenance(self, raw_body: str) -> ProvenanceGuess:
        """Detect paste provenance."""
        return detect_provenance(raw_body, self._config)

    def strip_scripts(self, markup: str) -> str:
        """Fast-path sanitization: script constructs only."""
        return strip_script_constructs(markup)

    def validate(
        self,
        raw_body: str,
        options: SanitizeOptions | None = None,
    ) -> ValidationResult:
        """
        Validate and sanitize a document body.

        Returns a ValidationResult whose processed_content is set unless a
        hard error occurred.
        """
        options = options or SanitizeOptions()
        raw_body = raw_body or ""
        limit = self._config.max_content_bytes
        errors: list[str] = []
        warnings: list[str] = []

        guess = self.detect_provenance(raw_body)
        if guess.is_pasted:
            warnings.append(provenance_warning(guess))

        if find_unbalanced_tags(raw_body):
            warnings.append(MALFORMED_WARNING)

        # Oversized input is rejected as submitted and never reaches the parser
        raw_size = content_size_bytes(raw_body)
        if options.validate_size and raw_size >= limit:
            errors.append(size_error(raw_size, limit))
            return ValidationResult(
                is_valid=False,
                errors=errors,
                warnings=warnings,
                processed_content=None,
                provenance=guess,
            )

        content = normalize_typography(raw_body)
        content = strip_foreign_markup(content)

        if options.sanitize:
            content = self._parser.clean(content, self.policy(aggressive=guess.is_pasted))
        else:
            content = strip_script_constructs(content)

        # The parser decodes entities, so normalize its output again
        content = normalize_typography(content)
        if options.strip_empty_tags:
            content = self._parser.prune_empty(content, PRUNABLE_TAGS)
            content = normalize_typography(content)

        if options.validate_size and content_size_bytes(content) >= limit:
            errors.append(size_error(content_size_bytes(content), limit))

        image_count = count_images(content)
        if image_count > self._config.max_images_before_warning:
            warnings.append(
                f"Content contains {image_count} images, which may slow down loading"
            )

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            processed_content=None if errors else content,
            provenance=guess,
        )

    def validate_metadata(
        self,
        title: str,
        excerpt: str | None = None,
        slug: str | None = None,
    ) -> ValidationResult:
        """
        Validate document metadata.

        Title problems are errors; excerpt length and slug shape only warn.
        """
        errors: list[str] = []
        warnings: list[str] = []
        max_title = self._config.max_title_length
        max_excerpt = self._config.max_excerpt_length

        if not title or not title.strip():
            errors.append("Title is required")
        elif len(title) > max_title:
            errors.append(f"Title is too long ({len(title)}/{max_title} characters)")

        if excerpt and len(excerpt) > max_excerpt:
            warnings.append(
                f"Excerpt is quite long ({len(excerpt)}/{max_excerpt} characters)"
            )

        if slug and not self._slug_re.match(slug):
            warnings.append("Slug should only contain lowercase letters, numbers, and hyphens")

        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)

    def extract_text(self, markup: str) -> str:
        """Visible text of markup, for reading time and search indexing."""
        return self._parser.text_content(markup)
