"""
Publishing pipeline error taxonomy.

Every error carries a stable ``code`` so callers can pick the right
remediation message without string matching:

- validation_failed: reject and fix input (never retried)
- transient_persistence / publish_failed: retry the same input later
- publish_timeout: large content, try again
- unsupported_type / quota_exceeded / decode_failed /
  compression_budget_exceeded: asset unsuitable for this context
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for publishing pipeline errors."""

    code = "pipeline_error"


# --- Content ---


class ContentValidationError(PipelineError):
    """Raised when content or metadata fails hard validation."""

    code = "validation_failed"

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Content validation failed")


# --- Persistence ---


class TransientPersistenceError(PipelineError):
    """Raised for a persistence failure that is eligible for retry."""

    code = "transient_persistence"

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


class PublishFailed(PipelineError):
    """Raised when all persistence attempts are exhausted."""

    code = "publish_failed"

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Publish failed after {attempts} attempts: {last_error}")


class PublishTimeout(PipelineError, TimeoutError):
    """Raised when the attempt sequence exceeds its size-derived budget."""

    code = "publish_timeout"

    def __init__(self, timeout_ms: int, attempts: int) -> None:
        self.timeout_ms = timeout_ms
        self.attempts = attempts
        super().__init__(
            f"Publish timed out after {timeout_ms} ms ({attempts} attempt(s)); "
            "large content may need another try"
        )


# --- Images ---


class ImageRejected(PipelineError):
    """Base class for image gate rejections."""

    code = "image_rejected"


class UnsupportedImageType(ImageRejected):
    """Raised when the MIME type is not in the allow-list."""

    code = "unsupported_type"

    def __init__(self, mime_type: str, allowed: tuple[str, ...]) -> None:
        self.mime_type = mime_type
        self.allowed = allowed
        super().__init__(
            f"Image type '{mime_type}' is not allowed. Allowed types: {', '.join(allowed)}"
        )


class QuotaExceeded(ImageRejected):
    """Raised when a document already holds its maximum number of images."""

    code = "quota_exceeded"

    def __init__(self, context: str, limit: int) -> None:
        self.context = context
        self.limit = limit
        super().__init__(f"Maximum {limit} images allowed per document in '{context}' context")


class ImageDecodeError(ImageRejected):
    """Raised when the image bytes cannot be decoded."""

    code = "decode_failed"


class CompressionBudgetExceeded(ImageRejected):
    """Raised when two encode passes cannot meet the byte budget."""

    code = "compression_budget_exceeded"

    def __init__(self, target_bytes: int, actual_bytes: int, passes: int) -> None:
        self.target_bytes = target_bytes
        self.actual_bytes = actual_bytes
        self.passes = passes
        super().__init__(
            f"Image is {actual_bytes} bytes after {passes} compression passes; "
            f"budget is {target_bytes} bytes"
        )
