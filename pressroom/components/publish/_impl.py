"""
PublishOrchestrator - size-aware timeout, bounded retry and progress.

Key behaviors:
- Timeout is sized once from the body and shared by every attempt and
  every backoff sleep of the call
- Persistence failures are retried with exponential backoff up to a cap
- Validation failures are never retried
- Tag associations are applied after the primary write and only warn
- A timed-out attempt is abandoned, not cancelled; a late write may land
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, TypeVar

from pressroom.components.sanitizer import (
    ContentSanitizer,
    calculate_reading_time,
    content_size_bytes,
    size_error,
    slugify,
)
from pressroom.core.entities import ContentDocument
from pressroom.core.errors import (
    ContentValidationError,
    PipelineError,
    PublishFailed,
    PublishTimeout,
    TransientPersistenceError,
)

from .models import (
    MediaItem,
    PublishAttempt,
    PublishMode,
    PublishOutput,
    PublishProgress,
    PublishStep,
)
from .ports import ClockPort, DocumentRepoPort, IdentityPort, MediaUploaderPort, SleeperPort

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[PublishProgress], None]

# --- Configuration ---


@dataclass(frozen=True)
class PublishConfig:
    """Publish configuration from rules."""

    # (below_bytes, timeout_ms); None marks the ceiling tier
    timeout_tiers: tuple[tuple[int | None, int], ...] = (
        (10_000, 15_000),
        (50_000, 30_000),
        (200_000, 60_000),
        (None, 120_000),
    )
    max_attempts: int = 3
    base_delay_ms: int = 1000
    fast_path_threshold_bytes: int = 50_000


DEFAULT_CONFIG = PublishConfig()

# --- Timeouts and Backoff ---


def compute_timeout_ms(size_bytes: int, config: PublishConfig = DEFAULT_CONFIG) -> int:
    """
    Timeout for a body of size_bytes.

    Non-decreasing in size; the last tier is the hard ceiling.
    """
    for below_bytes, timeout_ms in config.timeout_tiers:
        if below_bytes is None or size_bytes < below_bytes:
            return timeout_ms
    return config.timeout_tiers[-1][1]


def calculate_backoff_ms(attempt: int, base_delay_ms: int = DEFAULT_CONFIG.base_delay_ms) -> int:
    """Delay after failed attempt n (1-based): base * 2^(n-1)."""
    return base_delay_ms * 2 ** (max(1, attempt) - 1)


class Deadline:
    """Monotonic deadline shared by all attempts of one call."""

    def __init__(self, clock: ClockPort, timeout_ms: int) -> None:
        self._clock = clock
        self.timeout_ms = timeout_ms
        self._expires_at = clock.monotonic() + timeout_ms / 1000

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self._expires_at - self._clock.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0


def run_with_retry(
    operation: Callable[[], T],
    *,
    name: str,
    deadline: Deadline,
    sleeper: SleeperPort,
    attempt: PublishAttempt,
    config: PublishConfig = DEFAULT_CONFIG,
) -> T:
    """
    Run operation with bounded retry under a shared deadline.

    Each try runs on its own worker thread and is awaited only for the
    remaining budget. On expiry the worker is left running.

    Raises:
        PublishTimeout: Budget exhausted during an attempt or a backoff
        PublishFailed: Every attempt failed; carries the last error
    """
    last_error: TransientPersistenceError | None = None

    for number in range(1, config.max_attempts + 1):
        attempt.attempt_number = number
        remaining = deadline.remaining()
        if remaining <= 0:
            raise PublishTimeout(deadline.timeout_ms, number - 1)

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="publish-attempt")
        try:
            future = executor.submit(operation)
            done, _ = wait([future], timeout=remaining)
        finally:
            executor.shutdown(wait=False)

        if not done:
            logger.error(
                "%s attempt %d/%d abandoned after %d ms budget",
                name,
                number,
                config.max_attempts,
                deadline.timeout_ms,
            )
            raise PublishTimeout(deadline.timeout_ms, number)

        try:
            return future.result()
        except Exception as e:
            last_error = TransientPersistenceError(name, e)
            logger.warning(
                "%s attempt %d/%d failed: %s", name, number, config.max_attempts, e
            )

        if number < config.max_attempts:
            delay_seconds = calculate_backoff_ms(number, config.base_delay_ms) / 1000
            if delay_seconds >= deadline.remaining():
                logger.error(
                    "%s backoff of %.1fs would overrun the %d ms budget",
                    name,
                    delay_seconds,
                    deadline.timeout_ms,
                )
                raise PublishTimeout(deadline.timeout_ms, number)
            sleeper.sleep(delay_seconds)

    assert last_error is not None
    raise PublishFailed(config.max_attempts, last_error)


# --- Service Class ---


class PublishOrchestrator:
    """
    Drives a document from raw input to a persisted row.

    Holds no per-call state; everything about a call lives in its
    PublishAttempt.
    """

    def __init__(
        self,
        repo: DocumentRepoPort,
        identity: IdentityPort,
        sanitizer: ContentSanitizer,
        clock: ClockPort,
        sleeper: SleeperPort,
        uploader: MediaUploaderPort | None = None,
        config: PublishConfig | None = None,
    ) -> None:
        self._repo = repo
        self._identity = identity
        self._sanitizer = sanitizer
        self._clock = clock
        self._sleeper = sleeper
        self._uploader = uploader
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> PublishConfig:
        """Get configuration."""
        return self._config

    def timeout_for(self, document: ContentDocument) -> int:
        """Timeout in ms for this document's body."""
        return compute_timeout_ms(content_size_bytes(document.raw_body), self._config)

    def _prepare_body(self, document: ContentDocument, warnings: list[str]) -> str:
        """Validate metadata and body; returns the body to persist."""
        meta = self._sanitizer.validate_metadata(document.title, document.excerpt, document.slug)
        warnings.extend(meta.warnings)

        size = content_size_bytes(document.raw_body)
        if size > self._config.fast_path_threshold_bytes:
            logger.info("Fast path for %d byte body: stripping scripts only", size)
            errors = list(meta.errors)
            limit = self._sanitizer.config.max_content_bytes
            if size >= limit:
                errors.append(size_error(size, limit))
            if errors:
                raise ContentValidationError(errors)
            return self._sanitizer.strip_scripts(document.raw_body)

        result = self._sanitizer.validate(document.raw_body)
        warnings.extend(result.warnings)
        errors = list(meta.errors) + list(result.errors)
        if errors or result.processed_content is None:
            raise ContentValidationError(errors)
        return result.processed_content

    def _ingest_media(
        self,
        document: ContentDocument,
        media: Sequence[MediaItem],
        document_id: str | None,
    ) -> tuple[str, ...]:
        if not media:
            return ()
        if self._uploader is None:
            raise ValueError("Media supplied but no uploader is configured")

        counts = {"content": document.existing_image_count}
        urls: list[str] = []
        for item in media:
            current = counts.get(item.context, 0)
            out = self._uploader.upload(
                item.data,
                item.mime_type,
                item.context,
                current_count=current,
                document_id=document_id,
            )
            if not out.success or out.url is None:
                error = out.errors[0]
                if urls:
                    logger.warning(
                        "Media rejected after %d upload(s) stored: %s", len(urls), urls
                    )
                raise _MediaRejected(error.code, error.message)
            counts[item.context] = current + 1
            urls.append(out.url)
        return tuple(urls)

    def _build_fields(
        self,
        document: ContentDocument,
        body: str,
        mode: PublishMode,
    ) -> dict[str, Any]:
        now = self._clock.now_utc()
        fields: dict[str, Any] = {
            "title": document.title.strip(),
            "slug": document.slug or slugify(document.title),
            "content": body,
            "excerpt": document.excerpt,
            "status": document.status,
            "category_id": document.category_id,
            "featured_image": document.featured_image,
            "reading_time": calculate_reading_time(self._sanitizer.extract_text(body)),
        }
        if mode == "create":
            fields["author_id"] = str(self._identity.current_actor().user_id)
        else:
            fields["updated_at"] = now
        if document.status == "published":
            fields["published_at"] = now
        return fields

    def _apply_associations(
        self,
        document_id: str,
        tags: Sequence[str] | None,
        mode: PublishMode,
        warnings: list[str],
    ) -> None:
        """Replace tag associations; failures are logged and returned as warnings.

        None leaves existing associations alone; an empty list clears them
        on update.
        """
        if tags is None or (mode == "create" and not tags):
            return
        try:
            self._repo.replace_associations(document_id, list(tags))
        except Exception as e:
            logger.warning("Failed to update tags for document %s: %s", document_id, e)
            warnings.append(f"Document saved but tags could not be updated: {e}")

    def publish(
        self,
        document: ContentDocument,
        tags: Sequence[str] | None = None,
        mode: PublishMode = "create",
        *,
        media: Sequence[MediaItem] = (),
        document_id: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PublishOutput:
        """
        Validate, persist and associate a document.

        Returns a PublishOutput; every pipeline failure is reported through
        error/error_code rather than raised.
        """
        if mode not in ("create", "update"):
            raise ValueError(f"Unknown publish mode: {mode}")
        if mode == "update" and not document_id:
            raise ValueError("document_id is required for update")

        size = content_size_bytes(document.raw_body)
        attempt = PublishAttempt(content_size_bytes=size, timeout_ms=self.timeout_for(document))
        deadline = Deadline(self._clock, attempt.timeout_ms)
        warnings: list[str] = []

        def emit(step: PublishStep, percent: int | None = None) -> None:
            progress = attempt.advance(step, percent)
            if on_progress is not None:
                on_progress(progress)

        def failed(step: PublishStep, error: PipelineError | _MediaRejected) -> PublishOutput:
            emit(step)
            return PublishOutput(
                success=False,
                id=document_id,
                error=str(error),
                error_code=error.code,
                warnings=warnings,
                attempts=attempt.attempt_number,
                progress=attempt.progress,
            )

        emit(PublishStep.ANALYZING, 0)
        logger.info(
            "Publishing %d byte document (%s) with %d ms budget", size, mode, attempt.timeout_ms
        )

        try:
            emit(PublishStep.PREPARING, 10)
            body = self._prepare_body(document, warnings)

            emit(PublishStep.PROCESSING, 20)
            urls = self._ingest_media(document, media, document_id)
            fields = self._build_fields(document, body, mode)

            emit(PublishStep.PERSISTING, 50)
            if mode == "create":
                row = run_with_retry(
                    lambda: self._repo.insert_document(fields),
                    name="insert_document",
                    deadline=deadline,
                    sleeper=self._sleeper,
                    attempt=attempt,
                    config=self._config,
                )
            else:
                assert document_id is not None
                doc_id = document_id
                row = run_with_retry(
                    lambda: self._repo.update_document(doc_id, fields),
                    name="update_document",
                    deadline=deadline,
                    sleeper=self._sleeper,
                    attempt=attempt,
                    config=self._config,
                )
        except ContentValidationError as e:
            logger.info("Document rejected: %s", e)
            return failed(PublishStep.FAILED, e)
        except _MediaRejected as e:
            return failed(PublishStep.FAILED, e)
        except PublishTimeout as e:
            logger.error("Publish timed out: %s", e)
            return failed(PublishStep.TIMED_OUT, e)
        except PublishFailed as e:
            logger.error("Publish failed: %s", e)
            return failed(PublishStep.FAILED, e)

        saved_id = str(row.get("id", document_id))

        emit(PublishStep.FINALIZING, 70)
        self._apply_associations(saved_id, tags, mode, warnings)
        emit(PublishStep.FINALIZING, 95)

        emit(PublishStep.DONE, 100)
        logger.info("Published document %s after %d attempt(s)", saved_id, attempt.attempt_number)
        return PublishOutput(
            success=True,
            id=saved_id,
            warnings=warnings,
            media=urls,
            attempts=attempt.attempt_number,
            progress=attempt.progress,
            document=document.model_copy(update={"sanitized_body": body}),
        )


class _MediaRejected(Exception):
    """Image gate rejection surfaced from the media step."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        super().__init__(message)


# --- Factory ---


def create_publish_orchestrator(
    repo: DocumentRepoPort,
    identity: IdentityPort,
    sanitizer: ContentSanitizer,
    clock: ClockPort,
    sleeper: SleeperPort,
    uploader: MediaUploaderPort | None = None,
    config: PublishConfig | None = None,
) -> PublishOrchestrator:
    """Create a PublishOrchestrator with optional configuration."""
    return PublishOrchestrator(
        repo=repo,
        identity=identity,
        sanitizer=sanitizer,
        clock=clock,
        sleeper=sleeper,
        uploader=uploader,
        config=config,
    )
