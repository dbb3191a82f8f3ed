"""
Image gate component - Context budgets, compression and storage of images.

Invariants:
- Type and quota rejections happen before any decode or encode work
- An image within budget is stored byte-for-byte
- No more than two encode passes per image
"""

from __future__ import annotations

import logging
import secrets
from datetime import UTC, datetime

from pressroom.core.errors import ImageRejected
from pressroom.core.ports.storage import StorageError

from ._impl import ImageGate, ImageGateConfig, extension_for
from .models import (
    ContextBudget,
    DeleteImageInput,
    DeleteImageOutput,
    ImageAsset,
    ImageGateError,
    IngestImageInput,
    IngestImageOutput,
)
from .ports import ClockPort, ImageCodecPort, RulesPort, StoragePort

logger = logging.getLogger(__name__)


def _build_config(rules: RulesPort | None) -> ImageGateConfig:
    """Build image gate config from rules port."""
    if rules is None:
        return ImageGateConfig()

    return ImageGateConfig(
        allowed_mime_types=tuple(rules.get_allowed_mime_types()),
        min_quality=rules.get_min_quality(),
        contexts={
            name: ContextBudget(**budget) for name, budget in rules.get_context_budgets().items()
        },
    )


def create_gate(
    codec: ImageCodecPort,
    rules: RulesPort | None = None,
) -> ImageGate:
    """Create an image gate configured from rules."""
    return ImageGate(codec=codec, config=_build_config(rules))


def build_storage_path(context: str, mime_type: str, now: datetime) -> str:
    """Unique upload path: uploads/<context>_<millis>_<random>.<ext>."""
    millis = int(now.timestamp() * 1000)
    return f"uploads/{context}_{millis}_{secrets.token_hex(4)}.{extension_for(mime_type)}"


def _store_metadata(asset: ImageAsset, document_id: str | None) -> dict[str, str]:
    metadata = {
        "context": asset.context,
        "original_size": str(asset.original_size),
        "compressed_size": str(asset.new_size),
        "was_compressed": str(asset.was_compressed).lower(),
    }
    if document_id:
        metadata["document_id"] = document_id
    return metadata


def _failed(error: ImageGateError, asset: ImageAsset | None = None) -> IngestImageOutput:
    return IngestImageOutput(
        url=None,
        was_compressed=False,
        original_size_label=None,
        new_size_label=None,
        asset=asset,
        errors=[error],
        success=False,
    )


class ImageUploader:
    """
    Gate-then-store pipeline for a single image.

    Shared by the upload endpoint and the publish orchestrator's media
    step; rejections come back as errors on the output, never raised.
    """

    def __init__(
        self,
        gate: ImageGate,
        storage: StoragePort,
        clock: ClockPort | None = None,
    ) -> None:
        self._gate = gate
        self._storage = storage
        self._clock = clock

    def _now(self) -> datetime:
        return self._clock.now_utc() if self._clock is not None else datetime.now(UTC)

    def upload(
        self,
        data: bytes,
        mime_type: str,
        context: str,
        current_count: int = 0,
        document_id: str | None = None,
    ) -> IngestImageOutput:
        if context not in self._gate.config.contexts:
            known = ", ".join(sorted(self._gate.config.contexts))
            return _failed(
                ImageGateError(
                    code="unknown_context",
                    message=f"Unknown image context '{context}' (expected one of: {known})",
                    field="context",
                )
            )

        try:
            asset = self._gate.ingest(data, mime_type, context, current_count)
        except ImageRejected as e:
            logger.info("Rejected %s image: %s", context, e)
            return _failed(ImageGateError(code=e.code, message=str(e)))

        path = build_storage_path(context, asset.mime_type, self._now())

        try:
            url = self._storage.store(
                asset.compressed_bytes, path, _store_metadata(asset, document_id)
            )
        except StorageError as e:
            logger.warning("Failed to store image at %s: %s", path, e)
            return _failed(ImageGateError(code="storage_failed", message=str(e)), asset)

        return IngestImageOutput(
            url=url,
            was_compressed=asset.was_compressed,
            original_size_label=asset.original_size_label,
            new_size_label=asset.new_size_label,
            asset=asset,
            errors=[],
            success=True,
        )


def create_uploader(
    codec: ImageCodecPort,
    storage: StoragePort,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> ImageUploader:
    """Create an uploader with a gate configured from rules."""
    return ImageUploader(create_gate(codec, rules), storage, clock)


# --- Component Entry Points ---


def run_ingest_image(
    inp: IngestImageInput,
    *,
    codec: ImageCodecPort,
    storage: StoragePort,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> IngestImageOutput:
    """
    Validate, compress and store an image.

    Args:
        inp: Input containing bytes, MIME type, context and current count.
        codec: Image codec port.
        storage: Storage port for the final bytes.
        clock: Optional clock port for the upload path timestamp.
        rules: Optional rules port for configuration.

    Returns:
        IngestImageOutput with the public URL and size labels, or errors.
    """
    uploader = create_uploader(codec, storage, clock, rules)
    return uploader.upload(
        inp.data,
        inp.mime_type,
        inp.context,
        current_count=inp.current_count,
        document_id=inp.document_id,
    )


def run_delete_image(
    inp: DeleteImageInput,
    *,
    storage: StoragePort,
) -> DeleteImageOutput:
    """
    Delete a stored image by URL.

    A missing object is reported as not deleted rather than as an error.
    """
    try:
        deleted = storage.delete(inp.url)
    except StorageError as e:
        logger.warning("Failed to delete image %s: %s", inp.url, e)
        return DeleteImageOutput(
            deleted=False,
            errors=[ImageGateError(code="storage_failed", message=str(e), field="url")],
            success=False,
        )

    return DeleteImageOutput(deleted=deleted, errors=[], success=True)


def run(
    inp: IngestImageInput | DeleteImageInput,
    *,
    codec: ImageCodecPort | None = None,
    storage: StoragePort,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> IngestImageOutput | DeleteImageOutput:
    """
    Main entry point for the image gate component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, IngestImageInput):
        if codec is None:
            raise ValueError("ImageCodecPort is required for ingest operations")
        return run_ingest_image(inp, codec=codec, storage=storage, clock=clock, rules=rules)
    elif isinstance(inp, DeleteImageInput):
        return run_delete_image(inp, storage=storage)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
