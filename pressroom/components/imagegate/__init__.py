"""
Image gate component - Context budgets, compression and storage of images.
"""

from ._impl import (
    DEFAULT_CONFIG,
    ImageGate,
    ImageGateConfig,
    create_image_gate,
    extension_for,
    fit_dimensions,
    format_file_size,
    normalize_mime_type,
    second_pass_quality,
)
from .component import (
    ImageUploader,
    build_storage_path,
    create_gate,
    create_uploader,
    run,
    run_delete_image,
    run_ingest_image,
)
from .models import (
    ContextBudget,
    DeleteImageInput,
    DeleteImageOutput,
    ImageAsset,
    ImageGateError,
    IngestImageInput,
    IngestImageOutput,
)
from .ports import ImageCodecPort, RulesPort

__all__ = [
    # Entry points
    "create_gate",
    "create_uploader",
    "run",
    "run_delete_image",
    "run_ingest_image",
    # Input models
    "DeleteImageInput",
    "IngestImageInput",
    # Output models
    "ContextBudget",
    "DeleteImageOutput",
    "ImageAsset",
    "ImageGateError",
    "IngestImageOutput",
    # Ports
    "ImageCodecPort",
    "RulesPort",
    # Service and helpers
    "DEFAULT_CONFIG",
    "ImageGate",
    "ImageGateConfig",
    "ImageUploader",
    "build_storage_path",
    "create_image_gate",
    "extension_for",
    "fit_dimensions",
    "format_file_size",
    "normalize_mime_type",
    "second_pass_quality",
]
