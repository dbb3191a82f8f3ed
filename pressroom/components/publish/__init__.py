"""
Publish component - Timeout-bounded, retrying document persistence.
"""

from ._impl import (
    DEFAULT_CONFIG,
    Deadline,
    ProgressCallback,
    PublishConfig,
    PublishOrchestrator,
    calculate_backoff_ms,
    compute_timeout_ms,
    create_publish_orchestrator,
    run_with_retry,
)
from .component import create_orchestrator, run, run_publish
from .models import (
    MediaItem,
    PublishAttempt,
    PublishInput,
    PublishMode,
    PublishOutput,
    PublishProgress,
    PublishStep,
)
from .ports import MediaUploaderPort, RulesPort

__all__ = [
    # Entry points
    "create_orchestrator",
    "run",
    "run_publish",
    # Input models
    "MediaItem",
    "PublishInput",
    "PublishMode",
    # Output models
    "PublishAttempt",
    "PublishOutput",
    "PublishProgress",
    "PublishStep",
    # Ports
    "MediaUploaderPort",
    "RulesPort",
    # Service and helpers
    "DEFAULT_CONFIG",
    "Deadline",
    "ProgressCallback",
    "PublishConfig",
    "PublishOrchestrator",
    "calculate_backoff_ms",
    "compute_timeout_ms",
    "create_publish_orchestrator",
    "run_with_retry",
]
