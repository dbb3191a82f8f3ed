"""
Publish component - Timeout-bounded, retrying document persistence.

Invariants:
- Timeout is non-decreasing in body size and never above the ceiling tier
- At most max_attempts persistence calls per publish
- Nothing is persisted unless validation passed
- Association failures never fail a publish whose primary write succeeded
"""

from __future__ import annotations

from pressroom.adapters.clock import SystemClock, TimeSleeper
from pressroom.components.sanitizer import MarkupParserPort, create_sanitizer
from pressroom.components.sanitizer import RulesPort as SanitizerRulesPort

from ._impl import ProgressCallback, PublishConfig, PublishOrchestrator
from .models import PublishInput, PublishOutput
from .ports import (
    ClockPort,
    DocumentRepoPort,
    IdentityPort,
    MediaUploaderPort,
    RulesPort,
    SleeperPort,
)


def _build_config(rules: RulesPort | None) -> PublishConfig:
    """Build publish config from rules port."""
    if rules is None:
        return PublishConfig()

    return PublishConfig(
        timeout_tiers=tuple(rules.get_timeout_tiers()),
        max_attempts=rules.get_max_attempts(),
        base_delay_ms=rules.get_base_delay_ms(),
        fast_path_threshold_bytes=rules.get_fast_path_threshold_bytes(),
    )


def create_orchestrator(
    *,
    repo: DocumentRepoPort,
    identity: IdentityPort,
    parser: MarkupParserPort,
    clock: ClockPort | None = None,
    sleeper: SleeperPort | None = None,
    uploader: MediaUploaderPort | None = None,
    rules: RulesPort | None = None,
    sanitizer_rules: SanitizerRulesPort | None = None,
) -> PublishOrchestrator:
    """
    Wire an orchestrator from ports.

    One RulesProvider satisfies both rules ports; pass it as rules and it
    is reused for the sanitizer unless sanitizer_rules is given.
    """
    if sanitizer_rules is None and rules is not None:
        sanitizer_rules = rules  # type: ignore[assignment]  # Protocol structural match
    return PublishOrchestrator(
        repo=repo,
        identity=identity,
        sanitizer=create_sanitizer(parser, sanitizer_rules),
        clock=clock or SystemClock(),
        sleeper=sleeper or TimeSleeper(),
        uploader=uploader,
        config=_build_config(rules),
    )


# --- Component Entry Points ---


def run_publish(
    inp: PublishInput,
    *,
    repo: DocumentRepoPort,
    identity: IdentityPort,
    parser: MarkupParserPort,
    clock: ClockPort | None = None,
    sleeper: SleeperPort | None = None,
    uploader: MediaUploaderPort | None = None,
    rules: RulesPort | None = None,
    on_progress: ProgressCallback | None = None,
) -> PublishOutput:
    """
    Create or update a document.

    Args:
        inp: Input containing the document, tags, mode and media.
        repo: Document repository port.
        identity: Identity port supplying the author.
        parser: Markup parser port for the sanitizer.
        clock: Optional clock port (deadlines and timestamps).
        sleeper: Optional sleeper port (backoff).
        uploader: Optional media uploader (required when media is given).
        rules: Optional rules port for configuration.
        on_progress: Optional callback receiving progress notifications.

    Returns:
        PublishOutput with the document id or a typed error.
    """
    orchestrator = create_orchestrator(
        repo=repo,
        identity=identity,
        parser=parser,
        clock=clock,
        sleeper=sleeper,
        uploader=uploader,
        rules=rules,
    )
    return orchestrator.publish(
        inp.document,
        inp.tags,
        inp.mode,
        media=inp.media,
        document_id=inp.document_id,
        on_progress=on_progress,
    )


def run(
    inp: PublishInput,
    *,
    repo: DocumentRepoPort,
    identity: IdentityPort,
    parser: MarkupParserPort,
    clock: ClockPort | None = None,
    sleeper: SleeperPort | None = None,
    uploader: MediaUploaderPort | None = None,
    rules: RulesPort | None = None,
    on_progress: ProgressCallback | None = None,
) -> PublishOutput:
    """
    Main entry point for the publish component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, PublishInput):
        return run_publish(
            inp,
            repo=repo,
            identity=identity,
            parser=parser,
            clock=clock,
            sleeper=sleeper,
            uploader=uploader,
            rules=rules,
            on_progress=on_progress,
        )
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
