"""
Rules provider - adapts the validated rules file to component rules ports.

One object satisfies the sanitizer, image gate and publish RulesPort
protocols so the application wires a single instance everywhere.
"""

from __future__ import annotations

from typing import Any

from pressroom.rules.models import Rules


class RulesProvider:
    """Read-only view over Rules for the pipeline components."""

    def __init__(self, rules: Rules) -> None:
        self._rules = rules

    @property
    def rules(self) -> Rules:
        return self._rules

    # --- Sanitizer ---

    def get_allowed_tags(self) -> frozenset[str]:
        return frozenset(t.lower() for t in self._rules.sanitizer.allowed_tags)

    def get_allowed_attrs(self) -> frozenset[str]:
        return frozenset(a.lower() for a in self._rules.sanitizer.allowed_attrs)

    def get_drop_with_content(self) -> frozenset[str]:
        return frozenset(t.lower() for t in self._rules.sanitizer.drop_with_content)

    def get_forbidden_protocols(self) -> frozenset[str]:
        return frozenset(p.lower() for p in self._rules.sanitizer.forbidden_protocols)

    def get_limits(self) -> dict[str, int]:
        s = self._rules.sanitizer
        return {
            "max_content_bytes": s.max_content_bytes,
            "max_title_length": s.max_title_length,
            "max_excerpt_length": s.max_excerpt_length,
            "max_images_before_warning": s.max_images_before_warning,
        }

    def get_slug_pattern(self) -> str:
        return self._rules.sanitizer.slug_pattern

    def get_paste_threshold(self) -> float:
        return self._rules.sanitizer.paste_threshold

    # --- Image gate ---

    def get_allowed_mime_types(self) -> tuple[str, ...]:
        return tuple(self._rules.images.allowed_mime_types)

    def get_min_quality(self) -> float:
        return self._rules.images.min_quality

    def get_context_budgets(self) -> dict[str, dict[str, Any]]:
        return {
            name: ctx.model_dump() for name, ctx in self._rules.images.contexts.items()
        }

    # --- Publish ---

    def get_max_attempts(self) -> int:
        return self._rules.publish.max_attempts

    def get_base_delay_ms(self) -> int:
        return self._rules.publish.base_delay_ms

    def get_fast_path_threshold_bytes(self) -> int:
        return self._rules.publish.fast_path_threshold_bytes

    def get_timeout_tiers(self) -> tuple[tuple[int | None, int], ...]:
        return tuple((t.below_bytes, t.timeout_ms) for t in self._rules.publish.timeout_tiers)
