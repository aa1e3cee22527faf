"""ThresholdEngine: base trigger levels plus calendar modifiers."""

from __future__ import annotations

from dataclasses import dataclass

from narrative_shock.domain.alert import CalendarContext, ThresholdSet


@dataclass(frozen=True)
class BaseThresholds:
    """Trigger levels on an ordinary day with no calendar modifiers."""

    event_spike: int = 10
    chaos_spike: int = 4
    chaos_saturation: int = 8
    migration: int = 150


class ThresholdEngine:
    """Pure arithmetic: effective = base + modifier."""

    def __init__(self, base: BaseThresholds | None = None) -> None:
        self._base = base or BaseThresholds()

    def compute(self, context: CalendarContext) -> ThresholdSet:
        b = self._base
        return ThresholdSet(
            event_spike_threshold=b.event_spike + context.event_threshold_mod,
            chaos_spike_threshold=b.chaos_spike + context.chaos_threshold_mod,
            chaos_saturation_threshold=b.chaos_saturation + context.chaos_threshold_mod,
            migration_threshold=b.migration + context.migration_threshold_mod,
        )
