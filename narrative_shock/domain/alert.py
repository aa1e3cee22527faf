"""Alert domain models: what the monitor concluded this cycle, and why.

These are one-way projections of a completed evaluation.  They are never
fed back into detection; only the compact CycleState crosses cycles.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator

from narrative_shock.domain.base import WireModel
from narrative_shock.domain.enums import AlertFlag, HolidayPriority, ReasonKind


class Reason(WireModel):
    """A single reason tag with optional human-readable detail.

    ``kind`` is machine-comparable; ``detail`` carries text such as
    "fading (cycle 3)" that is only meaningful to a reader.
    """

    kind: ReasonKind
    detail: Optional[str] = Field(default=None, max_length=200)

    def __str__(self) -> str:
        return self.detail or self.kind.value


class ThresholdSet(WireModel):
    """Effective trigger levels for one cycle (base + calendar modifiers)."""

    event_spike_threshold: int
    chaos_spike_threshold: int
    chaos_saturation_threshold: int
    migration_threshold: int


class CalendarContext(WireModel):
    """Resolved calendar facts and the threshold modifiers they produce."""

    holiday: str = "none"
    holiday_priority: HolidayPriority = HolidayPriority.NONE
    is_recurring_community_night: bool = False
    is_quiet_anniversary_day: bool = False
    resolved_seasonal_phase: str = "off"
    seasonal_override_active: bool = False
    event_threshold_mod: int = 0
    chaos_threshold_mod: int = 0
    migration_threshold_mod: int = 0


class CalendarAudit(WireModel):
    """Audit trail echoed on every AlertRecord: calendar facts plus thresholds used."""

    holiday: str
    holiday_priority: HolidayPriority
    is_recurring_community_night: bool
    is_quiet_anniversary_day: bool
    resolved_seasonal_phase: str
    seasonal_override_active: bool
    event_threshold_mod: int
    chaos_threshold_mod: int
    migration_threshold_mod: int
    thresholds: ThresholdSet

    @classmethod
    def from_context(cls, context: CalendarContext, thresholds: ThresholdSet) -> CalendarAudit:
        return cls(**context.model_dump(), thresholds=thresholds)


class DetectionOutcome(WireModel):
    """Aggregate verdict of the detector bank.  Reasons are never deduplicated."""

    reasons: list[Reason] = Field(default_factory=list)

    @property
    def triggered(self) -> bool:
        return len(self.reasons) > 0

    @property
    def kinds(self) -> list[ReasonKind]:
        return [r.kind for r in self.reasons]


class AlertRecord(WireModel):
    """The durable artifact of one cycle.

    Invariants enforced on construction:
        - ``score == len(reasons)``
        - ``start_cycle == duration == 0`` unless an episode is open
    """

    flag: AlertFlag = AlertFlag.NONE
    reasons: list[Reason] = Field(default_factory=list)
    score: int = Field(default=0, ge=0)
    detection_count: int = Field(
        default=0,
        ge=0,
        description="Detector reasons only, excluding any hysteresis note",
    )
    start_cycle: int = Field(default=0, ge=0)
    duration: int = Field(default=0, ge=0)
    calendar_context: Optional[CalendarAudit] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> AlertRecord:
        if self.score != len(self.reasons):
            raise ValueError(f"score {self.score} != reason count {len(self.reasons)}")
        if not self.flag.is_episode and (self.start_cycle or self.duration):
            raise ValueError(f"flag '{self.flag.value}' must carry zero start_cycle and duration")
        return self

    @property
    def reason_tags(self) -> list[str]:
        """Human-readable reason strings in emission order."""
        return [str(r) for r in self.reasons]

    @property
    def kinds(self) -> list[ReasonKind]:
        return [r.kind for r in self.reasons]
