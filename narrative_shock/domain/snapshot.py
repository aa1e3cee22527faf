"""SignalSnapshot: the per-cycle contract between Signal Producer and monitor.

A snapshot is a read-only picture of one environment at one cycle.  Every
field is optional: an absent (or null) field takes a neutral default so the
monitor never fails on sparse producers.  A field that IS present must have
the right shape; pydantic rejects anything else at the boundary.

Wire names are camelCase.  snake_case names are accepted too.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator

from narrative_shock.domain.base import WireModel
from narrative_shock.domain.enums import (
    SEVERITY_SYNONYMS,
    ArcPhase,
    CivicLoad,
    CoverageIntensity,
    HolidayPriority,
    PatternFlag,
    Severity,
)


# ── Nested structures ────────────────────────────────────────────────────────

class WorldEvent(WireModel):
    """One world event as far as the monitor cares: how bad, and where."""

    severity: Optional[Severity] = Field(
        default=None,
        description="Severity label; synonyms 'major'/'moderate' are accepted",
    )
    domain: str = Field(default="", max_length=64, description="Event domain, e.g. SAFETY")

    @field_validator("severity", mode="before")
    @classmethod
    def normalise_severity(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            if not v:
                return None
            return SEVERITY_SYNONYMS.get(v, v)
        return v

    def in_domain(self, domain: str) -> bool:
        return self.domain.upper() == domain.upper()


class Weather(WireModel):
    impact_factor: float = Field(default=1.0, ge=0.0)
    mood_conflict: Optional[float] = Field(default=None, description="Conflict potential (0–1)")
    mood_comfort: Optional[float] = Field(default=None, description="Comfort index (0–1)")


class DemographicDrift(WireModel):
    migration: int = Field(default=0, description="Net migration this cycle (signed)")
    employment_rate: float = Field(default=0.91, ge=0.0, le=1.0)


class Arc(WireModel):
    phase: Optional[ArcPhase] = None
    tension: float = Field(default=0.0, ge=0.0)


class MediaEffects(WireModel):
    crisis_saturation: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    coverage_intensity: Optional[CoverageIntensity] = None


class CityDynamics(WireModel):
    """Community metrics consumed by the calendar composite detectors."""

    cultural_activity: float = Field(default=1.0, ge=0.0)
    community_engagement: float = Field(default=1.0, ge=0.0)


# ── Snapshot ─────────────────────────────────────────────────────────────────

class SignalSnapshot(WireModel):
    """Everything the monitor reads about one environment for one cycle.

    Immutable after creation.  Validated at the boundary so downstream
    code never has to re-check field shapes.
    """

    cycle: int = Field(default=0, ge=0, description="Current cycle number")
    event_count: int = Field(default=0, ge=0, description="Events generated this cycle")
    world_events: list[WorldEvent] = Field(default_factory=list)
    sentiment: float = Field(default=0.0, description="City sentiment, roughly -1..1")
    civic_load: CivicLoad = CivicLoad.STABLE
    civic_load_score: float = 0.0
    weather: Weather = Field(default_factory=Weather)
    economic_mood: float = Field(default=50.0, description="Economic mood index, 0..100")
    demographic_drift: DemographicDrift = Field(default_factory=DemographicDrift)
    arcs: list[Arc] = Field(default_factory=list)
    media_effects: MediaEffects = Field(default_factory=MediaEffects)
    pattern_flag: PatternFlag = PatternFlag.NONE
    city_dynamics: CityDynamics = Field(default_factory=CityDynamics)

    # ── Calendar facts ───────────────────────────────────────────────────
    holiday_name: str = Field(default="none", max_length=64)
    holiday_priority: HolidayPriority = HolidayPriority.NONE
    is_recurring_community_night: bool = False
    is_quiet_anniversary_day: bool = False
    seasonal_activity_phase: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Externally derived phase, or the authored label when an override is active",
    )
    seasonal_override_active: bool = False
    month: Optional[int] = Field(default=None, ge=1, le=12)

    @field_validator("holiday_name")
    @classmethod
    def blank_holiday_is_none(cls, v: str) -> str:
        return v.strip() or "none"

    @field_validator("seasonal_activity_phase")
    @classmethod
    def blank_phase_is_absent(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    # ── Derived counts ───────────────────────────────────────────────────

    @property
    def chaos_count(self) -> int:
        """Number of world events this cycle."""
        return len(self.world_events)

    def count_domain(self, domain: str) -> int:
        return sum(1 for ev in self.world_events if ev.in_domain(domain))
