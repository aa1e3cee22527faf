"""DetectorBank: independent boolean rules over one cycle's facts.

Design principles:
    1. Every rule is a (ReasonKind, predicate) row in a table.
    2. Every row is evaluated every cycle.  No short-circuiting, no vetoes.
    3. A rule appends at most one reason, so reasons need no deduplication.
    4. Rules read only CycleFacts; they never see the store or the clock.

Adding or removing a detection category is a one-row change to the table
returned by ``default_rules()``.

Categories:
    1  event spike            7  migration surge
    2  severity spike         8  employment crisis
    3  chaos spike/saturation 9  civic strain
    4  weather volatility     10 pattern break
    5  sentiment collapse     11 arc cluster
    6  economic crash         12 media saturation
    13 calendar-specific composites
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from narrative_shock.core.calendar import (
    CULTURAL_HOLIDAYS,
    FIREWORKS_HOLIDAYS,
    TRAVEL_HOLIDAYS,
    is_peak_override,
)
from narrative_shock.domain.alert import CalendarContext, DetectionOutcome, Reason, ThresholdSet
from narrative_shock.domain.enums import (
    ArcPhase,
    CivicLoad,
    CoverageIntensity,
    HolidayPriority,
    PatternFlag,
    ReasonKind,
    Severity,
)
from narrative_shock.domain.snapshot import SignalSnapshot
from narrative_shock.domain.state import CycleState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectorLimits:
    """Fixed constants the rules compare against.

    Calendar-adjusted levels live in ThresholdSet; everything here is
    the same on every day of the year.
    """

    high_severity_cluster: int = 2
    medium_severity_wave: int = 4
    severe_weather_impact: float = 1.5
    weather_conflict: float = 0.5
    weather_distress_comfort: float = 0.2
    sentiment_collapse_drop: float = 0.3
    severe_negative_sentiment: float = -0.5
    economic_crash_drop: float = 15.0
    economic_crisis_mood: float = 25.0
    employment_crisis_rate: float = 0.85
    civic_strain_score: float = 15.0
    stability_break_events: int = 10
    arc_peak_cluster: int = 2
    arc_high_tension: float = 8.0
    arc_high_tension_count: int = 2
    media_crisis_saturation: float = 0.8

    # Calendar composites
    dead_zone_max_events: int = 5
    peak_season_sentiment: float = -0.4
    fireworks_safety_events: int = 3
    cultural_activity_floor: float = 0.7
    anniversary_chaos: int = 5
    community_night_sentiment: float = -0.35
    holiday_infrastructure_events: int = 2
    community_engagement_floor: float = 0.6
    withdrawal_sentiment: float = -0.3


@dataclass(frozen=True)
class CycleFacts:
    """Everything a rule may look at, gathered once per cycle."""

    snapshot: SignalSnapshot
    prior: CycleState
    thresholds: ThresholdSet
    calendar: CalendarContext
    limits: DetectorLimits

    @property
    def chaos(self) -> int:
        return self.snapshot.chaos_count

    def severity_count(self, *levels: Severity) -> int:
        return sum(1 for ev in self.snapshot.world_events if ev.severity in levels)


Predicate = Callable[[CycleFacts], bool]


@dataclass(frozen=True)
class DetectorRule:
    kind: ReasonKind
    predicate: Predicate


def _peak_arcs(f: CycleFacts) -> int:
    return sum(1 for arc in f.snapshot.arcs if arc.phase == ArcPhase.PEAK)


def _high_tension_arcs(f: CycleFacts) -> int:
    return sum(1 for arc in f.snapshot.arcs if arc.tension >= f.limits.arc_high_tension)


def _weather_distress(f: CycleFacts) -> bool:
    comfort = f.snapshot.weather.mood_comfort
    return comfort is not None and comfort < f.limits.weather_distress_comfort


def _weather_conflict(f: CycleFacts) -> bool:
    conflict = f.snapshot.weather.mood_conflict
    return conflict is not None and conflict >= f.limits.weather_conflict


def _media_crisis(f: CycleFacts) -> bool:
    saturation = f.snapshot.media_effects.crisis_saturation
    return saturation is not None and saturation >= f.limits.media_crisis_saturation


def default_rules() -> list[DetectorRule]:
    """The full rule table, in reporting order."""
    R = DetectorRule
    K = ReasonKind
    return [
        # 1. Event spike (calendar-adjusted)
        R(K.EVENT_SPIKE, lambda f: (
            f.snapshot.event_count - f.prior.event_count >= f.thresholds.event_spike_threshold
        )),
        # 2. Severity spike
        R(K.HIGH_SEVERITY_CLUSTER, lambda f: (
            f.severity_count(Severity.HIGH, Severity.CRITICAL) >= f.limits.high_severity_cluster
        )),
        R(K.MEDIUM_SEVERITY_WAVE, lambda f: (
            f.severity_count(Severity.MEDIUM) >= f.limits.medium_severity_wave
        )),
        # 3. Chaos spike / saturation (calendar-adjusted)
        R(K.CHAOS_SPIKE, lambda f: f.chaos - f.prior.chaos_count >= f.thresholds.chaos_spike_threshold),
        R(K.CHAOS_SATURATION, lambda f: f.chaos >= f.thresholds.chaos_saturation_threshold),
        # 4. Weather volatility
        R(K.SEVERE_WEATHER, lambda f: f.snapshot.weather.impact_factor >= f.limits.severe_weather_impact),
        R(K.WEATHER_CONFLICT, _weather_conflict),
        R(K.WEATHER_DISTRESS, _weather_distress),
        # 5. Sentiment collapse
        R(K.SENTIMENT_COLLAPSE, lambda f: (
            f.prior.sentiment - f.snapshot.sentiment >= f.limits.sentiment_collapse_drop
        )),
        R(K.SEVERE_NEGATIVE_SENTIMENT, lambda f: f.snapshot.sentiment <= f.limits.severe_negative_sentiment),
        # 6. Economic crash
        R(K.ECONOMIC_CRASH, lambda f: (
            f.prior.economic_mood - f.snapshot.economic_mood >= f.limits.economic_crash_drop
        )),
        R(K.ECONOMIC_CRISIS, lambda f: f.snapshot.economic_mood <= f.limits.economic_crisis_mood),
        # 7. Migration surge (calendar-adjusted)
        R(K.MIGRATION_SURGE, lambda f: (
            abs(f.snapshot.demographic_drift.migration) >= f.thresholds.migration_threshold
        )),
        # 8. Employment crisis
        R(K.EMPLOYMENT_CRISIS, lambda f: (
            f.snapshot.demographic_drift.employment_rate < f.limits.employment_crisis_rate
        )),
        # 9. Civic strain
        R(K.CIVIC_OVERLOAD, lambda f: f.snapshot.civic_load == CivicLoad.LOAD_STRAIN),
        R(K.CIVIC_STRAIN_EXTREME, lambda f: f.snapshot.civic_load_score >= f.limits.civic_strain_score),
        # 10. Pattern break
        R(K.STABILITY_BREAK, lambda f: (
            f.prior.pattern_flag == PatternFlag.STABILITY_STREAK
            and f.snapshot.event_count >= f.limits.stability_break_events
        )),
        R(K.STRAIN_TREND, lambda f: f.snapshot.pattern_flag == PatternFlag.STRAIN_TREND),
        # 11. Arc cluster
        R(K.ARC_PEAK_CLUSTER, lambda f: _peak_arcs(f) >= f.limits.arc_peak_cluster),
        R(K.HIGH_TENSION_ARCS, lambda f: _high_tension_arcs(f) >= f.limits.arc_high_tension_count),
        # 12. Media saturation
        R(K.MEDIA_CRISIS_SATURATION, _media_crisis),
        R(K.MEDIA_SATURATION, lambda f: (
            f.snapshot.media_effects.coverage_intensity == CoverageIntensity.SATURATED
        )),
        # 13. Calendar-specific composites
        R(K.HOLIDAY_DEAD_ZONE, lambda f: (
            f.calendar.holiday_priority == HolidayPriority.MAJOR
            and f.snapshot.event_count < f.limits.dead_zone_max_events
            and f.chaos == 0
        )),
        R(K.PEAK_SEASON_TENSION, lambda f: (
            is_peak_override(f.calendar) and f.snapshot.sentiment <= f.limits.peak_season_sentiment
        )),
        R(K.FIREWORKS_CRISIS, lambda f: (
            f.calendar.holiday in FIREWORKS_HOLIDAYS
            and f.snapshot.count_domain("SAFETY") >= f.limits.fireworks_safety_events
        )),
        R(K.CULTURAL_DISCONNECT, lambda f: (
            f.calendar.holiday in CULTURAL_HOLIDAYS
            and f.snapshot.city_dynamics.cultural_activity < f.limits.cultural_activity_floor
        )),
        R(K.ANNIVERSARY_DISRUPTION, lambda f: (
            f.calendar.is_quiet_anniversary_day and f.chaos >= f.limits.anniversary_chaos
        )),
        R(K.COMMUNITY_NIGHT_TENSION, lambda f: (
            f.calendar.is_recurring_community_night
            and f.snapshot.sentiment <= f.limits.community_night_sentiment
        )),
        R(K.HOLIDAY_TRANSIT_CRISIS, lambda f: (
            f.calendar.holiday in TRAVEL_HOLIDAYS
            and f.snapshot.count_domain("INFRASTRUCTURE") >= f.limits.holiday_infrastructure_events
        )),
        R(K.COMMUNITY_WITHDRAWAL, lambda f: (
            f.snapshot.city_dynamics.community_engagement < f.limits.community_engagement_floor
            and f.snapshot.sentiment <= f.limits.withdrawal_sentiment
        )),
    ]


class DetectorBank:
    """Evaluates every rule in its table against one cycle's facts.

    Usage:
        bank = DetectorBank()
        outcome = bank.run(snapshot, prior, thresholds, calendar)
        if outcome.triggered: ...
    """

    def __init__(
        self,
        rules: Sequence[DetectorRule] | None = None,
        limits: DetectorLimits | None = None,
    ) -> None:
        self._rules = list(rules) if rules is not None else default_rules()
        self._limits = limits or DetectorLimits()

    def run(
        self,
        snapshot: SignalSnapshot,
        prior: CycleState,
        thresholds: ThresholdSet,
        calendar: CalendarContext,
    ) -> DetectionOutcome:
        facts = CycleFacts(
            snapshot=snapshot,
            prior=prior,
            thresholds=thresholds,
            calendar=calendar,
            limits=self._limits,
        )
        reasons: list[Reason] = []
        for rule in self._rules:
            if rule.predicate(facts):
                logger.debug("Cycle %d: rule '%s' fired", snapshot.cycle, rule.kind.value)
                reasons.append(Reason(kind=rule.kind))
        return DetectionOutcome(reasons=reasons)
