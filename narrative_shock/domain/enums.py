"""Controlled enumerations for the narrative-shock domain.

Every categorical field in the domain MUST reference an enum defined here.
Free-form strings are only accepted where the upstream producer owns the
vocabulary (holiday names, event domains, seasonal labels).
"""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Severity labels the Signal Producer attaches to world events."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Synonyms emitted by older producers.
SEVERITY_SYNONYMS: dict[str, Severity] = {
    "major": Severity.HIGH,
    "moderate": Severity.MEDIUM,
}


class CivicLoad(str, Enum):
    """Civic load classification.  Only LOAD_STRAIN is acted on."""

    STABLE = "stable"
    MINOR_VARIANCE = "minor-variance"
    ELEVATED = "elevated"
    LOAD_STRAIN = "load-strain"


class PatternFlag(str, Enum):
    """Pattern detected by the producer over recent cycles."""

    NONE = "none"
    STABILITY_STREAK = "stability-streak"
    MICRO_EVENT_WAVE = "micro-event-wave"
    STRAIN_TREND = "strain-trend"
    CALM_AFTER_SHOCK = "calm-after-shock"
    ELEVATED_ACTIVITY = "elevated-activity"
    HOLIDAY_ELEVATED = "holiday-elevated"


class ArcPhase(str, Enum):
    """Phases of a narrative arc.  Only PEAK counts toward the arc cluster."""

    EARLY = "early"
    RISING = "rising"
    MID = "mid"
    PEAK = "peak"
    FALLING = "falling"
    DECLINE = "decline"
    RESOLVED = "resolved"


class CoverageIntensity(str, Enum):
    MINIMAL = "minimal"
    MODERATE = "moderate"
    HEAVY = "heavy"
    SATURATED = "saturated"


class HolidayPriority(str, Enum):
    """Holiday tiers.  CULTURAL and LOCAL are kept for producers that emit them."""

    NONE = "none"
    MAJOR = "major"
    MINOR = "minor"
    CULTURAL = "cultural"
    LOCAL = "oakland"


class SeasonalPhase(str, Enum):
    """Seasonal activity labels the resolver knows how to weigh.

    EARLY / ACTIVE / OFF are the buckets derived from the calendar month.
    PEAK / SECONDARY_PEAK only carry weight when an override is active.
    """

    EARLY = "early"
    ACTIVE = "active"
    OFF = "off"
    PEAK = "peak"
    SECONDARY_PEAK = "secondary-peak"


class AlertFlag(str, Enum):
    """Hysteresis states of an alert episode.

    none → firing → {fading | chronic} → resolved → none
    """

    NONE = "none"
    FIRING = "firing"
    FADING = "fading"
    CHRONIC = "chronic"
    RESOLVED = "resolved"

    @property
    def is_episode(self) -> bool:
        """True while an episode is open (firing, fading or chronic)."""
        return self in (AlertFlag.FIRING, AlertFlag.FADING, AlertFlag.CHRONIC)


# Flag names written by the previous generation of the monitor.
LEGACY_ALERT_FLAGS: dict[str, AlertFlag] = {
    "shock-flag": AlertFlag.FIRING,
    "shock-fading": AlertFlag.FADING,
    "shock-chronic": AlertFlag.CHRONIC,
    "shock-resolved": AlertFlag.RESOLVED,
}


class ReasonKind(str, Enum):
    """Closed set of reason tags.

    One member per detector rule, plus the notes the hysteresis machine
    appends when it relabels or closes an episode.
    """

    # Detector bank
    EVENT_SPIKE = "event spike"
    HIGH_SEVERITY_CLUSTER = "high severity cluster"
    MEDIUM_SEVERITY_WAVE = "medium severity wave"
    CHAOS_SPIKE = "chaos spike"
    CHAOS_SATURATION = "chaos saturation"
    SEVERE_WEATHER = "severe weather"
    WEATHER_CONFLICT = "weather conflict"
    WEATHER_DISTRESS = "weather distress"
    SENTIMENT_COLLAPSE = "sentiment collapse"
    SEVERE_NEGATIVE_SENTIMENT = "severe negative sentiment"
    ECONOMIC_CRASH = "economic crash"
    ECONOMIC_CRISIS = "economic crisis"
    MIGRATION_SURGE = "migration surge"
    EMPLOYMENT_CRISIS = "employment crisis"
    CIVIC_OVERLOAD = "civic overload"
    CIVIC_STRAIN_EXTREME = "civic strain extreme"
    STABILITY_BREAK = "stability break"
    STRAIN_TREND = "strain trend"
    ARC_PEAK_CLUSTER = "arc peak cluster"
    HIGH_TENSION_ARCS = "high tension arcs"
    MEDIA_CRISIS_SATURATION = "media crisis saturation"
    MEDIA_SATURATION = "media saturation"

    # Calendar composites
    HOLIDAY_DEAD_ZONE = "holiday dead-zone"
    PEAK_SEASON_TENSION = "peak season tension"
    FIREWORKS_CRISIS = "fireworks crisis"
    CULTURAL_DISCONNECT = "cultural disconnect"
    ANNIVERSARY_DISRUPTION = "anniversary disruption"
    COMMUNITY_NIGHT_TENSION = "community night tension"
    HOLIDAY_TRANSIT_CRISIS = "holiday transit crisis"
    COMMUNITY_WITHDRAWAL = "community withdrawal"

    # Hysteresis notes
    CHRONIC_NOTE = "chronic"
    FADING_NOTE = "fading"
    RESOLVED_NOTE = "resolved this cycle"
    CHRONIC_RESOLVED_NOTE = "chronic condition resolved"

    @property
    def is_note(self) -> bool:
        return self in _NOTE_KINDS


_NOTE_KINDS = frozenset({
    ReasonKind.CHRONIC_NOTE,
    ReasonKind.FADING_NOTE,
    ReasonKind.RESOLVED_NOTE,
    ReasonKind.CHRONIC_RESOLVED_NOTE,
})
