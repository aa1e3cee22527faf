"""CalendarContextResolver: turns calendar facts into threshold modifiers.

Busy days raise the bar for what counts as a shock: a parade on
Independence Day is not a crisis.  Quiet anniversary days lower it.

Modifier table (all additive, order-independent):

    | condition                  | event | chaos | migration |
    |----------------------------|-------|-------|-----------|
    | high-activity holiday      |  +3   |  +2   |           |
    | travel holiday             |       |       |   +50     |
    | crowd holiday              |       |  +2   |           |
    | recurring community night  |  +2   |  +1   |           |
    | override: peak label       |  +4   |  +3   |   +60     |
    | override: secondary-peak   |  +2   |  +2   |   +40     |
    | derived phase 'active'     |  +1   |  +1   |           |
    | quiet anniversary day      |  -2   |  -1   |           |

Only an explicitly authored seasonal override may produce the large
seasonal modifiers.  A phase derived from the calendar (or supplied as a
derived hint) is capped at the flat +1/+1.
"""

from __future__ import annotations

import logging
from typing import Optional

from narrative_shock.domain.alert import CalendarContext
from narrative_shock.domain.enums import SeasonalPhase
from narrative_shock.domain.snapshot import SignalSnapshot

logger = logging.getLogger(__name__)


# ── Holiday sets ─────────────────────────────────────────────────────────────

HIGH_ACTIVITY_HOLIDAYS = frozenset({
    "Independence", "NewYearsEve", "Halloween", "OpeningDay",
    "OaklandPride", "ArtSoulFestival", "CincoDeMayo",
})

TRAVEL_HOLIDAYS = frozenset({
    "Thanksgiving", "Holiday", "NewYear", "NewYearsEve",
    "MemorialDay", "LaborDay", "Independence",
})

CROWD_HOLIDAYS = frozenset({
    "Independence", "NewYearsEve", "Halloween", "OpeningDay",
    "OaklandPride", "CincoDeMayo", "DiaDeMuertos",
})

FIREWORKS_HOLIDAYS = frozenset({"Independence", "NewYearsEve"})

CULTURAL_HOLIDAYS = frozenset({
    "Juneteenth", "CincoDeMayo", "DiaDeMuertos", "OaklandPride",
    "LunarNewYear", "MLKDay",
})

# Authored override labels, including the sports-calendar names older
# configs still use.
PEAK_LABELS = frozenset({SeasonalPhase.PEAK.value, "championship"})
SECONDARY_PEAK_LABELS = frozenset({SeasonalPhase.SECONDARY_PEAK.value, "playoffs", "post-season"})


def derive_seasonal_phase(month: Optional[int]) -> str:
    """Map a calendar month onto the three derived buckets.

    3-5 → early, 6-11 → active, 12/1/2 → off.  No month → off.
    """
    if month is None:
        return SeasonalPhase.OFF.value
    if 3 <= month <= 5:
        return SeasonalPhase.EARLY.value
    if 6 <= month <= 11:
        return SeasonalPhase.ACTIVE.value
    return SeasonalPhase.OFF.value


def is_peak_override(context: CalendarContext) -> bool:
    """True when an authored override put the cycle in a peak season."""
    return context.seasonal_override_active and context.resolved_seasonal_phase in PEAK_LABELS


class CalendarContextResolver:
    """Stateless resolver from snapshot calendar facts to a CalendarContext."""

    def resolve(self, snapshot: SignalSnapshot) -> CalendarContext:
        holiday = snapshot.holiday_name
        event_mod = 0
        chaos_mod = 0
        migration_mod = 0

        if holiday in HIGH_ACTIVITY_HOLIDAYS:
            event_mod += 3
            chaos_mod += 2
        if holiday in TRAVEL_HOLIDAYS:
            migration_mod += 50
        if holiday in CROWD_HOLIDAYS:
            chaos_mod += 2

        if snapshot.is_recurring_community_night:
            event_mod += 2
            chaos_mod += 1

        # ── Seasonal phase ───────────────────────────────────────────────
        label = snapshot.seasonal_activity_phase
        override = snapshot.seasonal_override_active and label is not None
        if snapshot.seasonal_override_active and label is not None:
            phase = label
            if phase in PEAK_LABELS:
                event_mod += 4
                chaos_mod += 3
                migration_mod += 60
            elif phase in SECONDARY_PEAK_LABELS:
                event_mod += 2
                chaos_mod += 2
                migration_mod += 40
        else:
            if snapshot.seasonal_override_active:
                logger.warning("Seasonal override flagged without a label; deriving phase instead")
            phase = label or derive_seasonal_phase(snapshot.month)
            if phase == SeasonalPhase.ACTIVE.value:
                event_mod += 1
                chaos_mod += 1

        if snapshot.is_quiet_anniversary_day:
            event_mod -= 2
            chaos_mod -= 1

        return CalendarContext(
            holiday=holiday,
            holiday_priority=snapshot.holiday_priority,
            is_recurring_community_night=snapshot.is_recurring_community_night,
            is_quiet_anniversary_day=snapshot.is_quiet_anniversary_day,
            resolved_seasonal_phase=phase,
            seasonal_override_active=override,
            event_threshold_mod=event_mod,
            chaos_threshold_mod=chaos_mod,
            migration_threshold_mod=migration_mod,
        )
