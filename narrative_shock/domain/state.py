"""CycleState: the compact summary carried from one cycle to the next.

The monitor returns a CycleState alongside every AlertRecord; the caller
persists it and hands it back as the *prior* state on the next invocation.
This is the only history the monitor ever sees.

Records written by the previous generation of the monitor used different
keys and flag names.  Both are translated on the way in, so existing state
stores keep working without a migration.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator

from narrative_shock.domain.base import WireModel
from narrative_shock.domain.enums import LEGACY_ALERT_FLAGS, AlertFlag, PatternFlag

_LEGACY_KEYS = {
    "events": "eventCount",
    "econMood": "economicMood",
    "pattern": "patternFlag",
    "shockFlag": "alertFlag",
    "shockStartCycle": "alertStartCycle",
}


class CycleState(WireModel):
    """Prior-cycle input and next-cycle output share this shape.

    Every field has a default, so an absent prior (first-ever cycle for an
    environment) is simply ``CycleState()``.
    """

    cycle_number: int = Field(default=0, ge=0)
    event_count: int = Field(default=0, ge=0)
    chaos_count: int = Field(default=0, ge=0)
    sentiment: float = 0.0
    economic_mood: float = 50.0
    pattern_flag: PatternFlag = PatternFlag.NONE
    alert_flag: AlertFlag = AlertFlag.NONE
    alert_start_cycle: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _translate_legacy_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        out = dict(data)
        for old, new in _LEGACY_KEYS.items():
            if old in out and out.get(new) is None:
                out[new] = out.pop(old)
        return out

    @field_validator("alert_flag", mode="before")
    @classmethod
    def _translate_legacy_flag(cls, v: Any) -> Any:
        if isinstance(v, str):
            return LEGACY_ALERT_FLAGS.get(v, v)
        return v


# The two roles of the same record, named for readability at call sites.
PriorCycleState = CycleState
NextCycleState = CycleState
