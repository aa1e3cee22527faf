from narrative_shock.domain.alert import AlertRecord, CalendarContext, DetectionOutcome, Reason, ThresholdSet
from narrative_shock.domain.snapshot import SignalSnapshot
from narrative_shock.domain.state import CycleState, NextCycleState, PriorCycleState

__all__ = [
    "AlertRecord",
    "CalendarContext",
    "CycleState",
    "DetectionOutcome",
    "NextCycleState",
    "PriorCycleState",
    "Reason",
    "SignalSnapshot",
    "ThresholdSet",
]
