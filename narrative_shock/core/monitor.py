"""ShockMonitor: one environment, one cycle, one pure evaluation.

Pipeline:

    snapshot ─► CalendarContextResolver ─► ThresholdEngine ─► DetectorBank
                                                                  │
    prior ────────────────────────────────► HysteresisMachine ◄───┘
                                                  │
                                  (AlertRecord, next CycleState)

Design principles:
    1. Pure function: (snapshot, prior) in, (alert, next_state) out.
    2. No side effects, no I/O, no state kept between calls.
    3. The caller owns persistence and cycle ordering per environment.
    4. Missing data never raises; malformed data is rejected earlier,
       in ``core.validation``.

Score note:
    ``score`` is ``len(reasons)`` read AFTER the hysteresis note is
    appended, so a fading/chronic/resolved cycle scores one more than its
    detector reasons.  Existing alert history depends on that count.
    ``detection_count`` carries the detector-only number.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple, Optional

from narrative_shock.core.calendar import CalendarContextResolver
from narrative_shock.core.detectors import DetectorBank
from narrative_shock.core.hysteresis import HysteresisMachine
from narrative_shock.core.thresholds import ThresholdEngine
from narrative_shock.core.validation import parse_prior, parse_snapshot
from narrative_shock.domain.alert import AlertRecord, CalendarAudit
from narrative_shock.domain.snapshot import SignalSnapshot
from narrative_shock.domain.state import CycleState

logger = logging.getLogger(__name__)


class EvaluationResult(NamedTuple):
    alert: AlertRecord
    next_state: CycleState


class ShockMonitor:
    """Deterministic shock evaluation.

    The monitor is stateless; its collaborators are injected so that
    thresholds, detector limits and hysteresis timings are explicit.
    """

    def __init__(
        self,
        calendar: CalendarContextResolver | None = None,
        thresholds: ThresholdEngine | None = None,
        detectors: DetectorBank | None = None,
        hysteresis: HysteresisMachine | None = None,
    ) -> None:
        self._calendar = calendar or CalendarContextResolver()
        self._thresholds = thresholds or ThresholdEngine()
        self._detectors = detectors or DetectorBank()
        self._hysteresis = hysteresis or HysteresisMachine()

    # ── Public API ───────────────────────────────────────────────────────

    def evaluate(
        self,
        snapshot: SignalSnapshot,
        prior: Optional[CycleState] = None,
    ) -> EvaluationResult:
        """Evaluate one cycle.  ``prior=None`` is the first-ever cycle."""
        prior = prior or CycleState()

        context = self._calendar.resolve(snapshot)
        thresholds = self._thresholds.compute(context)
        outcome = self._detectors.run(snapshot, prior, thresholds, context)

        detection_count = len(outcome.reasons)
        transition = self._hysteresis.step(
            triggered=outcome.triggered,
            reason_count=detection_count,
            current_cycle=snapshot.cycle,
            prior=prior,
        )

        reasons = list(outcome.reasons)
        if transition.note is not None:
            reasons.append(transition.note)

        alert = AlertRecord(
            flag=transition.flag,
            reasons=reasons,
            score=len(reasons),
            detection_count=detection_count,
            start_cycle=transition.start_cycle,
            duration=transition.duration,
            calendar_context=CalendarAudit.from_context(context, thresholds),
        )

        next_state = CycleState(
            cycle_number=snapshot.cycle,
            event_count=snapshot.event_count,
            chaos_count=snapshot.chaos_count,
            sentiment=snapshot.sentiment,
            economic_mood=snapshot.economic_mood,
            pattern_flag=snapshot.pattern_flag,
            alert_flag=transition.flag,
            alert_start_cycle=transition.start_cycle,
        )

        if outcome.triggered:
            logger.debug(
                "Cycle %d: %d reason(s): %s",
                snapshot.cycle,
                detection_count,
                ", ".join(alert.reason_tags),
            )
        return EvaluationResult(alert, next_state)

    def evaluate_payload(
        self,
        snapshot: Any,
        prior: Optional[Any] = None,
    ) -> EvaluationResult:
        """Validate raw mappings, then evaluate.

        Raises:
            MalformedInputError: If either payload has a wrong-shaped field.
        """
        return self.evaluate(parse_snapshot(snapshot), parse_prior(prior))


_default_monitor = ShockMonitor()


def evaluate(snapshot: SignalSnapshot, prior: Optional[CycleState] = None) -> EvaluationResult:
    """Module-level convenience using the default-configured monitor."""
    return _default_monitor.evaluate(snapshot, prior)
