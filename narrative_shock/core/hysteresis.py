"""HysteresisMachine: turns a per-cycle verdict into an alert lifecycle.

States:

    none → firing → {fading | chronic} → resolved → none

An episode is identified by its start cycle, never by a counter, so the
duration is recomputed from scratch every cycle and cannot drift.

Triggered cycle:
    - prior flag open (firing/fading/chronic) with a start cycle → continue
    - otherwise → fresh episode starting now, duration 0
    - duration ≥ chronic_after:  chronic if reasons < chronic_max_reasons, else firing
    - duration ≥ fading_after:   fading  if reasons < fading_max_reasons,  else firing
    - otherwise:                 firing

An episode with many active reasons keeps firing however long it lasts;
only one that is thinning out gets the calmer fading/chronic label.

Quiet cycle:
    - prior open → resolved (one cycle only)
    - prior resolved or none → none
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from narrative_shock.domain.alert import Reason
from narrative_shock.domain.enums import AlertFlag, ReasonKind
from narrative_shock.domain.state import CycleState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HysteresisConfig:
    """Episode ages (in cycles) and reason counts that relabel a shock."""

    fading_after: int = 3
    chronic_after: int = 5
    # Below this many reasons a 3+ cycle episode is fading
    fading_max_reasons: int = 2
    # Below this many reasons a 5+ cycle episode is chronic
    chronic_max_reasons: int = 3


@dataclass(frozen=True)
class Transition:
    """Outcome of one step.  ``note`` is appended to the reason list if set."""

    flag: AlertFlag
    start_cycle: int
    duration: int
    note: Optional[Reason] = None


class HysteresisMachine:
    """Stateless: every input it needs arrives as an argument."""

    def __init__(self, config: HysteresisConfig | None = None) -> None:
        self._config = config or HysteresisConfig()

    def step(
        self,
        triggered: bool,
        reason_count: int,
        current_cycle: int,
        prior: CycleState,
    ) -> Transition:
        if triggered:
            transition = self._active(reason_count, current_cycle, prior)
        else:
            transition = self._quiet(prior)

        if transition.flag != prior.alert_flag:
            logger.info(
                "Cycle %d: alert %s → %s (start=%d, duration=%d)",
                current_cycle,
                prior.alert_flag.value,
                transition.flag.value,
                transition.start_cycle,
                transition.duration,
            )
        return transition

    # ── Triggered ────────────────────────────────────────────────────────

    def _active(self, reason_count: int, current_cycle: int, prior: CycleState) -> Transition:
        c = self._config

        if prior.alert_flag.is_episode and prior.alert_start_cycle > 0:
            start = prior.alert_start_cycle
            # A prior start ahead of the current cycle means the caller
            # replayed out of order; clamp rather than emit a negative age.
            duration = max(current_cycle - start, 0)
        else:
            start = current_cycle
            duration = 0

        if duration >= c.chronic_after:
            if reason_count < c.chronic_max_reasons:
                return Transition(
                    AlertFlag.CHRONIC, start, duration,
                    Reason(
                        kind=ReasonKind.CHRONIC_NOTE,
                        detail=f"chronic (normalized after {duration} cycles)",
                    ),
                )
            return Transition(AlertFlag.FIRING, start, duration)

        if duration >= c.fading_after:
            if reason_count < c.fading_max_reasons:
                return Transition(
                    AlertFlag.FADING, start, duration,
                    Reason(kind=ReasonKind.FADING_NOTE, detail=f"fading (cycle {duration})"),
                )
            return Transition(AlertFlag.FIRING, start, duration)

        return Transition(AlertFlag.FIRING, start, duration)

    # ── Quiet ────────────────────────────────────────────────────────────

    @staticmethod
    def _quiet(prior: CycleState) -> Transition:
        if prior.alert_flag == AlertFlag.CHRONIC:
            return Transition(AlertFlag.RESOLVED, 0, 0, Reason(kind=ReasonKind.CHRONIC_RESOLVED_NOTE))
        if prior.alert_flag.is_episode:
            return Transition(AlertFlag.RESOLVED, 0, 0, Reason(kind=ReasonKind.RESOLVED_NOTE))
        return Transition(AlertFlag.NONE, 0, 0)
