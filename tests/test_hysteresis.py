"""Tests for the alert hysteresis state machine."""

from __future__ import annotations

import pytest

from narrative_shock.core.hysteresis import HysteresisConfig, HysteresisMachine, Transition
from narrative_shock.domain.enums import AlertFlag, ReasonKind
from narrative_shock.domain.state import CycleState


def _prior(flag: AlertFlag = AlertFlag.NONE, start: int = 0) -> CycleState:
    return CycleState(alert_flag=flag, alert_start_cycle=start)


def _step(
    triggered: bool,
    reasons: int,
    cycle: int,
    prior: CycleState,
    machine: HysteresisMachine | None = None,
) -> Transition:
    return (machine or HysteresisMachine()).step(triggered, reasons, cycle, prior)


class TestEpisodeStart:
    def test_fresh_episode(self) -> None:
        t = _step(True, 1, 50, _prior())
        assert t.flag == AlertFlag.FIRING
        assert t.start_cycle == 50
        assert t.duration == 0
        assert t.note is None

    def test_resolved_prior_starts_fresh_episode(self) -> None:
        t = _step(True, 1, 60, _prior(AlertFlag.RESOLVED, 0))
        assert (t.flag, t.start_cycle, t.duration) == (AlertFlag.FIRING, 60, 0)

    def test_open_prior_without_start_cycle_starts_fresh(self) -> None:
        t = _step(True, 1, 60, _prior(AlertFlag.FIRING, 0))
        assert (t.start_cycle, t.duration) == (60, 0)

    @pytest.mark.parametrize("flag", [AlertFlag.FIRING, AlertFlag.FADING, AlertFlag.CHRONIC])
    def test_open_prior_continues_episode(self, flag: AlertFlag) -> None:
        t = _step(True, 5, 52, _prior(flag, 50))
        assert t.start_cycle == 50
        assert t.duration == 2

    def test_prior_start_ahead_of_cycle_clamps_duration(self) -> None:
        t = _step(True, 1, 48, _prior(AlertFlag.FIRING, 50))
        assert t.duration == 0
        assert t.flag == AlertFlag.FIRING


class TestDecay:
    def test_young_episode_always_fires(self) -> None:
        for duration in range(3):
            t = _step(True, 1, 50 + duration, _prior(AlertFlag.FIRING, 50))
            assert t.flag == AlertFlag.FIRING

    def test_fading_with_single_reason(self) -> None:
        t = _step(True, 1, 53, _prior(AlertFlag.FIRING, 50))
        assert t.flag == AlertFlag.FADING
        assert t.duration == 3
        assert t.note is not None
        assert t.note.kind == ReasonKind.FADING_NOTE
        assert str(t.note) == "fading (cycle 3)"

    def test_two_reasons_keep_firing_at_three_cycles(self) -> None:
        t = _step(True, 2, 53, _prior(AlertFlag.FIRING, 50))
        assert t.flag == AlertFlag.FIRING
        assert t.note is None

    def test_chronic_with_few_reasons(self) -> None:
        t = _step(True, 2, 55, _prior(AlertFlag.FADING, 50))
        assert t.flag == AlertFlag.CHRONIC
        assert t.duration == 5
        assert t.note is not None
        assert t.note.kind == ReasonKind.CHRONIC_NOTE
        assert str(t.note) == "chronic (normalized after 5 cycles)"

    def test_escalating_long_episode_stays_firing(self) -> None:
        t = _step(True, 4, 55, _prior(AlertFlag.FADING, 50))
        assert t.flag == AlertFlag.FIRING
        assert t.duration == 5
        assert t.note is None

    def test_chronic_persists(self) -> None:
        t = _step(True, 1, 70, _prior(AlertFlag.CHRONIC, 50))
        assert t.flag == AlertFlag.CHRONIC
        assert t.duration == 20


class TestQuietCycle:
    @pytest.mark.parametrize("flag", [AlertFlag.FIRING, AlertFlag.FADING])
    def test_open_episode_resolves(self, flag: AlertFlag) -> None:
        t = _step(False, 0, 56, _prior(flag, 50))
        assert t.flag == AlertFlag.RESOLVED
        assert (t.start_cycle, t.duration) == (0, 0)
        assert t.note is not None
        assert t.note.kind == ReasonKind.RESOLVED_NOTE
        assert str(t.note) == "resolved this cycle"

    def test_chronic_episode_resolves_with_its_own_note(self) -> None:
        t = _step(False, 0, 80, _prior(AlertFlag.CHRONIC, 50))
        assert t.flag == AlertFlag.RESOLVED
        assert t.note is not None
        assert str(t.note) == "chronic condition resolved"

    def test_resolved_becomes_none(self) -> None:
        t = _step(False, 0, 57, _prior(AlertFlag.RESOLVED))
        assert t.flag == AlertFlag.NONE
        assert t.note is None

    def test_none_stays_none(self) -> None:
        t = _step(False, 0, 10, _prior())
        assert (t.flag, t.start_cycle, t.duration, t.note) == (AlertFlag.NONE, 0, 0, None)


class TestConfig:
    def test_custom_timings(self) -> None:
        machine = HysteresisMachine(HysteresisConfig(fading_after=1, chronic_after=2))
        assert _step(True, 1, 51, _prior(AlertFlag.FIRING, 50), machine).flag == AlertFlag.FADING
        assert _step(True, 1, 52, _prior(AlertFlag.FADING, 50), machine).flag == AlertFlag.CHRONIC

    def test_custom_reason_limits(self) -> None:
        machine = HysteresisMachine(HysteresisConfig(fading_max_reasons=4))
        assert _step(True, 3, 53, _prior(AlertFlag.FIRING, 50), machine).flag == AlertFlag.FADING
