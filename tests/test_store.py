"""Tests for the CycleStateStore."""

import asyncio

import pytest

from narrative_shock.domain.enums import AlertFlag
from narrative_shock.domain.snapshot import SignalSnapshot
from narrative_shock.domain.state import CycleState
from narrative_shock.store.cycle_store import CycleOrderError, CycleStateStore

from tests.test_snapshot import _quiet_snapshot


@pytest.fixture
def store() -> CycleStateStore:
    return CycleStateStore()


def _snap(cycle: int, **kw) -> SignalSnapshot:
    return SignalSnapshot.model_validate(_quiet_snapshot(cycle=cycle, **kw))


_STRAINED = {"demographicDrift": {"employmentRate": 0.8}}


class TestCycleStateStore:
    @pytest.mark.asyncio
    async def test_advance_stores_next_state(self, store: CycleStateStore) -> None:
        result = await store.advance("oakland", _snap(50, **_STRAINED))
        stored = await store.get("oakland")
        assert stored == result.next_state
        assert stored.alert_flag == AlertFlag.FIRING

    @pytest.mark.asyncio
    async def test_state_carries_between_cycles(self, store: CycleStateStore) -> None:
        for cycle in range(50, 53):
            await store.advance("oakland", _snap(cycle, **_STRAINED))
        result = await store.advance("oakland", _snap(53, **_STRAINED))
        assert result.alert.flag == AlertFlag.FADING
        assert result.alert.start_cycle == 50
        assert result.alert.duration == 3

    @pytest.mark.asyncio
    async def test_repeated_cycle_rejected(self, store: CycleStateStore) -> None:
        await store.advance("oakland", _snap(50))
        with pytest.raises(CycleOrderError) as exc_info:
            await store.advance("oakland", _snap(50))
        assert exc_info.value.stored_cycle == 50
        assert exc_info.value.incoming_cycle == 50

    @pytest.mark.asyncio
    async def test_earlier_cycle_rejected_without_touching_state(self, store: CycleStateStore) -> None:
        await store.advance("oakland", _snap(50, **_STRAINED))
        before = await store.get("oakland")
        with pytest.raises(CycleOrderError):
            await store.advance("oakland", _snap(49))
        assert await store.get("oakland") == before

    @pytest.mark.asyncio
    async def test_cycles_may_skip_ahead(self, store: CycleStateStore) -> None:
        await store.advance("oakland", _snap(50, **_STRAINED))
        result = await store.advance("oakland", _snap(60, **_STRAINED))
        assert result.alert.duration == 10

    @pytest.mark.asyncio
    async def test_environments_are_independent(self, store: CycleStateStore) -> None:
        await store.advance("oakland", _snap(50, **_STRAINED))
        result = await store.advance("fresno", _snap(10))
        assert result.alert.flag == AlertFlag.NONE
        assert (await store.get("oakland")).alert_flag == AlertFlag.FIRING
        assert await store.environment_count() == 2

    @pytest.mark.asyncio
    async def test_unknown_environment(self, store: CycleStateStore) -> None:
        assert await store.get("nowhere") is None

    @pytest.mark.asyncio
    async def test_unknown_lookups_leave_no_locks(self, store: CycleStateStore) -> None:
        for i in range(100):
            assert await store.get(f"ghost-{i}") is None
        assert store._locks == {}

    @pytest.mark.asyncio
    async def test_locks_track_only_known_environments(self, store: CycleStateStore) -> None:
        await store.advance("oakland", _snap(50))
        await store.get("oakland")
        await store.get("fresno")
        assert set(store._locks) == {"oakland"}
        await store.forget("oakland")
        assert store._locks == {}

    @pytest.mark.asyncio
    async def test_put_seeds_prior_state(self, store: CycleStateStore) -> None:
        seeded = CycleState(cycle_number=55, alert_flag=AlertFlag.FADING, alert_start_cycle=50)
        await store.put("oakland", seeded)
        result = await store.advance("oakland", _snap(56))
        assert result.alert.flag == AlertFlag.RESOLVED

    @pytest.mark.asyncio
    async def test_forget(self, store: CycleStateStore) -> None:
        await store.advance("oakland", _snap(50))
        assert await store.forget("oakland") is True
        assert await store.get("oakland") is None
        assert await store.forget("oakland") is False
        assert await store.environment_count() == 0

    @pytest.mark.asyncio
    async def test_forgotten_environment_restarts_cleanly(self, store: CycleStateStore) -> None:
        await store.advance("oakland", _snap(50))
        await store.forget("oakland")
        result = await store.advance("oakland", _snap(5))
        assert result.next_state.cycle_number == 5

    @pytest.mark.asyncio
    async def test_concurrent_advances_for_one_environment_serialise(self, store: CycleStateStore) -> None:
        await store.advance("oakland", _snap(1))
        outcomes = await asyncio.gather(
            store.advance("oakland", _snap(2)),
            store.advance("oakland", _snap(2)),
            return_exceptions=True,
        )
        errors = [o for o in outcomes if isinstance(o, CycleOrderError)]
        assert len(errors) == 1
        assert (await store.get("oakland")).cycle_number == 2
