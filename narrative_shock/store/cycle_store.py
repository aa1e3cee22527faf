"""In-memory per-environment cycle state with async-safe, ordered access.

Design notes:
    - The monitor itself is pure; this store is the optional state carry
      used by the HTTP host when callers do not persist state themselves.
    - Invocation N's output is invocation N+1's input, so evaluations for
      one environment are serialised behind that environment's own
      asyncio.Lock.  Different environments never contend.
    - A snapshot whose cycle is not strictly after the stored cycle is
      rejected rather than silently re-evaluated.
    - Only the latest CycleState is kept; there is no history.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from narrative_shock.core.monitor import EvaluationResult, ShockMonitor
from narrative_shock.domain.snapshot import SignalSnapshot
from narrative_shock.domain.state import CycleState

logger = logging.getLogger(__name__)


class CycleOrderError(Exception):
    """Raised when a snapshot would evaluate an environment out of order."""

    def __init__(self, environment_id: str, stored_cycle: int, incoming_cycle: int) -> None:
        self.environment_id = environment_id
        self.stored_cycle = stored_cycle
        self.incoming_cycle = incoming_cycle
        super().__init__(
            f"Environment '{environment_id}' is at cycle {stored_cycle}; "
            f"cannot evaluate cycle {incoming_cycle}"
        )


class CycleStateStore:
    """Async-safe store of the latest CycleState per environment.

    Usage:
        store = CycleStateStore(ShockMonitor())
        result = await store.advance("oakland", snapshot)
    """

    def __init__(self, monitor: ShockMonitor | None = None) -> None:
        self._monitor = monitor or ShockMonitor()
        self._states: dict[str, CycleState] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._registry_lock = asyncio.Lock()

    # ── Public API ───────────────────────────────────────────────────────

    async def advance(self, environment_id: str, snapshot: SignalSnapshot) -> EvaluationResult:
        """Evaluate the next cycle for an environment and store its state.

        Raises:
            CycleOrderError: If ``snapshot.cycle`` is not after the stored cycle.
        """
        lock = await self._lock_for(environment_id)
        async with lock:
            prior = self._states.get(environment_id)
            if prior is not None and snapshot.cycle <= prior.cycle_number:
                logger.warning(
                    "Out-of-order cycle for %s: stored=%d incoming=%d",
                    environment_id, prior.cycle_number, snapshot.cycle,
                )
                raise CycleOrderError(environment_id, prior.cycle_number, snapshot.cycle)

            result = self._monitor.evaluate(snapshot, prior)
            if prior is None:
                logger.info("Tracking new environment %s from cycle %d", environment_id, snapshot.cycle)
            self._states[environment_id] = result.next_state
            return result

    async def get(self, environment_id: str) -> Optional[CycleState]:
        """Return the stored state, or None for an unknown environment.

        States are replaced whole, never mutated, so a read needs only the
        registry lock and leaves no per-environment lock behind.
        """
        async with self._registry_lock:
            return self._states.get(environment_id)

    async def put(self, environment_id: str, state: CycleState) -> None:
        """Seed or overwrite an environment's state (e.g. restored from disk)."""
        lock = await self._lock_for(environment_id)
        async with lock:
            self._states[environment_id] = state

    async def forget(self, environment_id: str) -> bool:
        """Drop an environment.  Returns True if it was tracked."""
        async with self._registry_lock:
            self._locks.pop(environment_id, None)
            return self._states.pop(environment_id, None) is not None

    async def environment_count(self) -> int:
        async with self._registry_lock:
            return len(self._states)

    # ── Internals ────────────────────────────────────────────────────────

    async def _lock_for(self, environment_id: str) -> asyncio.Lock:
        async with self._registry_lock:
            lock = self._locks.get(environment_id)
            if lock is None:
                lock = asyncio.Lock()
                self._locks[environment_id] = lock
            return lock
