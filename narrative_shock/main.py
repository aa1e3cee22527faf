"""narrative-shock: per-cycle shock detection with alert hysteresis.

This is the application entry point.  It wires the ShockMonitor, the
CycleStateStore and the REST endpoints together.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from narrative_shock.api.evaluate import create_evaluate_router
from narrative_shock.config import settings
from narrative_shock.core.hysteresis import HysteresisConfig, HysteresisMachine
from narrative_shock.core.monitor import ShockMonitor
from narrative_shock.core.thresholds import BaseThresholds, ThresholdEngine
from narrative_shock.store.cycle_store import CycleStateStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

# ── Monitor ──────────────────────────────────────────────────────────────────

monitor = ShockMonitor(
    thresholds=ThresholdEngine(
        BaseThresholds(
            event_spike=settings.base_event_spike_threshold,
            chaos_spike=settings.base_chaos_spike_threshold,
            chaos_saturation=settings.base_chaos_saturation_threshold,
            migration=settings.base_migration_threshold,
        )
    ),
    hysteresis=HysteresisMachine(
        HysteresisConfig(
            fading_after=settings.fading_after_cycles,
            chronic_after=settings.chronic_after_cycles,
            fading_max_reasons=settings.fading_max_reasons,
            chronic_max_reasons=settings.chronic_max_reasons,
        )
    ),
)

# ── State ────────────────────────────────────────────────────────────────────

store = CycleStateStore(monitor)

# ── App ──────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    description="Narrative shock detection and alert lifecycle",
    version="2.3.0",
    debug=settings.debug,
)

# ── Routes ───────────────────────────────────────────────────────────────────

app.include_router(create_evaluate_router(monitor, store))


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/health")
async def health() -> dict:
    return {
        "status": "ok",
        "tracked_environments": await store.environment_count(),
        "base_thresholds": {
            "event_spike": settings.base_event_spike_threshold,
            "chaos_spike": settings.base_chaos_spike_threshold,
            "chaos_saturation": settings.base_chaos_saturation_threshold,
            "migration": settings.base_migration_threshold,
        },
    }
