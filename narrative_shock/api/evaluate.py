"""REST endpoints for shock evaluation.

Paths:
    POST /api/evaluate                                  stateless, caller carries state
    POST /api/environments/{environment_id}/cycles     server-side state carry
    GET  /api/environments/{environment_id}/state      latest carried state
    DELETE /api/environments/{environment_id}          stop tracking

Bodies are accepted as raw JSON and validated here, so a malformed field
is answered with 400 naming the field, never with a 500.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException

from narrative_shock.core.monitor import EvaluationResult, ShockMonitor
from narrative_shock.core.validation import MalformedInputError, parse_snapshot
from narrative_shock.explain.formatter import AlertFormatter
from narrative_shock.store.cycle_store import CycleOrderError, CycleStateStore

logger = logging.getLogger(__name__)


def _response(result: EvaluationResult, cycle: int) -> dict[str, Any]:
    return {
        "alert": result.alert.to_wire(),
        "next": result.next_state.to_wire(),
        "human_readable": AlertFormatter.format_plain(result.alert, cycle=cycle),
    }


def create_evaluate_router(
    monitor: ShockMonitor,
    store: CycleStateStore,
) -> APIRouter:
    """Factory that wires the evaluation endpoints to a monitor and store."""

    router = APIRouter(prefix="/api", tags=["shock"])

    @router.post("/evaluate")
    async def evaluate(body: Any = Body(...)) -> dict[str, Any]:
        """Evaluate one cycle.  Body: ``{"snapshot": {...}, "prior": {...} | null}``."""
        if not isinstance(body, dict):
            raise HTTPException(
                status_code=400,
                detail={"field": "body", "message": "expected an object"},
            )
        try:
            snapshot = body.get("snapshot")
            result = monitor.evaluate_payload(
                {} if snapshot is None else snapshot,
                body.get("prior"),
            )
        except MalformedInputError as exc:
            raise HTTPException(status_code=400, detail=exc.to_dict()) from exc
        return _response(result, result.next_state.cycle_number)

    @router.post("/environments/{environment_id}/cycles")
    async def advance(environment_id: str, body: Any = Body(...)) -> dict[str, Any]:
        """Evaluate the next cycle for an environment using stored prior state."""
        try:
            snapshot = parse_snapshot(body)
        except MalformedInputError as exc:
            raise HTTPException(status_code=400, detail=exc.to_dict()) from exc

        try:
            result = await store.advance(environment_id, snapshot)
        except CycleOrderError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _response(result, snapshot.cycle)

    @router.get("/environments/{environment_id}/state")
    async def get_state(environment_id: str) -> dict[str, Any]:
        state = await store.get(environment_id)
        if state is None:
            raise HTTPException(status_code=404, detail=f"Environment {environment_id} not found")
        return state.to_wire()

    @router.delete("/environments/{environment_id}")
    async def forget(environment_id: str) -> dict[str, Any]:
        if not await store.forget(environment_id):
            raise HTTPException(status_code=404, detail=f"Environment {environment_id} not found")
        logger.info("Stopped tracking environment %s", environment_id)
        return {"status": "forgotten", "environment_id": environment_id}

    return router
