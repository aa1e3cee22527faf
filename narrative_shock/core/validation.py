"""Boundary validation: raw mappings in, validated domain models out.

Missing data is never an error; it takes the documented default.  Data
that is present but has the wrong shape (a string where a list belongs,
an unknown enum label, a negative count) is a caller contract violation
and is rejected before any evaluation happens.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, TypeVar

from pydantic import ValidationError

from narrative_shock.domain.base import WireModel
from narrative_shock.domain.snapshot import SignalSnapshot
from narrative_shock.domain.state import CycleState

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=WireModel)


class MalformedInputError(ValueError):
    """Raised when a present field has the wrong shape.

    Attributes:
        field: Dotted path of the first offending field (wire names).
        message: Validator message for that field.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"Malformed input at '{field}': {message}")

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


def _first_error(root: str, exc: ValidationError) -> MalformedInputError:
    err = exc.errors()[0]
    path = ".".join(str(p) for p in (root, *err.get("loc", ())))
    return MalformedInputError(path, err.get("msg", "invalid value"))


def _parse(model: type[M], raw: Any, root: str) -> M:
    if not isinstance(raw, Mapping):
        raise MalformedInputError(root, f"expected an object, got {type(raw).__name__}")
    try:
        return model.model_validate(dict(raw))
    except ValidationError as exc:
        error = _first_error(root, exc)
        logger.warning("Rejected %s payload: %s", root, error)
        raise error from exc


def parse_snapshot(raw: Any) -> SignalSnapshot:
    """Validate a raw snapshot mapping.

    Raises:
        MalformedInputError: If any present field has the wrong shape.
    """
    return _parse(SignalSnapshot, raw, "snapshot")


def parse_prior(raw: Optional[Any]) -> CycleState:
    """Validate a raw prior-state mapping.  ``None`` means first-ever cycle."""
    if raw is None:
        return CycleState()
    return _parse(CycleState, raw, "prior")
