"""Shared pydantic base for wire-facing domain models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Frozen model with camelCase wire names and null-as-absent semantics.

    Producers routinely emit ``null`` for fields they could not compute.
    Those keys are dropped before validation so the field default applies,
    exactly as if the key had never been sent.  Unknown keys are ignored.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def to_wire(self) -> dict[str, Any]:
        """JSON-safe dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
