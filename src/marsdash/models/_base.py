"""Base model for rover API payloads.

Every response model inherits from :class:`DashBaseModel` which provides:

* frozen instances, so a model held by a state snapshot never changes.
* A ``model_validator(mode="before")`` that drops ``None`` and blank
  strings so the field default is used instead.
* A read-only ``raw`` mapping that captures the original payload.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from marsdash.state.store import freeze


def safe_int(value: Any) -> int | None:
    """Convert *value* to ``int``, returning ``None`` on failure."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return int(result)


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


class DashBaseModel(BaseModel):
    """Base for rover API models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    _stash_raw: ClassVar[bool] = True

    raw: Mapping[str, Any] = Field(default_factory=lambda: MappingProxyType({}))
    """Original API payload, frozen like the state snapshots."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip empty values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = DashBaseModel._clean_dict(values)
        # Keep an explicitly provided raw (e.g. when re-parsing a dumped model).
        if "raw" not in values and cls._stash_raw:
            cleaned["raw"] = dict(values)
        return cleaned

    @field_validator("raw", mode="after")
    @classmethod
    def _freeze_raw(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return freeze(value)

    @field_serializer("raw")
    def _dump_raw(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return _thaw(value)
