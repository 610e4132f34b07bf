"""Rover model."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from marsdash.models._base import DashBaseModel, safe_int


class Rover(DashBaseModel):
    """A rover as listed by the ``/rovers`` endpoint."""

    name: str
    """Rover name (e.g. ``"Curiosity"``). Stable identifier for actions."""
    launch_date: str = ""
    landing_date: str = ""
    status: str = ""
    max_date: str = ""
    """Most recent earth date with photos; used to query the gallery."""
    id: int | None = None
    max_sol: int | None = None
    total_photos: int | None = None

    @field_validator("id", "max_sol", "total_photos", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("name", "launch_date", "landing_date", "status", "max_date", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def as_selection(self, *, loading: bool) -> dict[str, Any]:
        """Plain mapping stored under ``selectedRover`` in the application state."""
        return {
            "name": self.name,
            "launch_date": self.launch_date,
            "landing_date": self.landing_date,
            "status": self.status,
            "max_date": self.max_date,
            "loading": loading,
        }
