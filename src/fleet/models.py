"""
Fleet Models.

Boats as the producer dashboard shows them, the add/edit boat forms, and the
summary figures above the boat list.
"""

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from registration.forms import MAX_BOATS, MIN_BOATS, BoatForm, required_text

BOX_WEIGHT_KG = {"20kg": 20, "25kg": 25}

# Utilization thresholds, in percent
HIGH_UTILIZATION = 80
MEDIUM_UTILIZATION = 60

DEFAULT_FLEET_BOAT = {
    "name": "",
    "registration_number": "",
    "captain_name": "",
    "capacity": 50,
    "box_size": "20kg",
    "status": "active",
    "photo": None,
    "last_maintenance_date": None,
}

EDITABLE_FIELDS = tuple(DEFAULT_FLEET_BOAT)


class BoatDetails(BoatForm):
    """Fields a producer fills in when adding or editing a boat."""

    captain_name: str
    status: Literal["active", "maintenance", "retired"] = "active"
    photo: str | None = None
    last_maintenance_date: str | None = None

    @field_validator("captain_name", mode="before")
    @classmethod
    def validate_captain_name(cls, v: Any) -> str:
        return required_text(v, "Captain name is required")

    @field_validator("last_maintenance_date", mode="before")
    @classmethod
    def validate_last_maintenance_date(cls, v: Any) -> str | None:
        if v is None or str(v).strip() == "":
            return None
        try:
            return date.fromisoformat(str(v).strip()).isoformat()
        except ValueError:
            raise ValueError("Last maintenance date must be a valid date (YYYY-MM-DD)")


class Boat(BoatDetails):
    """A registered boat."""

    id: str
    current_utilization: float | None = None
    total_boxes_used: int | None = None
    available_capacity: int | None = None

    @property
    def carrying_weight_kg(self) -> int:
        """Capacity expressed in kilograms of fish."""
        return self.capacity * BOX_WEIGHT_KG[self.box_size]


class AddBoatsForm(BaseModel):
    """Several new boats at once; the count drives the list length."""

    number_of_boats: int = Field(ge=MIN_BOATS, le=MAX_BOATS)
    boats: list[BoatDetails]

    @model_validator(mode="after")
    def validate_boat_count(self) -> "AddBoatsForm":
        if len(self.boats) != self.number_of_boats:
            raise ValueError(f"Expected {self.number_of_boats} boat(s), got {len(self.boats)}")
        return self


def utilization_level(utilization: float) -> str:
    """'high' from 80%, 'medium' from 60%, otherwise 'low'."""
    if utilization >= HIGH_UTILIZATION:
        return "high"
    if utilization >= MEDIUM_UTILIZATION:
        return "medium"
    return "low"


def fleet_summary(boats: list[Boat]) -> dict:
    """Totals for the summary cards: boats, active boats, capacity, average utilization."""
    if not boats:
        return {"total_boats": 0, "active_boats": 0, "total_capacity": 0, "average_utilization": 0.0}

    utilization = sum(b.current_utilization or 0 for b in boats) / len(boats)
    return {
        "total_boats": len(boats),
        "active_boats": sum(1 for b in boats if b.status == "active"),
        "total_capacity": sum(b.capacity for b in boats),
        "average_utilization": round(utilization, 1),
    }
