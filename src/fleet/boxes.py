"""
Box Requests.

Producers order empty boxes for a boat, delivered in a two-hour slot.
Requesting more boxes than the boat has free capacity is advisory: the
request is refused with a warning, never with an exception.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from selal.config import settings
from selal.repositories import FleetRepository

logger = logging.getLogger(__name__)


BOX_TYPES = {
    "standard": {"name": "Medium Box", "capacity": "20kg"},
    "premium": {"name": "Large Box", "capacity": "25kg"},
}

TIME_SLOTS = [f"{h:02d}:00 - {h + 2:02d}:00" for h in range(6, 24, 2)]


class BoxRequestForm(BaseModel):
    """Box order for one boat."""

    boat_id: str = Field(min_length=1)
    box_type: Literal["standard", "premium"] = "standard"
    quantity: int = Field(ge=1, default=1)
    delivery_address: str = Field(min_length=1)
    delivery_date: date
    delivery_time: str
    special_instructions: str = ""

    @field_validator("delivery_time")
    @classmethod
    def validate_delivery_time(cls, v: str) -> str:
        if v not in TIME_SLOTS:
            raise ValueError("Please select a delivery time")
        return v


@dataclass
class QuantityCheck:
    ok: bool
    available_capacity: int | None = None
    message: str = ""


@dataclass
class BoxRequestResult:
    accepted: bool
    reference: str | None = None
    subtotal: float = 0.0
    total: float = 0.0
    warnings: list[str] = field(default_factory=list)


def calculate_total(box_type: str, quantity: int, unit_price: float | None = None) -> dict:
    """Order totals. Both box types cost the same per box."""
    if box_type not in BOX_TYPES:
        raise ValueError(f"Unknown box type: {box_type}")
    price = settings.box_unit_price if unit_price is None else unit_price
    subtotal = price * quantity
    return {"subtotal": subtotal, "total": subtotal}


def check_quantity(boat: dict | None, quantity: int) -> QuantityCheck:
    """Compare the quantity with the boat's free capacity. Unknown boats pass."""
    if boat is None:
        return QuantityCheck(ok=True)
    available = boat.get("available_capacity") or 0
    if quantity <= available:
        return QuantityCheck(ok=True, available_capacity=available)
    return QuantityCheck(
        ok=False,
        available_capacity=available,
        message=f"Quantity exceeds available capacity ({available} boxes)",
    )


class BoxRequestService:
    """Validates box orders against the fleet and submits them."""

    def __init__(self, repository: FleetRepository) -> None:
        self.repository = repository

    def submit(self, form: BoxRequestForm) -> BoxRequestResult:
        boat = self.repository.get_boat(form.boat_id)
        totals = calculate_total(form.box_type, form.quantity)

        check = check_quantity(boat, form.quantity)
        if not check.ok:
            logger.info(f"Box request held back: {check.message}")
            return BoxRequestResult(accepted=False, warnings=[check.message], **totals)

        reference = self.repository.submit_box_request(form.model_dump(mode="json"))
        return BoxRequestResult(accepted=True, reference=reference, **totals)
