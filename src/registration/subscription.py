"""
Fleet Editor for the Subscription Requirements step.

Holds the in-progress fleet and plan while the producer edits them, and
recomputes the pricing quote after every change. The boats list always has
exactly `number_of_boats` entries.
"""

import logging
from typing import Any, Mapping

from .forms import DEFAULT_BOAT, MAX_BOATS, MIN_BOATS, capacity_hints, resize_boats
from .pricing import BillingCycle, PricingQuote, calculate_pricing

logger = logging.getLogger(__name__)

BOAT_FIELDS = set(DEFAULT_BOAT)


class FleetEditor:
    """Editable fleet + billing cycle with a live quote."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        initial = dict(initial or {})
        self.number_of_boats: int = int(initial.get("number_of_boats", MIN_BOATS))
        self.boats: list[dict] = resize_boats(
            list(initial.get("boats") or [DEFAULT_BOAT]), self.number_of_boats
        )
        self.plan = BillingCycle(initial.get("subscription_plan", BillingCycle.MONTHLY))
        self._quote = calculate_pricing(self.boats, self.plan)

    @property
    def quote(self) -> PricingQuote:
        """Quote for the current fleet and plan."""
        return self._quote

    def _recompute(self) -> None:
        self._quote = calculate_pricing(self.boats, self.plan)

    def set_number_of_boats(self, count: int) -> None:
        """Change the boat count, padding or truncating the boats list."""
        count = int(count)
        if not MIN_BOATS <= count <= MAX_BOATS:
            raise ValueError(f"Number of boats must be between {MIN_BOATS} and {MAX_BOATS}")
        if count != self.number_of_boats:
            logger.debug(f"Fleet resized {self.number_of_boats} -> {count}")
        self.number_of_boats = count
        self.boats = resize_boats(self.boats, count)
        self._recompute()

    def update_boat(self, index: int, **fields: Any) -> None:
        """Edit fields of one boat (name, registration_number, capacity, box_size)."""
        unknown = set(fields) - BOAT_FIELDS
        if unknown:
            raise ValueError(f"Unknown boat fields: {sorted(unknown)}")
        self.boats[index].update(fields)
        self._recompute()

    def set_plan(self, plan: BillingCycle | str) -> None:
        self.plan = BillingCycle(plan)
        self._recompute()

    def hints(self) -> list[str]:
        return capacity_hints(self.boats)

    def to_payload(self) -> dict:
        """Form data for the subscription step (still to be validated)."""
        return {
            "number_of_boats": self.number_of_boats,
            "boats": [dict(b) for b in self.boats],
            "subscription_plan": self.plan.value,
        }
