"""
Subscription Pricing.

Pure functions that turn a fleet configuration and a billing cycle into a
PricingQuote. Nothing here is cached: callers recompute the quote after every
change to the boats or the plan.

Box size does not affect the rate. 20kg and 25kg boxes bill identically
(fixed product decision: no price difference between box sizes).
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping


# Currency units per box per month
BASE_RATE = 2.5


class BillingCycle(str, Enum):
    """Subscription billing cycles."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"

    @property
    def discount(self) -> float:
        return PLAN_DISCOUNTS[self]

    @property
    def duration_months(self) -> int:
        return PLAN_DURATION_MONTHS[self]


PLAN_DISCOUNTS: dict[BillingCycle, float] = {
    BillingCycle.MONTHLY: 0.0,
    BillingCycle.QUARTERLY: 0.05,
    BillingCycle.ANNUAL: 0.15,
}

PLAN_DURATION_MONTHS: dict[BillingCycle, int] = {
    BillingCycle.MONTHLY: 1,
    BillingCycle.QUARTERLY: 3,
    BillingCycle.ANNUAL: 12,
}


@dataclass(frozen=True)
class PricingQuote:
    """
    Derived pricing for a fleet and a selected billing cycle.

    `plan_costs` holds the full-cycle charge for every cycle, so a plan picker
    can show all three side by side. The displayed total is always
    `plan_costs[plan]`; `final_monthly_cost` is the discounted
    monthly-equivalent and is informational only.

    Quotes are immutable: `plan_costs` is wrapped in a read-only mapping.
    """
    plan: BillingCycle
    total_capacity: int
    monthly_base_cost: float
    plan_costs: Mapping[BillingCycle, float] = field(default_factory=dict, hash=False)
    discount: float = 0.0
    final_monthly_cost: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "plan_costs", MappingProxyType(dict(self.plan_costs)))

    @property
    def total(self) -> float:
        """Full-cycle charge for the selected plan."""
        return self.plan_costs[self.plan]

    def to_dict(self) -> dict:
        """Serialize for API responses."""
        return {
            "plan": self.plan.value,
            "total_capacity": self.total_capacity,
            "monthly_base_cost": self.monthly_base_cost,
            "plan_costs": {c.value: cost for c, cost in self.plan_costs.items()},
            "discount": self.discount,
            "final_monthly_cost": self.final_monthly_cost,
            "total": self.total,
        }


def _capacity_of(boat: Any) -> int:
    # Accepts BoatForm models as well as plain dicts from a draft snapshot
    if isinstance(boat, dict):
        return int(boat.get("capacity", 0) or 0)
    return int(getattr(boat, "capacity", 0) or 0)


def total_capacity(boats: Iterable[Any]) -> int:
    """Sum of boat capacities, in boxes."""
    return sum(_capacity_of(b) for b in boats)


def cycle_cost(monthly_base_cost: float, cycle: BillingCycle) -> float:
    """Full-cycle cost: discount applied first, then multiplied by duration."""
    discounted = monthly_base_cost * (1 - cycle.discount)
    return discounted * cycle.duration_months


def calculate_pricing(boats: Iterable[Any], plan: BillingCycle | str) -> PricingQuote:
    """
    Compute the subscription quote for a fleet.

    Args:
        boats: BoatForm instances or dicts with a `capacity` key
        plan: Selected billing cycle (enum or its string value)

    Returns:
        PricingQuote. An empty fleet yields zero capacity and zero costs.
    """
    plan = BillingCycle(plan)

    capacity = total_capacity(boats)
    monthly_base_cost = capacity * BASE_RATE

    plan_costs = {cycle: cycle_cost(monthly_base_cost, cycle) for cycle in BillingCycle}

    return PricingQuote(
        plan=plan,
        total_capacity=capacity,
        monthly_base_cost=monthly_base_cost,
        plan_costs=plan_costs,
        discount=plan.discount,
        final_monthly_cost=monthly_base_cost * (1 - plan.discount),
    )


def format_amount(amount: float, currency: str = "EGP") -> str:
    """Format an amount for display, e.g. 'EGP 3825.00'."""
    return f"{currency} {amount:.2f}"


def discount_label(cycle: BillingCycle) -> str:
    """Badge text for a cycle's discount ('5% OFF'), empty when none."""
    if not cycle.discount:
        return ""
    return f"{round(cycle.discount * 100)}% OFF"
