"""
Registration Payload.

Everything derived from a draft snapshot: the payment step's order summary
and the final registration record handed to the repository on success.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

from .pricing import BillingCycle, PricingQuote, calculate_pricing
from .state import AccountType, StepId


@dataclass
class PaymentSummary:
    """Order summary shown on the payment step."""
    subscription_plan: str | None
    total_boats: int
    total_capacity: int
    total_amount: float
    discount: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RegistrationPayload:
    """
    Complete output of the sign-up wizard.

    Subscription fields are only filled for fish producers.
    """
    account_type: str = ""
    personal_information: dict = field(default_factory=dict)
    subscription: dict | None = None
    pricing: dict | None = None
    payment: dict = field(default_factory=dict)
    registration_version: str = "1.0"

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "RegistrationPayload":
        return cls(**data)


def _step(snapshot: Mapping[str, Mapping[str, Any]], step: StepId) -> dict:
    return dict(snapshot.get(step.value, {}))


def account_type_of(snapshot: Mapping[str, Mapping[str, Any]]) -> str | None:
    return _step(snapshot, StepId.USER_TYPE).get("user_type")


def is_producer(snapshot: Mapping[str, Mapping[str, Any]]) -> bool:
    return account_type_of(snapshot) == AccountType.PRODUCER.value


def quote_from_draft(snapshot: Mapping[str, Mapping[str, Any]]) -> PricingQuote | None:
    """Quote for the fleet stored in the draft, or None when there is no fleet step."""
    if not is_producer(snapshot):
        return None
    subscription = _step(snapshot, StepId.SUBSCRIPTION_REQUIREMENTS)
    if not subscription:
        return None
    return calculate_pricing(
        subscription.get("boats", []),
        subscription.get("subscription_plan", BillingCycle.MONTHLY),
    )


def build_payment_summary(snapshot: Mapping[str, Mapping[str, Any]]) -> PaymentSummary:
    """
    Order summary for the payment step.

    The total is the full-cycle charge of the selected plan. Accounts without
    a fleet get an empty summary.
    """
    quote = quote_from_draft(snapshot)
    if quote is None:
        return PaymentSummary(
            subscription_plan=None,
            total_boats=0,
            total_capacity=0,
            total_amount=0.0,
        )

    subscription = _step(snapshot, StepId.SUBSCRIPTION_REQUIREMENTS)
    return PaymentSummary(
        subscription_plan=quote.plan.value,
        total_boats=len(subscription.get("boats", [])),
        total_capacity=quote.total_capacity,
        total_amount=quote.total,
        discount=quote.discount,
    )


def build_payload_from_draft(snapshot: Mapping[str, Mapping[str, Any]]) -> RegistrationPayload:
    """
    Assemble the final registration record from a draft snapshot.

    Called when the wizard reaches the success step.
    """
    payload = RegistrationPayload(
        account_type=account_type_of(snapshot) or "",
        personal_information=_step(snapshot, StepId.PERSONAL_INFO),
        payment=_step(snapshot, StepId.PAYMENT),
    )

    # Subscription data left over from an earlier producer pass is ignored
    quote = quote_from_draft(snapshot)
    if quote is not None:
        payload.subscription = _step(snapshot, StepId.SUBSCRIPTION_REQUIREMENTS)
        payload.pricing = quote.to_dict()

    return payload


def success_message(account_type: str | None) -> str:
    if account_type == AccountType.PRODUCER.value:
        return (
            "Your account has been created and is waiting for admin confirmation. "
            "You will receive a notification once your subscription is activated."
        )
    return "Your account has been created successfully. You can now start using our platform."
