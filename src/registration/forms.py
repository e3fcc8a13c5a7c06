"""
Registration Forms - per-step validation schemas.

Each wizard step has one pydantic model. `validate_step()` runs the model for
the active step and reports field-level errors; only a valid result's payload
is ever handed to the sequencer.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from selal.config import settings

from .pricing import BillingCycle, discount_label
from .state import AccountType, StepId

logger = logging.getLogger(__name__)


# =============================================================================
# Options
# =============================================================================

USER_TYPES = [
    {"value": AccountType.PRODUCER.value, "label": "Fish Producer", "description": "Boat owners and fish producers"},
    {"value": AccountType.WHOLESALER.value, "label": "Wholesaler", "description": "Fish wholesale distributors"},
    {"value": AccountType.LOGISTICS.value, "label": "Logistics Partners", "description": "Transportation and logistics providers"},
    {"value": AccountType.CUSTOMER.value, "label": "Customer", "description": "End customers and retailers"},
]

BOX_SIZES = ["20kg", "25kg"]

PAYMENT_METHODS = [
    {"value": "bank", "label": "Bank Transfer"},
    {"value": "cash", "label": "Cash"},
    {"value": "instapay", "label": "InstaPay"},
]

MIN_BOATS = 1
MAX_BOATS = 10

# Hard capacity bounds (boxes per boat)
MIN_CAPACITY = 1
MAX_CAPACITY = 1000

# Suggested range shown by entry forms; outside it is allowed but flagged
SUGGESTED_MIN_CAPACITY = 50
SUGGESTED_MAX_CAPACITY = 500

DEFAULT_BOAT = {"name": "", "registration_number": "", "capacity": 50, "box_size": "20kg"}

EGYPTIAN_PHONE = re.compile(r"^01[0-9]{9}$")
NATIONAL_ID_LENGTH = 14


def required_text(value: Any, message: str, min_length: int = 1) -> str:
    text = str(value).strip() if value is not None else ""
    if len(text) < min_length:
        raise ValueError(message)
    return text


# =============================================================================
# Step Models
# =============================================================================

class UserTypeForm(BaseModel):
    """Step 1: account type selection."""

    user_type: AccountType

    @field_validator("user_type", mode="before")
    @classmethod
    def require_user_type(cls, v: Any) -> Any:
        if not v:
            raise ValueError("Please select a user type")
        if isinstance(v, str) and v not in {t["value"] for t in USER_TYPES}:
            raise ValueError("Please select a user type")
        return v


class PersonalInformationForm(BaseModel):
    """Step 2: contact and identity details."""

    full_name: str
    phone: str
    national_id: str
    company_name: str
    agree_terms: bool = Field(default=False, validate_default=True)

    @field_validator("full_name", mode="before")
    @classmethod
    def validate_full_name(cls, v: Any) -> str:
        return required_text(v, "Full name is required", min_length=2)

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any) -> str:
        phone = str(v or "").strip()
        if not EGYPTIAN_PHONE.match(phone):
            raise ValueError("Invalid Egyptian phone number (01XXXXXXXXX)")
        return phone

    @field_validator("national_id", mode="before")
    @classmethod
    def validate_national_id(cls, v: Any) -> str:
        national_id = str(v or "").strip()
        if len(national_id) != NATIONAL_ID_LENGTH:
            raise ValueError(f"National ID must be {NATIONAL_ID_LENGTH} digits")
        return national_id

    @field_validator("company_name", mode="before")
    @classmethod
    def validate_company_name(cls, v: Any) -> str:
        return required_text(v, "Company/Boat Owner Name is required", min_length=2)

    @field_validator("agree_terms")
    @classmethod
    def must_agree(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("You must agree to the terms and conditions")
        return v


class BoatForm(BaseModel):
    """One boat in the producer's fleet."""

    name: str
    registration_number: str
    capacity: int = Field(ge=MIN_CAPACITY, le=MAX_CAPACITY, default=50)
    box_size: Literal["20kg", "25kg"] = "20kg"

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return required_text(v, "Boat name is required")

    @field_validator("registration_number", mode="before")
    @classmethod
    def validate_registration_number(cls, v: Any) -> str:
        return required_text(v, "Registration number is required")


class SubscriptionRequirementsForm(BaseModel):
    """
    Step 3 (producers only): fleet configuration and billing cycle.

    `boats` must always hold exactly `number_of_boats` entries. Editors keep
    the list in step with `resize_boats()` when the count changes.
    """

    number_of_boats: int = Field(ge=MIN_BOATS, le=MAX_BOATS, default=1)
    boats: list[BoatForm] = Field(default_factory=list)
    subscription_plan: BillingCycle = BillingCycle.MONTHLY

    @model_validator(mode="after")
    def boats_match_count(self) -> "SubscriptionRequirementsForm":
        if len(self.boats) != self.number_of_boats:
            raise ValueError(
                f"Expected {self.number_of_boats} boat(s), got {len(self.boats)}"
            )
        return self


class PaymentForm(BaseModel):
    """Step 4: payment details. The receipt is a data URL from the upload guard."""

    payment_method: Literal["bank", "cash", "instapay"] = "bank"
    payment_reference: str | None = None
    payment_date: str
    payment_receipt: str | None = None

    @field_validator("payment_date", mode="before")
    @classmethod
    def validate_payment_date(cls, v: Any) -> str:
        if isinstance(v, date):
            return v.isoformat()
        raw = required_text(v, "Payment date is required")
        try:
            return date.fromisoformat(raw).isoformat()
        except ValueError:
            raise ValueError("Payment date must be a valid date (YYYY-MM-DD)")

    @field_validator("payment_receipt")
    @classmethod
    def validate_receipt(cls, v: str | None) -> str | None:
        if v and not v.startswith("data:"):
            raise ValueError("Receipt must be an uploaded file")
        return v or None


class OtpForm(BaseModel):
    """Mocked OTP verification code."""

    otp: str

    @field_validator("otp", mode="before")
    @classmethod
    def validate_otp(cls, v: Any) -> str:
        code = str(v or "").strip()
        length = settings.otp_code_length
        if len(code) != length or not code.isdigit():
            raise ValueError(f"OTP must be {length} digits")
        return code


STEP_FORMS: dict[StepId, type[BaseModel]] = {
    StepId.USER_TYPE: UserTypeForm,
    StepId.PERSONAL_INFO: PersonalInformationForm,
    StepId.SUBSCRIPTION_REQUIREMENTS: SubscriptionRequirementsForm,
    StepId.PAYMENT: PaymentForm,
}


# =============================================================================
# Validation
# =============================================================================

@dataclass
class ValidationResult:
    """Outcome of validating one step's form data."""
    valid: bool
    errors: dict[str, str] = field(default_factory=dict)
    payload: dict = field(default_factory=dict)


def _error_path(loc: tuple) -> str:
    path = ".".join(str(part) for part in loc)
    return path or "__root__"


def _error_message(error: dict) -> str:
    msg = error.get("msg", "Invalid value")
    # Custom ValueError messages arrive prefixed by pydantic
    return msg.removeprefix("Value error, ")


def validate_form(model: type[BaseModel], data: Mapping[str, Any]) -> ValidationResult:
    """Validate `data` against `model`, collecting field-level errors."""
    try:
        form = model.model_validate(dict(data))
    except ValidationError as e:
        errors: dict[str, str] = {}
        for err in e.errors():
            errors.setdefault(_error_path(err["loc"]), _error_message(err))
        return ValidationResult(valid=False, errors=errors)

    return ValidationResult(valid=True, payload=form.model_dump(mode="json"))


def validate_step(step: StepId, data: Mapping[str, Any] | None) -> ValidationResult:
    """
    Validate form data for a wizard step.

    Never raises. The success step takes no input and always validates.
    """
    model = STEP_FORMS.get(StepId(step))
    if model is None:
        return ValidationResult(valid=True)

    result = validate_form(model, data or {})
    if not result.valid:
        logger.info(f"Step {StepId(step).value} failed validation ({len(result.errors)} errors)")
    return result


# =============================================================================
# Fleet Helpers
# =============================================================================

def resize_boats(boats: list[dict], number_of_boats: int, default: Mapping[str, Any] = DEFAULT_BOAT) -> list[dict]:
    """
    Return `boats` padded with copies of `default` or truncated from the end
    so its length equals `number_of_boats`. Existing entries are kept as they are.
    """
    count = max(0, int(number_of_boats))
    resized = [dict(b) for b in boats[:count]]
    while len(resized) < count:
        resized.append(dict(default))
    return resized


def capacity_hints(boats: list[Any]) -> list[str]:
    """Advisory notes for capacities outside the suggested range. Never blocks."""
    hints = []
    for i, boat in enumerate(boats):
        capacity = boat.get("capacity") if isinstance(boat, dict) else getattr(boat, "capacity", None)
        if capacity is None:
            continue
        if not SUGGESTED_MIN_CAPACITY <= capacity <= SUGGESTED_MAX_CAPACITY:
            hints.append(
                f"Boat {i + 1}: capacity {capacity} is outside the usual "
                f"{SUGGESTED_MIN_CAPACITY}-{SUGGESTED_MAX_CAPACITY} boxes"
            )
    return hints


# =============================================================================
# API Response Helpers
# =============================================================================

def get_form_options() -> dict:
    """
    Get all form options for frontend rendering.

    Returns dict with user types, box sizes, billing cycles (with discount
    badges), payment methods and the allowed boat-count range.
    """
    return {
        "user_types": USER_TYPES,
        "box_sizes": BOX_SIZES,
        "billing_cycles": [
            {
                "value": cycle.value,
                "discount": cycle.discount,
                "duration_months": cycle.duration_months,
                "badge": discount_label(cycle),
            }
            for cycle in BillingCycle
        ],
        "payment_methods": PAYMENT_METHODS,
        "boats": {"min": MIN_BOATS, "max": MAX_BOATS, "default": DEFAULT_BOAT},
        "capacity": {
            "min": MIN_CAPACITY,
            "max": MAX_CAPACITY,
            "suggested_min": SUGGESTED_MIN_CAPACITY,
            "suggested_max": SUGGESTED_MAX_CAPACITY,
        },
    }
