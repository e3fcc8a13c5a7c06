"""
Selal Registration Wizard.

Multi-step sign-up flow with derived subscription pricing.

Steps:
1. User type - producer, wholesaler, logistics partner or customer
2. Personal information - followed by (mocked) OTP verification
3. Subscription requirements - fleet and billing cycle, producers only
4. Payment - order summary, payment details and receipt
5. Success
"""

from .draft import DraftAccumulator
from .pricing import BASE_RATE, BillingCycle, PricingQuote, calculate_pricing
from .session import RegistrationWizard, WizardClosedError
from .state import AccountType, StepId, StepSequencer, WizardStatus, steps_for

__all__ = [
    "AccountType",
    "BASE_RATE",
    "BillingCycle",
    "DraftAccumulator",
    "PricingQuote",
    "RegistrationWizard",
    "StepId",
    "StepSequencer",
    "WizardClosedError",
    "WizardStatus",
    "calculate_pricing",
    "steps_for",
]
