"""
Registration Wizard Session.

One `RegistrationWizard` per sign-up attempt. It validates the active step's
form, runs the mocked OTP gate after personal information, folds validated
payloads into the draft through the sequencer, and hands the finished record
to the injected repository when the success step is reached.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping

from selal.repositories import RegistrationRepository

from .draft import DraftAccumulator
from .forms import OtpForm, validate_form, validate_step
from .otp import MockOtpService, OtpService
from .payload import (
    PaymentSummary,
    build_payload_from_draft,
    build_payment_summary,
    quote_from_draft,
    success_message,
)
from .pricing import PricingQuote
from .receipts import Receipt, ReceiptSlot
from .state import StepId, StepSequencer, WizardStatus
from .subscription import FleetEditor

logger = logging.getLogger(__name__)


class WizardClosedError(RuntimeError):
    """The session was abandoned; only reset() is allowed."""


@dataclass
class StepOutcome:
    """Result of submitting the active step."""
    step: str
    advanced: bool
    current: str
    errors: dict[str, str] = field(default_factory=dict)
    otp_required: bool = False
    reference: str | None = None

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "advanced": self.advanced,
            "current": self.current,
            "errors": self.errors,
            "otp_required": self.otp_required,
            "reference": self.reference,
        }


class RegistrationWizard:
    """Facade over the sequencer, draft, OTP gate and receipt upload."""

    def __init__(
        self,
        repository: RegistrationRepository,
        otp: OtpService | None = None,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.repository = repository
        self.otp = otp or MockOtpService()
        self.draft = DraftAccumulator()
        self.sequencer = StepSequencer(self.draft)
        self.receipt = ReceiptSlot()
        self.reference: str | None = None
        self._pending_personal_info: dict | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def current(self) -> StepId:
        return self.sequencer.current

    @property
    def status(self) -> WizardStatus:
        return self.sequencer.status

    @property
    def otp_pending(self) -> bool:
        return self._pending_personal_info is not None

    def _ensure_open(self) -> None:
        if self.status == WizardStatus.ABANDONED:
            raise WizardClosedError("Registration was abandoned; start over")

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def submit(self, data: Mapping[str, Any] | None = None) -> StepOutcome:
        """
        Validate `data` for the active step and advance on success.

        Invalid data leaves the draft and the step untouched. Personal
        information is held back until the OTP is verified.
        """
        self._ensure_open()
        step = self.current

        if step == StepId.SUCCESS:
            return self._outcome(step, advanced=False)

        data = dict(data or {})
        if step == StepId.PAYMENT and not data.get("payment_receipt") and self.receipt.data_url:
            data["payment_receipt"] = self.receipt.data_url

        result = validate_step(step, data)
        if not result.valid:
            return self._outcome(step, advanced=False, errors=result.errors)

        if step == StepId.PERSONAL_INFO:
            self._pending_personal_info = result.payload
            phone = result.payload["phone"]
            # Within the cooldown the issued code stays valid
            if self.otp.seconds_until_resend(phone) == 0:
                self.otp.send_code(phone)
            return self._outcome(step, advanced=False, otp_required=True)

        return self._advance(step, result.payload)

    def verify_otp(self, code: str) -> StepOutcome:
        """Check the OTP for the pending personal information and advance."""
        self._ensure_open()
        step = self.current
        if step != StepId.PERSONAL_INFO or self._pending_personal_info is None:
            return self._outcome(step, advanced=False, errors={"otp": "No verification in progress"})

        result = validate_form(OtpForm, {"otp": code})
        if not result.valid:
            return self._outcome(step, advanced=False, otp_required=True, errors=result.errors)

        phone = self._pending_personal_info["phone"]
        self.otp.verify(phone, result.payload["otp"])

        payload, self._pending_personal_info = self._pending_personal_info, None
        return self._advance(step, payload)

    def resend_otp(self) -> int:
        """Resend the code. Returns seconds until the next resend is allowed."""
        self._ensure_open()
        if self._pending_personal_info is None:
            return 0
        phone = self._pending_personal_info["phone"]
        self.otp.resend(phone)
        return self.otp.seconds_until_resend(phone)

    def back(self) -> bool:
        """Go back one step. Draft values are kept for when the user returns."""
        self._ensure_open()
        if self._pending_personal_info is not None:
            # Leaving the OTP prompt returns to the personal information form
            self._pending_personal_info = None
            return True
        return self.sequencer.retreat()

    def abandon(self) -> None:
        self._pending_personal_info = None
        self.receipt.remove()
        self.sequencer.abandon()

    def reset(self) -> None:
        """Start over with an empty draft."""
        self._pending_personal_info = None
        self.receipt.remove()
        self.reference = None
        self.sequencer.reset()

    # ------------------------------------------------------------------
    # Receipt
    # ------------------------------------------------------------------

    async def attach_receipt(
        self,
        filename: str,
        content_type: str,
        size: int,
        read: Callable[[], Awaitable[bytes]],
    ) -> Receipt | None:
        """Attach the payment receipt. None when a newer upload replaced this one."""
        self._ensure_open()
        return await self.receipt.attach(filename, content_type, size, read)

    def remove_receipt(self) -> None:
        self._ensure_open()
        self.receipt.remove()

    def _advance(self, step: StepId, payload: dict) -> StepOutcome:
        self.sequencer.advance(payload)
        if self.current == StepId.SUCCESS and self.reference is None:
            record = build_payload_from_draft(self.draft.snapshot())
            self.reference = self.repository.submit_registration(record.to_dict())
        return self._outcome(step, advanced=True, reference=self.reference)

    def _outcome(self, step: StepId, advanced: bool, **kwargs: Any) -> StepOutcome:
        return StepOutcome(step=step.value, advanced=advanced, current=self.current.value, **kwargs)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def fleet_editor(self) -> FleetEditor:
        """Editor pre-filled with the fleet already in the draft, if any."""
        return FleetEditor(self.draft.get(StepId.SUBSCRIPTION_REQUIREMENTS))

    def quote(self) -> PricingQuote | None:
        return quote_from_draft(self.draft.snapshot())

    def payment_summary(self) -> PaymentSummary:
        return build_payment_summary(self.draft.snapshot())

    def state(self) -> dict:
        """Serializable view for the HTTP layer and the CLI."""
        snapshot = self.draft.snapshot()
        quote = quote_from_draft(snapshot)
        data = self.sequencer.to_dict()
        data.update({
            "session_id": self.session_id,
            "draft": {step: dict(values) for step, values in snapshot.items()},
            "otp_pending": self.otp_pending,
            "quote": quote.to_dict() if quote else None,
            "payment_summary": build_payment_summary(snapshot).to_dict(),
            "reference": self.reference,
        })
        if self.status == WizardStatus.SUCCESS:
            data["message"] = success_message(self.sequencer.account_type and self.sequencer.account_type.value)
        return data
