"""
Registration API Endpoints.

Router for the sign-up wizard. Sessions live in memory for the lifetime of
the process and expire after `session_ttl_minutes` of inactivity.
"""

import base64
import binascii
import logging
from datetime import datetime, timedelta
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from selal.config import settings
from selal.repositories import InMemoryRegistrationRepository, RegistrationRepository

from .forms import MAX_CAPACITY, get_form_options
from .otp import OtpError
from .pricing import BillingCycle, calculate_pricing
from .receipts import ReceiptRejectedError, format_file_size
from .session import RegistrationWizard, StepOutcome, WizardClosedError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/registration", tags=["registration"])


# =============================================================================
# Dependencies
# =============================================================================

_repository = InMemoryRegistrationRepository()


def get_registration_repository() -> RegistrationRepository:
    """Repository for completed registrations. Override in tests or deployments."""
    return _repository


# =============================================================================
# Request/Response Models
# =============================================================================


class StepSubmitRequest(BaseModel):
    """Form data for the active step."""
    data: dict[str, Any] = Field(default_factory=dict)


class OtpRequest(BaseModel):
    otp: str


class ReceiptRequest(BaseModel):
    """Receipt file, base64 encoded."""
    filename: str
    content_type: str
    content_base64: str


class QuoteBoat(BaseModel):
    """Only what pricing needs; names may still be blank while editing."""
    capacity: int = Field(ge=0, le=MAX_CAPACITY)
    box_size: Literal["20kg", "25kg"] = "20kg"


class QuoteRequest(BaseModel):
    """Pricing preview for a fleet."""
    boats: list[QuoteBoat] = Field(default_factory=list)
    plan: BillingCycle = BillingCycle.MONTHLY


class StepResponse(BaseModel):
    outcome: dict
    state: dict


# =============================================================================
# Session Store
# =============================================================================


class _StoredSession:
    def __init__(self, wizard: RegistrationWizard) -> None:
        self.wizard = wizard
        self.touched_at = datetime.utcnow()


sessions: dict[str, _StoredSession] = {}


def _expire_sessions() -> None:
    cutoff = datetime.utcnow() - timedelta(minutes=settings.session_ttl_minutes)
    expired = [sid for sid, s in sessions.items() if s.touched_at < cutoff]
    for sid in expired:
        logger.info(f"Registration session expired: {sid}")
        del sessions[sid]


def get_wizard(session_id: str) -> RegistrationWizard:
    _expire_sessions()
    stored = sessions.get(session_id)
    if stored is None:
        raise HTTPException(status_code=404, detail="Registration session not found")
    stored.touched_at = datetime.utcnow()
    return stored.wizard


def _step_response(wizard: RegistrationWizard, outcome: StepOutcome) -> StepResponse:
    if outcome.errors:
        raise HTTPException(
            status_code=400,
            detail={"errors": outcome.errors, "step": outcome.step},
        )
    return StepResponse(outcome=outcome.to_dict(), state=wizard.state())


# =============================================================================
# Endpoints: Options & Pricing
# =============================================================================


@router.get("/options")
async def get_registration_options():
    """Form options for every wizard step."""
    return get_form_options()


@router.post("/quote")
async def preview_quote(request: QuoteRequest):
    """Live pricing for a fleet being edited, before the step is submitted."""
    return calculate_pricing(request.boats, request.plan).to_dict()


# =============================================================================
# Endpoints: Session Lifecycle
# =============================================================================


@router.post("/sessions", status_code=201)
async def create_session(
    repository: RegistrationRepository = Depends(get_registration_repository),
) -> dict:
    """Start a new registration wizard."""
    _expire_sessions()
    wizard = RegistrationWizard(repository=repository)
    sessions[wizard.session_id] = _StoredSession(wizard)
    logger.info(f"Registration session started: {wizard.session_id}")
    return wizard.state()


@router.get("/sessions/{session_id}")
async def get_session_state(session_id: str) -> dict:
    return get_wizard(session_id).state()


@router.post("/sessions/{session_id}/abandon")
async def abandon_session(session_id: str) -> dict:
    wizard = get_wizard(session_id)
    wizard.abandon()
    return wizard.state()


@router.post("/sessions/{session_id}/reset")
async def reset_session(session_id: str) -> dict:
    wizard = get_wizard(session_id)
    wizard.reset()
    return wizard.state()


# =============================================================================
# Endpoints: Steps
# =============================================================================


@router.post("/sessions/{session_id}/submit", response_model=StepResponse)
async def submit_step(session_id: str, request: StepSubmitRequest) -> StepResponse:
    """Validate and submit the active step."""
    wizard = get_wizard(session_id)
    try:
        outcome = wizard.submit(request.data)
    except WizardClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _step_response(wizard, outcome)


@router.post("/sessions/{session_id}/back", response_model=StepResponse)
async def go_back(session_id: str) -> StepResponse:
    wizard = get_wizard(session_id)
    try:
        moved = wizard.back()
    except WizardClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    outcome = StepOutcome(step=wizard.current.value, advanced=False, current=wizard.current.value)
    response = StepResponse(outcome=outcome.to_dict(), state=wizard.state())
    response.outcome["moved"] = moved
    return response


@router.post("/sessions/{session_id}/otp/verify", response_model=StepResponse)
async def verify_otp(session_id: str, request: OtpRequest) -> StepResponse:
    wizard = get_wizard(session_id)
    try:
        outcome = wizard.verify_otp(request.otp)
    except WizardClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except OtpError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _step_response(wizard, outcome)


@router.post("/sessions/{session_id}/otp/resend")
async def resend_otp(session_id: str) -> dict:
    wizard = get_wizard(session_id)
    try:
        wait = wizard.resend_otp()
    except WizardClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except OtpError as e:
        raise HTTPException(status_code=429, detail=str(e))
    return {"resend_available_in": wait}


@router.post("/sessions/{session_id}/receipt")
async def upload_receipt(session_id: str, request: ReceiptRequest) -> dict:
    """Attach a payment receipt to the session's payment form."""
    wizard = get_wizard(session_id)

    try:
        content = base64.b64decode(request.content_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="Receipt content is not valid base64")

    async def read() -> bytes:
        return content

    try:
        receipt = await wizard.attach_receipt(
            filename=request.filename,
            content_type=request.content_type,
            size=len(content),
            read=read,
        )
    except WizardClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ReceiptRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if receipt is None:
        raise HTTPException(status_code=409, detail="A newer receipt upload replaced this one")

    return {
        "filename": receipt.filename,
        "content_type": receipt.content_type,
        "size": format_file_size(receipt.size),
        "is_image": receipt.is_image,
    }


@router.delete("/sessions/{session_id}/receipt")
async def remove_receipt(session_id: str) -> dict:
    try:
        get_wizard(session_id).remove_receipt()
    except WizardClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"removed": True}
