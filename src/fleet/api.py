"""
Fleet API Endpoints.

Boat list, boat add/edit, dashboard summary and box requests for the
signed-in producer. Backed by the in-memory fleet repository until a real
backend exists.
"""

import base64
import binascii
import logging
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from registration.receipts import ReceiptRejectedError
from selal.repositories import FleetRepository, InMemoryFleetRepository

from .boats import BoatChangeResult, BoatNotFoundError, BoatPhotoSlot, BoatService
from .boxes import BOX_TYPES, TIME_SLOTS, BoxRequestForm, BoxRequestService
from .models import Boat, fleet_summary, utilization_level

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fleet", tags=["fleet"])

_repository = InMemoryFleetRepository()

# Per-boat photo slots, kept across requests so a stale read can be detected
photo_slots: dict[str, BoatPhotoSlot] = {}


def get_fleet_repository() -> FleetRepository:
    return _repository


# =============================================================================
# Request Models
# =============================================================================


class AddBoatsRequest(BaseModel):
    """Boat entries are validated by the service, after resizing to the count."""
    number_of_boats: int
    boats: list[dict[str, Any]] = Field(default_factory=list)


class BoatUpdateRequest(BaseModel):
    """Only the fields sent are changed."""
    name: str | None = None
    registration_number: str | None = None
    captain_name: str | None = None
    capacity: int | None = None
    box_size: Literal["20kg", "25kg"] | None = None
    status: Literal["active", "maintenance", "retired"] | None = None
    photo: str | None = None
    last_maintenance_date: str | None = None


class PhotoUploadRequest(BaseModel):
    """Photo file, base64 encoded."""
    filename: str
    content_type: str
    content_base64: str


def _boat_view(boat: Boat) -> dict:
    return {
        **boat.model_dump(),
        "carrying_weight_kg": boat.carrying_weight_kg,
        "utilization_level": utilization_level(boat.current_utilization or 0),
    }


def _changed_boats(result: BoatChangeResult) -> list[dict]:
    if not result.ok:
        raise HTTPException(status_code=400, detail={"errors": result.errors})
    return [_boat_view(b) for b in result.boats]


# =============================================================================
# Endpoints: Boats
# =============================================================================


@router.get("/boats")
async def list_boats(repository: FleetRepository = Depends(get_fleet_repository)) -> list[dict]:
    return [_boat_view(Boat(**b)) for b in repository.list_boats()]


@router.post("/boats", status_code=201)
async def add_boats(
    request: AddBoatsRequest,
    repository: FleetRepository = Depends(get_fleet_repository),
) -> list[dict]:
    """Add one or more boats. Any invalid entry rejects the whole batch."""
    result = BoatService(repository, photo_slots).add_boats(request.number_of_boats, request.boats)
    return _changed_boats(result)


@router.get("/boats/{boat_id}")
async def get_boat(boat_id: str, repository: FleetRepository = Depends(get_fleet_repository)) -> dict:
    boat = repository.get_boat(boat_id)
    if boat is None:
        raise HTTPException(status_code=404, detail="Boat not found")
    return boat


@router.put("/boats/{boat_id}")
async def update_boat(
    boat_id: str,
    request: BoatUpdateRequest,
    repository: FleetRepository = Depends(get_fleet_repository),
) -> dict:
    try:
        result = BoatService(repository, photo_slots).update_boat(
            boat_id, request.model_dump(exclude_unset=True)
        )
    except BoatNotFoundError:
        raise HTTPException(status_code=404, detail="Boat not found")
    return _changed_boats(result)[0]


@router.post("/boats/{boat_id}/photo")
async def upload_boat_photo(
    boat_id: str,
    request: PhotoUploadRequest,
    repository: FleetRepository = Depends(get_fleet_repository),
) -> dict:
    try:
        content = base64.b64decode(request.content_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="Photo content is not valid base64")

    async def read() -> bytes:
        return content

    try:
        boat = await BoatService(repository, photo_slots).attach_photo(
            boat_id,
            filename=request.filename,
            content_type=request.content_type,
            size=len(content),
            read=read,
        )
    except BoatNotFoundError:
        raise HTTPException(status_code=404, detail="Boat not found")
    except ReceiptRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if boat is None:
        raise HTTPException(status_code=409, detail="A newer photo upload replaced this one")
    return _boat_view(boat)


@router.get("/summary")
async def get_fleet_summary(repository: FleetRepository = Depends(get_fleet_repository)) -> dict:
    return fleet_summary([Boat(**b) for b in repository.list_boats()])


# =============================================================================
# Endpoints: Box Requests
# =============================================================================


@router.get("/box-requests/options")
async def get_box_request_options() -> dict:
    return {"box_types": BOX_TYPES, "time_slots": TIME_SLOTS}


@router.post("/box-requests")
async def submit_box_request(
    form: BoxRequestForm,
    repository: FleetRepository = Depends(get_fleet_repository),
) -> dict:
    """Submit a box order. Over-capacity orders come back with accepted=false."""
    result = BoxRequestService(repository).submit(form)
    return {
        "accepted": result.accepted,
        "reference": result.reference,
        "subtotal": result.subtotal,
        "total": result.total,
        "warnings": result.warnings,
    }
