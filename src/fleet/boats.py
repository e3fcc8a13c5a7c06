"""
Boat Management.

Adding boats (several at once; the chosen count drives the list length) and
editing one boat's details. Boat photos go through the same stale-read guard
as payment receipts, so a photo read that finishes after a newer upload never
replaces the newer photo.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping

from registration.forms import MAX_BOATS, resize_boats, validate_form
from registration.receipts import ReceiptSlot
from selal.repositories import FleetRepository

from .models import DEFAULT_FLEET_BOAT, EDITABLE_FIELDS, AddBoatsForm, Boat, BoatDetails

logger = logging.getLogger(__name__)

PHOTO_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
})


class BoatNotFoundError(LookupError):
    """No boat with the given id."""


class BoatPhotoSlot(ReceiptSlot):
    """The photo attached to one boat. Images only."""

    allowed_types = PHOTO_TYPES
    type_message = "Please select an image file (PNG, JPG, GIF or WEBP)"


@dataclass
class BoatChangeResult:
    ok: bool
    boats: list[Boat] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)


class BoatService:
    """Validates boat additions and edits before they reach the repository."""

    def __init__(
        self,
        repository: FleetRepository,
        photo_slots: dict[str, BoatPhotoSlot] | None = None,
    ) -> None:
        self.repository = repository
        self.photo_slots = photo_slots if photo_slots is not None else {}

    def add_boats(self, number_of_boats: int, boats: list[dict]) -> BoatChangeResult:
        """
        Add `number_of_boats` boats.

        `boats` is padded with blank boats or truncated to the count first, so
        a count larger than the entries given reports the missing fields.
        """
        count = int(number_of_boats)
        data = {
            "number_of_boats": count,
            "boats": resize_boats(boats, min(count, MAX_BOATS), default=DEFAULT_FLEET_BOAT),
        }
        result = validate_form(AddBoatsForm, data)
        if not result.valid:
            logger.info(f"Add boats rejected ({len(result.errors)} errors)")
            return BoatChangeResult(ok=False, errors=result.errors)

        added = self.repository.add_boats(result.payload["boats"])
        return BoatChangeResult(ok=True, boats=[Boat(**b) for b in added])

    def update_boat(self, boat_id: str, changes: Mapping[str, Any]) -> BoatChangeResult:
        """Edit a boat. Fields not in `changes` keep their current values."""
        existing = self.repository.get_boat(boat_id)
        if existing is None:
            raise BoatNotFoundError(boat_id)

        data = {name: existing.get(name) for name in EDITABLE_FIELDS}
        data.update({k: v for k, v in changes.items() if k in EDITABLE_FIELDS})

        result = validate_form(BoatDetails, data)
        if not result.valid:
            return BoatChangeResult(ok=False, errors=result.errors)

        updated = self.repository.update_boat(boat_id, result.payload)
        return BoatChangeResult(ok=True, boats=[Boat(**updated)])

    async def attach_photo(
        self,
        boat_id: str,
        filename: str,
        content_type: str,
        size: int,
        read: Callable[[], Awaitable[bytes]],
    ) -> Boat | None:
        """
        Read a photo and store it on the boat.

        Returns the updated boat, or None when a newer upload for the same
        boat superseded this read. Raises ReceiptRejectedError for non-image
        or oversized files.
        """
        if self.repository.get_boat(boat_id) is None:
            raise BoatNotFoundError(boat_id)

        slot = self.photo_slots.setdefault(boat_id, BoatPhotoSlot())
        photo = await slot.attach(filename, content_type, size, read)
        if photo is None:
            return None

        updated = self.repository.update_boat(boat_id, {"photo": photo.data_url})
        return Boat(**updated)
