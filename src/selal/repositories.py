"""
Data Provider Protocols.

The wizard and the fleet services receive a repository at construction and
never import fixture data themselves. The in-memory implementations below
stand in for a real backend: submissions are logged and acknowledged with a
generated reference.
"""

import copy
import logging
import uuid
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class RegistrationRepository(Protocol):
    """Where completed registrations go."""

    def submit_registration(self, payload: dict) -> str:
        """Store a completed registration and return its reference."""
        ...


@runtime_checkable
class FleetRepository(Protocol):
    """A producer's boats (read and edit) plus box-request submission."""

    def list_boats(self) -> list[dict]:
        ...

    def get_boat(self, boat_id: str) -> dict | None:
        ...

    def add_boats(self, boats: list[dict]) -> list[dict]:
        """Store new boats and return them with their assigned ids."""
        ...

    def update_boat(self, boat_id: str, changes: dict) -> dict | None:
        """Apply field changes to a boat. None when the boat does not exist."""
        ...

    def submit_box_request(self, request: dict) -> str:
        ...


# =============================================================================
# In-memory implementations
# =============================================================================


SAMPLE_BOATS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Al-Bahr Star",
        "registration_number": "EG-2024-001",
        "captain_name": "Ahmed Hassan",
        "capacity": 200,
        "box_size": "20kg",
        "status": "active",
        "last_maintenance_date": "2024-05-12",
        "current_utilization": 75,
        "total_boxes_used": 150,
        "available_capacity": 50,
    },
    {
        "id": "2",
        "name": "Nile Pearl",
        "registration_number": "EG-2024-002",
        "captain_name": "Mohamed Ali",
        "capacity": 150,
        "box_size": "25kg",
        "status": "active",
        "last_maintenance_date": "2024-04-02",
        "current_utilization": 40,
        "total_boxes_used": 60,
        "available_capacity": 90,
    },
    {
        "id": "3",
        "name": "Red Sea Hunter",
        "registration_number": "EG-2024-003",
        "captain_name": "Omar Khaled",
        "capacity": 300,
        "box_size": "20kg",
        "status": "maintenance",
        "last_maintenance_date": "2024-06-20",
        "current_utilization": 0,
        "total_boxes_used": 0,
        "available_capacity": 0,
    },
]


class InMemoryRegistrationRepository:
    """Keeps submitted registrations in a dict keyed by reference."""

    def __init__(self) -> None:
        self.registrations: dict[str, dict] = {}

    def submit_registration(self, payload: dict) -> str:
        reference = f"REG-{uuid.uuid4().hex[:8].upper()}"
        self.registrations[reference] = copy.deepcopy(payload)
        logger.info(
            f"Registration submitted (mocked): {reference} "
            f"type={payload.get('account_type')}"
        )
        return reference


class InMemoryFleetRepository:
    """Boats seeded from sample data; box requests kept in a list."""

    def __init__(self, boats: list[dict] | None = None) -> None:
        source = SAMPLE_BOATS if boats is None else boats
        self.boats: list[dict] = copy.deepcopy(source)
        self.box_requests: dict[str, dict] = {}

    def list_boats(self) -> list[dict]:
        return copy.deepcopy(self.boats)

    def get_boat(self, boat_id: str) -> dict | None:
        for boat in self.boats:
            if boat["id"] == boat_id:
                return copy.deepcopy(boat)
        return None

    def add_boats(self, boats: list[dict]) -> list[dict]:
        added = []
        for boat in boats:
            record = {
                "current_utilization": 0,
                "total_boxes_used": 0,
                "available_capacity": boat.get("capacity", 0),
                **copy.deepcopy(boat),
                "id": uuid.uuid4().hex[:8],
            }
            self.boats.append(record)
            added.append(copy.deepcopy(record))
        logger.info(f"Boats added (mocked): {[b['id'] for b in added]}")
        return added

    def update_boat(self, boat_id: str, changes: dict) -> dict | None:
        for boat in self.boats:
            if boat["id"] == boat_id:
                boat.update(copy.deepcopy(changes))
                logger.info(f"Boat updated (mocked): {boat_id} fields={sorted(changes)}")
                return copy.deepcopy(boat)
        return None

    def submit_box_request(self, request: dict) -> str:
        reference = f"BOX-{uuid.uuid4().hex[:8].upper()}"
        self.box_requests[reference] = copy.deepcopy(request)
        logger.info(f"Box request submitted (mocked): {reference} boat={request.get('boat_id')}")
        return reference
