"""
Selal Fleet.

Boat records for a fish producer's dashboard, boat add/edit with photos, and
the box-request order flow.
"""

from .boats import BoatNotFoundError, BoatPhotoSlot, BoatService
from .boxes import BoxRequestForm, BoxRequestService, calculate_total, check_quantity
from .models import Boat, BoatDetails, fleet_summary

__all__ = [
    "Boat",
    "BoatDetails",
    "BoatNotFoundError",
    "BoatPhotoSlot",
    "BoatService",
    "BoxRequestForm",
    "BoxRequestService",
    "calculate_total",
    "check_quantity",
    "fleet_summary",
]
