"""
Tests for fleet models and dashboard figures.
"""

import pytest
from pydantic import ValidationError

from fleet.models import Boat, fleet_summary, utilization_level
from selal.repositories import SAMPLE_BOATS


class TestBoat:

    def test_sample_boats_are_valid(self):
        boats = [Boat(**b) for b in SAMPLE_BOATS]
        assert [b.status for b in boats] == ["active", "active", "maintenance"]

    def test_carrying_weight(self):
        boat = Boat(id="x", name="A", registration_number="R", captain_name="C", capacity=10, box_size="25kg")
        assert boat.carrying_weight_kg == 250

    def test_capacity_bounds(self):
        with pytest.raises(ValidationError):
            Boat(id="x", name="A", registration_number="R", captain_name="C", capacity=0)


class TestUtilization:

    @pytest.mark.parametrize("value,level", [(95, "high"), (80, "high"), (60, "medium"), (59.9, "low"), (0, "low")])
    def test_levels(self, value, level):
        assert utilization_level(value) == level


class TestFleetSummary:

    def test_sample_fleet(self):
        summary = fleet_summary([Boat(**b) for b in SAMPLE_BOATS])
        assert summary == {
            "total_boats": 3,
            "active_boats": 2,
            "total_capacity": 650,
            "average_utilization": 38.3,
        }

    def test_empty(self):
        assert fleet_summary([])["total_boats"] == 0
