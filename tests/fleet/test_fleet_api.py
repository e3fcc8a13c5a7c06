"""
Tests for the fleet HTTP endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from fleet import api
from selal.web.app import create_app


@pytest.fixture
def client(fleet_repository):
    app = create_app()
    app.dependency_overrides[api.get_fleet_repository] = lambda: fleet_repository
    api.photo_slots.clear()
    with TestClient(app) as test_client:
        yield test_client
    api.photo_slots.clear()


class TestBoats:

    def test_list(self, client):
        boats = client.get("/api/fleet/boats").json()
        assert len(boats) == 3
        assert boats[0]["utilization_level"] == "medium"
        assert boats[0]["carrying_weight_kg"] == 4000

    def test_get(self, client):
        assert client.get("/api/fleet/boats/2").json()["name"] == "Nile Pearl"

    def test_missing(self, client):
        assert client.get("/api/fleet/boats/99").status_code == 404

    def test_summary(self, client):
        assert client.get("/api/fleet/summary").json()["active_boats"] == 2


class TestBoatChanges:

    def test_add(self, client, fleet_repository):
        response = client.post(
            "/api/fleet/boats",
            json={
                "number_of_boats": 1,
                "boats": [{
                    "name": "Delta Queen",
                    "registration_number": "EG-2024-010",
                    "captain_name": "Youssef Nabil",
                    "capacity": 120,
                    "box_size": "25kg",
                }],
            },
        )
        data = response.json()

        assert response.status_code == 201
        assert data[0]["carrying_weight_kg"] == 3000
        assert fleet_repository.get_boat(data[0]["id"])["name"] == "Delta Queen"

    def test_add_reports_missing_boats(self, client):
        response = client.post("/api/fleet/boats", json={"number_of_boats": 2, "boats": []})
        errors = response.json()["detail"]["errors"]

        assert response.status_code == 400
        assert "boats.0.name" in errors
        assert "boats.1.captain_name" in errors

    def test_edit(self, client):
        response = client.put("/api/fleet/boats/3", json={"status": "active", "capacity": 250})
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "active"
        assert data["capacity"] == 250
        assert data["name"] == "Red Sea Hunter"

    def test_edit_invalid(self, client):
        response = client.put("/api/fleet/boats/1", json={"captain_name": ""})
        assert response.status_code == 400
        assert response.json()["detail"]["errors"]["captain_name"] == "Captain name is required"

    def test_edit_missing(self, client):
        assert client.put("/api/fleet/boats/99", json={"name": "Ghost"}).status_code == 404

    def test_photo(self, client):
        response = client.post(
            "/api/fleet/boats/2/photo",
            json={"filename": "boat.png", "content_type": "image/png", "content_base64": "YWJj"},
        )
        assert response.status_code == 200
        assert response.json()["photo"] == "data:image/png;base64,YWJj"

    def test_photo_wrong_type(self, client):
        response = client.post(
            "/api/fleet/boats/2/photo",
            json={"filename": "boat.pdf", "content_type": "application/pdf", "content_base64": "YWJj"},
        )
        assert response.status_code == 400

    def test_photo_missing_boat(self, client):
        response = client.post(
            "/api/fleet/boats/99/photo",
            json={"filename": "boat.png", "content_type": "image/png", "content_base64": "YWJj"},
        )
        assert response.status_code == 404


class TestBoxRequests:

    def test_options(self, client):
        data = client.get("/api/fleet/box-requests/options").json()
        assert set(data["box_types"]) == {"standard", "premium"}

    def test_submit(self, client, fleet_repository):
        response = client.post(
            "/api/fleet/box-requests",
            json={
                "boat_id": "2",
                "box_type": "premium",
                "quantity": 20,
                "delivery_address": "Damietta Harbour",
                "delivery_date": "2024-08-01",
                "delivery_time": "10:00 - 12:00",
            },
        )
        data = response.json()
        assert data["accepted"] is True
        assert data["total"] == 1000.0
        assert data["reference"] in fleet_repository.box_requests

    def test_invalid_slot(self, client):
        response = client.post(
            "/api/fleet/box-requests",
            json={
                "boat_id": "2",
                "quantity": 1,
                "delivery_address": "Damietta Harbour",
                "delivery_date": "2024-08-01",
                "delivery_time": "anytime",
            },
        )
        assert response.status_code == 422
