"""
Pytest configuration and fixtures for Selal tests.
"""

import os

import pytest

# Set test environment before importing selal modules
os.environ["SELAL_ENV"] = "development"
os.environ["OTP_MOCKED"] = "true"

from registration import RegistrationWizard
from selal.repositories import InMemoryFleetRepository, InMemoryRegistrationRepository


@pytest.fixture
def sample_boats():
    """Two boats totalling 150 boxes."""
    return [
        {"name": "Al-Bahr Star", "registration_number": "EG-2024-001", "capacity": 50, "box_size": "20kg"},
        {"name": "Nile Pearl", "registration_number": "EG-2024-002", "capacity": 100, "box_size": "25kg"},
    ]


@pytest.fixture
def personal_info():
    """Valid personal information form data."""
    return {
        "full_name": "Ahmed Hassan",
        "phone": "01012345678",
        "national_id": "29001011234567",
        "company_name": "Hassan Fisheries",
        "agree_terms": True,
    }


@pytest.fixture
def subscription(sample_boats):
    return {
        "number_of_boats": 2,
        "boats": sample_boats,
        "subscription_plan": "annual",
    }


@pytest.fixture
def payment():
    return {
        "payment_method": "bank",
        "payment_reference": "TRX-001",
        "payment_date": "2024-07-01",
    }


@pytest.fixture
def registration_repository():
    return InMemoryRegistrationRepository()


@pytest.fixture
def fleet_repository():
    return InMemoryFleetRepository()


@pytest.fixture
def wizard(registration_repository):
    return RegistrationWizard(repository=registration_repository)
