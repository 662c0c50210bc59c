"""
Shared pytest configuration and fixtures.

This module provides registration data fixtures used across the unit and
integration test suites.
"""

from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from patient_registration.models import (
    Address,
    BloodPressure,
    ContactInfo,
    CreatedPatient,
    FamilyMember,
    Gender,
    NextOfKin,
    PatientDraft,
    PersonalInfo,
    RecordedVitals,
    Relationship,
    VitalSigns,
)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def examples_dir(project_root: Path) -> Path:
    """Return the directory holding example drafts and configuration."""
    return project_root / "examples"


@pytest.fixture
def valid_personal_info() -> PersonalInfo:
    return PersonalInfo(
        first_name="Ada",
        last_name="Lovelace",
        date_of_birth=date(1990, 1, 1),
        gender=Gender.FEMALE,
    )


@pytest.fixture
def valid_address() -> Address:
    return Address(
        street="12 Marina Road",
        city="Lagos",
        state="Lagos",
        postal_code="101001",
        country="Nigeria",
    )


@pytest.fixture
def valid_contact_info(valid_address: Address) -> ContactInfo:
    return ContactInfo(
        email="ada@example.com",
        phone_number="0801 234 5678",
        address=valid_address,
    )


@pytest.fixture
def valid_next_of_kin() -> NextOfKin:
    return NextOfKin(
        full_name="Byron Lovelace",
        relationship="parent",
        phone_number="+2348098765432",
        is_primary=True,
    )


@pytest.fixture
def valid_draft(valid_personal_info, valid_contact_info, valid_next_of_kin) -> PatientDraft:
    return PatientDraft(
        personal_info=valid_personal_info,
        contact_info=valid_contact_info,
        next_of_kin=[valid_next_of_kin],
    )


@pytest.fixture
def valid_family_member() -> FamilyMember:
    return FamilyMember(
        first_name="Emeka",
        last_name="Okafor",
        gender=Gender.MALE,
        date_of_birth=date(2012, 9, 20),
        relationship=Relationship.CHILD,
    )


@pytest.fixture
def valid_vitals() -> VitalSigns:
    return VitalSigns(
        blood_pressure=BloodPressure(systolic=120, diastolic=80),
        heart_rate=72,
        temperature=37.0,
        weight=70.5,
        height=175,
    )


@pytest.fixture
def mock_registry() -> AsyncMock:
    """PatientRegistry double whose calls succeed with fixed identifiers."""
    registry = AsyncMock()
    registry.create_patient.return_value = CreatedPatient(patient_id="p1", record_number="TH001")
    registry.record_vitals.side_effect = lambda patient_id, vitals, recorded_by: RecordedVitals(
        patient_id=patient_id, vitals=vitals, recorded_by=recorded_by
    )
    return registry
