"""Models module.

This module provides data models and dataclasses for the application.
"""

from patient_registration.models.patient import (
    AccountType,
    Address,
    BloodPressure,
    ContactInfo,
    FamilyMember,
    Gender,
    NextOfKin,
    PatientDraft,
    PersonalInfo,
    RegistrationDraft,
    Relationship,
    VitalSigns,
)
from patient_registration.models.responses import (
    CreatedPatient,
    DuplicateCheckResult,
    RecordedVitals,
)

__all__ = [
    "AccountType",
    "Address",
    "BloodPressure",
    "ContactInfo",
    "CreatedPatient",
    "DuplicateCheckResult",
    "FamilyMember",
    "Gender",
    "NextOfKin",
    "PatientDraft",
    "PersonalInfo",
    "RecordedVitals",
    "RegistrationDraft",
    "Relationship",
    "VitalSigns",
]
