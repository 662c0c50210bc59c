"""Patient registration data models.

This module defines the typed records a registration wizard collects: personal
details, contact details, next of kin, family members and vital signs. All
fields default to "not provided" so partially completed drafts can be
represented and validated.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class Gender(str, Enum):
    """Administrative gender options offered by the registration forms."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class AccountType(str, Enum):
    """Registration account type."""

    PERSONAL = "personal"
    FAMILY = "family"


class Relationship(str, Enum):
    """Relationship of a family member to the account holder."""

    SPOUSE = "spouse"
    CHILD = "child"
    PARENT = "parent"
    SIBLING = "sibling"
    GRANDPARENT = "grandparent"
    OTHER = "other"


@dataclass
class PersonalInfo:
    """Personal details of a patient.

    Attributes:
        first_name: Given name (required)
        last_name: Family name (required)
        middle_name: Middle name (optional)
        date_of_birth: Date of birth, must not be in the future (optional)
        gender: Administrative gender (required to complete a registration)
    """

    first_name: str = ""
    last_name: str = ""
    middle_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None

    @property
    def full_name(self) -> str:
        """Display name built from first, middle and last name."""
        parts = [self.first_name, self.middle_name or "", self.last_name]
        return " ".join(p.strip() for p in parts if p and p.strip())


@dataclass
class Address:
    """Postal address. All fields are required when an address is validated."""

    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""


@dataclass
class ContactInfo:
    """Contact details of a patient.

    Attributes:
        email: Email address
        phone_number: Mobile phone number (separators allowed)
        address: Postal address, validated when present
    """

    email: str = ""
    phone_number: str = ""
    address: Optional[Address] = None


@dataclass
class NextOfKin:
    """Emergency contact for a patient."""

    full_name: str = ""
    relationship: str = ""
    phone_number: str = ""
    email: Optional[str] = None
    is_primary: bool = False


@dataclass
class FamilyMember:
    """Additional member registered under a family account."""

    first_name: str = ""
    last_name: str = ""
    middle_name: Optional[str] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    relationship: Optional[Relationship] = None


@dataclass
class BloodPressure:
    """Blood pressure reading in mmHg."""

    systolic: Optional[float] = None
    diastolic: Optional[float] = None


@dataclass
class VitalSigns:
    """Vital signs captured at registration.

    Numeric fields are optional; ``None`` or ``0`` means "not provided".

    Attributes:
        blood_pressure: Systolic/diastolic reading (mmHg)
        heart_rate: Beats per minute
        temperature: Body temperature in Celsius
        weight: Kilograms
        height: Centimeters
        notes: Free-text clinical notes
    """

    blood_pressure: Optional[BloodPressure] = None
    heart_rate: Optional[float] = None
    temperature: Optional[float] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    notes: str = ""


@dataclass
class PatientDraft:
    """Primary patient data submitted from the personal or family form."""

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    contact_info: Optional[ContactInfo] = None
    next_of_kin: list[NextOfKin] = field(default_factory=list)


@dataclass
class RegistrationDraft:
    """Everything collected for one registration, as loaded from a draft file.

    Attributes:
        account_type: Selected account type, or None when not yet chosen
        patient: Primary patient data
        family_members: Additional members (family accounts only)
        vitals: Vital signs, or None when the vitals step is skipped
    """

    account_type: Optional[AccountType] = None
    patient: PatientDraft = field(default_factory=PatientDraft)
    family_members: list[FamilyMember] = field(default_factory=list)
    vitals: Optional[VitalSigns] = None
