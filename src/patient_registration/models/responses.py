"""Patient registry response models.

This module defines the records returned by the patient registry collaborator
when a patient is created or vital signs are recorded.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from patient_registration.models.patient import VitalSigns


@dataclass(frozen=True)
class CreatedPatient:
    """Identifiers assigned by the registry to a newly created patient.

    Attributes:
        patient_id: Registry identifier of the patient
        record_number: Hospital record number (e.g. ``TH123456789``)
    """

    patient_id: str
    record_number: str


@dataclass
class RecordedVitals:
    """Vital signs as persisted by the registry."""

    patient_id: str
    vitals: VitalSigns
    recorded_by: str
    recorded_at: Optional[datetime] = None


@dataclass
class DuplicateCheckResult:
    """Outcome of a duplicate patient lookup.

    Attributes:
        is_duplicate: Whether the registry believes the patient already exists
        potential_matches: Raw patient records returned by the registry
    """

    is_duplicate: bool = False
    potential_matches: list[dict[str, Any]] = field(default_factory=list)
