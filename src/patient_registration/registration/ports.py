"""Collaborator interface used by the registration workflow."""

from typing import Optional, Protocol, Sequence

from patient_registration.models.patient import (
    AccountType,
    ContactInfo,
    FamilyMember,
    NextOfKin,
    PersonalInfo,
    VitalSigns,
)
from patient_registration.models.responses import CreatedPatient, RecordedVitals


class PatientRegistry(Protocol):
    """Persistence backend for registrations.

    Implementations raise on failure; the workflow turns any exception into a
    SUBMISSION_FAILED field error and never retries on its own.
    """

    async def create_patient(
        self,
        account_type: AccountType,
        personal_info: PersonalInfo,
        next_of_kin: Sequence[NextOfKin],
        family_members: Sequence[FamilyMember],
        created_by: str,
        contact_info: Optional[ContactInfo] = None,
    ) -> CreatedPatient:
        ...

    async def record_vitals(
        self, patient_id: str, vitals: VitalSigns, recorded_by: str
    ) -> RecordedVitals:
        ...
