"""REST client for the hospital patient registry.

This module implements the PatientRegistry port over the registry's JSON API
using a pooled ``requests`` session. The blocking HTTP calls run in a worker
thread so the async workflow stays responsive.
"""

import asyncio
import random
import time
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

import requests

from patient_registration.config.schema import Config
from patient_registration.logging_audit import get_logger
from patient_registration.models.patient import (
    AccountType,
    ContactInfo,
    FamilyMember,
    NextOfKin,
    PersonalInfo,
    VitalSigns,
)
from patient_registration.models.responses import (
    CreatedPatient,
    DuplicateCheckResult,
    RecordedVitals,
)
from patient_registration.registration.payloads import (
    contact_info_to_dict,
    family_member_to_dict,
    next_of_kin_to_dict,
    personal_info_to_dict,
    vitals_to_dict,
)
from patient_registration.transport.http_client import (
    ConnectionPool,
    ConnectionPoolConfig,
)
from patient_registration.utils.exceptions import RegistryError, ValidationError

logger = get_logger(__name__)


def fallback_record_number() -> str:
    """Generate a local record number when the registry cannot issue one.

    Returns:
        ``TH`` followed by the epoch milliseconds and three random digits
    """
    timestamp = int(time.time() * 1000)
    return f"TH{timestamp}{random.randint(0, 999):03d}"


class PatientRegistryClient:
    """PatientRegistry implementation backed by the registry REST API.

    Attributes:
        base_url: Registry base URL without trailing slash
        pool: Connection pool supplying the HTTP session

    Example:
        >>> client = PatientRegistryClient.from_config(load_config())
        >>> created = await client.create_patient(
        ...     AccountType.PERSONAL, info, [], [], created_by="staff-7"
        ... )
        >>> created.record_number
        'TH123456789'
    """

    def __init__(self, base_url: str, pool: Optional[ConnectionPool] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.pool = pool or ConnectionPool()
        logger.info(f"Patient registry client initialized for {self.base_url}")

    @classmethod
    def from_config(cls, config: Config) -> "PatientRegistryClient":
        """Create a client using the api and transport configuration sections."""
        pool = ConnectionPool(ConnectionPoolConfig.from_transport_config(config.transport))
        return cls(config.api.base_url, pool)

    def close(self) -> None:
        self.pool.close()

    def __enter__(self) -> "PatientRegistryClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        json_body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            RegistryError: On transport failure, non-2xx status or invalid JSON.
                The underlying requests exception is chained.
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self.pool.get_session().request(
                method,
                url,
                json=json_body,
                params=params,
                timeout=self.pool.config.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise RegistryError(
                f"{method} {path} failed with HTTP {status_code}: {_error_detail(e.response)}",
                status_code=status_code,
            ) from e
        except requests.RequestException as e:
            raise RegistryError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return {}

        try:
            body = response.json()
        except ValueError as e:
            raise RegistryError(f"{method} {path} returned invalid JSON") from e

        if not isinstance(body, dict):
            raise RegistryError(f"{method} {path} returned unexpected payload")
        return body

    def _create_patient_sync(self, payload: dict[str, Any]) -> CreatedPatient:
        body = self._request("POST", "/patients", json_body=payload)
        patient = body.get("patient", body)
        if not isinstance(patient, dict):
            raise ValidationError("Registry response has no patient object")
        patient_id = patient.get("id") or patient.get("_id")
        record_number = patient.get("recordNumber")
        if not patient_id or not record_number:
            raise ValidationError(
                "Registry response is missing the patient id or record number"
            )
        return CreatedPatient(patient_id=str(patient_id), record_number=str(record_number))

    async def create_patient(
        self,
        account_type: AccountType,
        personal_info: PersonalInfo,
        next_of_kin: Sequence[NextOfKin],
        family_members: Sequence[FamilyMember],
        created_by: str,
        contact_info: Optional[ContactInfo] = None,
    ) -> CreatedPatient:
        """Create a patient (and family members for family accounts).

        Raises:
            RegistryError: If the request fails
            ValidationError: If the response lacks identifiers
        """
        payload: dict[str, Any] = {
            "accountType": AccountType(account_type).value,
            "personalInfo": personal_info_to_dict(personal_info),
            "createdBy": created_by,
        }
        if contact_info is not None:
            payload["contactInfo"] = contact_info_to_dict(contact_info)
        if next_of_kin:
            payload["nextOfKin"] = [next_of_kin_to_dict(kin) for kin in next_of_kin]
        if family_members:
            payload["familyMembers"] = [family_member_to_dict(m) for m in family_members]

        created = await asyncio.to_thread(self._create_patient_sync, payload)
        logger.info(f"Registry created patient {created.patient_id} ({created.record_number})")
        return created

    async def record_vitals(
        self, patient_id: str, vitals: VitalSigns, recorded_by: str
    ) -> RecordedVitals:
        """Record vital signs for an existing patient.

        Raises:
            RegistryError: If the request fails
        """
        recorded_at = datetime.now(timezone.utc)
        payload = vitals_to_dict(vitals)
        payload["recordedBy"] = recorded_by
        payload["recordedAt"] = recorded_at.isoformat()

        await asyncio.to_thread(
            self._request, "POST", f"/patients/{patient_id}/vitals", payload
        )
        logger.info(f"Registry recorded vitals for patient {patient_id}")
        return RecordedVitals(
            patient_id=patient_id,
            vitals=vitals,
            recorded_by=recorded_by,
            recorded_at=recorded_at,
        )

    async def get_patient(self, patient_id: str) -> dict[str, Any]:
        """Fetch a patient record.

        Raises:
            RegistryError: If the request fails
        """
        body = await asyncio.to_thread(self._request, "GET", f"/patients/{patient_id}")
        return body.get("patient", body)

    async def check_for_duplicates(
        self,
        first_name: str,
        last_name: str,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> DuplicateCheckResult:
        """Ask the registry whether a matching patient already exists.

        A failed check never blocks registration: errors are logged and
        reported as "no duplicates".
        """
        params = {"firstName": first_name, "lastName": last_name}
        if email:
            params["email"] = email
        if phone_number:
            params["phoneNumber"] = phone_number

        try:
            body = await asyncio.to_thread(
                self._request, "GET", "/patients/check-duplicate", None, params
            )
        except RegistryError as e:
            logger.warning(f"Duplicate check failed, assuming no duplicates: {e}")
            return DuplicateCheckResult()

        return DuplicateCheckResult(
            is_duplicate=bool(body.get("isDuplicate", False)),
            potential_matches=list(body.get("potentialMatches") or []),
        )

    async def generate_record_number(self) -> str:
        """Request a new record number, falling back to a local one on failure."""
        try:
            body = await asyncio.to_thread(
                self._request, "GET", "/patients/generate-record-number"
            )
        except RegistryError as e:
            record_number = fallback_record_number()
            logger.warning(f"Record number generation failed, using {record_number}: {e}")
            return record_number

        record_number = body.get("recordNumber")
        if not record_number:
            record_number = fallback_record_number()
            logger.warning(f"Registry returned no record number, using {record_number}")
        return record_number

    async def log_registration_activity(
        self,
        action: str,
        staff_id: str,
        details: str,
        patient_id: Optional[str] = None,
    ) -> None:
        """Send a registration audit entry to the registry; failures are logged only."""
        payload: dict[str, Any] = {"action": action, "staffId": staff_id, "details": details}
        if patient_id:
            payload["patientId"] = patient_id

        try:
            await asyncio.to_thread(self._request, "POST", "/registration-audit", payload)
        except RegistryError as e:
            logger.warning(f"Failed to log registration activity '{action}': {e}")


def _error_detail(response: Optional[requests.Response]) -> str:
    if response is None:
        return "no response"
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason or "no details"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)
