"""In-memory patient storage for the mock registry."""

import random
import uuid
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Optional

RECORD_NUMBER_PREFIX = "TH"
RECORD_NUMBER_DIGITS = 9


class PatientStore:
    """Thread-safe in-memory store of patients, vitals and audit entries."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.patients: dict[str, dict[str, Any]] = {}
        self.vitals: dict[str, list[dict[str, Any]]] = {}
        self.audit_log: list[dict[str, Any]] = []
        self._record_numbers: set[str] = set()

    def _new_record_number(self) -> str:
        # Caller holds the lock
        while True:
            digits = "".join(random.choices("0123456789", k=RECORD_NUMBER_DIGITS))
            record_number = f"{RECORD_NUMBER_PREFIX}{digits}"
            if record_number not in self._record_numbers:
                self._record_numbers.add(record_number)
                return record_number

    def generate_record_number(self) -> str:
        with self._lock:
            return self._new_record_number()

    def create_patient(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Store a patient (and its family members) and assign identifiers."""
        now = datetime.now(timezone.utc).isoformat()
        with self._lock:
            patient_id = uuid.uuid4().hex
            members = []
            for member in payload.get("familyMembers") or []:
                members.append({
                    **member,
                    "id": uuid.uuid4().hex,
                    "recordNumber": self._new_record_number(),
                })
            patient = {
                "id": patient_id,
                "recordNumber": self._new_record_number(),
                "accountType": payload.get("accountType", "personal"),
                "personalInfo": payload.get("personalInfo", {}),
                "contactInfo": payload.get("contactInfo"),
                "nextOfKin": payload.get("nextOfKin", []),
                "familyMembers": members,
                "createdBy": payload.get("createdBy"),
                "createdAt": now,
            }
            self.patients[patient_id] = patient
            return patient

    def get_patient(self, patient_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            return self.patients.get(patient_id)

    def add_vitals(self, patient_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            entry = {
                **payload,
                "id": uuid.uuid4().hex,
                "patientId": patient_id,
                "recordedAt": payload.get("recordedAt") or datetime.now(timezone.utc).isoformat(),
            }
            self.vitals.setdefault(patient_id, []).append(entry)
            return entry

    def find_duplicates(
        self,
        first_name: str,
        last_name: str,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Find patients matching by full name, email or phone number."""
        matches = []
        with self._lock:
            for patient in self.patients.values():
                info = patient.get("personalInfo") or {}
                contact = patient.get("contactInfo") or {}
                same_name = (
                    (info.get("firstName") or "").lower() == first_name.lower()
                    and (info.get("lastName") or "").lower() == last_name.lower()
                )
                same_email = bool(email) and (contact.get("email") or "").lower() == email.lower()
                same_phone = bool(phone_number) and contact.get("phoneNumber") == phone_number
                if same_name or same_email or same_phone:
                    matches.append(patient)
        return matches

    def add_audit_entry(self, payload: dict[str, Any]) -> None:
        with self._lock:
            self.audit_log.append(
                {**payload, "receivedAt": datetime.now(timezone.utc).isoformat()}
            )
