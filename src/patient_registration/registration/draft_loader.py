"""Loading of registration draft files.

A draft file is a JSON object with camelCase keys::

    {
      "accountType": "family",
      "personalInfo": {"firstName": "Ada", "lastName": "Lovelace", "gender": "female"},
      "contactInfo": {"email": "ada@example.com", "phoneNumber": "0801 234 5678"},
      "nextOfKin": [{"fullName": "Byron", "relationship": "parent", "phoneNumber": "..."}],
      "familyMembers": [{"firstName": "Ann", "relationship": "child", ...}],
      "vitals": {"bloodPressure": {"systolic": 120, "diastolic": 80}, "heartRate": 72}
    }

Only structural problems (bad JSON, wrong types, unknown enum values) raise
DraftLoadError. Missing or invalid field values are left for the validator.
"""

import json
from pathlib import Path
from typing import Any

from patient_registration.logging_audit import get_logger
from patient_registration.models.patient import AccountType, PatientDraft, RegistrationDraft
from patient_registration.registration.payloads import (
    contact_info_from_dict,
    family_member_from_dict,
    next_of_kin_from_dict,
    personal_info_from_dict,
    vitals_from_dict,
)
from patient_registration.utils.exceptions import DraftLoadError

logger = get_logger(__name__)


def _list_of_objects(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise TypeError(f"'{key}' must be a list of objects")
    return value


def _section(data: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise TypeError(f"'{key}' must be an object, got {type(value).__name__}")
    return value


def parse_registration(data: Any) -> RegistrationDraft:
    """Build a RegistrationDraft from decoded JSON.

    Args:
        data: Decoded JSON document

    Returns:
        Typed registration draft

    Raises:
        DraftLoadError: If the document structure or an enum value is invalid
    """
    if not isinstance(data, dict):
        raise DraftLoadError("Registration draft must be a JSON object")

    try:
        account_type_value = data.get("accountType")
        account_type = (
            AccountType(str(account_type_value).lower()) if account_type_value else None
        )

        personal = _section(data, "personalInfo") or {}
        contact = _section(data, "contactInfo")
        vitals = _section(data, "vitals")

        patient = PatientDraft(
            personal_info=personal_info_from_dict(personal),
            contact_info=contact_info_from_dict(contact) if contact is not None else None,
            next_of_kin=[next_of_kin_from_dict(k) for k in _list_of_objects(data, "nextOfKin")],
        )

        return RegistrationDraft(
            account_type=account_type,
            patient=patient,
            family_members=[
                family_member_from_dict(m) for m in _list_of_objects(data, "familyMembers")
            ],
            vitals=vitals_from_dict(vitals) if vitals is not None else None,
        )
    except (TypeError, ValueError) as e:
        raise DraftLoadError(f"Invalid registration draft: {e}") from e


def load_registration_file(path: Path) -> RegistrationDraft:
    """Load a registration draft from a JSON file.

    Args:
        path: Path to the draft file

    Returns:
        Typed registration draft

    Raises:
        DraftLoadError: If the file cannot be read, is not valid JSON or has an
            invalid structure
    """
    path = Path(path)
    logger.info(f"Loading registration draft from {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DraftLoadError(
            f"Invalid JSON in draft file: {path} (line {e.lineno}, column {e.colno})"
        ) from e
    except OSError as e:
        raise DraftLoadError(f"Failed to read draft file: {path}: {e}") from e

    draft = parse_registration(data)
    logger.debug(
        f"Draft loaded: account_type={draft.account_type}, "
        f"family_members={len(draft.family_members)}, vitals={draft.vitals is not None}"
    )
    return draft
