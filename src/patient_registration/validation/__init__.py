"""Validation engine for patient registration data.

Pure functions that check personal, contact, next-of-kin, family member and
vital sign data and return structured error maps.
"""

from patient_registration.validation.errors import ErrorCode, ErrorMap, FieldError
from patient_registration.validation.report import ValidationReport
from patient_registration.validation.validator import (
    clean_phone_number,
    clear_field_errors,
    format_phone_number,
    has_errors,
    merge_errors,
    prefix_errors,
    validate_address,
    validate_contact_info,
    validate_email,
    validate_family_member,
    validate_next_of_kin,
    validate_patient_submission,
    validate_personal_info,
    validate_phone_number,
    validate_postal_code,
    validate_registration,
    validate_vital_signs,
)

__all__ = [
    "ErrorCode",
    "ErrorMap",
    "FieldError",
    "ValidationReport",
    "clean_phone_number",
    "clear_field_errors",
    "format_phone_number",
    "has_errors",
    "merge_errors",
    "prefix_errors",
    "validate_address",
    "validate_contact_info",
    "validate_email",
    "validate_family_member",
    "validate_next_of_kin",
    "validate_patient_submission",
    "validate_personal_info",
    "validate_phone_number",
    "validate_postal_code",
    "validate_registration",
    "validate_vital_signs",
]
