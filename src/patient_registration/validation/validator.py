"""Field and aggregate validation for patient registration data.

Every function here is pure: it never raises for bad data and never mutates its
input. Problems are collected into error lists/maps so a form can display all
of them at once rather than failing on the first.
"""

from datetime import date
from typing import Iterable, Optional, Sequence

from patient_registration.logging_audit import get_logger
from patient_registration.models.patient import (
    AccountType,
    Address,
    ContactInfo,
    FamilyMember,
    NextOfKin,
    PatientDraft,
    PersonalInfo,
    RegistrationDraft,
    VitalSigns,
)
from patient_registration.validation.errors import ErrorMap, FieldError
from patient_registration.validation.rules import (
    DIASTOLIC_RANGE,
    EMAIL_PATTERN,
    ERROR_MESSAGES,
    HEART_RATE_RANGE,
    HEIGHT_RANGE,
    PHONE_PATTERN,
    PHONE_SEPARATORS,
    POSTAL_CODE_PATTERN,
    SYSTOLIC_RANGE,
    TEMPERATURE_RANGE,
    VitalRange,
    WEIGHT_RANGE,
)

logger = get_logger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() == ""


def _is_future(value: date, today: Optional[date]) -> bool:
    return value > (today or date.today())


def clean_phone_number(phone_number: str) -> str:
    """Strip whitespace, dashes and parentheses from a phone number.

    Args:
        phone_number: Phone number as typed by the user

    Returns:
        Phone number suitable for storage (e.g. ``08012345678``)
    """
    return PHONE_SEPARATORS.sub("", phone_number or "")


def format_phone_number(phone_number: str) -> str:
    """Format a phone number for display.

    ``+234`` numbers become ``+234 XXX XXX XXXX`` and trunk-prefixed numbers
    become ``0XXX XXX XXXX``. Anything else is returned unchanged.

    Args:
        phone_number: Phone number in any accepted format

    Returns:
        Display-formatted phone number
    """
    cleaned = clean_phone_number(phone_number)

    if cleaned.startswith("+234"):
        number = cleaned[4:]
        return f"+234 {number[:3]} {number[3:6]} {number[6:]}"

    if cleaned.startswith("0"):
        return f"{cleaned[:4]} {cleaned[4:7]} {cleaned[7:]}"

    return phone_number


def validate_email(email: Optional[str]) -> list[FieldError]:
    """Validate an email address.

    Args:
        email: Email address, may be blank

    Returns:
        Empty list when valid, otherwise a single REQUIRED_FIELD or
        INVALID_FORMAT error
    """
    if _is_blank(email):
        return [FieldError.required()]

    if not EMAIL_PATTERN.match(email.strip()):
        return [FieldError.invalid_format(ERROR_MESSAGES["INVALID_EMAIL"])]

    return []


def validate_phone_number(phone_number: Optional[str]) -> list[FieldError]:
    """Validate a mobile phone number after stripping separators.

    Accepts ``+234`` or ``0`` prefixed numbers as well as bare 10-digit
    subscriber numbers, e.g. ``0801 234 5678`` or ``+2348012345678``.

    Args:
        phone_number: Phone number, may contain spaces, dashes or parentheses

    Returns:
        Empty list when valid, otherwise a single REQUIRED_FIELD or
        INVALID_FORMAT error
    """
    if _is_blank(phone_number):
        return [FieldError.required()]

    if not PHONE_PATTERN.match(clean_phone_number(phone_number)):
        return [FieldError.invalid_format(ERROR_MESSAGES["INVALID_PHONE"])]

    return []


def validate_postal_code(postal_code: Optional[str]) -> list[FieldError]:
    """Validate a postal code (exactly six digits).

    Args:
        postal_code: Postal code, may be blank

    Returns:
        Empty list when valid, otherwise a single REQUIRED_FIELD or
        INVALID_FORMAT error
    """
    if _is_blank(postal_code):
        return [FieldError.required()]

    if not POSTAL_CODE_PATTERN.match(postal_code.strip()):
        return [FieldError.invalid_format(ERROR_MESSAGES["INVALID_POSTAL_CODE"])]

    return []


def validate_address(address: Address) -> ErrorMap:
    """Validate a complete postal address.

    Args:
        address: Address to validate

    Returns:
        ErrorMap keyed by street, city, state, postalCode and country
    """
    errors: ErrorMap = {}

    for key, value in (
        ("street", address.street),
        ("city", address.city),
        ("state", address.state),
    ):
        if _is_blank(value):
            errors[key] = [FieldError.required()]

    postal_errors = validate_postal_code(address.postal_code)
    if postal_errors:
        errors["postalCode"] = postal_errors

    if _is_blank(address.country):
        errors["country"] = [FieldError.required()]

    return errors


def validate_personal_info(
    personal_info: PersonalInfo, today: Optional[date] = None
) -> ErrorMap:
    """Validate a patient's personal details.

    First and last name are required. A date of birth, when present, must not
    be in the future.

    Args:
        personal_info: Personal details to validate
        today: Reference date for the future-date check (defaults to today)

    Returns:
        ErrorMap keyed by firstName, lastName and dateOfBirth
    """
    errors: ErrorMap = {}

    if _is_blank(personal_info.first_name):
        errors["firstName"] = [FieldError.required()]

    if _is_blank(personal_info.last_name):
        errors["lastName"] = [FieldError.required()]

    if personal_info.date_of_birth is not None and _is_future(
        personal_info.date_of_birth, today
    ):
        errors["dateOfBirth"] = [FieldError.future_date()]

    return errors


def validate_contact_info(contact_info: ContactInfo) -> ErrorMap:
    """Validate email, phone and (when present) the address of a contact.

    Args:
        contact_info: Contact details to validate

    Returns:
        ErrorMap keyed by email, phoneNumber and ``address.<field>``
    """
    errors: ErrorMap = {}

    email_errors = validate_email(contact_info.email)
    if email_errors:
        errors["email"] = email_errors

    phone_errors = validate_phone_number(contact_info.phone_number)
    if phone_errors:
        errors["phoneNumber"] = phone_errors

    if contact_info.address is not None:
        errors.update(prefix_errors(validate_address(contact_info.address), "address"))

    return errors


def validate_next_of_kin(next_of_kin: NextOfKin) -> ErrorMap:
    """Validate an emergency contact.

    Name, relationship and phone number are required; email is optional but
    must be well-formed when given.

    Args:
        next_of_kin: Next of kin to validate

    Returns:
        ErrorMap keyed by fullName, relationship, phoneNumber and email
    """
    errors: ErrorMap = {}

    if _is_blank(next_of_kin.full_name):
        errors["fullName"] = [FieldError.required()]

    if _is_blank(next_of_kin.relationship):
        errors["relationship"] = [FieldError.required()]

    phone_errors = validate_phone_number(next_of_kin.phone_number)
    if phone_errors:
        errors["phoneNumber"] = phone_errors

    if not _is_blank(next_of_kin.email):
        email_errors = validate_email(next_of_kin.email)
        if email_errors:
            errors["email"] = email_errors

    return errors


def validate_family_member(
    member: FamilyMember, today: Optional[date] = None
) -> ErrorMap:
    """Validate a single family member.

    Args:
        member: Family member to validate
        today: Reference date for the future-date check (defaults to today)

    Returns:
        ErrorMap keyed by firstName, lastName, gender, dateOfBirth and relationship
    """
    errors: ErrorMap = {}

    if _is_blank(member.first_name):
        errors["firstName"] = [FieldError.required()]

    if _is_blank(member.last_name):
        errors["lastName"] = [FieldError.required()]

    if member.gender is None:
        errors["gender"] = [FieldError.required()]

    if member.date_of_birth is None:
        errors["dateOfBirth"] = [FieldError.required()]
    elif _is_future(member.date_of_birth, today):
        errors["dateOfBirth"] = [FieldError.future_date()]

    if member.relationship is None:
        errors["relationship"] = [FieldError.required()]

    return errors


def _check_range(errors: ErrorMap, vital_range: VitalRange, value: Optional[float]) -> None:
    # None and 0 both mean "not measured"
    if not value:
        return
    if not vital_range.contains(value):
        errors[vital_range.key] = [
            FieldError.out_of_range(vital_range.label, vital_range.minimum, vital_range.maximum)
        ]


def validate_vital_signs(vitals: VitalSigns) -> ErrorMap:
    """Validate vital signs against clinical ranges.

    Every measurement is optional. Values that are absent or zero are treated
    as not provided and skipped.

    Args:
        vitals: Vital signs to validate

    Returns:
        ErrorMap with at most one OUT_OF_RANGE error per measurement
    """
    errors: ErrorMap = {}

    if vitals.blood_pressure is not None:
        _check_range(errors, SYSTOLIC_RANGE, vitals.blood_pressure.systolic)
        _check_range(errors, DIASTOLIC_RANGE, vitals.blood_pressure.diastolic)

    _check_range(errors, HEART_RATE_RANGE, vitals.heart_rate)
    _check_range(errors, TEMPERATURE_RANGE, vitals.temperature)
    _check_range(errors, WEIGHT_RANGE, vitals.weight)
    _check_range(errors, HEIGHT_RANGE, vitals.height)

    return errors


def validate_patient_submission(
    account_type: AccountType,
    draft: PatientDraft,
    family_members: Sequence[FamilyMember] = (),
    require_gender: bool = True,
    today: Optional[date] = None,
) -> ErrorMap:
    """Validate everything submitted from the personal or family form.

    Args:
        account_type: Form the data comes from
        draft: Primary patient data
        family_members: Additional members (family accounts)
        require_gender: Whether the primary patient's gender must be set
        today: Reference date for future-date checks

    Returns:
        Combined ErrorMap. Contact, next-of-kin and member errors are keyed
        ``address.<field>``, ``nextOfKin.<i>.<field>`` and
        ``familyMembers.<i>.<field>``; a family form with no members reports
        MEMBERS_REQUIRED under ``familyMembers``.
    """
    errors = validate_personal_info(draft.personal_info, today=today)

    if require_gender and draft.personal_info.gender is None:
        errors["gender"] = [FieldError.required()]

    if draft.contact_info is not None:
        errors = merge_errors(errors, validate_contact_info(draft.contact_info))

    for index, kin in enumerate(draft.next_of_kin):
        errors = merge_errors(
            errors, prefix_errors(validate_next_of_kin(kin), f"nextOfKin.{index}")
        )

    if account_type == AccountType.FAMILY:
        if not family_members:
            errors = merge_errors(errors, {"familyMembers": [FieldError.members_required()]})
        for index, member in enumerate(family_members):
            errors = merge_errors(
                errors,
                prefix_errors(validate_family_member(member, today=today), f"familyMembers.{index}"),
            )

    return errors


def validate_registration(draft: RegistrationDraft, today: Optional[date] = None) -> ErrorMap:
    """Validate a complete registration draft, including vitals when present.

    Args:
        draft: Registration draft
        today: Reference date for future-date checks

    Returns:
        Combined ErrorMap; vital sign errors are keyed ``vitals.<field>`` and a
        missing account type is reported under ``accountType``
    """
    errors: ErrorMap = {}

    if draft.account_type is None:
        errors["accountType"] = [FieldError.required()]
        account_type = AccountType.PERSONAL
    else:
        account_type = draft.account_type

    errors = merge_errors(
        errors,
        validate_patient_submission(account_type, draft.patient, draft.family_members, today=today),
    )

    if draft.vitals is not None:
        errors = merge_errors(errors, prefix_errors(validate_vital_signs(draft.vitals), "vitals"))

    logger.debug(f"Registration draft validated: {len(errors)} field(s) with errors")
    return errors


def has_errors(errors: ErrorMap) -> bool:
    """Check whether any field in an ErrorMap carries at least one error."""
    return any(len(field_errors) > 0 for field_errors in errors.values())


def merge_errors(*error_maps: ErrorMap) -> ErrorMap:
    """Merge error maps, concatenating per-field lists without deduplication.

    Args:
        *error_maps: Error maps to merge, in order

    Returns:
        New ErrorMap; the inputs are not modified
    """
    merged: ErrorMap = {}
    for error_map in error_maps:
        for key, field_errors in error_map.items():
            merged.setdefault(key, []).extend(field_errors)
    return merged


def clear_field_errors(errors: ErrorMap, field_names: Iterable[str]) -> ErrorMap:
    """Remove the listed fields from an ErrorMap entirely.

    Args:
        errors: ErrorMap to clear fields from
        field_names: Keys to remove

    Returns:
        New ErrorMap without the listed keys
    """
    to_clear = set(field_names)
    return {key: list(value) for key, value in errors.items() if key not in to_clear}


def prefix_errors(errors: ErrorMap, prefix: str) -> ErrorMap:
    """Re-key a nested ErrorMap under a dotted prefix.

    Example:
        >>> prefix_errors({"city": [FieldError.required()]}, "address")
        {'address.city': [...]}
    """
    return {f"{prefix}.{key}": list(value) for key, value in errors.items()}
