"""Conversion between registration models and camelCase JSON payloads.

The registry API and draft files share one JSON shape, e.g.::

    {"personalInfo": {"firstName": "Ada", "dateOfBirth": "1990-01-01", ...},
     "contactInfo": {"phoneNumber": "08012345678", "address": {...}},
     "nextOfKin": [...], "familyMembers": [...], "vitals": {...}}

The ``*_from_dict`` functions raise ValueError or TypeError on malformed input;
callers wrap these into their own exception types.
"""

from datetime import date
from typing import Any, Optional

from patient_registration.models.patient import (
    Address,
    BloodPressure,
    ContactInfo,
    FamilyMember,
    Gender,
    NextOfKin,
    PersonalInfo,
    Relationship,
    VitalSigns,
)
from patient_registration.validation.validator import clean_phone_number


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _enum_value(value) -> Optional[str]:
    return value.value if value is not None else None


def personal_info_to_dict(info: PersonalInfo) -> dict[str, Any]:
    return _drop_none({
        "firstName": info.first_name.strip(),
        "lastName": info.last_name.strip(),
        "middleName": info.middle_name,
        "dateOfBirth": _iso(info.date_of_birth),
        "gender": _enum_value(info.gender),
    })


def address_to_dict(address: Address) -> dict[str, Any]:
    return {
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "postalCode": address.postal_code,
        "country": address.country,
    }


def contact_info_to_dict(contact: ContactInfo) -> dict[str, Any]:
    """Serialize contact details; phone numbers are stored without separators."""
    data: dict[str, Any] = {
        "email": contact.email.strip(),
        "phoneNumber": clean_phone_number(contact.phone_number),
    }
    if contact.address is not None:
        data["address"] = address_to_dict(contact.address)
    return data


def next_of_kin_to_dict(kin: NextOfKin) -> dict[str, Any]:
    return _drop_none({
        "fullName": kin.full_name,
        "relationship": kin.relationship,
        "phoneNumber": clean_phone_number(kin.phone_number),
        "email": kin.email or None,
        "isPrimary": kin.is_primary,
    })


def family_member_to_dict(member: FamilyMember) -> dict[str, Any]:
    return _drop_none({
        "firstName": member.first_name.strip(),
        "lastName": member.last_name.strip(),
        "middleName": member.middle_name,
        "gender": _enum_value(member.gender),
        "dateOfBirth": _iso(member.date_of_birth),
        "relationship": _enum_value(member.relationship),
    })


def vitals_to_dict(vitals: VitalSigns) -> dict[str, Any]:
    """Flatten vital signs into the registry's vitals request shape.

    Measurements that are absent or zero are omitted.
    """
    bp = vitals.blood_pressure or BloodPressure()
    measurements = {
        "bloodPressureSystolic": bp.systolic,
        "bloodPressureDiastolic": bp.diastolic,
        "heartRate": vitals.heart_rate,
        "temperature": vitals.temperature,
        "weight": vitals.weight,
        "height": vitals.height,
    }
    data: dict[str, Any] = {key: value for key, value in measurements.items() if value}
    if vitals.notes:
        data["notes"] = vitals.notes
    return data


def _text(data: dict[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _optional_text(data: dict[str, Any], key: str) -> Optional[str]:
    value = _text(data, key)
    return value or None


def _date(data: dict[str, Any], key: str) -> Optional[date]:
    value = _optional_text(data, key)
    if value is None:
        return None
    # Accept full ISO timestamps as sent by date pickers
    return date.fromisoformat(value[:10])


def _number(data: dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise TypeError(f"'{key}' must be a number, got {type(value).__name__}")
    return float(value)


def _gender(data: dict[str, Any], key: str = "gender") -> Optional[Gender]:
    value = _optional_text(data, key)
    return Gender(value.lower()) if value else None


def _object(data: dict[str, Any], key: str) -> Optional[dict[str, Any]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise TypeError(f"'{key}' must be an object, got {type(value).__name__}")
    return value


def personal_info_from_dict(data: dict[str, Any]) -> PersonalInfo:
    return PersonalInfo(
        first_name=_text(data, "firstName"),
        last_name=_text(data, "lastName"),
        middle_name=_optional_text(data, "middleName"),
        date_of_birth=_date(data, "dateOfBirth"),
        gender=_gender(data),
    )


def address_from_dict(data: dict[str, Any]) -> Address:
    return Address(
        street=_text(data, "street"),
        city=_text(data, "city"),
        state=_text(data, "state"),
        postal_code=_text(data, "postalCode"),
        country=_text(data, "country"),
    )


def contact_info_from_dict(data: dict[str, Any]) -> ContactInfo:
    address = _object(data, "address")
    return ContactInfo(
        email=_text(data, "email"),
        phone_number=_text(data, "phoneNumber"),
        address=address_from_dict(address) if address is not None else None,
    )


def next_of_kin_from_dict(data: dict[str, Any]) -> NextOfKin:
    return NextOfKin(
        full_name=_text(data, "fullName"),
        relationship=_text(data, "relationship"),
        phone_number=_text(data, "phoneNumber"),
        email=_optional_text(data, "email"),
        is_primary=bool(data.get("isPrimary", False)),
    )


def family_member_from_dict(data: dict[str, Any]) -> FamilyMember:
    relationship = _optional_text(data, "relationship")
    return FamilyMember(
        first_name=_text(data, "firstName"),
        last_name=_text(data, "lastName"),
        middle_name=_optional_text(data, "middleName"),
        gender=_gender(data),
        date_of_birth=_date(data, "dateOfBirth"),
        relationship=Relationship(relationship.lower()) if relationship else None,
    )


def vitals_from_dict(data: dict[str, Any]) -> VitalSigns:
    """Parse vital signs from either the nested or the flattened request shape."""
    bp_data = _object(data, "bloodPressure")
    if bp_data is not None:
        blood_pressure = BloodPressure(
            systolic=_number(bp_data, "systolic"),
            diastolic=_number(bp_data, "diastolic"),
        )
    else:
        blood_pressure = BloodPressure(
            systolic=_number(data, "bloodPressureSystolic"),
            diastolic=_number(data, "bloodPressureDiastolic"),
        )

    if blood_pressure.systolic is None and blood_pressure.diastolic is None:
        blood_pressure = None

    return VitalSigns(
        blood_pressure=blood_pressure,
        heart_rate=_number(data, "heartRate"),
        temperature=_number(data, "temperature"),
        weight=_number(data, "weight"),
        height=_number(data, "height"),
        notes=_text(data, "notes"),
    )
