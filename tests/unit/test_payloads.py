"""Unit tests for registration payload conversion."""

from datetime import date

import pytest

from patient_registration.models import BloodPressure, Gender, Relationship, VitalSigns
from patient_registration.registration.payloads import (
    contact_info_to_dict,
    family_member_from_dict,
    family_member_to_dict,
    next_of_kin_to_dict,
    personal_info_from_dict,
    personal_info_to_dict,
    vitals_from_dict,
    vitals_to_dict,
)


class TestToDict:
    """Serialization into registry request shapes."""

    def test_personal_info(self, valid_personal_info):
        assert personal_info_to_dict(valid_personal_info) == {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "dateOfBirth": "1990-01-01",
            "gender": "female",
        }

    def test_contact_phone_is_cleaned(self, valid_contact_info):
        data = contact_info_to_dict(valid_contact_info)

        assert data["phoneNumber"] == "08012345678"
        assert data["address"]["postalCode"] == "101001"

    def test_next_of_kin_omits_missing_email(self, valid_next_of_kin):
        data = next_of_kin_to_dict(valid_next_of_kin)

        assert "email" not in data
        assert data["phoneNumber"] == "+2348098765432"

    def test_family_member(self, valid_family_member):
        data = family_member_to_dict(valid_family_member)

        assert data["relationship"] == "child"
        assert data["dateOfBirth"] == "2012-09-20"
        assert "middleName" not in data

    def test_vitals_flattened_without_zero_values(self):
        """Test blood pressure is flattened and unmeasured values dropped."""
        # Arrange
        vitals = VitalSigns(
            blood_pressure=BloodPressure(systolic=120, diastolic=80),
            heart_rate=0,
            temperature=37.2,
            notes="Calm",
        )

        # Act
        data = vitals_to_dict(vitals)

        # Assert
        assert data == {
            "bloodPressureSystolic": 120,
            "bloodPressureDiastolic": 80,
            "temperature": 37.2,
            "notes": "Calm",
        }


class TestFromDict:
    """Parsing of draft and response shapes."""

    def test_personal_info_accepts_timestamp_and_case(self):
        info = personal_info_from_dict({
            "firstName": "Ada",
            "lastName": "Lovelace",
            "dateOfBirth": "1990-01-01T00:00:00.000Z",
            "gender": "Female",
        })

        assert info.date_of_birth == date(1990, 1, 1)
        assert info.gender == Gender.FEMALE

    def test_family_member_relationship(self):
        member = family_member_from_dict({"firstName": "Emeka", "relationship": "CHILD"})

        assert member.relationship == Relationship.CHILD
        assert member.gender is None
        assert member.date_of_birth is None

    def test_vitals_nested_shape(self):
        vitals = vitals_from_dict({"bloodPressure": {"systolic": 120, "diastolic": "80"}})

        assert vitals.blood_pressure == BloodPressure(systolic=120.0, diastolic=80.0)
        assert vitals.heart_rate is None

    def test_vitals_flat_shape(self):
        vitals = vitals_from_dict({"bloodPressureSystolic": 130, "heartRate": 70})

        assert vitals.blood_pressure.systolic == 130
        assert vitals.blood_pressure.diastolic is None
        assert vitals.heart_rate == 70

    def test_vitals_without_blood_pressure(self):
        assert vitals_from_dict({"weight": 70}).blood_pressure is None

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"firstName": 5}, "'firstName' must be a string"),
            ({"dateOfBirth": "yesterday"}, "Invalid isoformat"),
            ({"gender": "unknown"}, "is not a valid Gender"),
        ],
    )
    def test_personal_info_errors(self, data, message):
        with pytest.raises((TypeError, ValueError), match=message):
            personal_info_from_dict(data)

    @pytest.mark.parametrize("value", [True, [120], {"v": 1}])
    def test_vitals_rejects_non_numbers(self, value):
        with pytest.raises(TypeError, match="must be a number"):
            vitals_from_dict({"heartRate": value})
