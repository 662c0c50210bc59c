"""Unit tests for the validation engine.

Tests field validators, section validators, aggregate submission checks and
the error map helpers.
"""

from dataclasses import replace
from datetime import date

import pytest

from patient_registration.models import (
    AccountType,
    Address,
    BloodPressure,
    ContactInfo,
    FamilyMember,
    NextOfKin,
    PatientDraft,
    PersonalInfo,
    RegistrationDraft,
    VitalSigns,
)
from patient_registration.validation import (
    ErrorCode,
    FieldError,
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

TODAY = date(2024, 6, 1)


def codes(field_errors):
    return [error.code for error in field_errors]


class TestValidateEmail:
    """Test suite for validate_email."""

    @pytest.mark.parametrize(
        "email",
        ["ada@example.com", "first.last+tag@sub.example.org", "  padded@example.com  "],
    )
    def test_valid_emails(self, email):
        assert validate_email(email) == []

    @pytest.mark.parametrize("email", ["", "   ", None])
    def test_blank_email_is_required(self, email):
        assert codes(validate_email(email)) == [ErrorCode.REQUIRED_FIELD]

    @pytest.mark.parametrize("email", ["not-an-email", "a@", "@example.com", "a b@example.com"])
    def test_malformed_email_is_invalid_format(self, email):
        # Act
        errors = validate_email(email)

        # Assert
        assert codes(errors) == [ErrorCode.INVALID_FORMAT]
        assert errors[0].message == "Please enter a valid email address"


class TestValidatePhoneNumber:
    """Test suite for validate_phone_number."""

    @pytest.mark.parametrize(
        "phone",
        ["0801 234 5678", "08012345678", "+2348012345678", "(0803) 123-4567", "9012345678"],
    )
    def test_valid_phone_numbers(self, phone):
        assert validate_phone_number(phone) == []

    def test_blank_phone_is_required(self):
        assert codes(validate_phone_number("  ")) == [ErrorCode.REQUIRED_FIELD]

    @pytest.mark.parametrize(
        "phone",
        [
            "12345",
            "06012345678",
            "0821234567890",
            "+1 555 123 4567",
            "080\u0661\u0662\u0663\u0664\u0665\u0666\u0667\u0668",
        ],
    )
    def test_invalid_phone_numbers(self, phone):
        assert codes(validate_phone_number(phone)) == [ErrorCode.INVALID_FORMAT]


class TestValidatePostalCode:
    """Test suite for validate_postal_code."""

    def test_six_digits_valid(self):
        assert validate_postal_code("101001") == []

    @pytest.mark.parametrize(
        "code", ["12345", "1234567", "10100A", "\u0661\u0660\u0661\u0660\u0660\u0661", "１０１００１"]
    )
    def test_wrong_shape_invalid(self, code):
        errors = validate_postal_code(code)
        assert codes(errors) == [ErrorCode.INVALID_FORMAT]
        assert errors[0].message == "Please enter a valid 6-digit postal code"

    def test_blank_required(self):
        assert codes(validate_postal_code("")) == [ErrorCode.REQUIRED_FIELD]


class TestValidateAddress:
    """Test suite for validate_address."""

    def test_valid_address(self, valid_address):
        assert validate_address(valid_address) == {}

    def test_empty_address_reports_every_field(self):
        # Act
        errors = validate_address(Address())

        # Assert
        assert set(errors) == {"street", "city", "state", "postalCode", "country"}
        assert all(codes(v) == [ErrorCode.REQUIRED_FIELD] for v in errors.values())

    def test_bad_postal_code_only(self, valid_address):
        errors = validate_address(replace(valid_address, postal_code="12"))
        assert list(errors) == ["postalCode"]
        assert codes(errors["postalCode"]) == [ErrorCode.INVALID_FORMAT]


class TestValidatePersonalInfo:
    """Test suite for validate_personal_info."""

    def test_valid_personal_info(self, valid_personal_info):
        assert validate_personal_info(valid_personal_info, today=TODAY) == {}

    def test_missing_names(self):
        errors = validate_personal_info(PersonalInfo(first_name=" ", last_name=""), today=TODAY)
        assert set(errors) == {"firstName", "lastName"}

    def test_future_date_of_birth(self, valid_personal_info):
        # Arrange
        info = replace(valid_personal_info, date_of_birth=date(2024, 6, 2))

        # Act
        errors = validate_personal_info(info, today=TODAY)

        # Assert
        assert codes(errors["dateOfBirth"]) == [ErrorCode.FUTURE_DATE]
        assert errors["dateOfBirth"][0].message == "Date of birth cannot be in the future"

    def test_today_is_not_future(self, valid_personal_info):
        info = replace(valid_personal_info, date_of_birth=TODAY)
        assert validate_personal_info(info, today=TODAY) == {}

    def test_gender_optional_at_field_level(self, valid_personal_info):
        info = replace(valid_personal_info, gender=None)
        assert validate_personal_info(info, today=TODAY) == {}


class TestValidateContactInfo:
    """Test suite for validate_contact_info."""

    def test_valid_contact(self, valid_contact_info):
        assert validate_contact_info(valid_contact_info) == {}

    def test_address_errors_are_prefixed(self, valid_contact_info, valid_address):
        # Arrange
        contact = replace(valid_contact_info, address=replace(valid_address, postal_code="abc"))

        # Act
        errors = validate_contact_info(contact)

        # Assert
        assert list(errors) == ["address.postalCode"]

    def test_address_optional(self):
        contact = ContactInfo(email="ada@example.com", phone_number="08012345678")
        assert validate_contact_info(contact) == {}

    def test_email_and_phone_required(self):
        errors = validate_contact_info(ContactInfo())
        assert codes(errors["email"]) == [ErrorCode.REQUIRED_FIELD]
        assert codes(errors["phoneNumber"]) == [ErrorCode.REQUIRED_FIELD]


class TestValidateNextOfKin:
    """Test suite for validate_next_of_kin."""

    def test_valid_next_of_kin(self, valid_next_of_kin):
        assert validate_next_of_kin(valid_next_of_kin) == {}

    def test_missing_fields(self):
        errors = validate_next_of_kin(NextOfKin())
        assert set(errors) == {"fullName", "relationship", "phoneNumber"}

    def test_email_checked_only_when_present(self, valid_next_of_kin):
        assert validate_next_of_kin(replace(valid_next_of_kin, email="")) == {}
        errors = validate_next_of_kin(replace(valid_next_of_kin, email="bad"))
        assert codes(errors["email"]) == [ErrorCode.INVALID_FORMAT]


class TestValidateFamilyMember:
    """Test suite for validate_family_member."""

    def test_valid_member(self, valid_family_member):
        assert validate_family_member(valid_family_member, today=TODAY) == {}

    def test_empty_member_reports_required_fields(self):
        errors = validate_family_member(FamilyMember(), today=TODAY)
        assert set(errors) == {"firstName", "lastName", "gender", "dateOfBirth", "relationship"}
        assert all(codes(v) == [ErrorCode.REQUIRED_FIELD] for v in errors.values())

    def test_future_birth_date(self, valid_family_member):
        member = replace(valid_family_member, date_of_birth=date(2030, 1, 1))
        errors = validate_family_member(member, today=TODAY)
        assert codes(errors["dateOfBirth"]) == [ErrorCode.FUTURE_DATE]


class TestValidateVitalSigns:
    """Test suite for validate_vital_signs."""

    def test_normal_vitals_have_no_errors(self, valid_vitals):
        assert validate_vital_signs(valid_vitals) == {}

    def test_empty_vitals_have_no_errors(self):
        assert validate_vital_signs(VitalSigns()) == {}

    def test_systolic_300_gives_exactly_one_out_of_range(self, valid_vitals):
        # Arrange
        vitals = replace(valid_vitals, blood_pressure=BloodPressure(systolic=300, diastolic=80))

        # Act
        errors = validate_vital_signs(vitals)

        # Assert
        assert list(errors) == ["bloodPressure.systolic"]
        assert len(errors["bloodPressure.systolic"]) == 1
        error = errors["bloodPressure.systolic"][0]
        assert error.code == ErrorCode.OUT_OF_RANGE
        assert (error.minimum, error.maximum) == (70, 250)

    def test_zero_values_are_skipped(self):
        vitals = VitalSigns(
            blood_pressure=BloodPressure(systolic=0, diastolic=0),
            heart_rate=0,
            temperature=0,
            weight=0,
            height=0,
        )
        assert validate_vital_signs(vitals) == {}

    @pytest.mark.parametrize(
        "field_name,value,key",
        [
            ("heart_rate", 29, "heartRate"),
            ("heart_rate", 221, "heartRate"),
            ("temperature", 31.9, "temperature"),
            ("temperature", 45.1, "temperature"),
            ("weight", 0.4, "weight"),
            ("weight", 501, "weight"),
            ("height", 29, "height"),
            ("height", 251, "height"),
        ],
    )
    def test_out_of_range_values(self, field_name, value, key):
        errors = validate_vital_signs(VitalSigns(**{field_name: value}))
        assert list(errors) == [key]
        assert codes(errors[key]) == [ErrorCode.OUT_OF_RANGE]

    @pytest.mark.parametrize(
        "field_name,value",
        [("heart_rate", 30), ("heart_rate", 220), ("temperature", 32.0), ("temperature", 45.0)],
    )
    def test_bounds_are_inclusive(self, field_name, value):
        assert validate_vital_signs(VitalSigns(**{field_name: value})) == {}

    def test_heart_rate_message(self):
        errors = validate_vital_signs(VitalSigns(heart_rate=250))
        assert errors["heartRate"][0].message == "Heart rate must be between 30 and 220"


class TestValidatePatientSubmission:
    """Test suite for validate_patient_submission."""

    def test_valid_personal_submission(self, valid_draft):
        assert validate_patient_submission(AccountType.PERSONAL, valid_draft, today=TODAY) == {}

    def test_gender_required_for_submission(self, valid_draft):
        draft = replace(valid_draft, personal_info=replace(valid_draft.personal_info, gender=None))
        errors = validate_patient_submission(AccountType.PERSONAL, draft, today=TODAY)
        assert codes(errors["gender"]) == [ErrorCode.REQUIRED_FIELD]

    def test_family_without_members_fails(self, valid_draft):
        # Act
        errors = validate_patient_submission(AccountType.FAMILY, valid_draft, [], today=TODAY)

        # Assert
        assert list(errors) == ["familyMembers"]
        assert codes(errors["familyMembers"]) == [ErrorCode.MEMBERS_REQUIRED]
        assert errors["familyMembers"][0].message == "Please add at least one family member"

    def test_family_member_errors_are_indexed(self, valid_draft, valid_family_member):
        members = [valid_family_member, replace(valid_family_member, first_name="")]
        errors = validate_patient_submission(AccountType.FAMILY, valid_draft, members, today=TODAY)
        assert list(errors) == ["familyMembers.1.firstName"]

    def test_personal_account_ignores_members(self, valid_draft):
        errors = validate_patient_submission(
            AccountType.PERSONAL, valid_draft, [FamilyMember()], today=TODAY
        )
        assert errors == {}

    def test_next_of_kin_errors_are_indexed(self, valid_draft):
        draft = replace(valid_draft, next_of_kin=[NextOfKin(full_name="X", relationship="parent")])
        errors = validate_patient_submission(AccountType.PERSONAL, draft, today=TODAY)
        assert list(errors) == ["nextOfKin.0.phoneNumber"]


class TestValidateRegistration:
    """Test suite for validate_registration."""

    def test_vitals_errors_are_prefixed(self, valid_draft):
        draft = RegistrationDraft(
            account_type=AccountType.PERSONAL,
            patient=valid_draft,
            vitals=VitalSigns(heart_rate=10),
        )
        assert list(validate_registration(draft, today=TODAY)) == ["vitals.heartRate"]

    def test_missing_account_type(self, valid_draft):
        draft = RegistrationDraft(patient=valid_draft)
        errors = validate_registration(draft, today=TODAY)
        assert codes(errors["accountType"]) == [ErrorCode.REQUIRED_FIELD]


class TestIdempotence:
    """Validators keep no hidden state."""

    def test_repeated_calls_return_equal_results(self, valid_draft):
        draft = PatientDraft(personal_info=PersonalInfo(), contact_info=ContactInfo(email="x"))
        first = validate_patient_submission(AccountType.FAMILY, draft, [FamilyMember()], today=TODAY)
        second = validate_patient_submission(AccountType.FAMILY, draft, [FamilyMember()], today=TODAY)
        assert first == second
        assert validate_email("bad") == validate_email("bad")
        assert validate_vital_signs(VitalSigns(weight=900)) == validate_vital_signs(
            VitalSigns(weight=900)
        )


class TestErrorMapHelpers:
    """Test suite for has_errors, merge_errors, clear_field_errors and prefix_errors."""

    def test_has_errors(self):
        assert not has_errors({})
        assert not has_errors({"email": []})
        assert has_errors({"email": [FieldError.required()]})

    def test_merge_concatenates_without_dedup(self):
        # Arrange
        first = {"email": [FieldError.required()]}
        second = {"email": [FieldError.required()], "city": [FieldError.required()]}

        # Act
        merged = merge_errors(first, second)

        # Assert
        assert len(merged["email"]) == 2
        assert "city" in merged
        assert len(first["email"]) == 1

    def test_clear_removes_keys_and_copies(self):
        errors = {"email": [FieldError.required()], "city": [FieldError.required()]}
        cleared = clear_field_errors(errors, ["email", "missing"])
        assert list(cleared) == ["city"]
        assert "email" in errors

    def test_prefix(self):
        assert list(prefix_errors({"city": [FieldError.required()]}, "address")) == [
            "address.city"
        ]


class TestPhoneHelpers:
    """Test suite for clean_phone_number and format_phone_number."""

    def test_clean_strips_separators(self):
        assert clean_phone_number("(0801) 234-5678") == "08012345678"

    def test_format_international(self):
        assert format_phone_number("+2348012345678") == "+234 801 234 5678"

    def test_format_local(self):
        assert format_phone_number("08012345678") == "0801 234 5678"

    def test_format_other_unchanged(self):
        assert format_phone_number("8012345678") == "8012345678"


class TestFieldError:
    """Test suite for FieldError."""

    def test_out_of_range_to_dict(self):
        error = FieldError.out_of_range("Weight", 0.5, 500)
        assert error.to_dict() == {
            "code": "OUT_OF_RANGE",
            "message": "Weight must be between 0.5 and 500",
            "field": "Weight",
            "minimum": 0.5,
            "maximum": 500,
        }

    def test_submission_failed_carries_reason(self):
        error = FieldError.submission_failed("Failed to create patient: boom")
        assert error.reason == "Failed to create patient: boom"
        assert error.to_dict()["reason"] == error.reason
