"""Validation rule table for patient registration.

Patterns and clinical ranges used by the validator. Phone and postal code
grammars follow Nigerian conventions (+234/0 trunk prefix, 6-digit postcodes).
"""

import re
from dataclasses import dataclass

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

# Optional +234 or 0 prefix, then a 7/8/9 network digit, 0/1, and 8 digits
PHONE_PATTERN = re.compile(r"^(\+234|0)?[789][01]\d{8}$", re.ASCII)

# Characters stripped from phone numbers before matching
PHONE_SEPARATORS = re.compile(r"[\s\-()]")

POSTAL_CODE_DIGITS = 6
POSTAL_CODE_PATTERN = re.compile(rf"^\d{{{POSTAL_CODE_DIGITS}}}$", re.ASCII)


@dataclass(frozen=True)
class VitalRange:
    """Inclusive clinical bounds for one vital sign.

    Attributes:
        key: Error map key for the field
        label: Display name used in messages
        minimum: Lowest accepted value
        maximum: Highest accepted value
    """

    key: str
    label: str
    minimum: float
    maximum: float

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


SYSTOLIC_RANGE = VitalRange("bloodPressure.systolic", "Systolic blood pressure", 70, 250)
DIASTOLIC_RANGE = VitalRange("bloodPressure.diastolic", "Diastolic blood pressure", 40, 150)
HEART_RATE_RANGE = VitalRange("heartRate", "Heart rate", 30, 220)
TEMPERATURE_RANGE = VitalRange("temperature", "Temperature", 32.0, 45.0)  # Celsius
WEIGHT_RANGE = VitalRange("weight", "Weight", 0.5, 500)  # kg
HEIGHT_RANGE = VitalRange("height", "Height", 30, 250)  # cm

ERROR_MESSAGES = {
    "REQUIRED_FIELD": "This field is required",
    "INVALID_EMAIL": "Please enter a valid email address",
    "INVALID_PHONE": "Please enter a valid Nigerian phone number",
    "INVALID_POSTAL_CODE": f"Please enter a valid {POSTAL_CODE_DIGITS}-digit postal code",
    "FUTURE_DATE": "Date of birth cannot be in the future",
    "MEMBERS_REQUIRED": "Please add at least one family member",
    "CREATE_FAILED": "Failed to create patient",
    "VITALS_FAILED": "Failed to record vitals",
}
