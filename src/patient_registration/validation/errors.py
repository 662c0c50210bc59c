"""Tagged field errors produced by the validation engine.

Validation never raises. Each problem is reported as a FieldError carrying an
ErrorCode plus the payload that code needs, collected in an ErrorMap keyed by
field name (dotted for nested fields, e.g. ``address.postalCode``).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from patient_registration.validation.rules import ERROR_MESSAGES


class ErrorCode(str, Enum):
    """Kinds of field errors."""

    REQUIRED_FIELD = "REQUIRED_FIELD"
    INVALID_FORMAT = "INVALID_FORMAT"
    FUTURE_DATE = "FUTURE_DATE"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    SUBMISSION_FAILED = "SUBMISSION_FAILED"
    MEMBERS_REQUIRED = "MEMBERS_REQUIRED"


@dataclass(frozen=True)
class FieldError:
    """A single validation or submission problem.

    Attributes:
        code: Error kind
        message: Human-readable message for display next to the field
        field: Field label for OUT_OF_RANGE errors (e.g. "Heart rate")
        minimum: Lower bound for OUT_OF_RANGE errors
        maximum: Upper bound for OUT_OF_RANGE errors
        reason: Failure reason for SUBMISSION_FAILED errors
    """

    code: ErrorCode
    message: str
    field: Optional[str] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    reason: Optional[str] = None

    @classmethod
    def required(cls) -> "FieldError":
        return cls(ErrorCode.REQUIRED_FIELD, ERROR_MESSAGES["REQUIRED_FIELD"])

    @classmethod
    def invalid_format(cls, message: str) -> "FieldError":
        return cls(ErrorCode.INVALID_FORMAT, message)

    @classmethod
    def future_date(cls) -> "FieldError":
        return cls(ErrorCode.FUTURE_DATE, ERROR_MESSAGES["FUTURE_DATE"])

    @classmethod
    def out_of_range(cls, field: str, minimum: float, maximum: float) -> "FieldError":
        return cls(
            ErrorCode.OUT_OF_RANGE,
            f"{field} must be between {minimum:g} and {maximum:g}",
            field=field,
            minimum=minimum,
            maximum=maximum,
        )

    @classmethod
    def submission_failed(cls, reason: str) -> "FieldError":
        return cls(ErrorCode.SUBMISSION_FAILED, reason, reason=reason)

    @classmethod
    def members_required(cls) -> "FieldError":
        return cls(ErrorCode.MEMBERS_REQUIRED, ERROR_MESSAGES["MEMBERS_REQUIRED"])

    def to_dict(self) -> dict[str, Any]:
        """Export as a JSON-serializable dictionary, omitting empty payload fields."""
        data: dict[str, Any] = {"code": self.code.value, "message": self.message}
        for key in ("field", "minimum", "maximum", "reason"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


ErrorMap = dict[str, list[FieldError]]
