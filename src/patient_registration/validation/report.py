"""Human-readable and JSON reporting for validation results."""

from dataclasses import dataclass, field
from typing import Any, Optional

from patient_registration.validation.errors import ErrorMap, FieldError
from patient_registration.validation.validator import has_errors

MAX_DISPLAYED_ERRORS = 20


@dataclass
class ValidationReport:
    """Validation outcome for one registration draft.

    Attributes:
        errors: Field errors keyed by dotted field name
        source: Where the draft came from (file path), shown in the report header
        account_type: Account type of the validated draft
        family_member_count: Number of family members in the draft
        has_vitals: Whether the draft carried vital signs
    """

    errors: ErrorMap = field(default_factory=dict)
    source: Optional[str] = None
    account_type: Optional[str] = None
    family_member_count: int = 0
    has_vitals: bool = False

    @property
    def is_valid(self) -> bool:
        """Check that no field carries an error."""
        return not has_errors(self.errors)

    @property
    def error_count(self) -> int:
        """Total number of field errors across all fields."""
        return sum(len(field_errors) for field_errors in self.errors.values())

    def _flatten(self) -> list[tuple[str, FieldError]]:
        return [
            (key, error)
            for key in sorted(self.errors)
            for error in self.errors[key]
        ]

    def format_report(self) -> str:
        """Format validation results as human-readable report.

        Returns:
            Multi-line string with a summary and the field errors
        """
        lines = []
        lines.append("=" * 60)
        lines.append("REGISTRATION VALIDATION REPORT")
        lines.append("=" * 60)
        lines.append("")

        lines.append("SUMMARY:")
        if self.source:
            lines.append(f"  Source: {self.source}")
        lines.append(f"  Account type: {self.account_type or 'not selected'}")
        lines.append(f"  Family members: {self.family_member_count}")
        lines.append(f"  Vitals included: {'yes' if self.has_vitals else 'no'}")
        lines.append(f"  Fields with errors: {len(self.errors)}")
        lines.append("")

        flattened = self._flatten()
        if flattened:
            lines.append(f"ERRORS ({len(flattened)}):")
            for key, error in flattened[:MAX_DISPLAYED_ERRORS]:
                lines.append(f"  [{key}] {error.code.value}: {error.message}")
            if len(flattened) > MAX_DISPLAYED_ERRORS:
                lines.append(
                    f"  ... and {len(flattened) - MAX_DISPLAYED_ERRORS} more errors"
                )
            lines.append("")

        lines.append("=" * 60)
        if self.is_valid:
            lines.append("RESULT: ✓ All validations passed")
        else:
            lines.append("RESULT: ✗ Validation failed - please fix errors above")
        lines.append("=" * 60)

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Export validation results as structured dictionary for JSON serialization."""
        return {
            "source": self.source,
            "account_type": self.account_type,
            "family_member_count": self.family_member_count,
            "has_vitals": self.has_vitals,
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "errors": {
                key: [error.to_dict() for error in field_errors]
                for key, field_errors in sorted(self.errors.items())
            },
        }
