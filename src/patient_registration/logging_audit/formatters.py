"""Log formatters for the Patient Registration Toolkit."""

import logging
import re

# (pattern, replacement) pairs applied in order
REDACTION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # ada.lovelace@example.com
    (re.compile(r"\b[\w.!#$%&'*+/=?^`{|}~-]+@[\w-]+(?:\.[\w-]+)+\b"), "[EMAIL-REDACTED]"),
    # +2348012345678, 0801 234 5678, 080-1234-5678
    (re.compile(r"(?<!\w)(?:\+234|0)[789][01][\d\s()-]{7,12}\d\b"), "[PHONE-REDACTED]"),
    # name="Ada Lovelace", name=Ada (audit key=value fields)
    (re.compile(r'name=["\']?([^"\'|,]+)["\']?'), "name=[NAME-REDACTED]"),
    # "Patient: Ada Lovelace", "Name: Ada Lovelace"
    (re.compile(r"(Patient|Name):\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)+)"), r"\1: [NAME-REDACTED]"),
]


def redact(text: str) -> str:
    """Mask emails, phone numbers and patient names in ``text``."""
    for pattern, replacement in REDACTION_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class PIIRedactingFormatter(logging.Formatter):
    """Formatter that optionally masks patient PII in the rendered record.

    Registration logs mention patient names, email addresses and phone
    numbers. Record numbers and patient ids are left intact so log lines can
    still be correlated with the registry.

    Example:
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(PIIRedactingFormatter(redact_pii=True))
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_pii: bool = False,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_pii = redact_pii

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        return redact(formatted) if self.redact_pii else formatted
