"""Audit trail functionality for the Patient Registration Toolkit.

This module provides structured audit logging for registration activity
(patient creation, vitals recording, cancellations) performed by staff.
"""

import time
import uuid
from typing import Any, Dict

from .logger import get_logger

logger = get_logger(__name__)

# Key fields are emitted first, in this order
AUDIT_FIELD_ORDER = [
    "status",
    "step",
    "account_type",
    "patient_id",
    "record_number",
    "staff_id",
    "error_count",
    "error_message",
    "correlation_id",
]


def log_audit_event(event_type: str, details: Dict[str, Any]) -> str:
    """Log an audit trail event.

    Creates a structured audit log entry. Events with ``status="failure"`` are
    logged at ERROR level, everything else at INFO.

    Args:
        event_type: Type of operation (e.g., "PATIENT_CREATED", "VITALS_RECORDED",
                   "REGISTRATION_CANCELLED")
        details: Dictionary with event details. Common fields include:
                - status: "success" or "failure"
                - patient_id / record_number: Registry identifiers
                - staff_id: Staff member performing the registration
                - error_message: Error details (if status is failure)
                - correlation_id: Optional correlation ID for tracking related events

    Returns:
        The correlation ID attached to the event

    Example:
        >>> log_audit_event("PATIENT_CREATED", {
        ...     "status": "success",
        ...     "patient_id": "p1",
        ...     "record_number": "TH123456789",
        ...     "staff_id": "staff-7",
        ... })
    """
    details = dict(details)
    details.setdefault("timestamp", time.time())
    details.setdefault("correlation_id", str(uuid.uuid4()))

    message_parts = [f"AUDIT [{event_type}]"]

    for key in AUDIT_FIELD_ORDER:
        if key in details:
            message_parts.append(f"{key}={details[key]}")

    for key, value in details.items():
        if key not in AUDIT_FIELD_ORDER and key != "timestamp":
            message_parts.append(f"{key}={value}")

    audit_message = " | ".join(message_parts)

    if details.get("status") == "failure":
        logger.error(audit_message)
    else:
        logger.info(audit_message)

    return details["correlation_id"]
