"""Logging Audit module.

This module provides logging configuration and audit trail functionality.
"""

from .audit import log_audit_event
from .formatters import PIIRedactingFormatter, redact
from .logger import configure_logging, get_logger, set_console_level

__all__ = [
    "configure_logging",
    "get_logger",
    "log_audit_event",
    "PIIRedactingFormatter",
    "redact",
    "set_console_level",
]
