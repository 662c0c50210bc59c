"""Logging setup for the Patient Registration Toolkit.

``configure_logging`` installs two handlers on the root logger:

- a console handler at the requested level
- a rotating file handler that always records DEBUG

Both share a PIIRedactingFormatter. Handlers installed here are tagged so a
later call replaces them without touching handlers owned by someone else
(e.g. pytest's capture handler).
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .formatters import PIIRedactingFormatter

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = Path("logs") / "patient-registration.log"
LOG_FILE_ENV_VAR = "PATIENT_REG_LOG_FILE"
MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

# Attribute set on every handler created by configure_logging
HANDLER_TAG = "_patient_registration_handler"

logger = logging.getLogger(__name__)


def _parse_level(level: str) -> int:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    return numeric_level


def _resolve_log_file(log_file: Optional[Path]) -> Path:
    if log_file is not None:
        return Path(log_file)
    env_log_file = os.environ.get(LOG_FILE_ENV_VAR)
    return Path(env_log_file) if env_log_file else DEFAULT_LOG_FILE


def _tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, HANDLER_TAG, True)
    return handler


def installed_handlers() -> list[logging.Handler]:
    """Return the root handlers created by configure_logging."""
    return [h for h in logging.getLogger().handlers if getattr(h, HANDLER_TAG, False)]


def _remove_installed_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in installed_handlers():
        root_logger.removeHandler(handler)
        handler.close()


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    redact_pii: bool = False,
) -> None:
    """Configure console and rotating file logging.

    Safe to call repeatedly; each call replaces the handlers of the previous one.

    Args:
        level: Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file path. Falls back to $PATIENT_REG_LOG_FILE, then
            logs/patient-registration.log
        redact_pii: Mask patient names, emails and phone numbers in output

    Raises:
        ValueError: If the log level is unknown
        RuntimeError: If the log directory cannot be created

    Example:
        >>> configure_logging(level="DEBUG", redact_pii=True)
    """
    console_level = _parse_level(level)
    log_file = _resolve_log_file(log_file)

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(
            f"Failed to create log directory: {log_file.parent}. "
            f"Ensure write permissions are available. Error: {e}"
        ) from e

    _remove_installed_handlers()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    formatter = PIIRedactingFormatter(fmt=DEFAULT_LOG_FORMAT, redact_pii=redact_pii)

    console_handler = _tag(logging.StreamHandler())
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    try:
        file_handler = _tag(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=MAX_LOG_FILE_SIZE,
                backupCount=BACKUP_COUNT,
                encoding="utf-8",
            )
        )
    except OSError as e:
        root_logger.warning(f"Cannot open log file {log_file}: {e}. Logging to console only.")
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger.debug("Logging configured: level=%s, log_file=%s", level.upper(), log_file)


def set_console_level(level: int) -> None:
    """Change the level of the console handler installed by configure_logging.

    Used by commands that print machine-readable output on the console.
    """
    for handler in installed_handlers():
        if not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger for the specified module.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Registration started")
    """
    return logging.getLogger(module_name)
