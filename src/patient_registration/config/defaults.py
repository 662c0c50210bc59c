"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Default configuration dictionary
# This is used as a fallback when no configuration file is present
DEFAULT_CONFIG: dict[str, Any] = {
    "api": {
        # Default to the local mock backend
        "base_url": "http://localhost:8080",
        "staff_id": None,
    },
    "transport": {
        "verify_tls": True,
        "timeout_connect": 10,
        "timeout_read": 30,
        # Retries happen in the HTTP adapter only; the workflow never retries
        "max_retries": 3,
        "backoff_factor": 0.3,
        "max_connections": 10,
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/patient-registration.log",
        # Do not redact PII by default (user must opt-in for privacy)
        "redact_pii": False,
    },
    "registration": {
        "vitals_optional": True,
        "check_duplicates": False,
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/config.json"
