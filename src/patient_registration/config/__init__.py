"""Config module.

This module provides configuration management functionality.
"""

from patient_registration.config.manager import load_config
from patient_registration.config.schema import (
    ApiConfig,
    Config,
    LoggingConfig,
    RegistrationConfig,
    TransportConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    # Configuration models
    "ApiConfig",
    "Config",
    "LoggingConfig",
    "RegistrationConfig",
    "TransportConfig",
]
