"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading and management functionality,
including support for JSON configuration files, environment variable overrides,
and configuration validation.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from patient_registration.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from patient_registration.config.schema import Config
from patient_registration.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "PATIENT_REG_"


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string.

    Args:
        value: String value to parse (case-insensitive)

    Returns:
        Boolean value
    """
    return value.lower() in ("true", "1", "yes", "on")


# Environment variable suffix -> (section, field, converter)
ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "API_BASE_URL": ("api", "base_url", str),
    "STAFF_ID": ("api", "staff_id", str),
    "VERIFY_TLS": ("transport", "verify_tls", _parse_bool),
    "TIMEOUT_CONNECT": ("transport", "timeout_connect", int),
    "TIMEOUT_READ": ("transport", "timeout_read", int),
    "MAX_RETRIES": ("transport", "max_retries", int),
    "BACKOFF_FACTOR": ("transport", "backoff_factor", float),
    "MAX_CONNECTIONS": ("transport", "max_connections", int),
    "LOG_LEVEL": ("logging", "level", str),
    "LOG_FILE": ("logging", "log_file", str),
    "REDACT_PII": ("logging", "redact_pii", _parse_bool),
    "VITALS_OPTIONAL": ("registration", "vitals_optional", _parse_bool),
    "CHECK_DUPLICATES": ("registration", "check_duplicates", _parse_bool),
}


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (PATIENT_REG_* prefix)
    3. Configuration file (JSON)
    4. Default values

    Args:
        config_path: Path to configuration file. If None, uses ./config/config.json

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If configuration is invalid or malformed

    Example:
        >>> config = load_config(Path("custom/config.json"))
        >>> base_url = config.api.base_url
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)

    config_dict = _load_config_file(config_path)
    config_dict = _apply_env_overrides(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and ensure all "
            f"values match the expected format. See documentation for details."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If JSON is malformed or file is unreadable
    """
    if not config_path.exists():
        logger.info(
            f"Config file not found: {config_path}. Using default configuration."
        )
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in config file: {config_path}\n"
            f"Error: {e}\n"
            f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read config file: {config_path}\n"
            f"Error: {e}\n"
            f"Fix: Check file permissions and path"
        ) from e

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Config file must contain a JSON object: {config_path}\n"
            f"Fix: Use examples/config.example.json as template"
        )

    logger.info(f"Loaded configuration from {config_path}")
    return config_dict


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with PATIENT_REG_ prefix.

    Environment variables follow the pattern: PATIENT_REG_<FIELD>
    For example: PATIENT_REG_API_BASE_URL, PATIENT_REG_LOG_LEVEL

    Args:
        config_dict: Configuration dictionary to update

    Returns:
        Updated configuration dictionary with environment overrides applied

    Raises:
        ConfigurationError: If a numeric override cannot be parsed
    """
    for suffix, (section, field_name, convert) in ENV_OVERRIDES.items():
        env_key = f"{ENV_PREFIX}{suffix}"
        if raw_value := os.getenv(env_key):
            try:
                value = convert(raw_value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {env_key}: '{raw_value}'.\n"
                    f"Fix: Provide a valid {convert.__name__} value"
                ) from e
            config_dict.setdefault(section, {})[field_name] = value
            logger.debug(f"Override: {field_name} from environment")

    return config_dict
