"""Configuration management for the mock patient registry."""

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from patient_registration.config.schema import VALID_LOG_LEVELS

DEFAULT_MOCK_CONFIG_PATH = Path("mocks/config.json")
ENV_PREFIX = "MOCK_SERVER_"


class MockServerConfig(BaseModel):
    """Mock server configuration model.

    Configuration precedence:
    1. Environment variables (MOCK_SERVER_* prefix)
    2. JSON config file
    3. Default values

    Attributes:
        host: Server host address
        http_port: HTTP server port
        log_level: Logging level
        log_path: Rotating log file path
        response_delay_ms: Delay added to every patient endpoint response
        failure_rate: Probability that a create/vitals request fails with HTTP 500
        failure_message: Message returned with simulated failures
    """

    host: str = Field(default="0.0.0.0", description="Server host address")
    http_port: int = Field(default=8080, description="HTTP server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_path: str = Field(default="mocks/logs/mock-server.log", description="Log file path")
    response_delay_ms: int = Field(
        default=0,
        ge=0,
        le=5000,
        description="Response delay in milliseconds",
    )
    failure_rate: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Probability of a simulated registry failure (0.0-1.0)",
    )
    failure_message: str = Field(
        default="Simulated registry failure",
        description="Error message returned on simulated failures",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        return v_upper

    @field_validator("http_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Invalid port {v}. Must be between 1 and 65535.")
        return v


_NUMERIC_FIELDS = {"http_port": int, "response_delay_ms": int, "failure_rate": float}


def load_config(config_file: Path | None = None) -> MockServerConfig:
    """Load mock server configuration from file and environment variables.

    Args:
        config_file: Path to configuration JSON file. Defaults to mocks/config.json

    Returns:
        MockServerConfig instance with merged configuration

    Raises:
        FileNotFoundError: If config file specified but not found
        ValueError: If configuration is invalid
    """
    if config_file is None:
        config_file = DEFAULT_MOCK_CONFIG_PATH

    config_data = {}
    if config_file.exists():
        try:
            with open(config_file, encoding="utf-8") as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Failed to parse configuration file '{config_file}': {e}. "
                f"Ensure the file contains valid JSON."
            ) from e
    elif config_file != DEFAULT_MOCK_CONFIG_PATH:
        raise FileNotFoundError(
            f"Configuration file not found: '{config_file}'. "
            f"Ensure the file exists or check the path."
        )

    for key in MockServerConfig.model_fields:
        env_key = f"{ENV_PREFIX}{key.upper()}"
        if env_key not in os.environ:
            continue
        value = os.environ[env_key]
        if key in _NUMERIC_FIELDS:
            convert = _NUMERIC_FIELDS[key]
            try:
                value = convert(value)
            except ValueError as e:
                raise ValueError(
                    f"Invalid value for {env_key}: '{value}'. Must be a {convert.__name__}."
                ) from e
        config_data[key] = value

    try:
        return MockServerConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}") from e
