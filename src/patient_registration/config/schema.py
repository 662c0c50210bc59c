"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ApiConfig(BaseModel):
    """Configuration for the patient registry REST API.

    Attributes:
        base_url: Base URL of the hospital backend (e.g. http://localhost:8080)
        staff_id: Default staff identifier recorded as creator of registrations
    """

    base_url: str = Field(..., description="Patient registry base URL")
    staff_id: Optional[str] = Field(
        default=None,
        description="Default staff ID used for createdBy/recordedBy",
    )

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL is valid HTTP/HTTPS and strip any trailing slash.

        Args:
            v: URL string to validate

        Returns:
            Validated URL string

        Raises:
            ValueError: If URL does not start with http:// or https://
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid URL: {v}. Must start with http:// or https://"
            )
        return v.rstrip("/")


class TransportConfig(BaseModel):
    """Configuration for HTTP/HTTPS transport.

    Attributes:
        verify_tls: Whether to verify TLS certificates
        timeout_connect: Connection timeout in seconds
        timeout_read: Read timeout in seconds
        max_retries: Maximum retry attempts inside the HTTP adapter
        backoff_factor: Exponential backoff factor for retries
        max_connections: Size of the HTTP connection pool
    """

    verify_tls: bool = True
    timeout_connect: int = Field(default=10, ge=1, description="Connection timeout in seconds")
    timeout_read: int = Field(default=30, ge=1, description="Read timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="Maximum retry attempts")
    backoff_factor: float = Field(default=0.3, ge=0.0, description="Exponential backoff factor")
    max_connections: int = Field(default=10, ge=1, le=50, description="Connection pool size")


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_pii: Whether to redact PII from logs
    """

    level: str = Field(default="INFO", description="Log level")
    log_file: Path = Field(
        default=Path("logs/patient-registration.log"),
        description="Log file path",
    )
    redact_pii: bool = Field(default=False, description="Redact PII from logs")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level.

        Args:
            v: Log level string

        Returns:
            Validated log level (uppercase)

        Raises:
            ValueError: If log level is not valid
        """
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        return v_upper


class RegistrationConfig(BaseModel):
    """Registration workflow behaviour.

    Attributes:
        vitals_optional: Whether the vitals step may be skipped
        check_duplicates: Whether the CLI queries the registry for duplicates
            before submitting a patient
    """

    vitals_optional: bool = Field(default=True, description="Allow skipping vitals")
    check_duplicates: bool = Field(
        default=False,
        description="Check for duplicate patients before registering",
    )


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        api: Patient registry API configuration
        transport: HTTP/HTTPS transport configuration
        logging: Logging configuration
        registration: Registration workflow configuration

    Example:
        >>> config = Config(api=ApiConfig(base_url="http://localhost:8080"))
        >>> config.registration.vitals_optional
        True
    """

    api: ApiConfig
    transport: TransportConfig = TransportConfig()
    logging: LoggingConfig = LoggingConfig()
    registration: RegistrationConfig = RegistrationConfig()
