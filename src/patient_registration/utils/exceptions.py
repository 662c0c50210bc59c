"""Custom exception classes for the Patient Registration Toolkit.

All exceptions inherit from PatientRegistrationError to allow catching all custom
exceptions. Field-level validation problems are reported as error maps, not
exceptions; the classes here cover configuration, registry calls and input loading.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests


class PatientRegistrationError(Exception):
    """Base exception for all Patient Registration Toolkit custom exceptions."""

    pass


class ValidationError(PatientRegistrationError):
    """Raised when data is rejected outright rather than reported field by field.

    Examples:
        - Registry rejected the submitted patient (HTTP 400/422)
        - Response body missing required identifiers
    """

    pass


class ConfigurationError(PatientRegistrationError):
    """Raised when configuration loading or validation fails.

    Examples:
        - Missing required configuration
        - Invalid configuration file format
        - Configuration value out of range
    """

    pass


class RegistryError(PatientRegistrationError):
    """Raised when the patient registry collaborator fails a request.

    The original ``requests`` exception, if any, is chained as ``__cause__``.

    Attributes:
        status_code: HTTP status code returned by the registry, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DraftLoadError(PatientRegistrationError):
    """Raised when a registration draft file cannot be loaded.

    Examples:
        - File not found
        - Malformed JSON
        - Unknown gender, relationship or account type value
    """

    pass


class ErrorCategory(Enum):
    """Error categorization for handling strategy.

    Attributes:
        TRANSIENT: Resubmitting may succeed (network issues, timeouts, 5xx)
        PERMANENT: Resubmitting the same data will fail again (4xx, rejected data)
        CRITICAL: Operator action required (configuration, endpoint unreachable, TLS)
    """

    TRANSIENT = "TRANSIENT"
    PERMANENT = "PERMANENT"
    CRITICAL = "CRITICAL"


@dataclass
class ErrorInfo:
    """Structured error information for actionable error handling.

    Attributes:
        category: Error category (TRANSIENT, PERMANENT, CRITICAL)
        error_type: Exception class name (e.g., "RegistryError")
        message: User-friendly error message
        remediation: Actionable guidance for resolving the error
        is_retryable: Whether resubmitting may succeed
        technical_details: Optional technical details for debugging
        patient_id: Optional patient ID if the error relates to a created patient
    """

    category: ErrorCategory
    error_type: str
    message: str
    remediation: str
    is_retryable: bool
    technical_details: Optional[str] = None
    patient_id: Optional[str] = None


def categorize_error(exception: Exception) -> ErrorCategory:
    """Categorize exception for error handling strategy.

    Args:
        exception: The exception to categorize

    Returns:
        ErrorCategory indicating handling strategy

    Example:
        >>> categorize_error(RegistryError("Server error", status_code=503))
        <ErrorCategory.TRANSIENT: 'TRANSIENT'>
        >>> categorize_error(ValidationError("Invalid data"))
        <ErrorCategory.PERMANENT: 'PERMANENT'>
    """
    # Look through wrappers to the transport-level cause
    cause = exception.__cause__
    if isinstance(exception, RegistryError) and isinstance(cause, Exception):
        if isinstance(cause, requests.RequestException):
            return categorize_error(cause)

    if isinstance(exception, ConfigurationError):
        return ErrorCategory.CRITICAL

    if isinstance(exception, requests.exceptions.SSLError):
        return ErrorCategory.CRITICAL

    if isinstance(exception, requests.ConnectionError):
        return ErrorCategory.CRITICAL

    if isinstance(exception, requests.Timeout):
        return ErrorCategory.TRANSIENT

    status_code = None
    if isinstance(exception, RegistryError):
        status_code = exception.status_code
    elif isinstance(exception, requests.HTTPError) and exception.response is not None:
        status_code = exception.response.status_code

    if status_code is not None:
        if 500 <= status_code < 600:
            return ErrorCategory.TRANSIENT
        if 400 <= status_code < 500:
            return ErrorCategory.PERMANENT

    if isinstance(exception, (ValidationError, DraftLoadError)):
        return ErrorCategory.PERMANENT

    # Unknown collaborator failures may succeed on resubmission
    if isinstance(exception, RegistryError):
        return ErrorCategory.TRANSIENT

    return ErrorCategory.PERMANENT


def create_error_info(
    exception: Exception,
    patient_id: Optional[str] = None,
) -> ErrorInfo:
    """Create structured error information from exception.

    Args:
        exception: Exception that occurred
        patient_id: Optional patient ID the failure relates to

    Returns:
        ErrorInfo with categorization and remediation guidance
    """
    category = categorize_error(exception)

    technical_details = None
    if exception.__cause__ is not None:
        cause = exception.__cause__
        technical_details = f"Caused by: {type(cause).__name__}: {cause}"

    return ErrorInfo(
        category=category,
        error_type=type(exception).__name__,
        message=str(exception) or type(exception).__name__,
        remediation=_generate_remediation(exception, category),
        is_retryable=category == ErrorCategory.TRANSIENT,
        technical_details=technical_details,
        patient_id=patient_id,
    )


def _generate_remediation(exception: Exception, category: ErrorCategory) -> str:
    """Generate actionable remediation message for an error.

    Args:
        exception: Exception that occurred
        category: Error category

    Returns:
        Actionable remediation message
    """
    if isinstance(exception, ConfigurationError):
        return (
            "Configuration error. Check config/config.json for missing or invalid values. "
            "Use examples/config.example.json as template."
        )

    if isinstance(exception, DraftLoadError):
        return (
            "Registration draft could not be read. Check the JSON syntax and that "
            "gender, relationship and accountType use the documented values."
        )

    if isinstance(exception, ValidationError):
        return "The registry rejected the submitted data. Review the form and resubmit."

    if category == ErrorCategory.CRITICAL:
        return (
            "Cannot reach the patient registry. Check: 1) Network connectivity, "
            "2) api.base_url in config.json, 3) TLS settings, 4) The registry is running."
        )

    if category == ErrorCategory.TRANSIENT:
        return "The registry is temporarily unavailable. Please try again."

    return "The registry rejected the request. Review the entered data and try again."
