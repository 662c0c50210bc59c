"""Registration module.

This module provides the registration workflow state machine, the registry
port it depends on, the REST implementation of that port and draft loading.
"""

from patient_registration.registration.api_client import PatientRegistryClient
from patient_registration.registration.draft_loader import (
    load_registration_file,
    parse_registration,
)
from patient_registration.registration.ports import PatientRegistry
from patient_registration.registration.workflow import (
    RegistrationState,
    RegistrationStep,
    RegistrationWorkflow,
    TRANSITIONS,
)

__all__ = [
    "PatientRegistry",
    "PatientRegistryClient",
    "RegistrationState",
    "RegistrationStep",
    "RegistrationWorkflow",
    "TRANSITIONS",
    "load_registration_file",
    "parse_registration",
]
