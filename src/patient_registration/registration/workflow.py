"""Registration workflow state machine.

This module drives a single registration through its steps:

    ACCOUNT_TYPE -> PERSONAL_FORM | FAMILY_FORM -> VITALS -> CONFIRMATION

Every forward transition is gated on the validation engine, and persistence is
delegated to a PatientRegistry collaborator. Calls that the current step does
not accept are rejected with a warning and leave the state untouched.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Callable, Optional, Sequence

from patient_registration.logging_audit import get_logger, log_audit_event
from patient_registration.models.patient import (
    AccountType,
    FamilyMember,
    NextOfKin,
    PatientDraft,
    VitalSigns,
)
from patient_registration.models.responses import CreatedPatient
from patient_registration.registration.ports import PatientRegistry
from patient_registration.utils.exceptions import (
    PatientRegistrationError,
    create_error_info,
)
from patient_registration.validation.errors import ErrorMap, FieldError
from patient_registration.validation.rules import ERROR_MESSAGES
from patient_registration.validation.validator import (
    has_errors,
    validate_patient_submission,
    validate_vital_signs,
)

logger = get_logger(__name__)

SUBMIT_ERROR_KEY = "submit"
VITALS_ERROR_KEY = "vitals"


class RegistrationStep(str, Enum):
    """Steps of the registration wizard."""

    ACCOUNT_TYPE = "account_type"
    PERSONAL_FORM = "personal_form"
    FAMILY_FORM = "family_form"
    VITALS = "vitals"
    CONFIRMATION = "confirmation"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STEPS = frozenset({RegistrationStep.COMPLETED, RegistrationStep.CANCELLED})

# Operations accepted in each step
TRANSITIONS: dict[RegistrationStep, frozenset[str]] = {
    RegistrationStep.ACCOUNT_TYPE: frozenset({"select_account_type", "cancel"}),
    RegistrationStep.PERSONAL_FORM: frozenset({"submit_patient_form", "cancel"}),
    RegistrationStep.FAMILY_FORM: frozenset({"submit_patient_form", "cancel"}),
    RegistrationStep.VITALS: frozenset({"submit_vitals", "skip_vitals", "cancel"}),
    RegistrationStep.CONFIRMATION: frozenset({"acknowledge_confirmation", "cancel"}),
    RegistrationStep.COMPLETED: frozenset(),
    RegistrationStep.CANCELLED: frozenset(),
}

FORM_STEPS = {
    AccountType.PERSONAL: RegistrationStep.PERSONAL_FORM,
    AccountType.FAMILY: RegistrationStep.FAMILY_FORM,
}


@dataclass
class RegistrationState:
    """Mutable state of one registration.

    Attributes:
        current_step: Step the wizard is on
        account_type: Selected account type, None until chosen
        patient_draft: Last submitted primary patient data
        family_members: Last submitted family members
        vitals: Last submitted vital signs
        is_submitting: True while a collaborator call is in flight
        errors: Field errors from the last rejected submission
        created_patient: Identifiers assigned by the registry, set once
        vitals_skipped: Whether the vitals step was skipped
    """

    current_step: RegistrationStep = RegistrationStep.ACCOUNT_TYPE
    account_type: Optional[AccountType] = None
    patient_draft: Optional[PatientDraft] = None
    family_members: list[FamilyMember] = field(default_factory=list)
    vitals: Optional[VitalSigns] = None
    is_submitting: bool = False
    errors: ErrorMap = field(default_factory=dict)
    created_patient: Optional[CreatedPatient] = None
    vitals_skipped: bool = False


class RegistrationWorkflow:
    """Sequencer for one patient registration.

    Attributes:
        registry: Collaborator that persists patients and vitals
        staff_id: Staff member recorded as creator of the patient and vitals
        vitals_optional: Whether the vitals step may be skipped

    Example:
        >>> workflow = RegistrationWorkflow(registry, staff_id="staff-7")
        >>> workflow.select_account_type(AccountType.PERSONAL)
        True
        >>> await workflow.submit_patient_form(draft)
        True
        >>> workflow.skip_vitals()
        True
        >>> workflow.acknowledge_confirmation()
        CreatedPatient(patient_id='p1', record_number='TH001')
    """

    def __init__(
        self,
        registry: PatientRegistry,
        staff_id: str,
        vitals_optional: bool = True,
        on_complete: Optional[Callable[[str, str], None]] = None,
        today: Optional[date] = None,
    ) -> None:
        """Initialize a workflow at the ACCOUNT_TYPE step.

        Args:
            registry: PatientRegistry implementation
            staff_id: Staff member performing the registration
            vitals_optional: Allow skip_vitals() (defaults to True)
            on_complete: Called with (patient_id, record_number) on acknowledgement
            today: Reference date for date of birth checks (defaults to today)
        """
        self.registry = registry
        self.staff_id = staff_id
        self.vitals_optional = vitals_optional
        self._on_complete = on_complete
        self._today = today
        self._state = RegistrationState()

    @property
    def state(self) -> RegistrationState:
        return self._state

    @property
    def current_step(self) -> RegistrationStep:
        return self._state.current_step

    @property
    def errors(self) -> ErrorMap:
        return self._state.errors

    @property
    def is_submitting(self) -> bool:
        return self._state.is_submitting

    @property
    def created_patient(self) -> Optional[CreatedPatient]:
        return self._state.created_patient

    @property
    def is_finished(self) -> bool:
        return self._state.current_step in TERMINAL_STEPS

    def snapshot(self) -> dict:
        """Summarize the workflow state for display or logging."""
        created = self._state.created_patient
        return {
            "step": self._state.current_step.value,
            "account_type": self._state.account_type.value if self._state.account_type else None,
            "is_submitting": self._state.is_submitting,
            "errors": {
                key: [error.to_dict() for error in field_errors]
                for key, field_errors in self._state.errors.items()
            },
            "patient_id": created.patient_id if created else None,
            "record_number": created.record_number if created else None,
            "vitals_skipped": self._state.vitals_skipped,
        }

    def _accepts(self, operation: str) -> bool:
        step = self._state.current_step
        if operation not in TRANSITIONS[step]:
            logger.warning(f"Rejected {operation}: not allowed in step {step.value}")
            return False
        return True

    def _busy(self, operation: str) -> bool:
        if self._state.is_submitting:
            logger.warning(f"Ignored {operation}: a submission is already in progress")
            return True
        return False

    def _audit(self, event_type: str, **details) -> None:
        details.setdefault("step", self._state.current_step.value)
        details.setdefault("staff_id", self.staff_id)
        if self._state.account_type is not None:
            details.setdefault("account_type", self._state.account_type.value)
        log_audit_event(event_type, details)

    def _submission_failure(self, exception: Exception, summary: str) -> FieldError:
        error_info = create_error_info(exception)
        if isinstance(exception, PatientRegistrationError):
            logger.error(
                f"{summary}: {error_info.message} "
                f"(category={error_info.category.value}, retryable={error_info.is_retryable}). "
                f"{error_info.remediation}"
            )
        else:
            logger.error(
                f"{summary}: unexpected error: {exception}. {error_info.remediation}",
                exc_info=True,
            )
        return FieldError.submission_failed(
            f"{summary}: {error_info.message}. {error_info.remediation}"
        )

    def select_account_type(self, account_type: AccountType) -> bool:
        """Record the account type and move to the matching form.

        Args:
            account_type: PERSONAL or FAMILY

        Returns:
            True if the transition happened
        """
        if not self._accepts("select_account_type"):
            return False

        account_type = AccountType(account_type)
        self._state.account_type = account_type
        self._state.errors = {}
        self._state.current_step = FORM_STEPS[account_type]

        logger.info(f"Account type selected: {account_type.value}")
        self._audit("ACCOUNT_TYPE_SELECTED", status="success")
        return True

    async def submit_patient_form(
        self,
        draft: PatientDraft,
        family_members: Sequence[FamilyMember] = (),
        next_of_kin: Optional[Sequence[NextOfKin]] = None,
    ) -> bool:
        """Validate the form and create the patient through the registry.

        On validation failure the errors are stored and the registry is not
        called. On registry failure a SUBMISSION_FAILED error is stored under
        ``submit``. The drafts are kept on the state in both cases.

        Args:
            draft: Primary patient data
            family_members: Additional members (family form only)
            next_of_kin: Emergency contacts, replacing ``draft.next_of_kin`` when given

        Returns:
            True if the patient was created and the workflow moved to VITALS
        """
        if self._busy("submit_patient_form") or not self._accepts("submit_patient_form"):
            return False

        if next_of_kin is not None:
            draft = replace(draft, next_of_kin=list(next_of_kin))

        account_type = self._state.account_type
        members = list(family_members) if account_type == AccountType.FAMILY else []
        self._state.patient_draft = draft
        self._state.family_members = members

        errors = validate_patient_submission(account_type, draft, members, today=self._today)
        if has_errors(errors):
            self._state.errors = errors
            logger.info(f"Patient form rejected: {len(errors)} field(s) with errors")
            self._audit("VALIDATION_FAILED", status="failure", error_count=len(errors))
            return False

        self._state.errors = {}
        self._state.is_submitting = True
        logger.info(
            f"Submitting {account_type.value} registration - Patient: {draft.personal_info.full_name}"
        )

        try:
            created = await self.registry.create_patient(
                account_type,
                draft.personal_info,
                draft.next_of_kin,
                members,
                self.staff_id,
                contact_info=draft.contact_info,
            )
        except Exception as e:
            failure = self._submission_failure(e, ERROR_MESSAGES["CREATE_FAILED"])
            if self._state.current_step == RegistrationStep.CANCELLED:
                logger.warning("Patient creation failed after the registration was cancelled")
                return False
            self._state.errors = {SUBMIT_ERROR_KEY: [failure]}
            self._audit("PATIENT_CREATE_FAILED", status="failure", error_message=failure.reason)
            return False
        finally:
            self._state.is_submitting = False

        self._state.created_patient = created

        if self._state.current_step == RegistrationStep.CANCELLED:
            logger.warning(
                f"Patient {created.patient_id} ({created.record_number}) was created after the "
                "registration was cancelled; the record is kept"
            )
            self._audit(
                "PATIENT_CREATED",
                status="success",
                patient_id=created.patient_id,
                record_number=created.record_number,
                note="created after cancellation",
            )
            return False

        self._state.current_step = RegistrationStep.VITALS
        logger.info(f"Patient created: {created.patient_id} ({created.record_number})")
        self._audit(
            "PATIENT_CREATED",
            status="success",
            patient_id=created.patient_id,
            record_number=created.record_number,
        )
        return True

    async def submit_vitals(self, vitals: VitalSigns) -> bool:
        """Validate vital signs and record them for the created patient.

        Args:
            vitals: Vital signs to record

        Returns:
            True if the vitals were recorded and the workflow moved to CONFIRMATION
        """
        if self._busy("submit_vitals") or not self._accepts("submit_vitals"):
            return False

        self._state.vitals = vitals
        errors = validate_vital_signs(vitals)
        if has_errors(errors):
            self._state.errors = errors
            logger.info(f"Vital signs rejected: {len(errors)} field(s) out of range")
            self._audit("VALIDATION_FAILED", status="failure", error_count=len(errors))
            return False

        patient_id = self._state.created_patient.patient_id
        self._state.errors = {}
        self._state.is_submitting = True

        try:
            await self.registry.record_vitals(patient_id, vitals, self.staff_id)
        except Exception as e:
            failure = self._submission_failure(e, ERROR_MESSAGES["VITALS_FAILED"])
            if self._state.current_step == RegistrationStep.CANCELLED:
                return False
            self._state.errors = {VITALS_ERROR_KEY: [failure]}
            self._audit(
                "VITALS_RECORDED",
                status="failure",
                patient_id=patient_id,
                error_message=failure.reason,
            )
            return False
        finally:
            self._state.is_submitting = False

        if self._state.current_step == RegistrationStep.CANCELLED:
            logger.warning(f"Vitals for patient {patient_id} were recorded after cancellation")
            self._audit("VITALS_RECORDED", status="success", patient_id=patient_id)
            return False

        self._state.current_step = RegistrationStep.CONFIRMATION
        logger.info(f"Vital signs recorded for patient {patient_id}")
        self._audit("VITALS_RECORDED", status="success", patient_id=patient_id)
        return True

    def skip_vitals(self) -> bool:
        """Move from VITALS to CONFIRMATION without recording vitals.

        Returns:
            True if the step was skipped; False when vitals are mandatory
        """
        if self._busy("skip_vitals") or not self._accepts("skip_vitals"):
            return False

        if not self.vitals_optional:
            logger.warning("Rejected skip_vitals: vitals are required by configuration")
            return False

        self._state.errors = {}
        self._state.vitals_skipped = True
        self._state.current_step = RegistrationStep.CONFIRMATION
        self._audit(
            "VITALS_SKIPPED",
            status="success",
            patient_id=self._state.created_patient.patient_id,
        )
        return True

    def acknowledge_confirmation(self) -> Optional[CreatedPatient]:
        """Finish the registration and report the created patient.

        Returns:
            The created patient, or None if the call was rejected
        """
        if not self._accepts("acknowledge_confirmation"):
            return None

        created = self._state.created_patient
        self._state.current_step = RegistrationStep.COMPLETED
        logger.info(f"Registration completed: {created.patient_id} ({created.record_number})")
        self._audit(
            "REGISTRATION_COMPLETED",
            status="success",
            patient_id=created.patient_id,
            record_number=created.record_number,
        )

        if self._on_complete is not None:
            self._on_complete(created.patient_id, created.record_number)

        return created

    def cancel(self) -> bool:
        """Abandon the registration from any non-terminal step.

        An already-created patient is not removed from the registry.

        Returns:
            True if the workflow moved to CANCELLED
        """
        if not self._accepts("cancel"):
            return False

        previous_step = self._state.current_step
        created = self._state.created_patient
        if created is not None:
            logger.warning(
                f"Registration cancelled after patient {created.patient_id} "
                f"({created.record_number}) was created; the record is not rolled back"
            )
        if self._state.is_submitting:
            logger.warning("Registration cancelled while a submission is in flight")

        self._state.current_step = RegistrationStep.CANCELLED
        self._audit(
            "REGISTRATION_CANCELLED",
            status="success",
            step=previous_step.value,
            patient_id=created.patient_id if created else None,
        )
        return True
