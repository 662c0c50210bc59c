"""Registration CLI command.

This module provides the ``register`` command, which drives a registration
draft through the workflow against the configured patient registry.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from patient_registration.config.schema import Config
from patient_registration.models.patient import RegistrationDraft
from patient_registration.models.responses import CreatedPatient
from patient_registration.registration.api_client import PatientRegistryClient
from patient_registration.registration.draft_loader import load_registration_file
from patient_registration.registration.workflow import RegistrationStep, RegistrationWorkflow
from patient_registration.utils.exceptions import DraftLoadError
from patient_registration.validation import ValidationReport

logger = logging.getLogger(__name__)


async def run_registration(
    workflow: RegistrationWorkflow,
    draft: RegistrationDraft,
    skip_vitals: bool = False,
) -> Optional[CreatedPatient]:
    """Drive a workflow through every step using the data in a draft.

    Args:
        workflow: Fresh workflow at the ACCOUNT_TYPE step
        draft: Registration data
        skip_vitals: Skip the vitals step even when the draft has vitals

    Returns:
        The created patient, or None if a step was rejected
    """
    if not workflow.select_account_type(draft.account_type):
        return None

    if not await workflow.submit_patient_form(draft.patient, draft.family_members):
        return None

    if draft.vitals is not None and not skip_vitals:
        if not await workflow.submit_vitals(draft.vitals):
            return None
    elif not workflow.skip_vitals():
        return None

    return workflow.acknowledge_confirmation()


async def _register(
    client: PatientRegistryClient,
    workflow: RegistrationWorkflow,
    draft: RegistrationDraft,
    skip_vitals: bool,
) -> Optional[CreatedPatient]:
    created = await run_registration(workflow, draft, skip_vitals)
    if created is not None:
        await client.log_registration_activity(
            "PATIENT_REGISTERED",
            workflow.staff_id,
            f"{draft.account_type.value} registration with "
            f"{len(draft.family_members)} family member(s)",
            patient_id=created.patient_id,
        )
    return created


def _has_duplicates(client: PatientRegistryClient, draft: RegistrationDraft) -> bool:
    info = draft.patient.personal_info
    contact = draft.patient.contact_info
    result = asyncio.run(
        client.check_for_duplicates(
            info.first_name,
            info.last_name,
            email=contact.email if contact else None,
            phone_number=contact.phone_number if contact else None,
        )
    )
    if result.is_duplicate:
        click.secho(
            f"Possible duplicate patient: {len(result.potential_matches)} existing record(s) match",
            fg="yellow",
            err=True,
        )
    return result.is_duplicate


@click.command("register")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--staff-id", default=None, help="Staff ID recorded as creator (overrides config)")
@click.option("--skip-vitals", is_flag=True, help="Skip the vitals step")
@click.option("--force", is_flag=True, help="Register even if possible duplicates are found")
@click.pass_context
def register_command(
    ctx: click.Context,
    file: Path,
    staff_id: Optional[str],
    skip_vitals: bool,
    force: bool,
) -> None:
    """Register a patient from a draft file.

    Runs the draft through every registration step against the registry at
    api.base_url and prints the assigned record number.

    Examples:

        # Register against the local mock registry
        patient-registration register drafts/ada.json --staff-id staff-7

        # Register without recording vitals
        patient-registration register drafts/ada.json --skip-vitals
    """
    config: Config = ctx.obj["config"]

    staff_id = staff_id or config.api.staff_id
    if not staff_id:
        click.secho(
            "Error: No staff ID. Fix: pass --staff-id or set api.staff_id in the config",
            fg="red",
            err=True,
        )
        sys.exit(1)

    try:
        draft = load_registration_file(file)
    except DraftLoadError as e:
        click.secho(f"Draft Error: {e}", fg="red", err=True)
        sys.exit(1)

    if draft.account_type is None:
        click.secho("Error: Draft has no accountType (personal or family)", fg="red", err=True)
        sys.exit(1)

    with PatientRegistryClient.from_config(config) as client:
        if config.registration.check_duplicates and not force and _has_duplicates(client, draft):
            click.echo("Registration aborted. Use --force to register anyway.", err=True)
            sys.exit(1)

        workflow = RegistrationWorkflow(
            client,
            staff_id=staff_id,
            vitals_optional=config.registration.vitals_optional,
        )
        created = asyncio.run(_register(client, workflow, draft, skip_vitals))

    if created is None:
        if workflow.errors:
            report = ValidationReport(
                errors=workflow.errors,
                source=str(file),
                account_type=draft.account_type.value,
                family_member_count=len(draft.family_members),
                has_vitals=draft.vitals is not None,
            )
            click.secho(report.format_report(), fg="red", err=True)
        elif workflow.current_step == RegistrationStep.VITALS:
            click.secho(
                "Error: Vitals are required (registration.vitals_optional is false)",
                fg="red",
                err=True,
            )
        if workflow.created_patient is not None:
            patient = workflow.created_patient
            click.echo(
                f"Patient {patient.patient_id} ({patient.record_number}) was created "
                "but the registration did not complete",
                err=True,
            )
        logger.error(f"Registration stopped at step {workflow.current_step.value}")
        sys.exit(1)

    click.secho("✓ Patient registered", fg="green", bold=True)
    click.echo(f"  Patient ID:    {created.patient_id}")
    click.echo(f"  Record number: {created.record_number}")
