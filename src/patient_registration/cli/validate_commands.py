"""Draft validation CLI command.

This module provides the ``validate`` command, which runs the validation
engine over a registration draft file and reports every field error.
"""

import json as json_lib
import logging
import sys
from pathlib import Path

import click

from patient_registration.logging_audit import set_console_level
from patient_registration.registration.draft_loader import load_registration_file
from patient_registration.utils.exceptions import DraftLoadError
from patient_registration.validation import ValidationReport, validate_registration

logger = logging.getLogger(__name__)


@click.command("validate")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
def validate_command(file: Path, json_output: bool) -> None:
    """Validate a registration draft file.

    Checks personal details, contact details, next of kin, family members and
    vital signs. Exits with code 0 when the draft is valid, 1 otherwise.

    Examples:

        # Human-readable report
        patient-registration validate drafts/ada.json

        # JSON output for automation
        patient-registration validate drafts/ada.json --json
    """
    if json_output:
        set_console_level(logging.CRITICAL + 1)

    try:
        draft = load_registration_file(file)
    except DraftLoadError as e:
        click.secho(f"Draft Error: {e}", fg="red", err=True)
        logger.error(f"Draft load error: {e}")
        sys.exit(1)

    report = ValidationReport(
        errors=validate_registration(draft),
        source=str(file),
        account_type=draft.account_type.value if draft.account_type else None,
        family_member_count=len(draft.family_members),
        has_vitals=draft.vitals is not None,
    )

    if json_output:
        click.echo(json_lib.dumps(report.to_dict(), indent=2))
    elif report.is_valid:
        click.secho(report.format_report(), fg="green")
    else:
        click.secho(report.format_report(), fg="red", err=True)

    if not report.is_valid:
        logger.error(f"Validation failed with {report.error_count} error(s)")
        sys.exit(1)

    logger.info("Validation complete. Exit code: 0")
    sys.exit(0)
