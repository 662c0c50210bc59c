"""Main CLI entry point for the Patient Registration Toolkit.

This module provides the main Click command group for the patient-registration CLI.
"""

from pathlib import Path
from typing import Optional

import click

from patient_registration import __version__
from patient_registration.cli.mock_commands import mock_group
from patient_registration.cli.register_commands import register_command
from patient_registration.cli.validate_commands import validate_command
from patient_registration.config import load_config
from patient_registration.logging_audit import configure_logging
from patient_registration.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="patient-registration")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.option(
    "--redact-pii",
    is_flag=True,
    help="Redact PII (patient names, emails, phone numbers) from logs",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    redact_pii: bool,
) -> None:
    """Patient Registration Toolkit - validate and register patients.

    Validates registration drafts and drives them through the registration
    workflow against a patient registry, with a mock registry for local runs.

    Common usage:

        # Validate a registration draft
        patient-registration validate drafts/ada.json

        # Register a patient against the configured registry
        patient-registration register drafts/ada.json --staff-id staff-7

        # Start the mock registry
        patient-registration mock start

    Use --help with any command for more information.
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
        ctx.obj["config"] = config_obj
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)

    ctx.obj["verbose"] = verbose
    ctx.obj["redact_pii"] = redact_pii
    ctx.obj["log_file"] = log_file

    # Precedence: CLI flags > config file > defaults
    log_level = "DEBUG" if verbose else config_obj.logging.level
    log_file_path = log_file if log_file else config_obj.logging.log_file
    redact_pii_setting = redact_pii or config_obj.logging.redact_pii

    configure_logging(level=log_level, log_file=log_file_path, redact_pii=redact_pii_setting)


cli.add_command(validate_command)
cli.add_command(register_command)
cli.add_command(mock_group)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate_config(config_file: Path) -> None:
    """Validate a configuration file.

    Example:
        patient-registration config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)
    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)

    click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
    click.echo(f"\nConfiguration file: {config_file}")

    click.echo("\nAPI:")
    click.echo(f"  Base URL:    {config_obj.api.base_url}")
    click.echo(f"  Staff ID:    {config_obj.api.staff_id or 'Not configured'}")

    click.echo("\nTransport:")
    click.echo(f"  Verify TLS:  {config_obj.transport.verify_tls}")
    click.echo(
        f"  Timeouts:    {config_obj.transport.timeout_connect}s connect, "
        f"{config_obj.transport.timeout_read}s read"
    )
    click.echo(f"  Retries:     {config_obj.transport.max_retries}")

    click.echo("\nLogging:")
    click.echo(f"  Level:       {config_obj.logging.level}")
    click.echo(f"  Log file:    {config_obj.logging.log_file}")
    click.echo(f"  Redact PII:  {config_obj.logging.redact_pii}")

    click.echo("\nRegistration:")
    click.echo(f"  Vitals optional:  {config_obj.registration.vitals_optional}")
    click.echo(f"  Check duplicates: {config_obj.registration.check_duplicates}")


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"patient-registration version {__version__}")


if __name__ == "__main__":
    cli()
