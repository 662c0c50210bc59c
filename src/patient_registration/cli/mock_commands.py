"""CLI commands for the mock patient registry."""

import logging
from pathlib import Path

import click

from patient_registration.mock_server.app import run_server
from patient_registration.mock_server.config import load_config

logger = logging.getLogger(__name__)


@click.group(name="mock")
def mock_group():
    """Run the mock patient registry.

    The mock registry keeps patients in memory and serves:
    - /health
    - /patients (POST), /patients/<id> (GET), /patients/<id>/vitals (POST)
    - /patients/check-duplicate, /patients/generate-record-number
    - /registration-audit
    """


@mock_group.command(name="start")
@click.option("--port", type=int, help="Server port (overrides config file)")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (default: mocks/config.json)",
)
@click.option("--debug", is_flag=True, help="Enable debug mode")
def start_server(port: int | None, config: Path | None, debug: bool):
    """Start the mock patient registry in the foreground.

    Examples:

        patient-registration mock start

        patient-registration mock start --port 9090 --config mocks/config.json
    """
    try:
        server_config = load_config(config)
    except (ValueError, FileNotFoundError) as e:
        raise click.ClickException(str(e))

    if port is None:
        port = server_config.http_port
    if not 1 <= port <= 65535:
        raise click.ClickException(f"Invalid port {port}. Port must be between 1 and 65535.")

    click.echo("=" * 50)
    click.echo("Mock Patient Registry")
    click.echo("=" * 50)
    click.echo(f"Host: {server_config.host}")
    click.echo(f"Port: {port}")
    click.echo(f"Health Check: http://{server_config.host}:{port}/health")
    click.echo(f"Failure rate: {server_config.failure_rate:.0%}")
    click.echo(f"Response delay: {server_config.response_delay_ms}ms")
    click.echo("=" * 50)

    logger.info(f"Starting mock registry on port {port}")
    run_server(port=port, config=server_config, debug=debug)
