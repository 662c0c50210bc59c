"""Entry point for running patient_registration as a module.

This allows the package to be executed as:
    python -m patient_registration
"""

from patient_registration.cli.main import cli

if __name__ == "__main__":
    cli()
