"""Unit tests for logging_audit module."""

import logging
from pathlib import Path

import pytest

from patient_registration.logging_audit import (
    PIIRedactingFormatter,
    configure_logging,
    get_logger,
    log_audit_event,
    redact,
)
from patient_registration.logging_audit.logger import (
    BACKUP_COUNT,
    MAX_LOG_FILE_SIZE,
    installed_handlers,
    set_console_level,
)


def format_message(message: str, redact_pii: bool = True) -> str:
    formatter = PIIRedactingFormatter(fmt="%(message)s", redact_pii=redact_pii)
    record = logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)
    return formatter.format(record)


class TestConfigureLogging:
    """Test logging configuration."""

    def test_configure_logging_creates_file(self, tmp_path):
        """Test logging configuration creates log file."""
        # Arrange
        log_file = tmp_path / "test.log"

        # Act
        configure_logging(level="INFO", log_file=log_file, redact_pii=False)
        get_logger(__name__).info("Test message")

        # Assert
        assert log_file.exists()
        assert "Test message" in log_file.read_text()

    def test_configure_logging_sets_console_level(self, tmp_path):
        """Test console handler uses specified log level."""
        configure_logging(level="WARNING", log_file=tmp_path / "test.log")

        console_handler = [
            h for h in installed_handlers()
            if not hasattr(h, "baseFilename")
        ][0]
        assert console_handler.level == logging.WARNING

    def test_configure_logging_creates_directory(self, tmp_path):
        """Test missing log directories are created."""
        log_file = tmp_path / "nested" / "dir" / "app.log"

        configure_logging(log_file=log_file)

        assert log_file.parent.is_dir()

    def test_configure_logging_invalid_level_raises_error(self, tmp_path):
        """Test invalid log level raises ValueError."""
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="LOUD", log_file=tmp_path / "test.log")

    def test_configure_logging_environment_variable(self, tmp_path, monkeypatch):
        """Test PATIENT_REG_LOG_FILE is used when no log file is given."""
        env_log = tmp_path / "env.log"
        monkeypatch.setenv("PATIENT_REG_LOG_FILE", str(env_log))

        configure_logging(level="INFO")
        get_logger(__name__).info("From env")

        assert "From env" in env_log.read_text()

    def test_configure_logging_idempotent(self, tmp_path):
        """Test repeated configuration does not duplicate handlers."""
        configure_logging(log_file=tmp_path / "a.log")
        configure_logging(log_file=tmp_path / "b.log")

        assert len(installed_handlers()) == 2

    def test_configure_logging_keeps_foreign_handlers(self, tmp_path):
        """Test reconfiguration leaves handlers it did not create."""
        foreign = logging.NullHandler()
        logging.getLogger().addHandler(foreign)
        try:
            configure_logging(log_file=tmp_path / "a.log")
            configure_logging(log_file=tmp_path / "b.log")

            assert foreign in logging.getLogger().handlers
        finally:
            logging.getLogger().removeHandler(foreign)

    def test_set_console_level_leaves_file_handler(self, tmp_path):
        configure_logging(level="INFO", log_file=tmp_path / "test.log")

        set_console_level(logging.CRITICAL + 1)

        levels = {hasattr(h, "baseFilename"): h.level for h in installed_handlers()}
        assert levels == {True: logging.DEBUG, False: logging.CRITICAL + 1}

    def test_configure_logging_rotation_config(self, tmp_path):
        """Test file handler rotates at 10MB with 5 backups."""
        configure_logging(log_file=tmp_path / "test.log")

        file_handler = [h for h in installed_handlers() if hasattr(h, "baseFilename")][0]
        assert file_handler.maxBytes == MAX_LOG_FILE_SIZE == 10 * 1024 * 1024
        assert file_handler.backupCount == BACKUP_COUNT == 5


class TestPIIRedactingFormatter:
    """Test PII redaction."""

    def test_redact_email(self):
        assert format_message("Contact ada@example.com") == "Contact [EMAIL-REDACTED]"

    @pytest.mark.parametrize("phone", ["+2348012345678", "0801 234 5678", "08012345678"])
    def test_redact_phone(self, phone):
        assert format_message(f"Phone {phone} saved") == "Phone [PHONE-REDACTED] saved"

    def test_redact_patient_name(self):
        text = format_message("Submitting personal registration for Patient: Ada Lovelace")
        assert "Ada Lovelace" not in text
        assert "Patient: [NAME-REDACTED]" in text

    def test_redact_name_field(self):
        assert "Lovelace" not in format_message("name=Ada Lovelace | status=ok")

    def test_no_redaction_when_disabled(self):
        message = "Patient: Ada Lovelace ada@example.com 08012345678"
        assert format_message(message, redact_pii=False) == message

    def test_redact_function(self):
        assert redact("name=Ada Lovelace | email=ada@example.com") == (
            "name=[NAME-REDACTED]| email=[EMAIL-REDACTED]"
        )

    def test_record_numbers_are_kept(self):
        assert format_message("Patient created: p1 (TH123456789)") == (
            "Patient created: p1 (TH123456789)"
        )


class TestAuditLogging:
    """Test audit trail events."""

    def test_log_audit_event_success(self, caplog):
        """Test success events are logged at INFO with ordered fields."""
        with caplog.at_level(logging.INFO):
            log_audit_event("PATIENT_CREATED", {
                "record_number": "TH001",
                "status": "success",
                "patient_id": "p1",
                "extra": "value",
            })

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.getMessage().startswith(
            "AUDIT [PATIENT_CREATED] | status=success | patient_id=p1 | record_number=TH001"
        )
        assert record.getMessage().endswith("extra=value")

    def test_log_audit_event_failure(self, caplog):
        """Test failure events are logged at ERROR."""
        with caplog.at_level(logging.INFO):
            log_audit_event("PATIENT_CREATE_FAILED", {"status": "failure", "error_message": "down"})

        assert caplog.records[-1].levelno == logging.ERROR
        assert "error_message=down" in caplog.text

    def test_log_audit_event_adds_correlation_id(self, caplog):
        """Test a correlation ID is generated and returned."""
        with caplog.at_level(logging.INFO):
            correlation_id = log_audit_event("VITALS_SKIPPED", {"status": "success"})

        assert len(correlation_id) == 36
        assert f"correlation_id={correlation_id}" in caplog.text

    def test_log_audit_event_preserves_custom_correlation_id(self):
        """Test a caller-supplied correlation ID is kept."""
        assert log_audit_event("X", {"correlation_id": "abc"}) == "abc"

    def test_log_audit_event_does_not_mutate_details(self):
        """Test the details dictionary is copied."""
        details = {"status": "success"}
        log_audit_event("X", details)
        assert details == {"status": "success"}
