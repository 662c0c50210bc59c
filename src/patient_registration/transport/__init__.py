"""Transport module.

This module provides pooled HTTP sessions for talking to the patient registry.
"""

from patient_registration.transport.http_client import (
    ConnectionPool,
    ConnectionPoolConfig,
)

__all__ = ["ConnectionPool", "ConnectionPoolConfig"]
