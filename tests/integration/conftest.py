"""Integration test fixtures and configuration.

This module provides a mock patient registry served over real HTTP, so the
registry client, connection pool and workflow are exercised end to end.
"""

import logging
import threading
import time
from typing import Generator

import pytest
import requests
from flask import Flask
from werkzeug.serving import make_server

from patient_registration.mock_server.app import create_app
from patient_registration.mock_server.config import MockServerConfig
from patient_registration.mock_server.store import PatientStore
from patient_registration.registration.api_client import PatientRegistryClient
from patient_registration.transport.http_client import ConnectionPool, ConnectionPoolConfig

logger = logging.getLogger(__name__)


def wait_for_server(url: str, timeout: float = 10.0, interval: float = 0.1) -> bool:
    """Wait for server to become available.

    Args:
        url: URL to check (e.g., health endpoint).
        timeout: Maximum time to wait in seconds.
        interval: Time between checks in seconds.

    Returns:
        bool: True if server became available, False if timeout.
    """
    start_time = time.time()
    while time.time() - start_time < timeout:
        try:
            response = requests.get(url, timeout=1)
            if response.status_code == 200:
                return True
        except requests.exceptions.RequestException:
            pass
        time.sleep(interval)
    return False


@pytest.fixture
def mock_server_config() -> MockServerConfig:
    """Mock registry configuration without delays or random failures."""
    return MockServerConfig(
        log_level="WARNING",
        response_delay_ms=0,
        failure_rate=0.0,
    )


@pytest.fixture
def mock_registry_app(mock_server_config: MockServerConfig) -> Flask:
    app = create_app(mock_server_config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def mock_server_url(mock_registry_app: Flask) -> Generator[str, None, None]:
    """Serve the mock registry on a free local port for one test.

    Yields:
        str: Base URL (e.g., "http://127.0.0.1:54321").
    """
    server = make_server("127.0.0.1", 0, mock_registry_app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    url = f"http://127.0.0.1:{server.server_port}"
    if not wait_for_server(f"{url}/health"):
        server.shutdown()
        pytest.fail(f"Mock registry failed to start at {url}")

    logger.info(f"Mock registry started at {url}")
    yield url

    server.shutdown()
    thread.join(timeout=5)
    logger.info("Mock registry stopped")


@pytest.fixture
def mock_store(mock_registry_app: Flask) -> PatientStore:
    """The in-memory store behind the running mock registry."""
    return mock_registry_app.extensions["mock_registry_store"]


@pytest.fixture
def registry_client(mock_server_url: str) -> Generator[PatientRegistryClient, None, None]:
    """Registry client with a short timeout and no adapter retries."""
    pool = ConnectionPool(ConnectionPoolConfig(retry_count=0, timeout_connect=2, timeout_read=5))
    with PatientRegistryClient(mock_server_url, pool) as client:
        yield client
