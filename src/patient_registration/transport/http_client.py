"""HTTP client with connection pooling for the patient registry API.

Sessions retry idempotent requests (GET/HEAD) on connection errors and
429/5xx responses. Patient creation and vitals recording are POSTs and are
never retried by the adapter, so a slow registry cannot produce duplicate
patients.
"""

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from patient_registration.config.schema import TransportConfig

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONNECTIONS = 10
DEFAULT_RETRY_COUNT = 3
DEFAULT_BACKOFF_FACTOR = 0.3
DEFAULT_TIMEOUT_CONNECT = 10
DEFAULT_TIMEOUT_READ = 30

RETRY_STATUS_CODES = (429, 500, 502, 503, 504)
RETRY_METHODS = ("HEAD", "GET", "OPTIONS")


@dataclass
class ConnectionPoolConfig:
    """Configuration for HTTP connection pooling.

    Attributes:
        max_connections: Maximum number of connections in the pool (>= 1)
        retry_count: Number of retries for idempotent requests
        backoff_factor: Factor for exponential backoff between retries
        timeout_connect: Connection timeout in seconds
        timeout_read: Read timeout in seconds
        verify_tls: Whether to verify TLS certificates

    Example:
        >>> config = ConnectionPoolConfig.from_transport_config(TransportConfig())
        >>> pool = ConnectionPool(config)
        >>> session = pool.get_session()
    """

    max_connections: int = DEFAULT_MAX_CONNECTIONS
    retry_count: int = DEFAULT_RETRY_COUNT
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    timeout_connect: int = DEFAULT_TIMEOUT_CONNECT
    timeout_read: int = DEFAULT_TIMEOUT_READ
    verify_tls: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_connections < 1:
            raise ValueError(f"max_connections must be >= 1, got {self.max_connections}")
        if self.retry_count < 0:
            raise ValueError(f"retry_count must be >= 0, got {self.retry_count}")
        if self.backoff_factor < 0:
            raise ValueError(f"backoff_factor must be >= 0, got {self.backoff_factor}")
        if self.timeout_connect < 1 or self.timeout_read < 1:
            raise ValueError(
                f"timeouts must be >= 1, got connect={self.timeout_connect} "
                f"read={self.timeout_read}"
            )

    @classmethod
    def from_transport_config(cls, transport: TransportConfig) -> "ConnectionPoolConfig":
        """Build pool settings from the transport section of the configuration."""
        return cls(
            max_connections=transport.max_connections,
            retry_count=transport.max_retries,
            backoff_factor=transport.backoff_factor,
            timeout_connect=transport.timeout_connect,
            timeout_read=transport.timeout_read,
            verify_tls=transport.verify_tls,
        )

    @property
    def timeout(self) -> tuple[int, int]:
        """(connect, read) timeout tuple accepted by requests."""
        return (self.timeout_connect, self.timeout_read)


class ConnectionPool:
    """Lazily created, reusable HTTP session with pooling and retry.

    Thread-safe: the registry client calls it from worker threads.

    Example:
        >>> with ConnectionPool() as pool:
        ...     response = pool.get_session().get(url, timeout=pool.config.timeout)
    """

    def __init__(self, config: Optional[ConnectionPoolConfig] = None) -> None:
        self.config = config or ConnectionPoolConfig()
        self._session: Optional[requests.Session] = None
        self._lock = Lock()
        logger.debug(
            "ConnectionPool initialized with max_connections=%d, retry_count=%d",
            self.config.max_connections,
            self.config.retry_count,
        )

    def get_session(self) -> requests.Session:
        """Get or create the shared session.

        Returns:
            Configured requests.Session with connection pooling and retry logic
        """
        with self._lock:
            if self._session is None:
                self._session = self._create_session()
            return self._session

    def _create_session(self) -> requests.Session:
        retry_strategy = Retry(
            total=self.config.retry_count,
            backoff_factor=self.config.backoff_factor,
            status_forcelist=list(RETRY_STATUS_CODES),
            allowed_methods=list(RETRY_METHODS),
            raise_on_status=False,
        )

        adapter = HTTPAdapter(
            pool_connections=self.config.max_connections,
            pool_maxsize=self.config.max_connections,
            max_retries=retry_strategy,
        )

        session = requests.Session()
        session.verify = self.config.verify_tls
        session.headers.update({"Accept": "application/json"})
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        if not self.config.verify_tls:
            logger.warning("TLS certificate verification is disabled")

        logger.info(
            "Created HTTP session with pool_maxsize=%d, retry_count=%d",
            self.config.max_connections,
            self.config.retry_count,
        )
        return session

    def close(self) -> None:
        """Close the session and release pooled connections."""
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None
                logger.debug("ConnectionPool session closed")

    def reset(self) -> None:
        """Drop the current session; a new one is created on next use."""
        self.close()

    def __enter__(self) -> "ConnectionPool":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
