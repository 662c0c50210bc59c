"""Mock patient registry for local runs and tests."""

from .app import create_app, run_server
from .config import MockServerConfig, load_config

__all__ = ["MockServerConfig", "create_app", "load_config", "run_server"]
