"""Pytest fixtures for MCP HTTP wrapper tests."""

import socket
import sys
from pathlib import Path

import pytest
import yaml

# Ensure project root is in path for mcp_wrapper imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from mcp_wrapper.config.settings import (  # noqa: E402
    LauncherSettings,
    ServerSettings,
    WrapperSettings,
)


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def find_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def python_child(code: str, terminate_timeout_sec: float = 5.0, env=None) -> LauncherSettings:
    """Launcher settings running `python -c code` in place of the real MCP server."""
    return LauncherSettings(
        command=sys.executable,
        args=("-c", code),
        terminate_timeout_sec=terminate_timeout_sec,
        env=dict(env or {}),
    )


@pytest.fixture
def project_root() -> Path:
    return _project_root()


@pytest.fixture
def example_config_path(project_root: Path) -> Path:
    return project_root / "config" / "config.yaml.example"


@pytest.fixture
def config(example_config_path: Path) -> dict:
    """Load config dict from the shipped example YAML."""
    with open(example_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@pytest.fixture
def server_settings() -> ServerSettings:
    """Default status server settings (port 8947, not bound by app-level tests)."""
    return ServerSettings(
        host="0.0.0.0",
        port=8947,
        status_message="Claude Code MCP Server is running",
    )


@pytest.fixture
def free_port() -> int:
    return find_free_port()


@pytest.fixture
def local_server_settings(free_port: int) -> ServerSettings:
    """Loopback listener on a free port with short shutdown timeout."""
    return ServerSettings(
        host="127.0.0.1",
        port=free_port,
        status_message="Claude Code MCP Server is running",
        log_level="warning",
        shutdown_timeout_sec=5.0,
    )


@pytest.fixture
def sleeper_settings(local_server_settings: ServerSettings) -> WrapperSettings:
    """Child that just sleeps, standing in for `claude mcp serve`."""
    return WrapperSettings(
        launcher=python_child("import time; time.sleep(60)"),
        server=local_server_settings,
    )
