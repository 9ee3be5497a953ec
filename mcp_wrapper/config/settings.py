"""Wrapper config: launcher (external MCP server command) and status_server (HTTP listener).

Defaults: loaded from config/config.yaml.example (single source of truth, no code-level defaults).
PORT env var overrides status_server.port.
"""

import copy
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from uvicorn.config import LOG_LEVELS

from mcp_wrapper.errors import ConfigError

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_EXAMPLE_PATH = _PROJECT_ROOT / "config" / "config.yaml.example"

# Env var naming the config file; PORT is the listener override
CONFIG_ENV_VAR = "MCP_WRAPPER_CONFIG"
PORT_ENV_VAR = "PORT"


@dataclass(frozen=True)
class LauncherSettings:
    command: str
    args: Tuple[str, ...] = ()
    terminate_timeout_sec: float = 10.0
    env: Dict[str, str] = field(default_factory=dict)

    @property
    def argv(self) -> list:
        return [self.command, *self.args]


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int
    status_message: str
    public_host: str = "localhost"
    log_level: str = "info"
    shutdown_timeout_sec: float = 10.0

    @property
    def endpoint(self) -> str:
        return f"http://{self.public_host}:{self.port}"


@dataclass(frozen=True)
class WrapperSettings:
    launcher: LauncherSettings
    server: ServerSettings


def _layered(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay override on base section by section; nested mappings merge, anything else replaces."""
    out = copy.deepcopy(base)
    for key, value in override.items():
        current = out.get(key)
        out[key] = _layered(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return out


@lru_cache(maxsize=1)
def _example_defaults() -> Dict[str, Any]:
    with open(_EXAMPLE_PATH, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _with_defaults(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """User config over config.yaml.example; the cached defaults are never mutated."""
    return _layered(_example_defaults(), cfg)


def _section(cfg: Dict[str, Any], section: str) -> Dict[str, Any]:
    s = cfg.get(section)
    if s is None:
        return {}
    if not isinstance(s, dict):
        raise ConfigError(f"config section '{section}' must be a mapping, got {type(s).__name__}")
    return s


def _parse_port(value: Any, source: str) -> int:
    """Port as int in 1..65535; raise ConfigError naming the source otherwise.

    0 is rejected: uvicorn would bind an ephemeral port the status payload cannot report.
    """
    try:
        port = int(str(value).strip())
    except (TypeError, ValueError):
        raise ConfigError(f"{source} must be an integer port, got {value!r}") from None
    if not 1 <= port <= 65535:
        raise ConfigError(f"{source} out of range (1-65535): {port}")
    return port


def _positive_float(value: Any, source: str) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{source} must be a number, got {value!r}") from None
    if out <= 0:
        raise ConfigError(f"{source} must be > 0, got {out}")
    return out


def read_config(config_path: Optional[str] = None) -> Tuple[Dict[str, Any], str]:
    """Load YAML config. Returns (config, resolved_path).

    Resolution: explicit path, then $MCP_WRAPPER_CONFIG, then config/config.yaml,
    falling back to config/config.yaml.example when the chosen file does not exist.
    """
    config_path = config_path or os.environ.get(CONFIG_ENV_VAR) or str(_PROJECT_ROOT / "config" / "config.yaml")
    if not Path(config_path).exists():
        config_path = str(_EXAMPLE_PATH)
    config_path = str(Path(config_path).resolve())
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {config_path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigError(f"{config_path}: top level must be a mapping")
    return config, config_path


def get_launcher_settings(config: Optional[Dict[str, Any]] = None) -> LauncherSettings:
    """Return launcher settings (command, args, terminate timeout, env). Missing values from config.yaml.example."""
    merged = _with_defaults(config or {})
    s = _section(merged, "launcher")
    command = str(s.get("command") or "").strip()
    if not command:
        raise ConfigError("launcher.command must be a non-empty string")
    args = s.get("args") or []
    if isinstance(args, str):
        args = args.split()
    env = s.get("env") or {}
    if not isinstance(env, dict):
        raise ConfigError("launcher.env must be a mapping")
    return LauncherSettings(
        command=command,
        args=tuple(str(a) for a in args),
        terminate_timeout_sec=_positive_float(s.get("terminate_timeout_sec"), "launcher.terminate_timeout_sec"),
        env={str(k): str(v) for k, v in env.items()},
    )


def get_server_settings(
    config: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServerSettings:
    """Return status server settings. PORT in environ (default os.environ) overrides status_server.port."""
    environ = os.environ if environ is None else environ
    merged = _with_defaults(config or {})
    s = _section(merged, "status_server")

    env_port = (environ.get(PORT_ENV_VAR) or "").strip()
    if env_port:
        port = _parse_port(env_port, f"${PORT_ENV_VAR}")
    else:
        port = _parse_port(s.get("port"), "status_server.port")

    status_message = str(s.get("status_message") or "").strip()
    if not status_message:
        raise ConfigError("status_server.status_message must be a non-empty string")

    log_level = str(s.get("log_level") or "info").strip().lower()
    if log_level not in LOG_LEVELS:
        raise ConfigError(
            f"status_server.log_level must be one of {sorted(LOG_LEVELS)}, got {log_level!r}"
        )

    return ServerSettings(
        host=str(s.get("host") or "0.0.0.0"),
        port=port,
        status_message=status_message,
        public_host=str(s.get("public_host") or "localhost"),
        log_level=log_level,
        shutdown_timeout_sec=_positive_float(s.get("shutdown_timeout_sec"), "status_server.shutdown_timeout_sec"),
    )


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> WrapperSettings:
    """Read config file and environment into one WrapperSettings passed to run_wrapper()."""
    config, _ = read_config(config_path)
    return WrapperSettings(
        launcher=get_launcher_settings(config),
        server=get_server_settings(config, environ),
    )
