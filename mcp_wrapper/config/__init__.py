"""Wrapper config: YAML file with defaults from config/config.yaml.example, PORT env override."""

from mcp_wrapper.config.settings import (
    LauncherSettings,
    ServerSettings,
    WrapperSettings,
    load_settings,
    read_config,
)

__all__ = ["LauncherSettings", "ServerSettings", "WrapperSettings", "load_settings", "read_config"]
