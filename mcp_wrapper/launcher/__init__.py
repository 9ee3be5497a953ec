"""External MCP server process launcher."""

from mcp_wrapper.launcher.process import ManagedProcess

__all__ = ["ManagedProcess"]
