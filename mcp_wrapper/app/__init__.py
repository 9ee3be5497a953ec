"""Application entry: McpWrapper lifecycle and run_wrapper."""

from mcp_wrapper.app.wrapper import McpWrapper, install_signal_handlers, run_wrapper

__all__ = ["McpWrapper", "install_signal_handlers", "run_wrapper"]
