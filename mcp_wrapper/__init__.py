"""HTTP status wrapper around an external MCP server process (default: `claude mcp serve`)."""

__version__ = "0.1.0"
