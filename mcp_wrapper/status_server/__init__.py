"""Status HTTP responder: fixed JSON status on every method and path, served by uvicorn."""

from mcp_wrapper.status_server.app import STATUS_HEADERS, create_app, status_payload
from mcp_wrapper.status_server.server import StatusServer

__all__ = ["STATUS_HEADERS", "StatusServer", "create_app", "status_payload"]
