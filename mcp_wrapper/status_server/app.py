"""FastAPI app: every method on every path returns 200 with a fixed JSON status and permissive CORS headers.

OPTIONS (CORS pre-flight) gets the same headers and an empty body. The request body is never read.
The payload is static; it does not reflect whether the MCP server child is alive.
"""

from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from mcp_wrapper.config.settings import ServerSettings


STATUS_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

PREFLIGHT_METHOD = "OPTIONS"


def status_payload(settings: ServerSettings) -> Dict[str, Any]:
    return {
        "status": settings.status_message,
        "port": settings.port,
        "endpoint": settings.endpoint,
    }


def create_app(settings: ServerSettings) -> FastAPI:
    """Build the status app. Docs/OpenAPI routes are off so /docs etc. also get the fixed payload."""
    app = FastAPI(
        title="MCP HTTP Wrapper",
        description="Fixed status response for the wrapped MCP server",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    payload = status_payload(settings)

    def answer(request: Request) -> Response:
        if request.method == PREFLIGHT_METHOD:
            return Response(status_code=200, headers=STATUS_HEADERS)
        return JSONResponse(status_code=200, content=payload, headers=STATUS_HEADERS)

    # Plain Starlette route without a method list: matches every method, including TRACE and custom ones
    app.add_route("/{path:path}", answer)
    return app
