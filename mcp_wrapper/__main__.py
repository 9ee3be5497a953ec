"""python -m mcp_wrapper [config.yaml] [--port N] [--debug]"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from mcp_wrapper.app.wrapper import run_wrapper
from mcp_wrapper.config.settings import PORT_ENV_VAR, load_settings
from mcp_wrapper.core.logging_utils import setup_logging
from mcp_wrapper.errors import ConfigError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-wrapper",
        description="Start the MCP server (claude mcp serve) and expose a status message over HTTP",
    )
    parser.add_argument("config", nargs="?", default=None, help="Config file (default: $MCP_WRAPPER_CONFIG or config/config.yaml)")
    parser.add_argument("--port", default=None, help=f"Listen port; overrides ${PORT_ENV_VAR} and status_server.port")
    parser.add_argument("--debug", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug)

    environ = dict(os.environ)
    if args.port is not None:
        environ[PORT_ENV_VAR] = str(args.port)
    try:
        settings = load_settings(args.config, environ=environ)
    except ConfigError as e:
        logger.error("Invalid config: %s", e)
        return 2
    return run_wrapper(settings)


if __name__ == "__main__":
    sys.exit(main())
