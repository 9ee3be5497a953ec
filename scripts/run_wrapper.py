#!/usr/bin/env python3
"""Entry point: start the MCP server child and the HTTP status wrapper (SIGTERM/SIGINT stop both)."""

import os
import sys

# Project root: always resolve relative to script location, not cwd
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)

if __name__ == "__main__":
    from mcp_wrapper.__main__ import main

    args = sys.argv[1:]
    # Relative config paths resolve from the project root, like the other scripts
    if args and not args[0].startswith("-") and not os.path.isabs(args[0]):
        args[0] = os.path.join(_PROJECT_ROOT, args[0])
    sys.exit(main(args))
