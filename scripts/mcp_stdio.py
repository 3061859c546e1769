#!/usr/bin/env python3
"""Run the stdio MCP server from a source checkout (same as the `onepassword-mcp` script)."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from onepassword_mcp.stdio import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
