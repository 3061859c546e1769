"""
stdio JSON-RPC transport for the 1Password MCP server.

Reads newline-delimited JSON-RPC 2.0 messages from stdin and writes responses
to stdout. Logs go to stderr (and logs/stdio.log), never stdout.
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

from .account import AccountProvider
from .logs import configure_logger
from .mcp_core import PARSE_ERROR, dispatch
from .models import ALL_SCOPES, Principal
from .settings import SERVER_NAME, SERVER_VERSION, Settings, load_settings


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog=SERVER_NAME, description="1Password MCP server (stdio transport)")
    parser.add_argument("--log-level", choices=["error", "warn", "info", "debug"])
    parser.add_argument("--integration-name")
    parser.add_argument("--integration-version")
    parser.add_argument("--service-account-token", "--token", dest="token")
    return parser.parse_args(argv)


def settings_from_args(ns: argparse.Namespace) -> Settings:
    return load_settings(
        MCP_LOG_LEVEL=ns.log_level,
        OP_INTEGRATION_NAME=ns.integration_name,
        OP_INTEGRATION_VERSION=ns.integration_version,
        OP_SERVICE_ACCOUNT_TOKEN=ns.token,
        TOKEN_FROM_ARGS=True if ns.token else None,
    )


def _println(out: TextIO, obj: Dict[str, Any]) -> None:
    out.write(json.dumps(obj) + "\n")
    out.flush()


async def serve(settings: Settings, provider: AccountProvider, stdin: TextIO, stdout: TextIO) -> None:
    logger = logging.getLogger("onepassword_mcp.stdio")
    p = Principal(subject=settings.SUBJECT, scopes=list(ALL_SCOPES))
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, stdin.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue
        try:
            msg = json.loads(line)
        except ValueError as e:
            _println(stdout, {"jsonrpc": "2.0", "id": None, "error": {"code": PARSE_ERROR, "message": f"Parse error: {e}"}})
            continue
        method = msg.get("method") if isinstance(msg, dict) else None
        logger.debug("stdio_request", extra={"extra": {"id": msg.get("id") if isinstance(msg, dict) else None, "method": method}})
        res = await dispatch(msg, p, provider, settings)
        if res is not None:
            _println(stdout, res)
            logger.info("stdio_result", extra={"extra": {"id": res.get("id"), "method": method, "status": "error" if "error" in res else "ok"}})
        if method == "shutdown":
            break


def main(argv: Optional[List[str]] = None) -> int:
    settings = settings_from_args(parse_args(argv))
    for name, filename in (
        ("onepassword_mcp.stdio", "stdio.log"),
        ("onepassword_mcp.response", "responses.log"),
        ("onepassword_mcp.account", "account.log"),
    ):
        configure_logger(name, settings.log_level, settings.LOG_DIR, filename)
    logger = logging.getLogger("onepassword_mcp.stdio")
    logger.info(
        "server_start",
        extra={"extra": {
            "name": SERVER_NAME,
            "version": SERVER_VERSION,
            "integration_name": settings.OP_INTEGRATION_NAME,
            "integration_version": settings.OP_INTEGRATION_VERSION,
            "python": sys.version.split()[0],
            "token_source": settings.token_source,
        }},
    )
    try:
        asyncio.run(serve(settings, AccountProvider(settings), sys.stdin, sys.stdout))
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception(f"Failed to run {SERVER_NAME}.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
