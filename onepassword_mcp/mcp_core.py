"""Transport-independent JSON-RPC 2.0 dispatcher for the MCP methods this server speaks."""
import logging
import time
from typing import Any, Dict, Optional

from .account import AccountProvider
from .metrics import mcp_tool_calls
from .models import Principal
from .prompts import PROMPTS, get_prompt
from .resources import RESOURCES, RESOURCE_TEMPLATES, read_resource
from .settings import SERVER_NAME, SERVER_VERSION, Settings
from .tools import TOOLS, call_tool

# Date-stamped protocol version
MCP_PROTOCOL_VERSION = "2025-06-18"

INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
FORBIDDEN = -32603
SERVER_ERROR = -32000
PARSE_ERROR = -32700


def _tool_schemas() -> Dict[str, Dict[str, Any]]:
    return {name: tool.schema() for name, tool in TOOLS.items()}


def _initialize_result() -> Dict[str, Any]:
    return {
        "protocolVersion": MCP_PROTOCOL_VERSION,
        "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        "capabilities": {
            "tools": {"listChanged": False},
            "prompts": {"listChanged": False},
            "resources": {"subscribe": False, "listChanged": False},
        },
    }


def _jsonrpc_response(id: Any, result: Any = None, error: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    if error is not None:
        return {"jsonrpc": "2.0", "id": id, "error": error}
    return {"jsonrpc": "2.0", "id": id, "result": result}


def _error(id: Any, code: int, message: str) -> Dict[str, Any]:
    return _jsonrpc_response(id, error={"code": code, "message": message})


async def _handle(method: str, params: Dict[str, Any], p: Principal, provider: AccountProvider, settings: Settings) -> Any:
    if method == "initialize":
        return _initialize_result()
    if method in ("ping", "shutdown"):
        return {} if method == "ping" else {"ok": True}
    if method == "tools/list":
        return {"tools": [{"name": k, **v} for k, v in _tool_schemas().items()]}
    if method == "tools/call":
        name = params.get("name")
        try:
            result = await call_tool(name, params.get("arguments") or {}, p, provider)
        except KeyError:
            raise ValueError(f"unknown tool: {name}")
        mcp_tool_calls.labels(str(name), "error" if result.get("isError") else "ok").inc()
        return result
    if method == "prompts/list":
        return {"prompts": PROMPTS}
    if method == "prompts/get":
        name = params.get("name")
        try:
            return get_prompt(name, params.get("arguments") or {})
        except KeyError:
            raise ValueError(f"unknown prompt: {name}")
    if method == "resources/list":
        return {"resources": RESOURCES}
    if method == "resources/templates/list":
        return {"resourceTemplates": RESOURCE_TEMPLATES}
    if method == "resources/read":
        return await read_resource(params.get("uri") or "", provider, settings)
    raise NotImplementedError(method)


async def dispatch(message: Any, p: Principal, provider: AccountProvider, settings: Settings) -> Optional[Dict[str, Any]]:
    """Handle one JSON-RPC message; returns None for notifications."""
    resp_logger = logging.getLogger("onepassword_mcp.response")
    if not isinstance(message, dict) or message.get("jsonrpc") != "2.0":
        id_ = message.get("id") if isinstance(message, dict) else None
        return _error(id_, INVALID_REQUEST, "Invalid Request")
    method = message.get("method"); id_ = message.get("id")
    if "id" not in message:
        # notifications (e.g. notifications/initialized) get no reply
        resp_logger.debug("mcp_notification", extra={"extra": {"method": method, "subject": p.subject}})
        return None
    start = time.time()
    params = message.get("params") or {}
    if not isinstance(params, dict):
        return _error(id_, INVALID_PARAMS, "params must be an object")
    status = "ok"
    try:
        return _jsonrpc_response(id_, await _handle(method, params, p, provider, settings))
    except NotImplementedError:
        status = "not_found"
        return _error(id_, METHOD_NOT_FOUND, "Method not found")
    except PermissionError as e:
        status = "forbidden"
        return _error(id_, FORBIDDEN, f"Forbidden: {e}")
    except ValueError as e:
        status = "invalid"
        return _error(id_, INVALID_PARAMS, str(e))
    except Exception as e:
        status = "error"
        return _error(id_, SERVER_ERROR, str(e))
    finally:
        extra = {"id": id_, "method": method, "status": status, "duration_ms": int((time.time() - start) * 1000), "subject": p.subject}
        if method == "tools/call":
            extra["tool"] = params.get("name")
        resp_logger.info("mcp_result", extra={"extra": extra})
