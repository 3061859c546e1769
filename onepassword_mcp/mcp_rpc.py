import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from .mcp_core import PARSE_ERROR, dispatch
from .models import Principal
from .security import get_principal

router = APIRouter(prefix="/mcp", tags=["mcp"])


@router.post("/rpc")
async def mcp_rpc(request: Request, p: Principal = Depends(get_principal)):
    req_logger = logging.getLogger("onepassword_mcp.request")
    try:
        body: Any = await request.json()
    except ValueError:
        return JSONResponse({"jsonrpc": "2.0", "id": None, "error": {"code": PARSE_ERROR, "message": "Parse error"}})
    method = body.get("method") if isinstance(body, dict) else None
    req_logger.debug("mcp_rpc", extra={"extra": {"id": body.get("id") if isinstance(body, dict) else None, "method": method, "subject": p.subject}})
    res: Dict[str, Any] = await dispatch(body, p, request.app.state.provider, request.app.state.settings)
    if res is None:
        return Response(status_code=202)
    return JSONResponse(res)
