from datetime import datetime, timezone

from fastapi import APIRouter, Request

from ..errors import OnePasswordMcpError
from .utils import json_response

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/healthz")
async def healthz():
    return json_response({"ok": True, "time": _now()})


@router.get("/livez")
async def livez():
    return json_response({"ok": True})


@router.get("/readyz")
async def readyz(request: Request):
    """Ready once a token is configured and the SDK client has authenticated."""
    try:
        await request.app.state.provider.get()
        check = {"ok": True, "detail": "ready"}
    except OnePasswordMcpError as exc:
        check = {"ok": False, "detail": str(exc)}
    except Exception as exc:
        check = {"ok": False, "detail": f"1Password error: {exc}"}
    return json_response(
        {"ok": check["ok"], "time": _now(), "onepassword": check},
        status_code=200 if check["ok"] else 503,
    )
