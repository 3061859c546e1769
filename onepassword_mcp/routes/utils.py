import json
from typing import Any, Dict, Optional

from fastapi import APIRouter
from fastapi.responses import Response

# Failure modes shared by every authenticated route
COMMON_ERRORS: Dict[int, Dict[str, Any]] = {
    401: {"description": "Missing or unknown X-API-Key"},
    403: {"description": "API key lacks a required scope"},
    429: {"description": "Per-subject rate limit exceeded"},
    501: {"description": "Installed onepassword-sdk lacks a required capability"},
    503: {"description": "Service account token not configured"},
}


def json_response(payload: Dict[str, Any], status_code: int = 200) -> Response:
    return Response(
        content=json.dumps(payload, ensure_ascii=False),
        media_type="application/json",
        status_code=status_code,
    )


class Router(APIRouter):
    """APIRouter whose routes document COMMON_ERRORS unless they override a code."""

    def add_api_route(self, path: str, endpoint, *, responses: Optional[Dict[int, Dict[str, Any]]] = None, **kwargs) -> None:
        return super().add_api_route(path, endpoint, responses={**COMMON_ERRORS, **(responses or {})}, **kwargs)
