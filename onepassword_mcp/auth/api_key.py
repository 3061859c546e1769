import json
import logging
from typing import Dict, Optional
from fastapi.security import APIKeyHeader
from fastapi import Depends, Request
from ..models import ALL_SCOPES, Principal
from ..settings import Settings

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)
_log = logging.getLogger("onepassword_mcp.request")

# raw API_KEYS_JSON -> parsed principals; settings objects are immutable in practice
_PRINCIPALS: Dict[str, Dict[str, Principal]] = {}


def _principal_for(subject_or_spec) -> Optional[Principal]:
    """A key maps to a subject name (all scopes) or to {"subject": ..., "scopes": [...]}."""
    if isinstance(subject_or_spec, str):
        return Principal(subject=subject_or_spec, scopes=list(ALL_SCOPES))
    if isinstance(subject_or_spec, dict) and subject_or_spec.get("subject"):
        scopes = subject_or_spec.get("scopes", ALL_SCOPES)
        return Principal(
            subject=str(subject_or_spec["subject"]),
            scopes=[s for s in scopes if s in ALL_SCOPES],
        )
    return None


def principals_from(settings: Settings) -> Dict[str, Principal]:
    raw = (settings.API_KEYS_JSON or "").strip()
    if raw in _PRINCIPALS:
        return _PRINCIPALS[raw]
    parsed: Dict[str, Principal] = {}
    try:
        data = json.loads(raw) if raw else {}
    except ValueError:
        _log.error("api_keys_invalid_json")
        data = {}
    for key, spec in (data.items() if isinstance(data, dict) else ()):
        p = _principal_for(spec)
        if p is not None:
            parsed[str(key)] = p
    _PRINCIPALS.clear()
    _PRINCIPALS[raw] = parsed
    return parsed


def verify_api_key(request: Request, x_api_key: Optional[str] = Depends(api_key_header)) -> Optional[Principal]:
    settings: Settings = request.app.state.settings
    if not settings.AUTH_API_KEY_ENABLED or not x_api_key:
        return None
    return principals_from(settings).get(x_api_key.strip())
