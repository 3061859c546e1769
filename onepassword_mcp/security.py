from collections import defaultdict, deque
from threading import Lock
from time import monotonic
from typing import Callable, Deque, Dict, List, Optional

from fastapi import Depends, HTTPException, Request, status

from .auth import verify_api_key
from .models import Principal
from .settings import Settings


class SlidingWindowLimiter:
    """Per-subject request timestamps over a trailing window."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def allow(self, key: str, limit: int, window: float) -> bool:
        now = monotonic()
        with self._lock:
            hits = self._hits[key]
            while hits and hits[0] <= now - window:
                hits.popleft()
            if len(hits) >= limit:
                return False
            hits.append(now)
            return True

    def clear(self) -> None:
        with self._lock:
            self._hits.clear()


limiter = SlidingWindowLimiter()


def enforce_rate_limit(p: Principal, settings: Settings) -> None:
    if not settings.RATE_LIMIT_ENABLED:
        return
    if not limiter.allow(f"sub:{p.subject}", settings.RATE_LIMIT_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS):
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Rate limit exceeded")


def get_principal(request: Request, p: Optional[Principal] = Depends(verify_api_key)) -> Principal:
    if p is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    enforce_rate_limit(p, request.app.state.settings)
    return p


def require_scopes(required: List[str]) -> Callable[[Principal], Principal]:
    def dep(p: Principal = Depends(get_principal)) -> Principal:
        missing = [s for s in required if s not in p.scopes]
        if missing:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Forbidden: missing scopes {missing}")
        return p
    return dep
