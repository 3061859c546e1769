import logging
import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response as FastAPIResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .account import AccountProvider
from .errors import FieldNotFoundError, InvalidArgument, MissingCapabilityError, MissingTokenError
from .logs import configure_logger
from .mcp_rpc import router as mcp_rpc_router
from .metrics import http_req_count, http_req_hist, http_req_in_flight, registry
from .routes.health import router as health_router
from .routes.passwords import router as passwords_router
from .settings import SERVER_VERSION, Settings, settings as default_settings


# domain errors raised outside MCP tool calls -> HTTP status and error label
ERROR_STATUS = {
    InvalidArgument: (400, "invalid_argument"),
    FieldNotFoundError: (404, "field_not_found"),
    MissingCapabilityError: (501, "missing_capability"),
    MissingTokenError: (503, "missing_token"),
}


def _error_handler(status_code: int, label: str):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc), "error": label})
    return handler


def create_app(settings: Optional[Settings] = None, provider: Optional[AccountProvider] = None) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(title="1Password MCP Bridge", version=SERVER_VERSION)
    app.state.settings = settings
    app.state.provider = provider or AccountProvider(settings)

    req_logger = configure_logger("onepassword_mcp.request", settings.log_level, settings.LOG_DIR, "requests.log")
    configure_logger("onepassword_mcp.response", settings.log_level, settings.LOG_DIR, "responses.log")
    configure_logger("onepassword_mcp.account", settings.log_level, settings.LOG_DIR, "account.log")

    origins = (settings.CORS_ALLOW_ORIGINS or "").strip()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[o.strip() for o in origins.split(",") if o.strip()],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        status = 500
        http_req_in_flight.inc()
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers["X-Request-Id"] = request_id
            return response
        finally:
            dur = time.time() - start
            route = request.scope.get("route").path if request.scope.get("route") else request.url.path
            http_req_in_flight.dec()
            http_req_hist.labels(request.method, route, str(status)).observe(dur)
            http_req_count.labels(request.method, route, str(status)).inc()
            req_logger.info(
                "request",
                extra={
                    "extra": {
                        "request_id": request_id,
                        "client": getattr(request.client, "host", "-"),
                        "method": request.method,
                        "path": route,
                        "status": status,
                        "duration_ms": int(dur * 1000),
                    }
                },
            )

    for exc_type, (status_code, label) in ERROR_STATUS.items():
        app.add_exception_handler(exc_type, _error_handler(status_code, label))

    @app.get("/metrics")
    async def metrics():
        return FastAPIResponse(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    app.include_router(health_router)
    if settings.EXPOSE_REST_ROUTES:
        app.include_router(passwords_router)
    app.include_router(mcp_rpc_router)
    logging.getLogger("onepassword_mcp.request").debug("app_created", extra={"extra": {"rest_routes": settings.EXPOSE_REST_ROUTES}})
    return app
