from __future__ import annotations

import logging
import os
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notices_api.config import BackendConfig, load_config
from notices_api.routers import alerts, health
from notices_api.schemas.common import failure_body
from notices_api.services.alert_store import AlertStoreError
from notices_api.state import build_state, get_state, init_state

openapi_tags = [
    {"name": "Health", "description": "Service health and liveness."},
    {"name": "Alerts", "description": "Global notices shown to application users."},
]

logger = logging.getLogger(__name__)


def _env_frontend_url() -> str | None:
    # FRONTEND_URL is standard; REACT_APP_FRONTEND_URL is accepted for older deployments.
    return os.getenv("FRONTEND_URL") or os.getenv("REACT_APP_FRONTEND_URL")


def _env_cors_extra_origins() -> List[str]:
    # Comma-separated list for preview deployments, etc.
    raw = os.getenv("CORS_ALLOW_ORIGINS") or ""
    return [p.strip() for p in raw.split(",") if p.strip()]


def _allowed_origins() -> List[str]:
    origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    frontend_url = _env_frontend_url()
    if frontend_url:
        origins.append(frontend_url)
    origins.extend(_env_cors_extra_origins())

    # De-dupe while preserving order
    seen = set()
    return [o for o in origins if not (o in seen or seen.add(o))]


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else str(err.get("msg", "invalid")))
    return "; ".join(parts) or "invalid request"


async def _store_error_handler(request: Request, exc: AlertStoreError) -> JSONResponse:
    logger.error("Alert store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content=failure_body(str(exc)))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=failure_body(str(exc) or exc.__class__.__name__))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": str(err.get("msg", "")), "type": str(err.get("type", ""))}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=failure_body(_validation_message(exc), meta={"errors": fields}))


# PUBLIC_INTERFACE
def create_app(config: Optional[BackendConfig] = None) -> FastAPI:
    """Build the notices API; config defaults to load_config()."""
    config = config or load_config()
    logging.getLogger("notices_api").setLevel(config.log_level)

    app = FastAPI(
        title="Global Notices API",
        description=(
            "CRUD API for alerts (global notices) shown to application users. "
            "Keeps a process-wide cache of active alerts, refreshed after every change."
        ),
        version="1.0.0",
        openapi_tags=openapi_tags,
    )

    init_state(app, build_state(config))

    @app.on_event("startup")
    def _on_startup() -> None:
        """Startup hook: connect to Mongo (if used), ensure indexes, and warm the active-alert cache."""
        state = get_state(app)

        if state.mongo is not None:
            state.mongo.connect_app()
            if not state.mongo.ping(timeout_ms=state.config.mongo_ping_timeout_ms):
                raise RuntimeError("Mongo connectivity check failed during startup. Verify BACKEND_MONGO_URI.")
            state.mongo.init_indexes()

        if state.config.warm_cache_on_startup:
            try:
                alerts_loaded = state.active_alerts.refresh(state.store)
                logger.info("Loaded %d active alerts on startup", len(alerts_loaded))
            except AlertStoreError:
                logger.exception("Could not load active alerts on startup; cache starts empty")

    @app.on_event("shutdown")
    def _on_shutdown() -> None:
        """Shutdown hook: close Mongo connections."""
        state = get_state(app)
        if state.mongo is not None:
            state.mongo.close()

    app.add_exception_handler(AlertStoreError, _store_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(alerts.router)
    return app
