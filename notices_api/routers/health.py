from __future__ import annotations

import re
from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from notices_api.schemas.common import HealthResponse, utc_now
from notices_api.state import get_state

router = APIRouter(tags=["Health"])


def _sanitize_mongo_uri_for_response(uri: str) -> str:
    """Mask credentials in mongo URIs to avoid returning secrets to clients."""
    return re.sub(r"(mongodb(?:\+srv)?://)([^:@/]+):([^@/]+)@", r"\1\2:***@", uri)


class StoreConnectivityResponse(BaseModel):
    """Response model for backend↔alert store connectivity diagnostics."""

    ok: bool = Field(..., description="Whether the backend can reach its alert store.")
    store: str = Field(..., description="Which AlertStore implementation is in use (mongo|memory).")
    mongo_uri_sanitized: Optional[str] = Field(
        default=None,
        description="MongoDB URI with credentials masked (mongo store only).",
    )
    active_alerts_cached: int = Field(..., ge=0, description="Number of alerts in the active-alert cache.")
    timestamp: str = Field(..., description="UTC timestamp when the check was performed (ISO string).")


@router.get(
    "/",
    response_model=HealthResponse,
    summary="Health check",
    description="Basic service liveness check used by deployment and the frontend.",
    operation_id="health_check",
)
def health_check() -> HealthResponse:
    """Return service liveness status."""
    return HealthResponse(status="ok", message="Healthy", timestamp=utc_now())


@router.get(
    "/api/health/store",
    response_model=StoreConnectivityResponse,
    summary="Alert store connectivity check",
    description="Pings the configured alert store and reports which implementation is in use. Credentials are masked.",
    operation_id="store_connectivity_check",
)
def store_connectivity_check(request: Request) -> StoreConnectivityResponse:
    state = get_state(request.app)
    uri = state.config.mongo_uri
    return StoreConnectivityResponse(
        ok=state.store.ping(),
        store=state.config.alerts_store,
        mongo_uri_sanitized=_sanitize_mongo_uri_for_response(uri) if uri and state.mongo is not None else None,
        active_alerts_cached=len(state.active_alerts.snapshot()),
        timestamp=utc_now().isoformat(),
    )
