from __future__ import annotations

from typing import Tuple

from fastapi import APIRouter, Depends, Path

from notices_api.routers.deps import get_active_alerts_cache, get_store, limit_offset
from notices_api.schemas.alerts import ActiveAlertsResponse, AlertIn, AlertListResponse
from notices_api.schemas.common import ErrorResponse, Pagination
from notices_api.services.active_alerts import ActiveAlertsCache
from notices_api.services.alert_store import AlertStore

router = APIRouter(prefix="/api/alerts", tags=["Alerts"])

_failure_responses = {
    400: {"model": ErrorResponse, "description": "Malformed request."},
    500: {"model": ErrorResponse, "description": "Alert store failure."},
}


@router.get(
    "",
    response_model=AlertListResponse,
    responses=_failure_responses,
    summary="Get Alerts",
    description="Get list of alerts (global notices).",
    operation_id="get_alerts",
)
def get_alerts(
    page: Tuple[int, int] = Depends(limit_offset),
    store: AlertStore = Depends(get_store),
) -> AlertListResponse:
    """List alerts with pagination; always reads the store, never the cache."""
    limit, offset = page
    alerts, count = store.list_alerts(limit, offset)
    return AlertListResponse(data=alerts, meta=Pagination(count=count, offset=offset, limit=limit))


@router.get(
    "/active",
    response_model=ActiveAlertsResponse,
    summary="Get Active Alerts",
    description="Return the cached active alerts as of the last mutation (or startup).",
    operation_id="get_active_alerts",
)
def get_active_alerts(cache: ActiveAlertsCache = Depends(get_active_alerts_cache)) -> ActiveAlertsResponse:
    """Serve the active-alert snapshot without touching the store."""
    return ActiveAlertsResponse(data=cache.snapshot())


@router.post(
    "",
    response_model=ActiveAlertsResponse,
    responses=_failure_responses,
    summary="Create Alert",
    description="Creates an alert (global notice). Returns the active alerts, not the created alert.",
    operation_id="create_alert",
)
def create_alert(
    payload: AlertIn,
    store: AlertStore = Depends(get_store),
    cache: ActiveAlertsCache = Depends(get_active_alerts_cache),
) -> ActiveAlertsResponse:
    store.create_alert(payload)
    return ActiveAlertsResponse(data=cache.refresh(store))


@router.put(
    "/{alert_id}",
    response_model=ActiveAlertsResponse,
    responses=_failure_responses,
    summary="Update Alert",
    description="Updates an alert, replacing every field. Returns the active alerts.",
    operation_id="update_alert",
)
def update_alert(
    payload: AlertIn,
    alert_id: str = Path(..., description="The alert ID to update."),
    store: AlertStore = Depends(get_store),
    cache: ActiveAlertsCache = Depends(get_active_alerts_cache),
) -> ActiveAlertsResponse:
    store.update_alert(alert_id, payload)
    return ActiveAlertsResponse(data=cache.refresh(store))


@router.delete(
    "/{alert_id}",
    response_model=ActiveAlertsResponse,
    responses={500: _failure_responses[500]},
    summary="Delete Alert",
    description="Deletes an alert. Returns the active alerts.",
    operation_id="delete_alert",
)
def delete_alert(
    alert_id: str = Path(..., description="The alert ID to delete."),
    store: AlertStore = Depends(get_store),
    cache: ActiveAlertsCache = Depends(get_active_alerts_cache),
) -> ActiveAlertsResponse:
    store.delete_alert(alert_id)
    return ActiveAlertsResponse(data=cache.refresh(store))
