"""Shared request dependencies for notice routers."""

from __future__ import annotations

from typing import Tuple

from fastapi import Query, Request

from notices_api.services.active_alerts import ActiveAlertsCache
from notices_api.services.alert_store import AlertStore
from notices_api.state import get_state


def limit_offset(
    limit: int = Query(..., ge=0, description="Max number of results to return."),
    offset: int = Query(
        ...,
        ge=0,
        description="Starting point to return rows from, should be multiplied by limit or 0.",
    ),
) -> Tuple[int, int]:
    """Parse the required limit/offset pagination query parameters."""
    return limit, offset


def get_store(request: Request) -> AlertStore:
    return get_state(request.app).store


def get_active_alerts_cache(request: Request) -> ActiveAlertsCache:
    return get_state(request.app).active_alerts
