from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for health endpoints."""

    status: str = Field(..., description="High-level health status string (e.g., 'ok').")
    message: str = Field(..., description="Human-readable status message.")
    timestamp: datetime = Field(..., description="UTC timestamp at time of response.")


class Pagination(BaseModel):
    """Pagination metadata describing one page of a larger result set."""

    count: int = Field(..., ge=0, description="Total number of records available, regardless of the page window.")
    offset: int = Field(..., ge=0, description="Starting row of this page.")
    limit: int = Field(..., ge=0, description="Max number of rows requested for this page.")


class StandardJsonResponse(BaseModel):
    """Standard success/failure envelope shared by all notice endpoints."""

    success: bool = Field(..., description="Whether the request succeeded.")
    error: str = Field(default="", description="Error details when success is false.")
    data: Any = Field(default_factory=dict, description="Response payload.")
    meta: Any = Field(default_factory=dict, description="Optional metadata such as pagination.")


class ErrorResponse(StandardJsonResponse):
    """Failure envelope (success is always false)."""

    success: bool = Field(default=False, description="Always false for failures.")


# PUBLIC_INTERFACE
def failure_body(error: str, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build a JSON-ready failure envelope."""
    return ErrorResponse(error=error, meta=meta or {}).model_dump()


# PUBLIC_INTERFACE
def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
