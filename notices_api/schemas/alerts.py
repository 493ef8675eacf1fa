from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

from notices_api.schemas.common import Pagination


class AlertType(str, Enum):
    """Display category of a global notice."""

    ERROR = "ERROR"
    INFO = "INFO"
    NEW = "NEW"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"


class AlertBase(BaseModel):
    """Mutable fields of an alert (global notice)."""

    model_config = ConfigDict(populate_by_name=True)

    name: StrictStr = Field(..., description="Name of the alert.")
    type: AlertType = Field(..., description="Type of alert.")
    content: StrictStr = Field(..., description="Alert content.")
    active: StrictBool = Field(..., description="Whether alert should be displayed or not.")
    allow_dismiss: StrictBool = Field(
        ...,
        description="Whether or not to allow users to dismiss the alert.",
        alias="allowDismiss",
    )
    registered_only: StrictBool = Field(
        ...,
        description="Whether or not to only show to users with an active session.",
        alias="registeredOnly",
    )


class AlertIn(AlertBase):
    """Request body for create (POST) and full replace (PUT). Every field is required."""

    def to_doc(self) -> Dict[str, Any]:
        """Return the stored field names and values (camelCase, enum flattened)."""
        return {
            "name": self.name,
            "type": self.type.value,
            "content": self.content,
            "active": self.active,
            "allowDismiss": self.allow_dismiss,
            "registeredOnly": self.registered_only,
        }


class AlertOut(AlertBase):
    """Response model for an alert."""

    id: str = Field(..., description="Alert id assigned by the store.")
    created_date: Optional[datetime] = Field(default=None, description="UTC creation timestamp.", alias="createdDate")
    updated_date: Optional[datetime] = Field(default=None, description="UTC last update timestamp.", alias="updatedDate")


class AlertListResponse(BaseModel):
    """Envelope for a page of alerts."""

    success: bool = Field(True, description="Whether the request succeeded.")
    error: str = Field(default="", description="Always empty on success.")
    data: List[AlertOut] = Field(..., description="Alerts in this page.")
    meta: Pagination = Field(..., description="Pagination metadata.")


class ActiveAlertsResponse(BaseModel):
    """Envelope for the current active alerts."""

    success: bool = Field(True, description="Whether the request succeeded.")
    error: str = Field(default="", description="Always empty on success.")
    data: List[AlertOut] = Field(..., description="Alerts currently flagged active.")
    meta: Dict[str, Any] = Field(default_factory=dict, description="Unused for this response.")
