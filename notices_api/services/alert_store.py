from __future__ import annotations

from typing import List, Protocol, Tuple

from notices_api.schemas.alerts import AlertIn, AlertOut


class AlertStoreError(Exception):
    """Raised by an AlertStore when the underlying persistence call fails."""


def doc_to_alert_out(doc: dict) -> AlertOut:
    """Convert a stored alert document (camelCase keys) to its response model."""
    return AlertOut(
        id=doc["id"],
        name=doc["name"],
        type=doc["type"],
        content=doc.get("content", ""),
        active=bool(doc.get("active", False)),
        allowDismiss=bool(doc.get("allowDismiss", True)),
        registeredOnly=bool(doc.get("registeredOnly", False)),
        createdDate=doc.get("createdDate"),
        updatedDate=doc.get("updatedDate"),
    )


class AlertStore(Protocol):
    """Persistence contract consumed by the alert handlers."""

    def list_alerts(self, limit: int, offset: int) -> Tuple[List[AlertOut], int]:
        """Return one page of alerts and the total number of alerts."""
        ...

    def create_alert(self, payload: AlertIn) -> None:
        """Insert a new alert; the store assigns its id."""
        ...

    def update_alert(self, alert_id: str, payload: AlertIn) -> None:
        """Replace every mutable field of an alert. Unknown ids are a no-op."""
        ...

    def delete_alert(self, alert_id: str) -> None:
        """Delete an alert. Unknown ids are a no-op."""
        ...

    def get_active_alerts(self) -> List[AlertOut]:
        """Return every alert with active=True."""
        ...

    def ping(self) -> bool:
        """Return whether the backing storage is reachable."""
        ...
