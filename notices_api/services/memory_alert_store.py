from __future__ import annotations

from threading import RLock
from typing import Dict, List, Tuple
from uuid import uuid4

from notices_api.schemas.alerts import AlertIn, AlertOut
from notices_api.schemas.common import utc_now
from notices_api.services.alert_store import doc_to_alert_out


class InMemoryAlertStore:
    """
    AlertStore kept in process memory.

    Used for local development (ALERTS_STORE=memory) and tests. Documents share the
    Mongo store's shape so both stores serialize alerts identically. Ordering is
    newest first, like the Mongo store.
    """

    def __init__(self) -> None:
        self._docs: Dict[str, dict] = {}
        self._lock = RLock()

    def _newest_first(self) -> List[dict]:
        return list(reversed(list(self._docs.values())))

    def list_alerts(self, limit: int, offset: int) -> Tuple[List[AlertOut], int]:
        with self._lock:
            docs = self._newest_first()
        page = docs[offset : offset + limit]
        return [doc_to_alert_out(d) for d in page], len(docs)

    def create_alert(self, payload: AlertIn) -> None:
        now = utc_now()
        alert_id = str(uuid4())
        with self._lock:
            self._docs[alert_id] = {"id": alert_id, **payload.to_doc(), "createdDate": now, "updatedDate": now}

    def update_alert(self, alert_id: str, payload: AlertIn) -> None:
        with self._lock:
            existing = self._docs.get(alert_id)
            fields = payload.to_doc()
            if existing is None or all(existing.get(k) == v for k, v in fields.items()):
                return
            self._docs[alert_id] = {**existing, **fields, "updatedDate": utc_now()}

    def delete_alert(self, alert_id: str) -> None:
        with self._lock:
            self._docs.pop(alert_id, None)

    def get_active_alerts(self) -> List[AlertOut]:
        with self._lock:
            docs = [d for d in self._newest_first() if d["active"]]
        return [doc_to_alert_out(d) for d in docs]

    def ping(self) -> bool:
        return True
