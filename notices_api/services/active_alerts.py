from __future__ import annotations

import logging
from threading import Lock
from typing import List

from notices_api.schemas.alerts import AlertOut
from notices_api.services.alert_store import AlertStore

logger = logging.getLogger(__name__)


class ActiveAlertsCache:
    """
    Process-wide snapshot of the alerts currently flagged active.

    The snapshot is only ever replaced wholesale by `refresh()`. `_refresh_lock` is held
    across the store query and the swap, so concurrent refreshes are serialized and the
    cache always ends up holding the result of the most recently completed query.
    `_swap_lock` only guards the list itself, so readers never wait on a store query.
    """

    def __init__(self) -> None:
        self._alerts: List[AlertOut] = []
        self._refresh_lock = Lock()
        self._swap_lock = Lock()

    # PUBLIC_INTERFACE
    def refresh(self, store: AlertStore) -> List[AlertOut]:
        """Re-query the store and replace the snapshot. Store errors leave the snapshot untouched."""
        with self._refresh_lock:
            alerts = list(store.get_active_alerts())
            with self._swap_lock:
                self._alerts = alerts
            logger.debug("Active alerts cache refreshed count=%d", len(alerts))
            return list(alerts)

    # PUBLIC_INTERFACE
    def snapshot(self) -> List[AlertOut]:
        """Return a copy of the current snapshot."""
        with self._swap_lock:
            return list(self._alerts)
