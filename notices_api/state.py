from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from fastapi import FastAPI

from notices_api.config import STORE_MONGO, BackendConfig
from notices_api.db.mongo import MongoManager
from notices_api.services.active_alerts import ActiveAlertsCache
from notices_api.services.alert_store import AlertStore
from notices_api.services.memory_alert_store import InMemoryAlertStore
from notices_api.services.mongo_alert_store import MongoAlertStore


@dataclass
class AppState:
    """Typed app.state container for shared singletons."""

    config: BackendConfig
    store: AlertStore
    active_alerts: ActiveAlertsCache = field(default_factory=ActiveAlertsCache)
    mongo: Optional[MongoManager] = None  # only set when the Mongo store is in use


# PUBLIC_INTERFACE
def build_state(config: BackendConfig) -> AppState:
    """Create AppState with the AlertStore selected by config."""
    if config.alerts_store == STORE_MONGO:
        if not config.mongo_uri:
            raise RuntimeError("Mongo URI not configured. Provide BACKEND_MONGO_URI or set ALERTS_STORE=memory.")
        mongo = MongoManager(config.mongo_uri, db_name=config.mongo_db_name)
        store = MongoAlertStore(mongo, ping_timeout_ms=config.mongo_ping_timeout_ms)
        return AppState(config=config, store=store, mongo=mongo)
    return AppState(config=config, store=InMemoryAlertStore())


# PUBLIC_INTERFACE
def init_state(app: FastAPI, state: AppState) -> None:
    """Attach AppState to a FastAPI app."""
    app.state.state = state


# PUBLIC_INTERFACE
def get_state(app: FastAPI) -> AppState:
    """Fetch typed AppState from a FastAPI app."""
    return app.state.state  # type: ignore[attr-defined]
