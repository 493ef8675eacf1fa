from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MongoCollections:
    """Convenience wrapper for app collections."""

    alerts: Collection


class MongoManager:
    """
    MongoDB connection manager.

    Maintains one MongoClient for the app's own storage DB. MongoClient is thread-safe
    and pools connections internally, so a single instance is shared by all requests.
    """

    def __init__(self, app_mongo_uri: str, db_name: str = "notices"):
        self._app_mongo_uri = app_mongo_uri
        self._db_name = db_name
        self._app_client: Optional[MongoClient] = None
        self._lock = RLock()

    def connect_app(self) -> None:
        """Initialize app Mongo client if needed."""
        with self._lock:
            if self._app_client is not None:
                return
            self._app_client = MongoClient(self._app_mongo_uri, connect=True)

    # PUBLIC_INTERFACE
    def ping(self, timeout_ms: int = 1500) -> bool:
        """Ping the configured MongoDB to validate connectivity."""
        try:
            if self._app_client is None:
                self.connect_app()
            assert self._app_client is not None
            self._app_client.admin.command("ping", maxTimeMS=int(max(250, timeout_ms)))
            return True
        except PyMongoError:
            logger.exception("Mongo ping failed (PyMongoError)")
            return False
        except Exception:
            logger.exception("Mongo ping failed (unexpected)")
            return False

    def close(self) -> None:
        """Close the app Mongo client."""
        with self._lock:
            if self._app_client is not None:
                try:
                    self._app_client.close()
                except Exception:
                    logger.exception("Error closing app MongoClient")
                self._app_client = None

    def app_db(self) -> Database:
        """Return the notices database handle."""
        if self._app_client is None:
            self.connect_app()
        assert self._app_client is not None
        return self._app_client[self._db_name]

    def collections(self) -> MongoCollections:
        """Return app collections."""
        db = self.app_db()
        return MongoCollections(alerts=db["alerts"])

    def init_indexes(self) -> None:
        """Create required indexes (idempotent)."""
        cols = self.collections()

        cols.alerts.create_index([("id", ASCENDING)], unique=True, name="idx_alerts_id")
        # Active-alert refreshes run after every mutation.
        cols.alerts.create_index([("active", ASCENDING)], name="idx_alerts_active")
        cols.alerts.create_index([("createdDate", DESCENDING)], name="idx_alerts_createdDate_desc")
