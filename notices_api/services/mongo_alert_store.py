from __future__ import annotations

import logging
from typing import List, Tuple
from uuid import uuid4

from bson.errors import InvalidDocument
from pymongo.errors import PyMongoError

from notices_api.db.mongo import MongoManager
from notices_api.schemas.alerts import AlertIn, AlertOut
from notices_api.schemas.common import utc_now
from notices_api.services.alert_store import AlertStoreError, doc_to_alert_out

logger = logging.getLogger(__name__)

# DocumentTooLarge and other encoding failures derive from bson's InvalidDocument, not PyMongoError.
_MONGO_ERRORS = (PyMongoError, InvalidDocument)


class MongoAlertStore:
    """AlertStore backed by the `alerts` collection."""

    def __init__(self, mongo: MongoManager, ping_timeout_ms: int = 1500):
        self._mongo = mongo
        self._ping_timeout_ms = ping_timeout_ms

    def list_alerts(self, limit: int, offset: int) -> Tuple[List[AlertOut], int]:
        try:
            cols = self._mongo.collections()
            total = int(cols.alerts.count_documents({}))
            # pymongo treats limit(0) as "no limit"; an empty page is what was asked for.
            if limit == 0:
                return [], total
            docs = list(
                cols.alerts.find({}, projection={"_id": 0})
                .sort("createdDate", -1)
                .skip(int(offset))
                .limit(int(limit))
            )
        except _MONGO_ERRORS as exc:
            logger.exception("Failed listing alerts limit=%s offset=%s", limit, offset)
            raise AlertStoreError(str(exc)) from exc
        return [doc_to_alert_out(d) for d in docs], total

    def create_alert(self, payload: AlertIn) -> None:
        now = utc_now()
        doc = {"id": str(uuid4()), **payload.to_doc(), "createdDate": now, "updatedDate": now}
        try:
            self._mongo.collections().alerts.insert_one(doc)
        except _MONGO_ERRORS as exc:
            logger.exception("Failed creating alert name=%s", payload.name)
            raise AlertStoreError(str(exc)) from exc

    def update_alert(self, alert_id: str, payload: AlertIn) -> None:
        fields = payload.to_doc()
        # $nor skips a document whose fields already equal the payload, so repeating
        # the same update leaves updatedDate alone.
        query = {"id": alert_id, "$nor": [fields]}
        try:
            res = self._mongo.collections().alerts.update_one(
                query, {"$set": {**fields, "updatedDate": utc_now()}}, upsert=False
            )
        except _MONGO_ERRORS as exc:
            logger.exception("Failed updating alert id=%s", alert_id)
            raise AlertStoreError(str(exc)) from exc
        if res.matched_count == 0:
            logger.info("Update for alert id=%s matched nothing (unknown id or unchanged)", alert_id)

    def delete_alert(self, alert_id: str) -> None:
        try:
            res = self._mongo.collections().alerts.delete_one({"id": alert_id})
        except _MONGO_ERRORS as exc:
            logger.exception("Failed deleting alert id=%s", alert_id)
            raise AlertStoreError(str(exc)) from exc
        if res.deleted_count == 0:
            logger.info("Delete for unknown alert id=%s matched nothing", alert_id)

    def get_active_alerts(self) -> List[AlertOut]:
        try:
            cols = self._mongo.collections()
            docs = list(cols.alerts.find({"active": True}, projection={"_id": 0}).sort("createdDate", -1))
        except _MONGO_ERRORS as exc:
            logger.exception("Failed loading active alerts")
            raise AlertStoreError(str(exc)) from exc
        return [doc_to_alert_out(d) for d in docs]

    def ping(self) -> bool:
        return self._mongo.ping(timeout_ms=self._ping_timeout_ms)
