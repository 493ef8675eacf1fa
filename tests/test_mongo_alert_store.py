"""Tests for MongoAlertStore against mocked pymongo collections."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from pymongo.errors import DocumentTooLarge
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from notices_api.schemas.alerts import AlertIn, AlertType
from notices_api.services.alert_store import AlertStoreError
from notices_api.services.mongo_alert_store import MongoAlertStore

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _doc(**overrides) -> dict:
    doc = {
        "id": "a-1",
        "name": "Maintenance",
        "type": "WARNING",
        "content": "DB down 10pm",
        "active": True,
        "allowDismiss": True,
        "registeredOnly": False,
        "createdDate": NOW,
        "updatedDate": NOW,
    }
    doc.update(overrides)
    return doc


def _payload() -> AlertIn:
    return AlertIn.model_validate({k: v for k, v in _doc().items() if k not in ("id", "createdDate", "updatedDate")})


@pytest.fixture
def alerts_collection() -> MagicMock:
    return MagicMock()


@pytest.fixture
def store(alerts_collection: MagicMock) -> MongoAlertStore:
    mongo = MagicMock()
    mongo.collections.return_value.alerts = alerts_collection
    return MongoAlertStore(mongo)


class TestMongoAlertStore:
    def test_list_alerts_pages_newest_first(self, store, alerts_collection):
        alerts_collection.count_documents.return_value = 7
        alerts_collection.find.return_value.sort.return_value.skip.return_value.limit.return_value = [_doc()]

        alerts, total = store.list_alerts(limit=1, offset=3)

        assert total == 7
        assert len(alerts) == 1
        assert alerts[0].type == AlertType.WARNING
        alerts_collection.find.assert_called_once_with({}, projection={"_id": 0})
        alerts_collection.find.return_value.sort.assert_called_once_with("createdDate", -1)
        alerts_collection.find.return_value.sort.return_value.skip.assert_called_once_with(3)
        alerts_collection.find.return_value.sort.return_value.skip.return_value.limit.assert_called_once_with(1)

    def test_list_alerts_zero_limit_skips_find(self, store, alerts_collection):
        alerts_collection.count_documents.return_value = 4

        assert store.list_alerts(limit=0, offset=0) == ([], 4)
        alerts_collection.find.assert_not_called()

    def test_create_alert_assigns_id_and_dates(self, store, alerts_collection):
        store.create_alert(_payload())

        (doc,), _ = alerts_collection.insert_one.call_args
        assert doc["id"]
        assert doc["name"] == "Maintenance"
        assert doc["type"] == "WARNING"
        assert doc["allowDismiss"] is True
        assert doc["createdDate"] == doc["updatedDate"]

    def test_update_alert_sets_all_fields_only_when_changed(self, store, alerts_collection):
        alerts_collection.update_one.return_value.matched_count = 1

        store.update_alert("a-1", _payload())

        (query, update), kwargs = alerts_collection.update_one.call_args
        fields = _payload().to_doc()
        assert query == {"id": "a-1", "$nor": [fields]}
        assert {k: update["$set"][k] for k in fields} == fields
        assert "updatedDate" in update["$set"]
        assert kwargs == {"upsert": False}

    def test_update_unknown_id_is_not_an_error(self, store, alerts_collection):
        alerts_collection.update_one.return_value.matched_count = 0
        store.update_alert("missing", _payload())

    def test_delete_alert(self, store, alerts_collection):
        alerts_collection.delete_one.return_value.deleted_count = 0
        store.delete_alert("missing")
        alerts_collection.delete_one.assert_called_once_with({"id": "missing"})

    def test_get_active_alerts_filters_on_active(self, store, alerts_collection):
        alerts_collection.find.return_value.sort.return_value = [_doc(), _doc(id="a-2", registeredOnly=True)]

        alerts = store.get_active_alerts()

        assert [a.id for a in alerts] == ["a-1", "a-2"]
        assert alerts[1].registered_only is True
        alerts_collection.find.assert_called_once_with({"active": True}, projection={"_id": 0})

    @pytest.mark.parametrize(
        "call, mocked",
        [
            (lambda s: s.list_alerts(10, 0), "count_documents"),
            (lambda s: s.create_alert(_payload()), "insert_one"),
            (lambda s: s.update_alert("a-1", _payload()), "update_one"),
            (lambda s: s.delete_alert("a-1"), "delete_one"),
            (lambda s: s.get_active_alerts(), "find"),
        ],
    )
    def test_pymongo_errors_become_store_errors(self, store, alerts_collection, call, mocked):
        getattr(alerts_collection, mocked).side_effect = PyMongoError("connection refused")

        with pytest.raises(AlertStoreError, match="connection refused"):
            call(store)

    def test_bson_encoding_errors_become_store_errors(self, store, alerts_collection):
        alerts_collection.insert_one.side_effect = DocumentTooLarge("BSON document too large")

        with pytest.raises(AlertStoreError, match="too large"):
            store.create_alert(_payload())

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: s.list_alerts(10, 0),
            lambda s: s.create_alert(_payload()),
            lambda s: s.update_alert("a-1", _payload()),
            lambda s: s.delete_alert("a-1"),
            lambda s: s.get_active_alerts(),
        ],
    )
    def test_connection_errors_from_collections_become_store_errors(self, call):
        mongo = MagicMock()
        mongo.collections.side_effect = ServerSelectionTimeoutError("no servers available")

        with pytest.raises(AlertStoreError, match="no servers available"):
            call(MongoAlertStore(mongo))
