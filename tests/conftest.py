from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Callable, Dict, Iterable, List, Tuple

import httpx
import pytest
from fastapi import FastAPI

from notices_api.app import create_app
from notices_api.config import STORE_MEMORY, BackendConfig
from notices_api.schemas.alerts import AlertIn, AlertOut
from notices_api.services.alert_store import AlertStoreError
from notices_api.services.memory_alert_store import InMemoryAlertStore
from notices_api.state import get_state


class FailingAlertStore(InMemoryAlertStore):
    """In-memory store whose listed operations raise AlertStoreError."""

    def __init__(self, fail_on: Iterable[str] = ()) -> None:
        super().__init__()
        self.fail_on = set(fail_on)

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_on:
            raise AlertStoreError("db unavailable")

    def list_alerts(self, limit: int, offset: int) -> Tuple[List[AlertOut], int]:
        self._maybe_fail("list_alerts")
        return super().list_alerts(limit, offset)

    def create_alert(self, payload: AlertIn) -> None:
        self._maybe_fail("create_alert")
        super().create_alert(payload)

    def update_alert(self, alert_id: str, payload: AlertIn) -> None:
        self._maybe_fail("update_alert")
        super().update_alert(alert_id, payload)

    def delete_alert(self, alert_id: str) -> None:
        self._maybe_fail("delete_alert")
        super().delete_alert(alert_id)

    def get_active_alerts(self) -> List[AlertOut]:
        self._maybe_fail("get_active_alerts")
        return super().get_active_alerts()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def config() -> BackendConfig:
    """Config for an app backed by the in-memory store."""
    return BackendConfig(
        alerts_store=STORE_MEMORY,
        mongo_uri=None,
        mongo_db_name="notices",
        mongo_ping_timeout_ms=1500,
        warm_cache_on_startup=True,
    )


@pytest.fixture
def app(config: BackendConfig) -> FastAPI:
    """Fresh FastAPI app per test so store and cache never leak across tests."""
    return create_app(config)


@pytest.fixture
def failing_store(app: FastAPI) -> FailingAlertStore:
    """Swap the app's store for one whose failures can be toggled per operation."""
    store = FailingAlertStore()
    get_state(app).store = store
    return store


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """Async HTTP client bound to the FastAPI ASGI app (lifespan hooks are not run)."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def alert_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for a valid create/update request body."""

    def _make(**overrides: Any) -> Dict[str, Any]:
        body = {
            "name": "Maintenance",
            "type": "WARNING",
            "content": "DB down 10pm",
            "active": True,
            "allowDismiss": True,
            "registeredOnly": False,
        }
        body.update(overrides)
        return body

    return _make


@pytest.fixture
def cached_alerts(app: FastAPI) -> Callable[[], List[Dict[str, Any]]]:
    """Return the active-alert cache serialized the way responses serialize it."""

    def _read() -> List[Dict[str, Any]]:
        return [a.model_dump(mode="json", by_alias=True) for a in get_state(app).active_alerts.snapshot()]

    return _read
