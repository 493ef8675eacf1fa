"""ASGI entrypoint: `uvicorn notices_api.main:app`."""

from __future__ import annotations

from notices_api.app import create_app

app = create_app()
