"""Shared fixtures for API route tests."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from editor_server.api.app import app
from editor_server.api.connectors.grow import GrowConnector
from editor_server.api.storage.local import LocalStorage


@pytest.fixture
async def client(storage: LocalStorage) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the app with the test site's storage.

    The app lifespan does NOT run under ``ASGITransport``, so the storage and
    connector singletons are pre-set here.
    """
    app.state.storage = storage
    app.state.connector = GrowConnector(storage)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.state.storage = None
    app.state.connector = None
