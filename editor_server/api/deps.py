"""FastAPI dependency injection for the storage and connector singletons.

Usage in route handlers::

    @router.post("/file.get")
    async def get_file(body: GetFileRequest, connector: ConnectorDep) -> EditorFileData:
        ...

Both are created once in the app lifespan.  A request arriving when no
connector recognised the repository fails with ``ConnectorNotFoundError``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from editor_server.api.connectors.base import Connector
from editor_server.api.errors import ApiError, ConnectorNotFoundError
from editor_server.api.storage.base import ConnectorStorage


async def get_storage(request: Request) -> ConnectorStorage:
    """Return the shared storage backend."""
    storage: ConnectorStorage | None = request.app.state.storage
    if storage is None:
        raise ApiError("Storage not configured.", status_code=503)
    return storage


async def get_connector(request: Request) -> Connector:
    """Return the connector chosen for the repository at startup."""
    connector: Connector | None = request.app.state.connector
    if connector is None:
        raise ConnectorNotFoundError(
            "Unable to find a connector for the repository.",
            description="No connector recognised the repository when the server started.",
        )
    return connector


# -- Annotated type aliases for concise route signatures ---------------------

StorageDep = Annotated[ConnectorStorage, Depends(get_storage)]
"""Annotated dependency: shared repository storage."""

ConnectorDep = Annotated[Connector, Depends(get_connector)]
"""Annotated dependency: the repository's connector."""
