"""Connector registry.

Connectors are probed in order and the first whose ``can_apply`` accepts the
storage is used for the lifetime of the process.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from editor_server.api.connectors.base import Connector
from editor_server.api.connectors.grow import GrowConnector
from editor_server.api.errors import ConnectorNotFoundError
from editor_server.api.storage.base import ConnectorStorage

CONNECTORS: list[type[GrowConnector]] = [GrowConnector]


async def select_connector(
    storage: ConnectorStorage,
    connectors: list[type[GrowConnector]] | None = None,
    **options: Any,
) -> Connector:
    """Instantiate the first connector that can handle ``storage``.

    Extra keyword ``options`` are passed to the connector constructor.
    Raises ``ConnectorNotFoundError`` if no connector applies.
    """
    candidates = CONNECTORS if connectors is None else connectors
    for connector_cls in candidates:
        if await connector_cls.can_apply(storage):
            logger.info("Connector: {} selected for {!r}", connector_cls.name, storage)
            return connector_cls(storage, **options)
    raise ConnectorNotFoundError(
        "Unable to find a connector for the repository.",
        description=f"None of {[c.name for c in candidates]} recognised {storage!r}.",
    )


__all__ = ["CONNECTORS", "Connector", "GrowConnector", "select_connector"]
