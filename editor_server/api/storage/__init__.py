"""Storage backends giving connectors raw access to a repository."""

from editor_server.api.storage.base import ConnectorStorage, InvalidPathError
from editor_server.api.storage.local import LocalStorage

__all__ = ["ConnectorStorage", "InvalidPathError", "LocalStorage"]
