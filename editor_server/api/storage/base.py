"""Storage interface for repository access.

A storage backend gives connectors raw access to the files of one content
repository.  Every path is relative to the repository root; a leading ``/``
is optional, so ``/podspec.yaml`` and ``podspec.yaml`` name the same file.
The interface is async to support both local filesystem and remote (S3)
backends.

Errors:

- a missing file or directory raises ``FileNotFoundError``;
- a path that escapes the repository root raises :class:`InvalidPathError`;
- anything else propagates as the backend's ``OSError``.
"""

from __future__ import annotations

from posixpath import normpath
from typing import Protocol, runtime_checkable

from editor_server.api.models.editor import FileData


class InvalidPathError(ValueError):
    """Raised when a path points outside the repository root."""


@runtime_checkable
class ConnectorStorage(Protocol):
    """Async protocol for reading and writing repository files."""

    async def read_file(self, path: str) -> bytes:
        """Read a file.  Raises ``FileNotFoundError`` if not found."""
        ...

    async def read_dir(self, path: str) -> list[FileData]:
        """List all files below a directory, recursively, sorted by path.

        Raises ``FileNotFoundError`` if the directory does not exist.
        """
        ...

    async def exists_file(self, path: str) -> bool:
        """Check whether a file exists."""
        ...

    async def write_file(self, path: str, content: bytes | str) -> None:
        """Create or replace a file, creating parent directories as needed."""
        ...

    async def delete_file(self, path: str) -> None:
        """Delete a file.  Raises ``FileNotFoundError`` if not found."""
        ...


def normalize_path(path: str) -> str:
    """Return the root-relative form of ``path`` without a leading slash.

    ``""`` (or ``"/"``) is the repository root.  Raises ``InvalidPathError``
    when ``..`` segments climb above the root.
    """
    relative = path.replace("\\", "/").lstrip("/")
    if not relative:
        return ""
    normalized = normpath(relative)
    if normalized == "..":
        msg = f"Path escapes the repository root: {path}"
        raise InvalidPathError(msg)
    if normalized.startswith("../"):
        msg = f"Path escapes the repository root: {path}"
        raise InvalidPathError(msg)
    return "" if normalized == "." else normalized


def to_editor_path(relative: str) -> str:
    """Inverse of :func:`normalize_path`: the ``/``-prefixed editor form."""
    return f"/{relative}"
