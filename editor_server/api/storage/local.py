"""Local filesystem storage.

Serves a repository checked out on disk::

    {root}/podspec.yaml
    {root}/content/pages/index.yaml
    {root}/views/partials/hero.html

Uses ``anyio.to_thread.run_sync`` for non-blocking file I/O.

Writes are atomic: data is written to a temporary file in the same directory,
then renamed to the target path.  This prevents corrupt reads if the process
crashes mid-write.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from functools import partial
from pathlib import Path

from anyio import to_thread

from editor_server.api.models.editor import FileData
from editor_server.api.storage.base import InvalidPathError, normalize_path, to_editor_path


class LocalStorage:
    """Local filesystem implementation of the ConnectorStorage protocol."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def __repr__(self) -> str:
        return f"LocalStorage({str(self.root)!r})"

    def _real_path(self, path: str) -> Path:
        real = (self.root / normalize_path(path)).resolve()
        # Symlinks may still point outside the root after normalization.
        if real != self.root and not real.is_relative_to(self.root):
            msg = f"Path escapes the repository root: {path}"
            raise InvalidPathError(msg)
        return real

    # -- Read ------------------------------------------------------------------

    async def read_file(self, path: str) -> bytes:
        real = self._real_path(path)
        return await to_thread.run_sync(real.read_bytes)

    async def read_dir(self, path: str) -> list[FileData]:
        real = self._real_path(path)
        relatives = await to_thread.run_sync(partial(_walk_files, real, self.root))
        return [FileData(path=to_editor_path(rel)) for rel in relatives]

    async def exists_file(self, path: str) -> bool:
        real = self._real_path(path)
        return await to_thread.run_sync(real.is_file)

    # -- Write -----------------------------------------------------------------

    async def write_file(self, path: str, content: bytes | str) -> None:
        real = self._real_path(path)
        data = content.encode("utf-8") if isinstance(content, str) else content
        await to_thread.run_sync(partial(_atomic_write, real, data))

    async def delete_file(self, path: str) -> None:
        real = self._real_path(path)
        await to_thread.run_sync(real.unlink)


# -- Sync helpers (run in thread pool) -----------------------------------------


def _walk_files(directory: Path, root: Path) -> list[str]:
    """Root-relative POSIX paths of every file below ``directory``, sorted.

    Raises ``FileNotFoundError`` if ``directory`` is missing or not a directory.
    """
    if not directory.is_dir():
        msg = f"Directory not found: {directory}"
        raise FileNotFoundError(msg)
    found: list[str] = []
    for dirpath, _dirnames, filenames in os.walk(directory):
        base = Path(dirpath)
        found.extend((base / name).relative_to(root).as_posix() for name in filenames)
    return sorted(found)


def _atomic_write(path: Path, data: bytes) -> None:
    """Write data atomically: temp file + rename.

    Ensures readers never see a partially-written file.  The temp file is
    created in the same directory so ``os.replace`` is atomic on POSIX.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on any failure.
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise
