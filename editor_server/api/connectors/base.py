"""Connector interface.

A connector translates generic editor operations into the operations of one
content-repository format.  Connectors are stateless per request: the storage
backend passed to the constructor is the only state they carry, and no
operation may assume another was called first.
"""

from __future__ import annotations

from typing import ClassVar, Protocol, runtime_checkable

from editor_server.api.models.api import GetFileRequest, GetProjectRequest, SaveFileRequest, UploadFileRequest
from editor_server.api.models.editor import EditorFileData, FileData, ProjectData
from editor_server.api.storage.base import ConnectorStorage
from editor_server.api.utility.filters import IncludeExcludeFilter


@runtime_checkable
class Connector(Protocol):
    """Async protocol every content-repository adapter implements."""

    name: ClassVar[str]
    storage: ConnectorStorage
    file_filter: IncludeExcludeFilter | None

    @classmethod
    async def can_apply(cls, storage: ConnectorStorage) -> bool:
        """Cheap capability probe: does the repository look like this format?"""
        ...

    async def get_file(self, request: GetFileRequest) -> EditorFileData: ...

    async def save_file(self, request: SaveFileRequest) -> EditorFileData: ...

    async def get_project(self, request: GetProjectRequest) -> ProjectData: ...

    async def upload_file(self, request: UploadFileRequest) -> FileData: ...
