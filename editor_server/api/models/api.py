"""API request schemas.

Each request maps one-to-one to a connector or manager operation.  Requests
that carry no fields are still modelled so every operation has a typed input.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from editor_server.api.models.editor import ApiModel, EditorFileData, FileData, WorkspaceData

# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class CopyFileRequest(ApiModel):
    original_path: str
    path: str


class CreateFileRequest(ApiModel):
    path: str
    content: str | None = None


class DeleteFileRequest(ApiModel):
    file: FileData


class GetFileRequest(ApiModel):
    file: FileData


class SaveFileRequest(ApiModel):
    """Save an edited file.

    When ``is_raw_edit`` is set the user edited ``dataRaw`` directly and it is
    written verbatim; otherwise ``data`` is serialized.
    """

    file: EditorFileData
    is_raw_edit: bool = False


class UploadFileRequest(ApiModel):
    """An uploaded file, decoded from the multipart form by the router."""

    file_name: str
    content: bytes
    content_type: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


class GetFilesRequest(ApiModel):
    pass


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------


class GetProjectRequest(ApiModel):
    pass


class GetDevicesRequest(ApiModel):
    pass


# ---------------------------------------------------------------------------
# Workspaces / publish
# ---------------------------------------------------------------------------


class CreateWorkspaceRequest(ApiModel):
    base: WorkspaceData
    workspace: str


class GetWorkspaceRequest(ApiModel):
    pass


class GetWorkspacesRequest(ApiModel):
    pass


class PublishRequest(ApiModel):
    workspace: WorkspaceData
    data: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Grow
# ---------------------------------------------------------------------------


class GetPartialsRequest(ApiModel):
    pass
