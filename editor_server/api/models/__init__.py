"""Data models for the editor API."""

from editor_server.api.models.api import (
    CopyFileRequest,
    CreateFileRequest,
    CreateWorkspaceRequest,
    DeleteFileRequest,
    GetDevicesRequest,
    GetFileRequest,
    GetFilesRequest,
    GetPartialsRequest,
    GetProjectRequest,
    GetWorkspaceRequest,
    GetWorkspacesRequest,
    PublishRequest,
    SaveFileRequest,
    UploadFileRequest,
)
from editor_server.api.models.editor import (
    ApiErrorData,
    ApiModel,
    BranchData,
    DeviceData,
    EditorFileConfig,
    EditorFileData,
    EmptyData,
    FieldConfig,
    FileData,
    GrowPartialData,
    ProjectData,
    PublishResult,
    WorkspaceData,
)
from editor_server.api.models.enums import PublishStatus, StorageBackend

__all__ = [
    "ApiErrorData",
    "ApiModel",
    "BranchData",
    "CopyFileRequest",
    "CreateFileRequest",
    "CreateWorkspaceRequest",
    "DeleteFileRequest",
    "DeviceData",
    "EditorFileConfig",
    "EditorFileData",
    "EmptyData",
    "FieldConfig",
    "FileData",
    "GetDevicesRequest",
    "GetFileRequest",
    "GetFilesRequest",
    "GetPartialsRequest",
    "GetProjectRequest",
    "GetWorkspaceRequest",
    "GetWorkspacesRequest",
    "GrowPartialData",
    "ProjectData",
    "PublishRequest",
    "PublishResult",
    "PublishStatus",
    "SaveFileRequest",
    "StorageBackend",
    "UploadFileRequest",
    "WorkspaceData",
]
