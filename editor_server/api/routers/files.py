"""File endpoints (RPC-style).

Format-aware reads and writes (``file.get``, ``file.save``, ``file.upload``)
go through the connector; plain file management goes straight to storage.
"""

from __future__ import annotations

import json

from fastapi import APIRouter, File, Form, UploadFile

from editor_server.api.deps import ConnectorDep, StorageDep
from editor_server.api.errors import ApiError
from editor_server.api.managers import files as files_manager
from editor_server.api.models.api import (
    CopyFileRequest,
    CreateFileRequest,
    DeleteFileRequest,
    GetFileRequest,
    SaveFileRequest,
    UploadFileRequest,
)
from editor_server.api.models.editor import EditorFileData, EmptyData, FileData

router = APIRouter(tags=["files"])


@router.post("/file.copy", response_model=FileData, response_model_exclude_unset=True)
async def copy_file(body: CopyFileRequest, storage: StorageDep) -> FileData:
    """Copy a file to a new path."""
    return await files_manager.copy_file(storage, body)


@router.post("/file.create", response_model=FileData, response_model_exclude_unset=True)
async def create_file(body: CreateFileRequest, storage: StorageDep) -> FileData:
    """Create a new file, optionally with content."""
    return await files_manager.create_file(storage, body)


@router.post("/file.delete", response_model=EmptyData)
async def delete_file(body: DeleteFileRequest, storage: StorageDep) -> EmptyData:
    """Delete a file."""
    return await files_manager.delete_file(storage, body)


@router.post("/file.get", response_model=EditorFileData, response_model_exclude_unset=True)
async def get_file(body: GetFileRequest, connector: ConnectorDep) -> EditorFileData:
    """Read a file for editing: content, decoded data and editor fields."""
    return await connector.get_file(body)


@router.post("/file.save", response_model=EditorFileData, response_model_exclude_unset=True)
async def save_file(body: SaveFileRequest, connector: ConnectorDep) -> EditorFileData:
    """Save an edited file and return it as stored."""
    return await connector.save_file(body)


@router.post("/file.upload", response_model=FileData, response_model_exclude_unset=True)
async def upload_file(
    connector: ConnectorDep,
    file: UploadFile = File(...),
    meta: str = Form("{}"),
) -> FileData:
    """Upload a file (multipart form with a ``file`` part and JSON ``meta``)."""
    try:
        meta_data = json.loads(meta)
    except json.JSONDecodeError as exc:
        raise ApiError("Invalid upload metadata.", description=str(exc), status_code=400) from None
    if not isinstance(meta_data, dict):
        raise ApiError("Upload metadata must be a JSON object.", status_code=400)

    request = UploadFileRequest(
        file_name=file.filename or "",
        content=await file.read(),
        content_type=file.content_type,
        meta=meta_data,
    )
    return await connector.upload_file(request)


@router.post("/files.get", response_model=list[FileData], response_model_exclude_unset=True)
async def get_files(storage: StorageDep, connector: ConnectorDep) -> list[FileData]:
    """List the files the editor may open."""
    return await files_manager.list_files(storage, connector.file_filter)
