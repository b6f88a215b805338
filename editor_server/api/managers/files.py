"""File operations: copy, create, delete, list, plus preview devices."""

from __future__ import annotations

import yaml
from pydantic import ValidationError

from editor_server.api.errors import MetadataParseError
from editor_server.api.models.api import CopyFileRequest, CreateFileRequest, DeleteFileRequest
from editor_server.api.models.editor import DeviceData, EmptyData, FileData
from editor_server.api.storage.base import ConnectorStorage, normalize_path, to_editor_path
from editor_server.api.utility.filters import IncludeExcludeFilter
from editor_server.api.utility.yaml_schemas import decode_document

EDITOR_CONFIG_PATH = "editor.yaml"

DEFAULT_DEVICES: tuple[DeviceData, ...] = (
    DeviceData(label="Mobile", width=411, can_rotate=True),
    DeviceData(label="Tablet", width=1024, can_rotate=True),
    DeviceData(label="Desktop", width=1440),
)


async def copy_file(storage: ConnectorStorage, body: CopyFileRequest) -> FileData:
    """Copy a file.  Raises ``FileExistsError`` if the destination exists."""
    if await storage.exists_file(body.path):
        msg = f"File already exists: {body.path}"
        raise FileExistsError(msg)
    raw = await storage.read_file(body.original_path)
    await storage.write_file(body.path, raw)
    return FileData(path=to_editor_path(normalize_path(body.path)))


async def create_file(storage: ConnectorStorage, body: CreateFileRequest) -> FileData:
    """Create a file.  Raises ``FileExistsError`` if it already exists."""
    if await storage.exists_file(body.path):
        msg = f"File already exists: {body.path}"
        raise FileExistsError(msg)
    await storage.write_file(body.path, body.content or "")
    return FileData(path=to_editor_path(normalize_path(body.path)))


async def delete_file(storage: ConnectorStorage, body: DeleteFileRequest) -> EmptyData:
    """Delete a file.  Raises ``FileNotFoundError`` if missing."""
    await storage.delete_file(body.file.path)
    return EmptyData()


async def list_files(storage: ConnectorStorage, file_filter: IncludeExcludeFilter | None = None) -> list[FileData]:
    """All repository files the editor may open, sorted by path."""
    files = await storage.read_dir("/")
    if file_filter is None:
        return files
    return [file for file in files if file_filter.matches(file.path)]


async def get_devices(storage: ConnectorStorage) -> list[DeviceData]:
    """Preview devices from ``editor.yaml``, or the default set."""
    if not await storage.exists_file(EDITOR_CONFIG_PATH):
        return list(DEFAULT_DEVICES)

    raw = await storage.read_file(EDITOR_CONFIG_PATH)
    try:
        config = yaml.safe_load(decode_document(raw, EDITOR_CONFIG_PATH))
    except yaml.YAMLError as exc:
        raise MetadataParseError("Unable to parse editor.yaml.", description=str(exc)) from exc

    devices = config.get("devices") if isinstance(config, dict) else None
    if not devices:
        return list(DEFAULT_DEVICES)
    try:
        return [DeviceData.model_validate(device) for device in devices]
    except ValidationError as exc:
        raise MetadataParseError("Invalid devices in editor.yaml.", description=str(exc)) from exc
