"""Project-level endpoints (RPC-style)."""

from __future__ import annotations

from fastapi import APIRouter

from editor_server.api.deps import ConnectorDep, StorageDep
from editor_server.api.managers import files as files_manager
from editor_server.api.models.api import GetProjectRequest
from editor_server.api.models.editor import DeviceData, ProjectData

router = APIRouter(tags=["project"])


@router.post("/project.get", response_model=ProjectData)
async def get_project(connector: ConnectorDep) -> ProjectData:
    """Project information (title) from the repository's configuration."""
    return await connector.get_project(GetProjectRequest())


@router.post("/devices.get", response_model=list[DeviceData], response_model_exclude_unset=True)
async def get_devices(storage: StorageDep) -> list[DeviceData]:
    """Preview devices available in the editor."""
    return await files_manager.get_devices(storage)
