"""Workspace and publish endpoints (RPC-style)."""

from __future__ import annotations

from fastapi import APIRouter

from editor_server.api.deps import StorageDep
from editor_server.api.managers import workspaces as workspaces_manager
from editor_server.api.models.api import CreateWorkspaceRequest, PublishRequest
from editor_server.api.models.editor import PublishResult, WorkspaceData

router = APIRouter(tags=["workspaces"])


@router.post("/workspace.create", response_model=WorkspaceData)
async def create_workspace(body: CreateWorkspaceRequest, storage: StorageDep) -> WorkspaceData:
    """Create a workspace branch from a base workspace."""
    return await workspaces_manager.create_workspace(storage, body)


@router.post("/workspace.get", response_model=WorkspaceData)
async def get_workspace(storage: StorageDep) -> WorkspaceData:
    """The workspace currently checked out."""
    return await workspaces_manager.get_workspace(storage)


@router.post("/workspaces.get", response_model=list[WorkspaceData])
async def get_workspaces(storage: StorageDep) -> list[WorkspaceData]:
    """All branches shown as workspaces, sorted by branch name."""
    return await workspaces_manager.list_workspaces(storage)


@router.post("/publish.start", response_model=PublishResult, response_model_exclude_unset=True)
async def publish(body: PublishRequest, storage: StorageDep) -> PublishResult:
    """Start publishing a workspace."""
    return await workspaces_manager.publish(storage, body)
