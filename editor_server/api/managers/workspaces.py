"""Workspace operations for a repository checkout.

Workspaces are discovered from the git metadata files inside the repository
(``.git/HEAD``, ``.git/refs/heads/``, ``.git/packed-refs``), read through the
storage backend like any other file.  Nothing here runs git: creating
branches and publishing require version control and are refused.

A repository without ``.git`` has exactly one workspace, ``main``.
"""

from __future__ import annotations

from loguru import logger

from editor_server.api.errors import ApiError, UnsupportedOperationError
from editor_server.api.models.api import CreateWorkspaceRequest, PublishRequest
from editor_server.api.models.editor import BranchData, PublishResult, WorkspaceData
from editor_server.api.models.enums import PublishStatus
from editor_server.api.storage.base import ConnectorStorage
from editor_server.api.workspaces import expand_workspace_branch, is_workspace_branch, shorten_workspace_name

DEFAULT_BRANCH = "main"
GIT_HEAD_PATH = ".git/HEAD"
GIT_HEADS_DIR = ".git/refs/heads"
GIT_PACKED_REFS_PATH = ".git/packed-refs"
HEADS_REF_PREFIX = "refs/heads/"


def workspace_for_branch(branch: str) -> WorkspaceData:
    return WorkspaceData(name=shorten_workspace_name(branch), branch=BranchData(name=branch))


async def current_branch(storage: ConnectorStorage) -> str:
    """Branch checked out in the repository, ``main`` if there is no git metadata.

    A detached HEAD yields the commit id, which is never a workspace branch.
    """
    if not await storage.exists_file(GIT_HEAD_PATH):
        return DEFAULT_BRANCH
    head = (await storage.read_file(GIT_HEAD_PATH)).decode("utf-8").strip()
    ref = head.removeprefix("ref:").strip()
    return ref.removeprefix(HEADS_REF_PREFIX)


async def list_branches(storage: ConnectorStorage) -> list[str]:
    """All local branch names (loose and packed refs), sorted."""
    branches = {await current_branch(storage)}

    try:
        loose = await storage.read_dir(GIT_HEADS_DIR)
    except FileNotFoundError:
        loose = []
    heads_prefix = f"/{GIT_HEADS_DIR}/"
    branches.update(ref.path.removeprefix(heads_prefix) for ref in loose)

    if await storage.exists_file(GIT_PACKED_REFS_PATH):
        packed = (await storage.read_file(GIT_PACKED_REFS_PATH)).decode("utf-8")
        for line in packed.splitlines():
            # Header comments and peeled-tag lines ("^<sha>") carry no ref.
            if not line or line.startswith(("#", "^")):
                continue
            _sha, _, ref = line.partition(" ")
            if ref.startswith(HEADS_REF_PREFIX):
                branches.add(ref.removeprefix(HEADS_REF_PREFIX))

    return sorted(branches)


async def get_workspace(storage: ConnectorStorage) -> WorkspaceData:
    return workspace_for_branch(await current_branch(storage))


async def list_workspaces(storage: ConnectorStorage) -> list[WorkspaceData]:
    """Branches shown in the editor as workspaces."""
    return [workspace_for_branch(branch) for branch in await list_branches(storage) if is_workspace_branch(branch)]


async def create_workspace(storage: ConnectorStorage, body: CreateWorkspaceRequest) -> WorkspaceData:
    """Refuse to create a workspace branch.

    Raises ``ApiError`` for an empty name and ``UnsupportedOperationError``
    otherwise, since branching needs version control.
    """
    name = body.workspace.strip()
    if not name:
        raise ApiError("Workspace name is required.", status_code=400)
    branch = expand_workspace_branch(name)
    logger.info("Workspace create requested: {} (base={})", branch, body.base.branch.name)
    raise UnsupportedOperationError(
        f"Unable to create workspace '{name}'.",
        description=f"Creating branch '{branch}' from '{body.base.branch.name}' requires version control.",
    )


async def publish(storage: ConnectorStorage, body: PublishRequest) -> PublishResult:
    """Publishing needs a version-control remote; report it as not allowed."""
    logger.info("Publish requested for workspace {}", body.workspace.name)
    return PublishResult(status=PublishStatus.NOT_ALLOWED, workspace=body.workspace)
