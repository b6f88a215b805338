"""Workspace <-> branch naming rules.

The editor addresses branches by a short *workspace* name.  A handful of
reserved branch names are shown as-is; every other workspace lives under the
``workspace/`` branch prefix::

    main           <-> main
    staging        <-> staging
    new-homepage   <-> workspace/new-homepage

These functions are pure and do no I/O.
"""

from __future__ import annotations

SPECIAL_BRANCHES: tuple[str, ...] = ("main", "master", "staging")
"""Branch names that are workspaces without the ``workspace/`` prefix."""

WORKSPACE_BRANCH_PREFIX = "workspace/"


def expand_workspace_branch(workspace: str) -> str:
    """Return the full branch name for a short workspace name."""
    if workspace in SPECIAL_BRANCHES:
        return workspace
    return f"{WORKSPACE_BRANCH_PREFIX}{workspace}"


def is_workspace_branch(branch: str) -> bool:
    """Whether the branch should be shown in the editor as a workspace."""
    if branch in SPECIAL_BRANCHES:
        return True
    return branch.startswith(WORKSPACE_BRANCH_PREFIX)


def shorten_workspace_name(branch: str) -> str:
    """Strip a single leading ``workspace/`` prefix from a branch name."""
    if branch.startswith(WORKSPACE_BRANCH_PREFIX):
        return branch[len(WORKSPACE_BRANCH_PREFIX) :]
    return branch
