"""Editor data models.

These are the shapes the editor front end exchanges with the server.  They
serialize with camelCase keys (``dataRaw``, ``canRotate``) and routes drop
fields the server never set, so an absent optional value is an absent key on
the wire.  Explicit ``null`` values inside document data or editor field
schemas are kept.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from editor_server.api.models.enums import PublishStatus


class ApiModel(BaseModel):
    """Base model: camelCase aliases, snake_case attribute access."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -- Files -------------------------------------------------------------------


class FileData(ApiModel):
    """A file in the repository, addressed by its root-relative path."""

    path: str
    url: str | None = None


class FieldConfig(ApiModel):
    """One editor field.  Unknown keys (field-type options) are preserved."""

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    key: str | None = None
    label: str | None = None
    validation: list[dict[str, Any]] | None = None


class EditorFileConfig(ApiModel):
    """Field schema the editor renders a form from."""

    model_config = ConfigDict(extra="allow")

    fields: list[FieldConfig] = Field(default_factory=list)


class EditorFileData(ApiModel):
    """A file as presented to (and saved by) the editor."""

    content: str | None = None
    data: Any = None
    data_raw: str | None = None
    file: FileData
    editor: EditorFileConfig | None = None
    history: list[dict[str, Any]] | None = None
    url: str | None = None
    urls: list[dict[str, Any]] | None = None


class EmptyData(ApiModel):
    pass


# -- Project -----------------------------------------------------------------


class ProjectData(ApiModel):
    title: str


class DeviceData(ApiModel):
    """A preview device the editor can emulate."""

    label: str
    width: int | None = None
    height: int | None = None
    can_rotate: bool | None = None


# -- Workspaces --------------------------------------------------------------


class BranchData(ApiModel):
    name: str


class WorkspaceData(ApiModel):
    """An editor workspace and the branch that backs it."""

    name: str
    branch: BranchData


class PublishResult(ApiModel):
    status: PublishStatus
    workspace: WorkspaceData | None = None


# -- Grow --------------------------------------------------------------------


class GrowPartialData(ApiModel):
    """A partial template and its optional editor field schema."""

    partial: str
    editor: EditorFileConfig | None = None


# -- Errors ------------------------------------------------------------------


class ApiErrorData(ApiModel):
    message: str
    description: str | None = None
