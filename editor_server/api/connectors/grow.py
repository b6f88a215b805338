"""Connector for Grow websites.

See https://grow.dev for the format.  A Grow site is recognised by the
``podspec.yaml`` at its root::

    podspec.yaml
    content/pages/_blueprint.yaml     # collection config, incl. ``editor``
    content/pages/index.yaml          # YAML document
    content/posts/hello.md            # front matter + markdown body
    views/partials/hero.html          # front matter + template

Documents and view templates are decoded with :class:`ImportSchema`, so
``!g.yaml`` imports are resolved on read.
"""

from __future__ import annotations

import asyncio
import posixpath
from typing import Any, ClassVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from editor_server.api.errors import ApiError, MetadataParseError
from editor_server.api.models.api import GetFileRequest, GetProjectRequest, SaveFileRequest, UploadFileRequest
from editor_server.api.models.editor import EditorFileConfig, EditorFileData, FileData, GrowPartialData, ProjectData
from editor_server.api.storage.base import ConnectorStorage, normalize_path, to_editor_path
from editor_server.api.utility.filters import IncludeExcludeFilter
from editor_server.api.utility.frontmatter import combine_front_matter, split_front_matter
from editor_server.api.utility.yaml_schemas import (
    GROW_TAG_PREFIX,
    ImportSchema,
    decode_document,
    dump_yaml,
    keep_unchanged_tags,
    load_tagged,
)

PODSPEC_PATH = "podspec.yaml"
BLUEPRINT_FILENAME = "_blueprint.yaml"
PARTIALS_DIR = "/views/partials/"
YAML_EXTENSIONS = (".yaml", ".yml")
DEFAULT_UPLOAD_DIR = "/static/uploads"
DEFAULT_PARTIALS_CONCURRENCY = 16


class PodspecConfig(BaseModel):
    """The parts of ``podspec.yaml`` the editor uses."""

    model_config = ConfigDict(extra="allow")

    title: str


class GrowConnector:
    """Connector implementation for Grow sites."""

    name: ClassVar[str] = "grow"

    def __init__(self, storage: ConnectorStorage, *, upload_dir: str = DEFAULT_UPLOAD_DIR) -> None:
        self.storage = storage
        self.upload_dir = upload_dir
        # TODO: Read include/exclude patterns from the podspec once Grow sites declare them.
        self.file_filter: IncludeExcludeFilter | None = IncludeExcludeFilter(
            includes=[r"^/(content|static)"],
            excludes=[r"/[_.]"],
        )

    @classmethod
    async def can_apply(cls, storage: ConnectorStorage) -> bool:
        return await storage.exists_file(PODSPEC_PATH)

    # -- Project ---------------------------------------------------------------

    async def get_project(self, request: GetProjectRequest) -> ProjectData:
        podspec = await self.read_podspec_config()
        return ProjectData(title=podspec.title)

    async def read_podspec_config(self) -> PodspecConfig:
        raw = await self.storage.read_file(PODSPEC_PATH)
        data = await ImportSchema(self.storage).load(decode_document(raw, PODSPEC_PATH))
        try:
            return PodspecConfig.model_validate(data if data is not None else {})
        except ValidationError as exc:
            raise MetadataParseError("Invalid podspec.yaml.", description=str(exc)) from exc

    # -- Files -----------------------------------------------------------------

    async def get_file(self, request: GetFileRequest) -> EditorFileData:
        path = to_editor_path(normalize_path(request.file.path))
        raw = decode_document(await self.storage.read_file(path), path)
        schema = ImportSchema(self.storage)

        if _is_yaml(path):
            data = await schema.load(raw)
            result = EditorFileData(data=data if data is not None else {}, data_raw=raw, file=FileData(path=path))
        else:
            parts = split_front_matter(raw)
            data = await schema.load(parts.front_matter) if parts.front_matter else {}
            result = EditorFileData(
                content=parts.body,
                data=data if data is not None else {},
                data_raw=parts.front_matter or "",
                file=FileData(path=path),
            )

        editor = await self._read_editor_config(path, schema)
        if editor is not None:
            result.editor = editor
        return result

    async def save_file(self, request: SaveFileRequest) -> EditorFileData:
        """Write an edited document and return it as re-read from storage.

        The metadata is validated before anything is written, so a save either
        fully succeeds or leaves the file untouched.  Structured saves keep the
        stored ``!g.*`` references the editor did not change.
        """
        file = request.file
        path = to_editor_path(normalize_path(file.file.path))

        if request.is_raw_edit:
            metadata = file.data_raw or ""
            await ImportSchema(self.storage).load(metadata)
        elif file.data:
            metadata = dump_yaml(await self._merge_stored_tags(path, file.data))
        else:
            metadata = ""

        text = metadata if _is_yaml(path) else combine_front_matter(metadata, file.content)
        await self.storage.write_file(path, text)
        logger.info("Saved {} (raw={})", path, request.is_raw_edit)
        return await self.get_file(GetFileRequest(file=FileData(path=path)))

    async def _merge_stored_tags(self, path: str, data: Any) -> Any:
        if not await self.storage.exists_file(path):
            return data
        stored = decode_document(await self.storage.read_file(path), path)
        metadata = stored if _is_yaml(path) else split_front_matter(stored).front_matter
        if not metadata or GROW_TAG_PREFIX not in metadata:
            return data
        resolved = await ImportSchema(self.storage).load(metadata)
        return keep_unchanged_tags(data, load_tagged(metadata), resolved)

    async def upload_file(self, request: UploadFileRequest) -> FileData:
        filename = posixpath.basename(request.file_name.replace("\\", "/"))
        if not filename:
            raise ApiError("Uploaded file has no name.", status_code=400)
        path = to_editor_path(posixpath.join(normalize_path(self.upload_dir), filename))
        await self.storage.write_file(path, request.content)
        logger.info("Uploaded {} ({} bytes, meta={})", path, len(request.content), request.meta)
        return FileData(path=path)

    async def _read_editor_config(self, path: str, schema: ImportSchema) -> EditorFileConfig | None:
        """Editor field schema from the ``_blueprint.yaml`` beside ``path``, if any."""
        blueprint_path = posixpath.join(posixpath.dirname(path), BLUEPRINT_FILENAME)
        if blueprint_path == path or not await self.storage.exists_file(blueprint_path):
            return None
        raw = await self.storage.read_file(blueprint_path)
        blueprint = await schema.load(decode_document(raw, blueprint_path))
        if not isinstance(blueprint, dict) or not blueprint.get("editor"):
            return None
        return _editor_config(blueprint["editor"], blueprint_path)


# ---------------------------------------------------------------------------
# Partials
# ---------------------------------------------------------------------------


def partial_name(path: str) -> str:
    """Partial name for a view file: the file name up to its first ``.``."""
    return posixpath.basename(path).split(".")[0]


async def get_partials(
    storage: ConnectorStorage,
    schema: ImportSchema | None = None,
    *,
    limit: int = DEFAULT_PARTIALS_CONCURRENCY,
) -> dict[str, GrowPartialData]:
    """Describe every partial under ``/views/partials/``.

    All files are read concurrently (at most ``limit`` at a time), then each
    one's front matter is decoded in listing order.  A single unreadable or
    malformed file fails the whole call and cancels the reads still running;
    no partial result is returned.
    """
    schema = schema or ImportSchema(storage)
    view_files = await storage.read_dir(PARTIALS_DIR)
    semaphore = asyncio.Semaphore(limit)

    async def _read(path: str) -> bytes:
        async with semaphore:
            return await storage.read_file(path)

    try:
        async with asyncio.TaskGroup() as group:
            reads = [group.create_task(_read(view_file.path)) for view_file in view_files]
    except ExceptionGroup as exc:
        raise exc.exceptions[0] from None

    partials: dict[str, GrowPartialData] = {}
    for view_file, read in zip(view_files, reads, strict=True):
        name = partial_name(view_file.path)
        text = decode_document(read.result(), view_file.path)
        partials[name] = await _load_partial(name, view_file.path, text, schema)

    logger.debug("Loaded {} partials from {}", len(partials), PARTIALS_DIR)
    return partials


async def _load_partial(name: str, path: str, text: str, schema: ImportSchema) -> GrowPartialData:
    parts = split_front_matter(text)
    if not parts.front_matter:
        return GrowPartialData(partial=name)

    fields = await schema.load(parts.front_matter)
    if isinstance(fields, dict) and fields.get("editor"):
        return GrowPartialData(partial=name, editor=_editor_config(fields["editor"], path))
    return GrowPartialData(partial=name)


# -- Helpers -----------------------------------------------------------------


def _is_yaml(path: str) -> bool:
    return path.endswith(YAML_EXTENSIONS)


def _editor_config(value: Any, source: str) -> EditorFileConfig:
    try:
        return EditorFileConfig.model_validate(value)
    except ValidationError as exc:
        raise MetadataParseError(f"Invalid editor config in {source}.", description=str(exc)) from exc
