"""YAML schemas for Grow content and view files.

Grow documents can pull in other YAML files with the ``!g.yaml`` tag::

    hero: !g.yaml /content/partials/hero.yaml
    title: !g.yaml /content/strings/home.yaml?hero.title

The part after ``?`` selects a nested value by dotted key.  Paths are
relative to the repository root, not to the importing document.

Imports are resolved eagerly while the YAML is decoded.  PyYAML is
synchronous but storage is async, so :meth:`ImportSchema.load` runs the whole
parse in a worker thread and the tag constructor calls back into the event
loop for each storage read.

Saving goes the other way: :func:`load_tagged` keeps every ``!g.*`` node as a
:class:`GrowTag`, :func:`keep_unchanged_tags` puts those nodes back wherever
the editor left the resolved value alone, and :func:`dump_yaml` writes them
out with their tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any

import yaml
from anyio import from_thread, to_thread

from editor_server.api.errors import MetadataParseError
from editor_server.api.storage.base import ConnectorStorage, normalize_path, to_editor_path

IMPORT_TAG = "!g.yaml"
GROW_TAG_PREFIX = "!g."


class ImportResolutionError(MetadataParseError):
    """Raised when an imported file or key cannot be resolved."""


class ImportCycleError(ImportResolutionError):
    """Raised when a file imports itself, directly or indirectly."""


def decode_document(raw: bytes, path: str) -> str:
    """Decode a repository text file.  Raises ``MetadataParseError`` if not UTF-8."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"{to_editor_path(normalize_path(path))} is not valid UTF-8."
        raise MetadataParseError(msg, description=str(exc)) from exc


def _construct_grow_tag(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> Any:
    """Keep other ``!g.*`` references (``!g.doc``, ``!g.url``...) as plain values."""
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_mapping(node, deep=True)


class ImportSchema:
    """YAML decoding schema that resolves ``!g.yaml`` through a storage backend."""

    def __init__(self, storage: ConnectorStorage) -> None:
        self.storage = storage
        self.loader = self._build_loader(())

    def _build_loader(self, stack: tuple[str, ...]) -> type[yaml.SafeLoader]:
        schema = self

        class ImportLoader(yaml.SafeLoader):
            pass

        def construct_import(loader: yaml.SafeLoader, node: yaml.Node) -> Any:
            reference = loader.construct_scalar(node)
            return schema._resolve(str(reference), stack)

        ImportLoader.add_constructor(IMPORT_TAG, construct_import)
        ImportLoader.add_multi_constructor(GROW_TAG_PREFIX, _construct_grow_tag)
        return ImportLoader

    def _resolve(self, reference: str, stack: tuple[str, ...]) -> Any:
        """Read and decode an imported file.  Runs in the parser's worker thread."""
        raw_path, _, query = reference.strip().partition("?")
        path = normalize_path(raw_path)
        if path in stack:
            chain = " -> ".join(to_editor_path(p) for p in (*stack, path))
            raise ImportCycleError(f"Import cycle detected: {chain}")

        try:
            raw = from_thread.run(self.storage.read_file, path)
        except FileNotFoundError:
            raise ImportResolutionError(
                f"Imported file not found: {to_editor_path(path)}",
                description=f"Referenced by {IMPORT_TAG} {reference}",
            ) from None

        data = yaml.load(decode_document(raw, path), Loader=self._build_loader((*stack, path)))  # noqa: S506
        if query:
            data = _select(data, query, reference)
        return data

    async def load(self, text: str) -> Any:
        """Decode YAML text, resolving imports.  Raises ``MetadataParseError``."""
        try:
            return await to_thread.run_sync(partial(yaml.load, text, Loader=self.loader))  # noqa: S506
        except yaml.YAMLError as exc:
            raise MetadataParseError("Unable to parse YAML.", description=str(exc)) from exc


def _select(data: Any, query: str, reference: str) -> Any:
    """Walk a dotted key path (``a.b.c``) into decoded YAML."""
    for key in query.split("."):
        if not isinstance(data, dict) or key not in data:
            raise ImportResolutionError(f"Key '{query}' not found in imported file.", description=reference)
        data = data[key]
    return data


# ---------------------------------------------------------------------------
# Tag-preserving round trip
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GrowTag:
    """An unresolved ``!g.*`` node: its tag and its literal value."""

    tag: str
    value: Any


class _TaggedLoader(yaml.SafeLoader):
    pass


def _construct_tagged(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> GrowTag:
    return GrowTag(GROW_TAG_PREFIX + tag_suffix, _construct_grow_tag(loader, tag_suffix, node))


_TaggedLoader.add_multi_constructor(GROW_TAG_PREFIX, _construct_tagged)


class _GrowDumper(yaml.SafeDumper):
    pass


def _represent_tagged(dumper: yaml.SafeDumper, data: GrowTag) -> yaml.Node:
    if isinstance(data.value, dict):
        return dumper.represent_mapping(data.tag, data.value)
    if isinstance(data.value, list):
        return dumper.represent_sequence(data.tag, data.value)
    return dumper.represent_scalar(data.tag, str(data.value))


_GrowDumper.add_representer(GrowTag, _represent_tagged)


def load_tagged(text: str) -> Any:
    """Decode YAML without resolving anything; ``!g.*`` nodes become :class:`GrowTag`."""
    try:
        return yaml.load(text, Loader=_TaggedLoader)  # noqa: S506
    except yaml.YAMLError as exc:
        raise MetadataParseError("Unable to parse YAML.", description=str(exc)) from exc


def dump_yaml(data: Any) -> str:
    """Serialize edited data, writing :class:`GrowTag` values back with their tag."""
    return yaml.dump(data, Dumper=_GrowDumper, sort_keys=False, allow_unicode=True, default_flow_style=False)


def keep_unchanged_tags(edited: Any, tagged: Any, resolved: Any) -> Any:
    """Merge edited data with the stored document's ``!g.*`` references.

    ``tagged`` and ``resolved`` are the stored document decoded by
    :func:`load_tagged` and by :class:`ImportSchema`.  A tagged node survives
    when the editor sent back exactly its resolved value; anything the editor
    changed is taken as edited.
    """
    if isinstance(tagged, GrowTag):
        return tagged if edited == resolved else edited
    if isinstance(edited, dict) and isinstance(tagged, dict) and isinstance(resolved, dict):
        return {
            key: keep_unchanged_tags(value, tagged[key], resolved[key])
            if key in tagged and key in resolved
            else value
            for key, value in edited.items()
        }
    if (
        isinstance(edited, list)
        and isinstance(tagged, list)
        and isinstance(resolved, list)
        and len(edited) == len(tagged) == len(resolved)
    ):
        return [keep_unchanged_tags(*items) for items in zip(edited, tagged, resolved, strict=True)]
    return edited
