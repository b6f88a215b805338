"""Unit tests for LocalStorage and path normalisation.

No network required -- uses a temporary directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from editor_server.api.storage import ConnectorStorage, InvalidPathError, LocalStorage
from editor_server.api.storage.base import normalize_path, to_editor_path


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/podspec.yaml", "podspec.yaml"),
        ("podspec.yaml", "podspec.yaml"),
        ("/content//pages/./index.yaml", "content/pages/index.yaml"),
        ("/content/pages/../posts/hello.md", "content/posts/hello.md"),
        ("/", ""),
        ("", ""),
        ("content\\pages\\index.yaml", "content/pages/index.yaml"),
    ],
)
def test_normalize_path(path: str, expected: str) -> None:
    assert normalize_path(path) == expected


@pytest.mark.parametrize("path", ["..", "/../etc/passwd", "content/../../secret", "/a/b/../../.."])
def test_normalize_path_rejects_escape(path: str) -> None:
    with pytest.raises(InvalidPathError):
        normalize_path(path)


def test_to_editor_path() -> None:
    assert to_editor_path("content/pages/index.yaml") == "/content/pages/index.yaml"


def test_local_storage_satisfies_protocol(storage: LocalStorage) -> None:
    assert isinstance(storage, ConnectorStorage)


async def test_read_file(storage: LocalStorage) -> None:
    assert await storage.read_file("/podspec.yaml") == await storage.read_file("podspec.yaml")
    assert (await storage.read_file("/content/posts/hello.md")).startswith(b"---\ntitle: Hello")


async def test_read_file_not_found(storage: LocalStorage) -> None:
    with pytest.raises(FileNotFoundError):
        await storage.read_file("/nope.txt")


async def test_read_dir_is_recursive_and_sorted(storage: LocalStorage) -> None:
    files = await storage.read_dir("/content")

    assert [f.path for f in files] == [
        "/content/pages/_blueprint.yaml",
        "/content/pages/index.yaml",
        "/content/partials/hero.yaml",
        "/content/posts/hello.md",
    ]


async def test_read_dir_root(storage: LocalStorage) -> None:
    paths = [f.path for f in await storage.read_dir("/")]

    assert paths == sorted(paths)
    assert "/podspec.yaml" in paths
    assert "/views/partials/hero.html" in paths


async def test_read_dir_missing(storage: LocalStorage) -> None:
    with pytest.raises(FileNotFoundError):
        await storage.read_dir("/nope")


async def test_read_dir_on_a_file(storage: LocalStorage) -> None:
    with pytest.raises(FileNotFoundError):
        await storage.read_dir("/podspec.yaml")


async def test_exists_file(storage: LocalStorage) -> None:
    assert await storage.exists_file("/podspec.yaml") is True
    assert await storage.exists_file("/nope.yaml") is False
    # Directories are not files.
    assert await storage.exists_file("/content") is False


async def test_write_file_creates_parents(storage: LocalStorage, site_root: Path) -> None:
    await storage.write_file("/content/new/deep/page.md", "# New\n")

    assert (site_root / "content/new/deep/page.md").read_text(encoding="utf-8") == "# New\n"


async def test_write_file_replaces_bytes(storage: LocalStorage, site_root: Path) -> None:
    await storage.write_file("/static/images/logo.svg", b"\x89PNG")

    assert (site_root / "static/images/logo.svg").read_bytes() == b"\x89PNG"
    # No temp files left behind.
    assert sorted(p.name for p in (site_root / "static/images").iterdir()) == ["logo.svg"]


async def test_delete_file(storage: LocalStorage) -> None:
    await storage.delete_file("/views/base.html")

    assert await storage.exists_file("/views/base.html") is False


async def test_delete_file_not_found(storage: LocalStorage) -> None:
    with pytest.raises(FileNotFoundError):
        await storage.delete_file("/nope.html")


async def test_paths_cannot_escape_root(storage: LocalStorage) -> None:
    with pytest.raises(InvalidPathError):
        await storage.read_file("/../outside.txt")
    with pytest.raises(InvalidPathError):
        await storage.write_file("../outside.txt", "x")


async def test_symlink_cannot_escape_root(storage: LocalStorage, site_root: Path, tmp_path: Path) -> None:
    outside = tmp_path / "outside.txt"
    outside.write_text("secret", encoding="utf-8")
    (site_root / "link.txt").symlink_to(outside)

    with pytest.raises(InvalidPathError):
        await storage.read_file("/link.txt")


def test_repr(storage: LocalStorage, site_root: Path) -> None:
    assert repr(storage) == f"LocalStorage({str(site_root.resolve())!r})"
