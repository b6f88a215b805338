"""Shared test fixtures: a small Grow site on disk.

Storage, connector and route tests all run against a temporary copy of the
site below, so no network or Docker is required.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from functools import partial
from pathlib import Path

import pytest

from editor_server.api.settings import _get_settings_cached
from editor_server.api.storage.local import LocalStorage

SITE_FILES: dict[str, str] = {
    "podspec.yaml": 'title: "My Site"\nhome: /content/pages/index.yaml\n',
    "content/pages/_blueprint.yaml": (
        "$path: /{base}/\n"
        "editor:\n"
        "  fields:\n"
        "  - type: text\n"
        "    key: title\n"
        "    label: Title\n"
        "    validation:\n"
        "    - type: require\n"
        "      message: Title is required.\n"
    ),
    "content/pages/index.yaml": "title: Home\nhero: !g.yaml /content/partials/hero.yaml\n",
    "content/partials/hero.yaml": "headline: Hello\ncta:\n  label: Go\n  url: /about/\n",
    "content/posts/hello.md": "---\ntitle: Hello\n---\n# Hello world\n",
    "views/base.html": "<html>{% block main %}{% endblock %}</html>\n",
    "views/partials/hero.html": (
        "---\neditor:\n  fields:\n  - key: title\n---\n<h1>{{partial.title}}</h1>\n"
    ),
    "views/partials/footer.html": "<footer></footer>\n",
    "static/images/logo.svg": "<svg></svg>\n",
}


def write_files(root: Path, files: dict[str, str]) -> None:
    """Write ``{relative path: text}`` under ``root``, creating directories."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    """Each test reads settings fresh from the environment."""
    _get_settings_cached.cache_clear()
    yield
    _get_settings_cached.cache_clear()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    write_files(root, SITE_FILES)
    return root


@pytest.fixture
def storage(site_root: Path) -> LocalStorage:
    return LocalStorage(site_root)


@pytest.fixture
def add_files(site_root: Path) -> Callable[[dict[str, str]], None]:
    """Add or replace files in the test site."""
    return partial(write_files, site_root)
