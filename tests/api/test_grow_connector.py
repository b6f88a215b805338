"""Tests for GrowConnector against a temporary Grow site."""

from __future__ import annotations

from pathlib import Path

import pytest

from editor_server.api.connectors import CONNECTORS, Connector, select_connector
from editor_server.api.connectors.grow import GrowConnector
from editor_server.api.errors import ApiError, ConnectorNotFoundError, MetadataParseError
from editor_server.api.models.api import GetFileRequest, GetProjectRequest, SaveFileRequest, UploadFileRequest
from editor_server.api.models.editor import EditorFileData, FileData
from editor_server.api.storage.local import LocalStorage
from editor_server.api.utility.frontmatter import split_front_matter
from editor_server.api.utility.yaml_schemas import GrowTag, load_tagged


@pytest.fixture
def connector(storage: LocalStorage) -> GrowConnector:
    return GrowConnector(storage)


def _get(path: str) -> GetFileRequest:
    return GetFileRequest(file=FileData(path=path))


# -- Selection ---------------------------------------------------------------


async def test_can_apply(storage: LocalStorage, tmp_path: Path) -> None:
    assert await GrowConnector.can_apply(storage) is True
    assert await GrowConnector.can_apply(LocalStorage(tmp_path)) is False


async def test_select_connector(storage: LocalStorage) -> None:
    connector = await select_connector(storage, upload_dir="/static/media")

    assert isinstance(connector, GrowConnector)
    assert isinstance(connector, Connector)
    assert connector.upload_dir == "/static/media"
    assert CONNECTORS == [GrowConnector]


async def test_select_connector_none_applies(tmp_path: Path) -> None:
    with pytest.raises(ConnectorNotFoundError) as exc_info:
        await select_connector(LocalStorage(tmp_path))

    assert exc_info.value.status_code == 503
    assert "grow" in exc_info.value.description


# -- Project -----------------------------------------------------------------


async def test_get_project(connector: GrowConnector) -> None:
    project = await connector.get_project(GetProjectRequest())

    assert project.title == "My Site"


async def test_get_project_without_title(connector: GrowConnector, add_files) -> None:
    add_files({"podspec.yaml": "home: /content/pages/index.yaml\n"})

    with pytest.raises(MetadataParseError, match="podspec.yaml"):
        await connector.get_project(GetProjectRequest())


async def test_get_project_title_from_import(connector: GrowConnector, add_files) -> None:
    add_files({
        "podspec.yaml": "title: !g.yaml /content/strings/site.yaml?name\n",
        "content/strings/site.yaml": "name: Imported Site\n",
    })

    project = await connector.get_project(GetProjectRequest())

    assert project.title == "Imported Site"


# -- get_file ----------------------------------------------------------------


async def test_get_yaml_file(connector: GrowConnector) -> None:
    result = await connector.get_file(_get("/content/pages/index.yaml"))

    assert result.content is None
    assert result.data == {
        "title": "Home",
        "hero": {"headline": "Hello", "cta": {"label": "Go", "url": "/about/"}},
    }
    # The raw text keeps the import tag unresolved.
    assert result.data_raw == "title: Home\nhero: !g.yaml /content/partials/hero.yaml\n"
    assert result.file.path == "/content/pages/index.yaml"


async def test_get_yaml_file_has_blueprint_editor(connector: GrowConnector) -> None:
    result = await connector.get_file(_get("content/pages/index.yaml"))

    assert result.editor is not None
    assert result.editor.model_dump(by_alias=True, exclude_none=True) == {
        "fields": [
            {
                "type": "text",
                "key": "title",
                "label": "Title",
                "validation": [{"type": "require", "message": "Title is required."}],
            }
        ]
    }


async def test_get_markdown_file(connector: GrowConnector) -> None:
    result = await connector.get_file(_get("/content/posts/hello.md"))

    assert result.content == "# Hello world\n"
    assert result.data == {"title": "Hello"}
    assert result.data_raw == "title: Hello"
    assert result.editor is None


async def test_get_file_without_front_matter(connector: GrowConnector) -> None:
    result = await connector.get_file(_get("/views/partials/footer.html"))

    assert result.content == "<footer></footer>\n"
    assert result.data == {}
    assert result.data_raw == ""


async def test_get_empty_yaml_file(connector: GrowConnector, add_files) -> None:
    add_files({"content/pages/empty.yaml": ""})

    result = await connector.get_file(_get("/content/pages/empty.yaml"))

    assert result.data == {}
    assert result.data_raw == ""


async def test_get_file_not_found(connector: GrowConnector) -> None:
    with pytest.raises(FileNotFoundError):
        await connector.get_file(_get("/content/pages/nope.yaml"))


async def test_get_file_with_broken_yaml(connector: GrowConnector, add_files) -> None:
    add_files({"content/pages/broken.yaml": "title: [unclosed\n"})

    with pytest.raises(MetadataParseError):
        await connector.get_file(_get("/content/pages/broken.yaml"))


# -- save_file ---------------------------------------------------------------


async def test_save_yaml_data(connector: GrowConnector, site_root: Path) -> None:
    request = SaveFileRequest(
        file=EditorFileData(file=FileData(path="/content/pages/about.yaml"), data={"title": "About", "order": 2}),
    )

    result = await connector.save_file(request)

    assert (site_root / "content/pages/about.yaml").read_text(encoding="utf-8") == "title: About\norder: 2\n"
    assert result.data == {"title": "About", "order": 2}
    assert result.editor is not None


async def test_save_markdown_data_and_content(connector: GrowConnector, site_root: Path) -> None:
    request = SaveFileRequest(
        file=EditorFileData(
            file=FileData(path="/content/posts/hello.md"),
            content="# Updated\n",
            data={"title": "Héllo", "draft": True},
        ),
    )

    result = await connector.save_file(request)

    written = (site_root / "content/posts/hello.md").read_text(encoding="utf-8")
    assert written == "---\ntitle: Héllo\ndraft: true\n---\n# Updated\n"
    assert result.content == "# Updated\n"
    assert result.data == {"title": "Héllo", "draft": True}


async def test_save_without_data_drops_front_matter(connector: GrowConnector, site_root: Path) -> None:
    request = SaveFileRequest(
        file=EditorFileData(file=FileData(path="/content/posts/hello.md"), content="Plain\n", data={}),
    )

    await connector.save_file(request)

    assert (site_root / "content/posts/hello.md").read_text(encoding="utf-8") == "Plain\n"


async def test_save_raw_edit_keeps_text_verbatim(connector: GrowConnector, site_root: Path) -> None:
    raw = "# keep this comment\ntitle: Home\nhero: !g.yaml /content/partials/hero.yaml?cta\n"
    request = SaveFileRequest(
        file=EditorFileData(file=FileData(path="/content/pages/index.yaml"), data={"ignored": True}, data_raw=raw),
        is_raw_edit=True,
    )

    result = await connector.save_file(request)

    assert (site_root / "content/pages/index.yaml").read_text(encoding="utf-8") == raw
    assert result.data == {"title": "Home", "hero": {"label": "Go", "url": "/about/"}}


async def test_save_invalid_raw_edit_leaves_file_unchanged(connector: GrowConnector, site_root: Path) -> None:
    before = (site_root / "content/posts/hello.md").read_text(encoding="utf-8")
    request = SaveFileRequest(
        file=EditorFileData(file=FileData(path="/content/posts/hello.md"), content="x", data_raw="title: [oops\n"),
        is_raw_edit=True,
    )

    with pytest.raises(MetadataParseError):
        await connector.save_file(request)

    assert (site_root / "content/posts/hello.md").read_text(encoding="utf-8") == before


async def test_structured_save_keeps_unchanged_import(connector: GrowConnector, site_root: Path) -> None:
    loaded = await connector.get_file(_get("/content/pages/index.yaml"))
    edited = loaded.model_copy(update={"data": {**loaded.data, "title": "Home 2"}})

    result = await connector.save_file(SaveFileRequest(file=edited))

    written = (site_root / "content/pages/index.yaml").read_text(encoding="utf-8")
    assert load_tagged(written) == {
        "title": "Home 2",
        "hero": GrowTag("!g.yaml", "/content/partials/hero.yaml"),
    }
    assert result.data["hero"] == {"headline": "Hello", "cta": {"label": "Go", "url": "/about/"}}


async def test_structured_save_replaces_changed_import(connector: GrowConnector, site_root: Path) -> None:
    loaded = await connector.get_file(_get("/content/pages/index.yaml"))
    hero = {"headline": "Local copy", "cta": {"label": "Go", "url": "/about/"}}
    edited = loaded.model_copy(update={"data": {"title": "Home", "hero": hero}})

    await connector.save_file(SaveFileRequest(file=edited))

    written = (site_root / "content/pages/index.yaml").read_text(encoding="utf-8")
    assert "!g.yaml" not in written
    assert load_tagged(written)["hero"] == hero


async def test_structured_save_keeps_other_grow_tags(connector: GrowConnector, site_root: Path, add_files) -> None:
    add_files({
        "content/posts/linked.md": (
            "---\n"
            "title: Linked\n"
            "next: !g.doc /content/posts/hello.md\n"
            "label: !g.yaml /content/partials/hero.yaml?cta.label\n"
            "---\n"
            "Body\n"
        ),
    })
    loaded = await connector.get_file(_get("/content/posts/linked.md"))
    assert loaded.data == {"title": "Linked", "next": "/content/posts/hello.md", "label": "Go"}
    edited = loaded.model_copy(update={"data": {**loaded.data, "title": "Linked 2"}, "content": "New body\n"})

    await connector.save_file(SaveFileRequest(file=edited))

    written = (site_root / "content/posts/linked.md").read_text(encoding="utf-8")
    parts = split_front_matter(written)
    assert parts.body == "New body\n"
    assert load_tagged(parts.front_matter) == {
        "title": "Linked 2",
        "next": GrowTag("!g.doc", "/content/posts/hello.md"),
        "label": GrowTag("!g.yaml", "/content/partials/hero.yaml?cta.label"),
    }


async def test_get_file_invalid_utf8(connector: GrowConnector, site_root: Path) -> None:
    (site_root / "content/pages/latin1.yaml").write_bytes("title: café\n".encode("latin-1"))

    with pytest.raises(MetadataParseError, match="/content/pages/latin1.yaml is not valid UTF-8."):
        await connector.get_file(_get("/content/pages/latin1.yaml"))


async def test_get_file_without_blueprint_leaves_editor_unset(connector: GrowConnector) -> None:
    result = await connector.get_file(_get("/content/posts/hello.md"))

    assert "editor" not in result.model_fields_set


# -- upload_file -------------------------------------------------------------


async def test_upload_file(connector: GrowConnector, site_root: Path) -> None:
    request = UploadFileRequest(file_name="photo.png", content=b"\x89PNG", content_type="image/png")

    result = await connector.upload_file(request)

    assert result.path == "/static/uploads/photo.png"
    assert (site_root / "static/uploads/photo.png").read_bytes() == b"\x89PNG"


async def test_upload_file_strips_client_directories(storage: LocalStorage, site_root: Path) -> None:
    connector = GrowConnector(storage, upload_dir="/static/media/")
    request = UploadFileRequest(file_name="C:\\Users\\me\\..\\logo.svg", content=b"<svg/>")

    result = await connector.upload_file(request)

    assert result.path == "/static/media/logo.svg"
    assert (site_root / "static/media/logo.svg").exists()


async def test_upload_file_without_name(connector: GrowConnector) -> None:
    with pytest.raises(ApiError) as exc_info:
        await connector.upload_file(UploadFileRequest(file_name="", content=b"x"))

    assert exc_info.value.status_code == 400
