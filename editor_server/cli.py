import os

import click


@click.group()
def main() -> None:
    """Editor Server - API backend for the web content editor."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: from EDITOR_HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port (default: from EDITOR_PORT or 9090).")
@click.option(
    "--root",
    default=None,
    type=click.Path(exists=True, file_okay=False),
    help="Repository root for local storage (default: from EDITOR_ROOT_DIR or the current directory).",
)
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def serve(host: str | None, port: int | None, root: str | None, reload: bool) -> None:
    """Start the editor API server."""
    import uvicorn

    from editor_server.api.settings import EditorSettings

    if root:
        # The app reads settings in its lifespan, possibly in a reloader subprocess.
        os.environ["EDITOR_ROOT_DIR"] = root

    settings = EditorSettings()

    uvicorn.run(
        "editor_server.api.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="warning",  # uvicorn's own logging is intercepted by loguru
    )


@main.command()
@click.option(
    "--root",
    default=".",
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
    help="Repository root of a local Grow site.",
)
def partials(root: str) -> None:
    """Print the partials of a local Grow site as JSON."""
    import asyncio
    import json

    from editor_server.api.connectors.grow import get_partials
    from editor_server.api.errors import ApiError
    from editor_server.api.storage.local import LocalStorage

    try:
        result = asyncio.run(get_partials(LocalStorage(root)))
    except FileNotFoundError as exc:
        raise click.ClickException(f"No partials directory: {exc}") from exc
    except ApiError as exc:
        raise click.ClickException(f"{exc.message} {exc.description or ''}".strip()) from exc
    payload = {name: data.model_dump(by_alias=True, exclude_unset=True) for name, data in result.items()}
    click.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
