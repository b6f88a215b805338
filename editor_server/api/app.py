from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRouter
from loguru import logger

from editor_server.api.connectors import select_connector
from editor_server.api.errors import ConnectorNotFoundError, install_error_handlers
from editor_server.api.log import setup_logging
from editor_server.api.models.enums import StorageBackend
from editor_server.api.reporting import ErrorReporter
from editor_server.api.settings import EditorSettings, get_settings
from editor_server.api.storage.base import ConnectorStorage
from editor_server.api.storage.local import LocalStorage


def create_storage(settings: EditorSettings) -> ConnectorStorage:
    """Create the storage backend based on configuration."""
    if settings.storage == StorageBackend.S3:
        from editor_server.api.storage.s3 import S3Storage

        if not (settings.s3_bucket and settings.s3_endpoint and settings.s3_access_key and settings.s3_secret_key):
            msg = "S3 storage requires EDITOR_S3_BUCKET, EDITOR_S3_ENDPOINT, EDITOR_S3_ACCESS_KEY, EDITOR_S3_SECRET_KEY"
            raise ValueError(msg)
        return S3Storage(
            bucket=settings.s3_bucket,
            endpoint_url=settings.s3_endpoint,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key.get_secret_value(),
            prefix=settings.s3_prefix,
            region=settings.s3_region,
            path_style=settings.s3_path_style,
        )
    return LocalStorage(settings.root_dir)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # -- Startup ---------------------------------------------------------------
    settings = get_settings()
    setup_logging(settings.log_level, error_log=settings.error_log)
    reporter.mode = settings.mode

    logger.info("Editor server starting (host={}, port={}, mode={})", settings.host, settings.port, settings.mode)

    # -- Storage / connector (process-lifetime singletons) ---------------------
    storage = create_storage(settings)
    _app.state.storage = storage
    _app.state.connector = None
    logger.info("Storage: {!r}", storage)

    try:
        _app.state.connector = await select_connector(storage, upload_dir=settings.upload_dir)
    except ConnectorNotFoundError:
        logger.warning("No connector recognised {!r} -- file and project endpoints disabled", storage)

    yield

    # -- Shutdown --------------------------------------------------------------
    logger.info("Editor server shutting down")


reporter = ErrorReporter()

app = FastAPI(title="Editor Server", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_error_handlers(app, reporter)

# ---------------------------------------------------------------------------
# API router -- all backend endpoints live under /api
# ---------------------------------------------------------------------------
api = APIRouter(prefix="/api")


@api.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


# -- RPC routers -------------------------------------------------------------
from editor_server.api.routers.files import router as files_router  # noqa: E402
from editor_server.api.routers.grow import router as grow_router  # noqa: E402
from editor_server.api.routers.project import router as project_router  # noqa: E402
from editor_server.api.routers.workspaces import router as workspaces_router  # noqa: E402

api.include_router(files_router)
api.include_router(project_router)
api.include_router(workspaces_router)
api.include_router(grow_router)

app.include_router(api)
