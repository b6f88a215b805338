"""Grow-specific endpoints (RPC-style)."""

from __future__ import annotations

from fastapi import APIRouter

from editor_server.api.connectors.grow import get_partials as load_partials
from editor_server.api.deps import StorageDep
from editor_server.api.models.editor import GrowPartialData
from editor_server.api.settings import get_settings

router = APIRouter(prefix="/grow", tags=["grow"])


@router.post("/partials.get", response_model=dict[str, GrowPartialData], response_model_exclude_unset=True)
async def get_partials(storage: StorageDep) -> dict[str, GrowPartialData]:
    """Partial templates keyed by name, each with its editor fields if declared."""
    return await load_partials(storage, limit=get_settings().partials_concurrency)
