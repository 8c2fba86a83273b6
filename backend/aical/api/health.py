"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from aical import __version__
from aical.models.layout import AppMode
from aical.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, modes=list(AppMode))
