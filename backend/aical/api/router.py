"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from aical.api import collage, edit, health, layout, render, resize

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(layout.router)
api_router.include_router(render.router)
api_router.include_router(collage.router)
api_router.include_router(resize.router)
api_router.include_router(edit.router)
