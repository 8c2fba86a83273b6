"""POST /api/edit — apply one layout edit; the client re-renders afterwards."""

from __future__ import annotations

from fastapi import APIRouter

from aical.engine.edits import apply_edit
from aical.models.layout import ImageLayout
from aical.models.requests import EditRequest

router = APIRouter()


@router.post("/edit", response_model=ImageLayout)
async def edit(req: EditRequest) -> ImageLayout:
    return apply_edit(req.layout, req.edit, req.width, req.height)
