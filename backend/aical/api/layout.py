"""POST /api/layout — initial layout for a freshly analysed photo."""

from __future__ import annotations

from fastapi import APIRouter

from aical.engine.layout import apply_collage_overrides, init_layout
from aical.models.layout import ImageLayout
from aical.models.modes import merge_mode_config
from aical.models.requests import LayoutRequest

router = APIRouter()


@router.post("/layout", response_model=ImageLayout)
async def layout(req: LayoutRequest) -> ImageLayout:
    config = merge_mode_config(req.mode, req.config)
    result = init_layout(req.width, req.height, req.analysis, config)
    if req.collage_source:
        result = apply_collage_overrides(result, req.analysis, config)
    return result
