"""POST /api/render (preview) and POST /api/export (final JPEG)."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from aical.config import Settings
from aical.dependencies import get_settings
from aical.engine.errors import ImageDecodeError
from aical.engine.export import load_logo, render_final
from aical.engine.imaging import decode_image, encode_data_url
from aical.engine.scene import render_scene
from aical.models.requests import ExportRequest, RenderRequest
from aical.models.responses import ExportResponse, RenderResponse

router = APIRouter()
logger = logging.getLogger(__name__)


def _preview_logo(req: RenderRequest):
    layout = req.layout
    if req.logo is not None and layout.logo is not None:
        layout = layout.model_copy(update={"logo": layout.logo.model_copy(update={"url": req.logo})})
    return load_logo(layout)


@router.post("/render", response_model=RenderResponse)
def render(req: RenderRequest) -> RenderResponse:
    """Preview render at the photo's own size, PNG so the overlay-only case keeps its alpha."""
    start = time.perf_counter()
    try:
        image = decode_image(req.image) if req.image is not None else None
        canvas, regions = render_scene(
            image,
            req.analysis,
            req.layout,
            req.mode,
            req.width,
            req.height,
            _preview_logo(req),
        )
    except ValueError as e:
        # ImageDecodeError included
        raise HTTPException(status_code=422, detail=str(e)) from e

    return RenderResponse(
        image=encode_data_url(canvas, "PNG"),
        hit_regions=regions,
        width=canvas.width,
        height=canvas.height,
        processing_time_ms=round((time.perf_counter() - start) * 1000, 1),
    )


@router.post("/export", response_model=ExportResponse)
def export(req: ExportRequest, settings: Settings = Depends(get_settings)) -> ExportResponse:
    start = time.perf_counter()
    try:
        url = render_final(
            req.image,
            req.analysis,
            req.layout,
            req.mode,
            target_width=settings.export_target_width,
            quality=settings.export_jpeg_quality,
        )
    except ImageDecodeError as e:
        logger.warning("Export rejected: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    return ExportResponse(image=url, processing_time_ms=round((time.perf_counter() - start) * 1000, 1))
