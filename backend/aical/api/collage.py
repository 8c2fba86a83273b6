"""POST /api/collage — 2x2 collage with per-cell pan/zoom."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from aical.config import Settings
from aical.dependencies import get_settings
from aical.engine.collage import create_collage
from aical.engine.errors import CollageTimeoutError, ImageDecodeError
from aical.engine.imaging import to_data_url
from aical.models.requests import CollageRequest
from aical.models.responses import CollageResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/collage", response_model=CollageResponse)
async def collage(req: CollageRequest, settings: Settings = Depends(get_settings)) -> CollageResponse:
    try:
        result = await create_collage(
            req.images,
            req.transforms,
            width=req.width,
            height=req.height,
            padding=req.padding,
            background_color=req.background_color,
            timeout=settings.collage_timeout_seconds,
            quality=settings.collage_jpeg_quality,
        )
    except CollageTimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e)) from e
    except ImageDecodeError as e:
        logger.warning("Collage rejected: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    return CollageResponse(image=to_data_url(result.data, result.content_type), filename=result.filename)
