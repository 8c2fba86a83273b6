"""POST /api/resize — the downscaled working copy sent for analysis."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from aical.config import Settings
from aical.dependencies import get_settings
from aical.engine.errors import ImageDecodeError
from aical.engine.imaging import resize_image
from aical.models.requests import ResizeRequest
from aical.models.responses import ResizeResponse

router = APIRouter()


@router.post("/resize", response_model=ResizeResponse)
def resize(req: ResizeRequest, settings: Settings = Depends(get_settings)) -> ResizeResponse:
    try:
        payload, mime_type = resize_image(
            req.image,
            max_dimension=req.max_dimension,
            crop_to_9x16=req.crop_to_9x16,
            quality=settings.working_jpeg_quality,
        )
    except ImageDecodeError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return ResizeResponse(image=payload, mime_type=mime_type)
