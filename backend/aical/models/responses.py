"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from aical.models.layout import AppMode, HitRegion


class _Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(_Response):
    status: str = "ok"
    version: str = "0.1.0"
    modes: list[AppMode] = Field(default_factory=lambda: list(AppMode))


class RenderResponse(_Response):
    image: str
    hit_regions: list[HitRegion] = Field(default_factory=list, alias="hitRegions")
    width: int
    height: int
    processing_time_ms: float = Field(default=0.0, alias="processingTimeMs")


class ExportResponse(_Response):
    image: str
    processing_time_ms: float = Field(default=0.0, alias="processingTimeMs")


class CollageResponse(_Response):
    image: str
    filename: str


class ResizeResponse(_Response):
    image: str
    mime_type: str = Field(default="image/jpeg", alias="mimeType")
