"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from aical.engine.edits import Edit
from aical.models.analysis import FoodAnalysis
from aical.models.layout import AppMode, CollageTransform, ImageLayout, ModeConfig


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LayoutRequest(_Request):
    width: int = Field(..., gt=0, description="Canvas width in pixels")
    height: int = Field(..., gt=0, description="Canvas height in pixels")
    analysis: FoodAnalysis
    mode: AppMode = AppMode.SCAN
    config: ModeConfig | None = Field(default=None, description="Overrides merged onto the mode defaults")
    collage_source: bool = Field(default=False, alias="collageSource", description="Photo is itself a collage")


class RenderRequest(_Request):
    image: str | None = Field(default=None, description="Background photo as a data URL; omit for overlay-only previews")
    analysis: FoodAnalysis
    layout: ImageLayout
    mode: AppMode = AppMode.SCAN
    logo: str | None = Field(default=None, description="Logo data URL; overrides layout.logo.url")
    width: int | None = Field(default=None, gt=0, description="Canvas width when no image is given")
    height: int | None = Field(default=None, gt=0, description="Canvas height when no image is given")


class ExportRequest(_Request):
    image: str = Field(..., description="Working-copy photo as a data URL")
    analysis: FoodAnalysis
    layout: ImageLayout
    mode: AppMode = AppMode.SCAN


class CollageRequest(_Request):
    images: list[str | None] = Field(..., max_length=4, description="Up to four data URLs; null leaves a slot empty")
    transforms: list[CollageTransform | None] = Field(default_factory=list, max_length=4)
    width: int = Field(default=2160, gt=0)
    height: int = Field(default=2160, gt=0)
    padding: float = Field(default=0, ge=0, description="Cell inset in pixels")
    background_color: str = Field(default="#FFFFFF", alias="backgroundColor")


class ResizeRequest(_Request):
    image: str = Field(..., description="Photo as a data URL")
    max_dimension: int = Field(default=1024, gt=0, alias="maxDimension")
    crop_to_9x16: bool = Field(default=False, alias="cropTo9x16")


class EditRequest(_Request):
    layout: ImageLayout
    edit: Edit
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
