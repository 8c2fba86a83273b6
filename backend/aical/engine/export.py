"""Export pipeline — the preview scene re-drawn at a guaranteed-legible resolution."""

from __future__ import annotations

import logging
import time

from PIL import Image

from aical.config import settings
from aical.engine.errors import ImageDecodeError
from aical.engine.imaging import ImageSource, decode_image, encode_data_url
from aical.engine.scene import draw_scene
from aical.engine.surface import PillowSurface
from aical.models.analysis import FoodAnalysis
from aical.models.layout import AppMode, ImageLayout

logger = logging.getLogger(__name__)


def export_size(width: int, height: int, target_width: int | None = None) -> tuple[int, int]:
    """Upscale to ``target_width`` when narrower, keeping aspect; never downscale."""
    target_width = target_width or settings.export_target_width
    if width >= target_width:
        return width, height
    return target_width, round(height * target_width / width)


def load_logo(layout: ImageLayout) -> Image.Image | None:
    """Best-effort logo decode. A broken logo never fails the render."""
    if layout.logo is None or not layout.logo.url:
        return None
    try:
        return decode_image(layout.logo.url)
    except ImageDecodeError as e:
        logger.warning("Logo could not be loaded, rendering without it: %s", e)
        return None


def render_final(
    image_source: ImageSource,
    analysis: FoodAnalysis,
    layout: ImageLayout,
    mode: AppMode = AppMode.SCAN,
    target_width: int | None = None,
    quality: int | None = None,
) -> str:
    """Render the composed photo at export resolution and return a JPEG data URL.

    Background decode failures raise ``ImageDecodeError``.
    """
    start = time.perf_counter()
    quality = quality or settings.export_jpeg_quality

    image = decode_image(image_source)
    width, height = export_size(image.width, image.height, target_width)
    logo = load_logo(layout)

    surface = PillowSurface(width, height)
    regions = draw_scene(surface, image, analysis, layout, mode, logo)
    url = encode_data_url(surface.to_image("RGB"), "JPEG", quality)

    logger.info(
        "Export %s: %dx%d -> %dx%d, %d elements in %.0fms",
        AppMode(mode).value,
        image.width,
        image.height,
        width,
        height,
        len(regions),
        (time.perf_counter() - start) * 1000,
    )
    return url
