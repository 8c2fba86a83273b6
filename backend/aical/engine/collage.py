"""Collage compositor — up to four photos in a 2x2 grid with per-cell pan/zoom.

Each photo is contain-fitted into its cell's content box (the cell inset by
``padding`` pixels), then the cell's ``CollageTransform`` is applied around
the cell centre: translate to centre, pan by (x * cell_w, y * cell_h), zoom,
translate back. The content box clips the result so zoomed or panned photos
never bleed into a neighbouring cell.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

from PIL import Image

from aical.config import settings
from aical.engine.errors import CollageTimeoutError
from aical.engine.imaging import ImageSource, decode_image, encode_image
from aical.engine.scale import Box
from aical.engine.surface import PillowSurface, rgba
from aical.models.layout import CollageTransform

logger = logging.getLogger(__name__)

GRID_COLUMNS = 2
GRID_ROWS = 2
SLOTS = GRID_COLUMNS * GRID_ROWS

MIN_ZOOM = 0.1
MAX_ZOOM = 5.0

IDENTITY = CollageTransform(scale=1.0, x=0.0, y=0.0)


@dataclass(frozen=True)
class CellPlacement:
    """Where one slot lands: its grid cell, clip box, and final image rectangle."""

    cell: Box
    content: Box
    image: Box


@dataclass(frozen=True)
class CollageFile:
    filename: str
    content_type: str
    data: bytes


def clamp_zoom(scale: float) -> float:
    return min(max(scale, MIN_ZOOM), MAX_ZOOM)


def pan_from_drag(
    transform: CollageTransform,
    dx: float,
    dy: float,
    cell_width: float,
    cell_height: float,
) -> CollageTransform:
    """Add a drag of (dx, dy) pixels in a ``cell_width`` x ``cell_height`` preview cell."""
    return transform.model_copy(update={"x": transform.x + dx / cell_width, "y": transform.y + dy / cell_height})


def zoom_by(transform: CollageTransform, delta: float) -> CollageTransform:
    return transform.model_copy(update={"scale": clamp_zoom(transform.scale + delta)})


def place_cell(
    index: int,
    image_size: tuple[int, int],
    transform: CollageTransform,
    width: float,
    height: float,
    padding: float,
) -> CellPlacement | None:
    """Geometry for slot ``index``, or None when padding leaves no content box."""
    cell_w = width / GRID_COLUMNS
    cell_h = height / GRID_ROWS
    cell = Box((index % GRID_COLUMNS) * cell_w, (index // GRID_COLUMNS) * cell_h, cell_w, cell_h)
    content = cell.inset(padding)
    if content.w <= 0 or content.h <= 0:
        return None

    img_w, img_h = image_size
    fit = min(content.w / img_w, content.h / img_h)
    draw_w = img_w * fit
    draw_h = img_h * fit
    # Fitted image top-left relative to the cell origin
    local_x = padding + (content.w - draw_w) / 2
    local_y = padding + (content.h - draw_h) / 2

    zoom = clamp_zoom(transform.scale)
    center_x = cell.x + cell_w / 2 + transform.x * cell_w
    center_y = cell.y + cell_h / 2 + transform.y * cell_h
    placed = Box(
        center_x + zoom * (local_x - cell_w / 2),
        center_y + zoom * (local_y - cell_h / 2),
        draw_w * zoom,
        draw_h * zoom,
    )
    return CellPlacement(cell=cell, content=content, image=placed)


def compose_collage(
    images: Sequence[Image.Image | None],
    transforms: Sequence[CollageTransform | None],
    width: int,
    height: int,
    padding: float = 0,
    background_color: str = "#FFFFFF",
) -> Image.Image:
    """Composite decoded images into the grid. Empty slots and degenerate cells are skipped."""
    surface = PillowSurface(width, height, background=rgba(background_color, (255, 255, 255, 255)))

    for index in range(SLOTS):
        image = images[index] if index < len(images) else None
        if image is None:
            continue
        transform = (transforms[index] if index < len(transforms) else None) or IDENTITY
        placement = place_cell(index, image.size, transform, width, height, padding)
        if placement is None:
            logger.debug("Collage slot %d skipped: padding %.0f leaves no content box", index, padding)
            continue
        surface.draw_image(image, placement.image, clip=placement.content)

    return surface.to_image("RGB")


def _render_and_encode(
    files: list[ImageSource | None],
    transforms: Sequence[CollageTransform | None],
    width: int,
    height: int,
    padding: float,
    background_color: str,
    quality: int,
) -> bytes:
    images = [decode_image(f) if f is not None else None for f in files]
    canvas = compose_collage(images, transforms, width, height, padding, background_color)
    return encode_image(canvas, "JPEG", quality)


async def create_collage(
    files: Sequence[ImageSource | None],
    transforms: Sequence[CollageTransform | None] = (),
    width: int = 2160,
    height: int = 2160,
    padding: float = 0,
    background_color: str = "#FFFFFF",
    timeout: float | None = None,
    quality: int | None = None,
) -> CollageFile:
    """Decode the slots, composite, and JPEG-encode within ``timeout`` seconds.

    Decoding runs in the default executor with the rest, so the event loop
    stays free and the timeout covers it. A slot that fails to decode raises
    ``ImageDecodeError``; running past the timeout raises
    ``CollageTimeoutError``. The worker thread cannot be interrupted, so its
    late result is discarded.
    """
    timeout = settings.collage_timeout_seconds if timeout is None else timeout
    quality = quality or settings.collage_jpeg_quality
    start = time.perf_counter()

    slots = list(files)[:SLOTS]
    filled = sum(1 for f in slots if f is not None)

    loop = asyncio.get_running_loop()
    job = loop.run_in_executor(
        None,
        _render_and_encode,
        slots,
        list(transforms),
        width,
        height,
        padding,
        background_color,
        quality,
    )
    try:
        data = await asyncio.wait_for(job, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.warning("Collage %dx%d (%d slots) timed out after %.0fs", width, height, filled, timeout)
        raise CollageTimeoutError(f"Collage creation timed out after {timeout:g}s") from e

    logger.info(
        "Collage %dx%d: %d/%d slots in %.0fms",
        width,
        height,
        filled,
        SLOTS,
        (time.perf_counter() - start) * 1000,
    )
    return CollageFile(
        filename=f"collage-{int(time.time() * 1000)}.jpg",
        content_type="image/jpeg",
        data=data,
    )
