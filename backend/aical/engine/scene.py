"""Scene compositor — one layout, one surface, one list of hit regions.

``draw_scene`` is the only rendering implementation. The interactive preview
and the high-resolution export both call it; they differ only in the size of
the surface they pass in.
"""

from __future__ import annotations

import logging
import time

from PIL import Image

from aical.engine import primitives
from aical.engine.errors import NoContextError
from aical.engine.scale import (
    CARD_SCALE_MODIFIER,
    LOGO_REFERENCE_WIDTH,
    TITLE_SCALE_MODIFIER,
    Box,
    element_scale,
    ref_scale,
    to_pixels,
)
from aical.engine.surface import PillowSurface, Surface
from aical.models.analysis import FoodAnalysis, format_calories
from aical.models.layout import AppMode, ElementBox, HitRegion, ImageLayout, LabelStyle

logger = logging.getLogger(__name__)


def draw_scene(
    surface: Surface | None,
    image: Image.Image | None,
    analysis: FoodAnalysis,
    layout: ImageLayout,
    mode: AppMode = AppMode.SCAN,
    logo_image: Image.Image | None = None,
) -> list[HitRegion]:
    """Draw background and overlays onto ``surface``; return one hit region per drawn element.

    Without ``image`` only the overlays are drawn (appearance previews).
    Scan and collage modes draw title, labels, then the nutrition card.
    Nutrition mode draws label bubbles, the bottom bar, then the logo.
    """
    if surface is None:
        raise NoContextError()

    start = time.perf_counter()
    if image is not None:
        surface.draw_image(image, Box(0, 0, surface.width, surface.height))

    if AppMode(mode) is AppMode.NUTRITION:
        regions = _draw_nutrition_overlays(surface, analysis, layout, logo_image)
    else:
        regions = _draw_scan_overlays(surface, analysis, layout)

    logger.debug(
        "Scene %s %dx%d: %d regions in %.1fms",
        AppMode(mode).value,
        surface.width,
        surface.height,
        len(regions),
        (time.perf_counter() - start) * 1000,
    )
    return regions


def render_scene(
    image: Image.Image | None,
    analysis: FoodAnalysis,
    layout: ImageLayout,
    mode: AppMode = AppMode.SCAN,
    width: int | None = None,
    height: int | None = None,
    logo_image: Image.Image | None = None,
) -> tuple[Image.Image, list[HitRegion]]:
    """Render onto a fresh surface sized to ``image`` (or ``width`` x ``height``)."""
    if image is not None:
        width = width or image.width
        height = height or image.height
    if not width or not height:
        raise ValueError("Canvas size is required when no image is given")
    surface = PillowSurface(width, height)
    regions = draw_scene(surface, image, analysis, layout, mode, logo_image)
    return surface.to_image(), regions


def _region(surface: Surface, element_id: int | str, kind: str, box: Box) -> HitRegion:
    visible = box.clamp(Box(0, 0, surface.width, surface.height))
    unclipped = None
    if visible != box:
        unclipped = ElementBox(x=box.x, y=box.y, w=box.w, h=box.h)
    return HitRegion(
        id=element_id,
        type=kind,
        x=visible.x,
        y=visible.y,
        w=visible.w,
        h=visible.h,
        unclipped=unclipped,
    )


def _draw_scan_overlays(surface: Surface, analysis: FoodAnalysis, layout: ImageLayout) -> list[HitRegion]:
    width, height = surface.width, surface.height
    regions: list[HitRegion] = []

    title = layout.meal_type
    if title.visible:
        x, y = to_pixels(title.x, title.y, width, height)
        s = element_scale(width, title.scale, TITLE_SCALE_MODIFIER)
        box = primitives.draw_title(surface, title.text or analysis.meal_type, x, y, s, title.color)
        regions.append(_region(surface, "title", "title", box))

    for label in layout.labels:
        if not label.visible:
            continue
        x, y = to_pixels(label.x, label.y, width, height)
        s = element_scale(width, label.scale)
        text = label.text or ""
        if label.style is LabelStyle.DEFAULT:
            ax, ay = to_pixels(label.anchor_x, label.anchor_y, width, height)
            primitives.draw_connector(surface, ax, ay, x, y, s)
        if label.style is LabelStyle.TEXT:
            box = primitives.draw_label_text(surface, text, x, y, s, label.color)
        else:
            box = primitives.draw_label_pill(surface, text, x, y, s, label.color, label.background_color)
        regions.append(_region(surface, label.id, "label", box))

    card = layout.card
    if card.visible:
        x, y = to_pixels(card.x, card.y, width, height)
        s = element_scale(width, card.scale, CARD_SCALE_MODIFIER)
        box = primitives.draw_nutrition_card(surface, analysis, x, y, s, card.color, card.background_color)
        regions.append(_region(surface, "card", "card", box))

    return regions


def _draw_nutrition_overlays(
    surface: Surface,
    analysis: FoodAnalysis,
    layout: ImageLayout,
    logo_image: Image.Image | None,
) -> list[HitRegion]:
    width, height = surface.width, surface.height
    regions: list[HitRegion] = []

    for label in layout.labels:
        if not label.visible:
            continue
        x, y = to_pixels(label.x, label.y, width, height)
        ax, ay = to_pixels(label.anchor_x, label.anchor_y, width, height)
        s = element_scale(width, label.scale)
        item = analysis.item(label.id)
        name = label.text or (item.name if item else "")
        calories = format_calories(item.calories if item else None)

        primitives.draw_connector(surface, ax, ay, x, y, s)
        box = primitives.draw_nutrition_bubble(
            surface, calories, name, x, y, s, label.color, label.background_color
        )
        regions.append(_region(surface, label.id, "label", box))

    card = layout.card
    if card.visible:
        s = element_scale(width, card.scale)
        bar_h = primitives.bar_height(s)
        # Bar keeps its full height on the canvas
        top = max(0.0, min(card.y * height, height - bar_h))
        box = primitives.draw_nutrition_bar(surface, analysis, top, s, card.color, card.background_color)
        regions.append(_region(surface, "card", "card", box))

    logo = layout.logo
    if logo is not None and logo.visible and logo_image is not None:
        x, y = to_pixels(logo.x, logo.y, width, height)
        logo_w = LOGO_REFERENCE_WIDTH * ref_scale(width) * logo.scale
        box = primitives.draw_logo(surface, logo_image, x, y, logo_w)
        regions.append(_region(surface, "logo", "logo", box))

    return regions
