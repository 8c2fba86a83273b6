"""Layout initializer — analysis + defaults -> the first normalized ``ImageLayout``."""

from __future__ import annotations

import logging

from aical.engine.primitives import card_height
from aical.engine.scale import CARD_SCALE_MODIFIER, element_scale, ref_scale
from aical.models.analysis import FoodAnalysis
from aical.models.layout import ElementState, ImageLayout, LabelState, LayoutConfig, ModeConfig

logger = logging.getLogger(__name__)

DEFAULT_TITLE_Y = 0.08

# Card margin from the canvas edges, reference pixels.
CARD_MARGIN = 32.0

# Card y used when the card is taller than the room above the bottom margin.
CARD_FALLBACK_Y = 0.05

# Labels float this fraction of the canvas height above their anchor...
LABEL_LIFT = 0.15
# ...but never closer to the top edge than this.
LABEL_MIN_Y = 0.05

# Title text for collage sources falls back to the summary below this length.
_COLLAGE_SUMMARY_MAX = 20
_COLLAGE_TITLE_BOOST = 1.2


def init_layout(
    width: float,
    height: float,
    analysis: FoodAnalysis,
    config: LayoutConfig | None = None,
) -> ImageLayout:
    """Initial layout for a ``width`` x ``height`` photo.

    Title: top-centre at ``default_title_y``. Card: bottom-left with a 32px
    (reference) margin unless the config pins it; clamped to y=0.05 when it
    would start above the canvas. Labels: one per item, anchored at the
    centre of the item's box (canvas centre without one), lifted 15% of the
    canvas height above the anchor.
    """
    config = config or LayoutConfig()

    title_y = config.default_title_y if config.default_title_y is not None else DEFAULT_TITLE_Y
    meal_type = ElementState(
        x=0.5,
        y=title_y,
        scale=config.default_title_scale,
        text=analysis.meal_type,
        visible=True,
    )

    card_h = card_height(element_scale(width, config.default_card_scale, CARD_SCALE_MODIFIER))
    margin = CARD_MARGIN * ref_scale(width)

    card_x = config.default_card_x if config.default_card_x is not None else margin / width
    card_y = config.default_card_y if config.default_card_y is not None else (height - card_h - margin) / height
    if card_y < 0:
        logger.debug("Card (%.0fpx) taller than canvas (%.0fpx); pinning near top", card_h, height)
        card_y = CARD_FALLBACK_Y

    card_colors: dict[str, str | None] = {}
    if isinstance(config, ModeConfig):
        card_colors = {"color": config.card_text_color, "background_color": config.card_background_color}

    card = ElementState(x=card_x, y=card_y, scale=config.default_card_scale, visible=True, **card_colors)

    labels = []
    for idx, item in enumerate(analysis.items):
        cx, cy = item.center or (0.5, 0.5)
        labels.append(
            LabelState(
                id=idx,
                text=item.name,
                x=cx,
                y=max(LABEL_MIN_Y, cy - LABEL_LIFT),
                anchor_x=cx,
                anchor_y=cy,
                scale=config.default_label_scale,
                visible=True,
                style=config.default_label_style,
            )
        )

    return ImageLayout(card=card, meal_type=meal_type, labels=labels)


def collage_title(analysis: FoodAnalysis) -> str:
    """First item name, else a short summary, else the meal type."""
    if analysis.items:
        return analysis.items[0].name
    if analysis.summary and len(analysis.summary) < _COLLAGE_SUMMARY_MAX:
        return analysis.summary
    return analysis.meal_type


def apply_collage_overrides(layout: ImageLayout, analysis: FoodAnalysis, config: LayoutConfig | None = None) -> ImageLayout:
    """Layout tweaks for a photo that is itself a collage: no labels, bigger centred title."""
    config = config or LayoutConfig()
    meal_type = layout.meal_type.model_copy(
        update={
            "x": 0.5,
            "text": collage_title(analysis),
            "scale": config.default_title_scale * _COLLAGE_TITLE_BOOST,
        }
    )
    return layout.model_copy(update={"labels": [], "meal_type": meal_type})
