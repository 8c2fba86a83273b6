"""Primitive renderers.

Every function draws one element at an already-resolved pixel position and
scale ``s`` (reference scale x element scale x class modifier) and returns
the ``Box`` it covers. That box becomes the element's hit region, so it is
computed from the same numbers used to draw, never re-measured afterwards.

Dimensional constants are reference pixels at a 1200px-wide canvas.
"""

from __future__ import annotations

import math
from collections.abc import Callable

import numpy as np
from PIL import Image

from aical.engine.geometry import as_xy, cubic_bezier, ellipse_points, join_paths, quadratic_bezier
from aical.engine.scale import Box
from aical.engine.surface import RGBA, Shadow, Surface, get_font, rgba, with_alpha
from aical.models.analysis import FoodAnalysis, format_calories

WHITE: RGBA = (255, 255, 255, 255)
INK: RGBA = (17, 24, 39, 255)  # gray-900
INK_SOFT: RGBA = (31, 41, 55, 255)  # gray-800
MUTED: RGBA = (55, 65, 81, 255)  # gray-700
BRACKET: RGBA = (75, 85, 99, 255)  # gray-600

CARBS_COLOR: RGBA = (22, 163, 74, 255)
PROTEIN_COLOR: RGBA = (217, 119, 6, 255)
FAT_COLOR: RGBA = (220, 38, 38, 255)

ELLIPSIS = "..."

# ── Title ──
_TITLE_FONT = 80

# ── Labels ──
_LABEL_FONT = 28
_LABEL_LINE_HEIGHT = 1.6
_PILL_PAD_X = 16
_TEXT_PAD_X = 4
_CONNECTOR_WIDTH = 3
_DOT_RADIUS = 6
_DOT_STROKE = 2

# ── Nutrition card ──
_CARD_W = 540
_CARD_HEADER_H = 70
_CARD_BASE_H = 260
_CARD_RADIUS = 24
_CARD_PAD = 24
_BADGE_W = 70
_BADGE_H = 36
_CARD_TITLE_FONT = 22
_CARD_TITLE_LINE = 30
_CAL_H = 64
_SECTION_GAP = 16
_MACRO_H = 80
_MACRO_GAP = 12

# ── Nutrition-mode bubble ──
_BUBBLE_CAL_FONT = 30
_BUBBLE_UNIT_FONT = 18
_BUBBLE_NAME_FONT = 24
_BUBBLE_PAD_X = 18
_BUBBLE_PAD_Y = 12
_BUBBLE_LINE_GAP = 4
_BUBBLE_RADIUS = 18

# ── Nutrition-mode bottom bar ──
_BAR_H = 150
_BAR_PAD_X = 40
_BAR_STRIP_H = 6


def wrap_two_lines(text: str, max_width: float, measure: Callable[[str], float]) -> tuple[str, str]:
    """Greedy word wrap into at most two lines; an overflowing second line gets an ellipsis.

    Words fill line one until the next word would exceed ``max_width``; the
    rest continue on line two. When line two would overflow too, it is cut at
    the last word that fits and ``...`` is appended. Lines keep the trailing
    space the measurement included.
    """
    line1 = ""
    line2 = ""
    on_first = True
    for word in text.split(" "):
        candidate = line1 + word + " "
        if on_first and measure(candidate) > max_width:
            on_first = False
            line2 = word + " "
        elif on_first:
            line1 = candidate
        else:
            candidate = line2 + word + " "
            if measure(candidate) < max_width:
                line2 = candidate
            else:
                line2 = line2.strip() + ELLIPSIS
                break
    return line1, line2


# ── Title ──


def draw_title(surface: Surface, text: str, center_x: float, top_y: float, s: float, color: str | None = None) -> Box:
    font = get_font(_TITLE_FONT * s, bold=True)
    w = surface.measure(text, font)
    h = _TITLE_FONT * s
    surface.text(
        center_x,
        top_y,
        text,
        font,
        rgba(color, WHITE),
        anchor="mt",
        shadow=Shadow((0, 0, 0, 128), 10 * s, 0, 2 * s),
    )
    return Box(center_x - w / 2, top_y, w, h)


# ── Labels ──


def measure_label(surface: Surface, text: str, s: float, text_only: bool) -> tuple[float, float]:
    font = get_font(_LABEL_FONT * s, bold=True)
    pad = (_TEXT_PAD_X if text_only else _PILL_PAD_X) * s
    return surface.measure(text, font) + pad * 2, _LABEL_FONT * s * _LABEL_LINE_HEIGHT


def draw_connector(surface: Surface, anchor_x: float, anchor_y: float, to_x: float, to_y: float, s: float) -> None:
    """Line from the anchor point to the label centre, then the anchor dot on top."""
    surface.polyline([(anchor_x, anchor_y), (to_x, to_y)], (255, 255, 255, 204), _CONNECTOR_WIDTH * s)
    surface.circle(
        anchor_x,
        anchor_y,
        _DOT_RADIUS * s,
        fill=WHITE,
        outline=(0, 0, 0, 77),
        line_width=_DOT_STROKE * s,
    )


def draw_label_pill(
    surface: Surface,
    text: str,
    center_x: float,
    center_y: float,
    s: float,
    color: str | None = None,
    background: str | None = None,
) -> Box:
    w, h = measure_label(surface, text, s, text_only=False)
    box = Box(center_x - w / 2, center_y - h / 2, w, h)
    surface.rounded_rect(
        box,
        h / 2,
        fill=rgba(background, (255, 255, 255, 242)),
        shadow=Shadow((0, 0, 0, 77), 8 * s, 0, 4 * s),
    )
    font = get_font(_LABEL_FONT * s, bold=True)
    surface.text(center_x, center_y, text, font, rgba(color, INK), anchor="mm")
    return box


def draw_label_text(
    surface: Surface,
    text: str,
    center_x: float,
    center_y: float,
    s: float,
    color: str | None = None,
) -> Box:
    """Outlined text with a soft shadow; no pill, no connector."""
    w, h = measure_label(surface, text, s, text_only=True)
    font = get_font(_LABEL_FONT * s, bold=True)
    surface.text(
        center_x,
        center_y,
        text,
        font,
        rgba(color, WHITE),
        anchor="mm",
        # 2px outline around the glyphs
        stroke_width=2 * s,
        stroke_fill=(0, 0, 0, 204),
        shadow=Shadow((0, 0, 0, 153), 6 * s, 0, 2 * s),
    )
    return Box(center_x - w / 2, center_y - h / 2, w, h)


# ── Nutrition card ──


def card_height(s: float) -> float:
    return (_CARD_BASE_H + _CARD_HEADER_H) * s


def draw_nutrition_card(
    surface: Surface,
    analysis: FoodAnalysis,
    left: float,
    top: float,
    s: float,
    color: str | None = None,
    background: str | None = None,
) -> Box:
    card_w = _CARD_W * s
    card_h = card_height(s)
    pad = _CARD_PAD * s
    ink = rgba(color, INK)
    box = Box(left, top, card_w, card_h)

    surface.rounded_rect(
        box,
        _CARD_RADIUS * s,
        fill=rgba(background, WHITE),
        shadow=Shadow((0, 0, 0, 38), 20 * s, 0, 10 * s),
    )

    draw_card_branding(surface, left + pad, top + pad, s, ink)
    content_top = top + pad + _CARD_HEADER_H * s

    # Item count badge
    badge = Box(left + card_w - pad - _BADGE_W * s, content_top, _BADGE_W * s, _BADGE_H * s)
    surface.rounded_rect(badge, badge.h / 2, outline=ink, line_width=1.5 * s)
    _draw_badge_content(surface, badge, len(analysis.items), s, ink)

    # Summary, two lines max
    title_w = card_w - pad * 2 - badge.w - 16 * s
    title_font = get_font(_CARD_TITLE_FONT * s, bold=True)
    line1, line2 = wrap_two_lines(analysis.summary, title_w, lambda t: surface.measure(t, title_font))
    title_ink = rgba(color, INK_SOFT)
    surface.text(left + pad, content_top, line1, title_font, title_ink, anchor="lt")
    if line2:
        surface.text(left + pad, content_top + _CARD_TITLE_LINE * s, line2, title_font, title_ink, anchor="lt")

    # Calorie banner
    title_h = (56 if line2 else 28) * s
    cal = Box(left + pad, content_top + title_h + _SECTION_GAP * s, card_w - pad * 2, _CAL_H * s)
    surface.rounded_rect(
        cal,
        16 * s,
        fill=(240, 253, 244, 255),
        outline=(220, 252, 231, 255),
        line_width=1.5 * s,
    )
    flame_x = cal.x + 24 * s
    _draw_flame(surface, flame_x + 10 * s, cal.y + cal.h / 2, s)
    surface.text(
        flame_x + 28 * s,
        cal.y + cal.h / 2 + 2 * s,
        f"{format_calories(analysis.nutrition.calories)} Kcal",
        get_font(28 * s, bold=True),
        INK,
        anchor="lm",
    )

    # Macro tiles
    macro_y = cal.bottom + _SECTION_GAP * s
    gap = _MACRO_GAP * s
    macro_w = (cal.w - gap * 2) / 3
    tiles = (
        ("Carbs", analysis.nutrition.carbs, (240, 253, 244, 255), CARBS_COLOR),
        ("Protein", analysis.nutrition.protein, (255, 251, 235, 255), PROTEIN_COLOR),
        ("Fat", analysis.nutrition.fat, (254, 242, 242, 255), FAT_COLOR),
    )
    for i, (label, value, bg, accent) in enumerate(tiles):
        tile = Box(cal.x + (macro_w + gap) * i, macro_y, macro_w, _MACRO_H * s)
        draw_macro_tile(surface, label, value, bg, accent, tile, s)

    return box


def draw_card_branding(surface: Surface, x: float, y: float, s: float, ink: RGBA = INK) -> None:
    """App mark (rounded square, scan brackets, apple) plus the "AI Cal" wordmark."""
    size = 60 * s
    surface.rounded_rect(Box(x, y, size, size), 14 * s, fill=INK)

    # Scan-frame corner brackets
    b_len = 10 * s
    b_pad = 8 * s
    lo, hi = b_pad, size - b_pad
    corners = (
        ((x + lo, y + lo + b_len), (x + lo, y + lo), (x + lo + b_len, y + lo)),
        ((x + hi - b_len, y + lo), (x + hi, y + lo), (x + hi, y + lo + b_len)),
        ((x + hi, y + hi - b_len), (x + hi, y + hi), (x + hi - b_len, y + hi)),
        ((x + lo + b_len, y + hi), (x + lo, y + hi), (x + lo, y + hi - b_len)),
    )
    for p0, p1, p2 in corners:
        surface.polyline(as_xy(quadratic_bezier(p0, p1, p2)), BRACKET, 3 * s)

    # Apple
    cx = x + size / 2
    cy = y + size / 2 + 3 * s
    r = 15 * s
    top = (cx, cy - r * 0.8)
    right_low = (cx + r * 0.8, cy + r * 0.95)
    left_low = (cx - r * 0.8, cy + r * 0.95)
    outline = join_paths(
        cubic_bezier(top, (cx + r * 0.9, cy - r * 1.3), (cx + r * 1.8, cy - r * 0.3), right_low),
        quadratic_bezier(right_low, (cx, cy + r * 1.2), left_low),
        cubic_bezier(left_low, (cx - r * 1.8, cy - r * 0.3), (cx - r * 0.9, cy - r * 1.3), top),
    )
    surface.polygon(as_xy(outline), WHITE)
    surface.polyline(as_xy(quadratic_bezier(top, (cx, cy - r * 1.4), (cx + r * 0.4, cy - r * 1.5))), WHITE, 2 * s)
    surface.polygon(as_xy(ellipse_points(cx + r * 0.4, cy - r * 1.3, r * 0.3, r * 0.15, -math.pi / 4)), WHITE)
    surface.text(cx, cy + 1 * s, "AI Cal", get_font(8 * s, bold=True), INK, anchor="mm")

    surface.text(x + size + 16 * s, y + size / 2, "AI Cal", get_font(32 * s, bold=True), ink, anchor="lm")


def draw_macro_tile(surface: Surface, label: str, value: str, bg: RGBA, accent: RGBA, box: Box, s: float) -> None:
    surface.rounded_rect(box, 16 * s, fill=bg, outline=with_alpha(accent, 0x40), line_width=1 * s)
    header_y = box.y + 16 * s
    label_font = get_font(13 * s)
    # Accent dot sits where the icon glyph would, vertically centred on the label
    surface.circle(box.x + 12 * s + 6 * s, header_y + 6.5 * s, 5 * s, fill=accent)
    surface.text(box.x + 36 * s, header_y, label, label_font, MUTED, anchor="lt")
    surface.text(box.x + box.w / 2, box.bottom - 20 * s, value, get_font(20 * s, bold=True), INK, anchor="mm")


def _draw_badge_content(surface: Surface, badge: Box, count: int, s: float, ink: RGBA) -> None:
    """Item count followed by a small bowl glyph."""
    cx, cy = badge.center
    surface.text(cx - 8 * s, cy + 2 * s, str(count), get_font(16 * s, bold=True), ink, anchor="mm")
    bowl = ellipse_points(cx + 12 * s, cy - 1 * s, 9 * s, 8 * s, start=0.0, end=math.pi)
    surface.polygon(as_xy(bowl), ink)


def _draw_flame(surface: Surface, cx: float, cy: float, s: float) -> None:
    h = 11 * s
    w = 8 * s
    tip = (cx, cy - h)
    base_r = (cx + w * 0.6, cy + h * 0.6)
    base_l = (cx - w * 0.6, cy + h * 0.6)
    outline = join_paths(
        cubic_bezier(tip, (cx + w * 0.2, cy - h * 0.4), (cx + w * 1.3, cy - h * 0.1), base_r),
        quadratic_bezier(base_r, (cx, cy + h * 1.1), base_l),
        cubic_bezier(base_l, (cx - w * 1.3, cy - h * 0.1), (cx - w * 0.2, cy - h * 0.4), tip),
    )
    surface.polygon(as_xy(outline), (249, 115, 22, 255))


# ── Nutrition mode ──


def measure_bubble(surface: Surface, calories: str, name: str, s: float) -> tuple[float, float]:
    cal_w = surface.measure(calories, get_font(_BUBBLE_CAL_FONT * s, bold=True))
    unit_w = surface.measure("kcal", get_font(_BUBBLE_UNIT_FONT * s))
    name_w = surface.measure(name, get_font(_BUBBLE_NAME_FONT * s))
    w = max(cal_w + 6 * s + unit_w, name_w) + _BUBBLE_PAD_X * s * 2
    h = (_BUBBLE_PAD_Y * 2 + _BUBBLE_CAL_FONT + _BUBBLE_LINE_GAP + _BUBBLE_NAME_FONT) * s
    return w, h


def draw_nutrition_bubble(
    surface: Surface,
    calories: str,
    name: str,
    center_x: float,
    center_y: float,
    s: float,
    color: str | None = None,
    background: str | None = None,
    accent: RGBA = (74, 222, 128, 255),
) -> Box:
    """Two-line bubble: calorie count in the accent colour plus unit, then item name."""
    w, h = measure_bubble(surface, calories, name, s)
    box = Box(center_x - w / 2, center_y - h / 2, w, h)
    surface.rounded_rect(
        box,
        _BUBBLE_RADIUS * s,
        fill=rgba(background, (17, 24, 39, 230)),
        shadow=Shadow((0, 0, 0, 77), 8 * s, 0, 4 * s),
    )

    cal_font = get_font(_BUBBLE_CAL_FONT * s, bold=True)
    unit_font = get_font(_BUBBLE_UNIT_FONT * s)
    line1_w = surface.measure(calories, cal_font) + 6 * s + surface.measure("kcal", unit_font)
    baseline = box.y + (_BUBBLE_PAD_Y + _BUBBLE_CAL_FONT * 0.8) * s
    start_x = center_x - line1_w / 2
    surface.text(start_x, baseline, calories, cal_font, accent, anchor="ls")
    surface.text(
        start_x + line1_w - surface.measure("kcal", unit_font),
        baseline,
        "kcal",
        unit_font,
        (209, 213, 219, 255),
        anchor="ls",
    )

    name_top = box.y + (_BUBBLE_PAD_Y + _BUBBLE_CAL_FONT + _BUBBLE_LINE_GAP) * s
    surface.text(center_x, name_top, name, get_font(_BUBBLE_NAME_FONT * s), rgba(color, WHITE), anchor="ma")
    return box


def bar_height(s: float) -> float:
    return _BAR_H * s


def draw_nutrition_bar(
    surface: Surface,
    analysis: FoodAnalysis,
    top: float,
    s: float,
    color: str | None = None,
    background: str | None = None,
) -> Box:
    """Full-width bar: total calories, tri-colour macro strip, carbs/protein/fat readouts."""
    width = surface.width
    box = Box(0, top, width, bar_height(s))
    ink = rgba(color, WHITE)
    muted = with_alpha(ink, 170)
    surface.rect(box, with_alpha(rgba(background, (0, 0, 0, 255)), 217))

    # Macro split strip along the top edge, proportional to grams
    grams = analysis.nutrition.grams()
    total = sum(grams)
    shares = [g / total for g in grams] if total > 0 else [1 / 3] * 3
    edges = np.concatenate(([0.0], np.cumsum(shares))) * width
    for i, accent in enumerate((CARBS_COLOR, PROTEIN_COLOR, FAT_COLOR)):
        surface.rect(Box(float(edges[i]), top, float(edges[i + 1] - edges[i]), _BAR_STRIP_H * s), accent)

    pad = _BAR_PAD_X * s
    label_y = top + 44 * s
    value_y = top + 72 * s
    label_font = get_font(18 * s)

    # Total
    surface.text(pad, label_y, "TOTAL", label_font, muted, anchor="lt")
    cal_text = format_calories(analysis.nutrition.calories)
    cal_font = get_font(44 * s, bold=True)
    surface.text(pad, value_y, cal_text, cal_font, ink, anchor="lt")
    surface.text(
        pad + surface.measure(cal_text, cal_font) + 8 * s,
        value_y + 44 * s * 0.8,
        "kcal",
        get_font(22 * s),
        muted,
        anchor="ls",
    )

    # Readouts share the right 60% of the bar
    column_w = width * 0.6 / 3
    value_font = get_font(34 * s, bold=True)
    readouts = (
        ("Carbs", analysis.nutrition.carbs, CARBS_COLOR),
        ("Protein", analysis.nutrition.protein, PROTEIN_COLOR),
        ("Fat", analysis.nutrition.fat, FAT_COLOR),
    )
    for i, (label, value, accent) in enumerate(readouts):
        cx = width * 0.4 + column_w * (i + 0.5)
        label_w = surface.measure(label, label_font)
        surface.circle(cx - label_w / 2 - 10 * s, label_y + 9 * s, 5 * s, fill=accent)
        surface.text(cx, label_y, label, label_font, muted, anchor="mt")
        surface.text(cx, value_y, value, value_font, ink, anchor="mt")

    return box


# ── Logo ──


def draw_logo(surface: Surface, image: Image.Image, center_x: float, center_y: float, width: float) -> Box:
    """Logo scaled to ``width`` keeping its aspect ratio, centred on the point."""
    height = width * image.height / image.width
    box = Box(center_x - width / 2, center_y - height / 2, width, height)
    surface.draw_image(image, box)
    return box
