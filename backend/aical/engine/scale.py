"""Coordinate and scale model shared by every renderer.

Primitive dimensions are authored against a 1200px-wide reference canvas.
A renderer multiplies each constant by ``ref_scale(width) * element.scale *
modifier`` so an element keeps the same proportion of the canvas at any
resolution; the preview and the export differ only in canvas size.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from aical.models.layout import ElementType

# Design baseline width in pixels.
REFERENCE_WIDTH = 1200.0

# Per-class calibration of the user-facing scale. A title at scale 7.6 and a
# card at scale 4.2 are the designer defaults; labels and logos use 1.0.
TITLE_SCALE_MODIFIER = 0.15
CARD_SCALE_MODIFIER = 0.25
LABEL_SCALE_MODIFIER = 1.0

# Nominal logo width at scale 1.0, in reference pixels.
LOGO_REFERENCE_WIDTH = 100.0


def ref_scale(canvas_width: float) -> float:
    return canvas_width / REFERENCE_WIDTH


def element_scale(canvas_width: float, scale: float, modifier: float = LABEL_SCALE_MODIFIER) -> float:
    """Multiplier applied to every dimensional constant of one element."""
    return ref_scale(canvas_width) * scale * modifier


@dataclass(frozen=True)
class Box:
    """Axis-aligned pixel rectangle (left, top, width, height)."""

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.w / 2, self.y + self.h / 2)

    def inset(self, amount: float) -> Box:
        return Box(self.x + amount, self.y + amount, self.w - 2 * amount, self.h - 2 * amount)

    def intersect(self, other: Box) -> Box | None:
        left = max(self.x, other.x)
        top = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right <= left or bottom <= top:
            return None
        return Box(left, top, right - left, bottom - top)

    def clamp(self, bounds: Box) -> Box:
        """Part of this box inside ``bounds``; zero-sized on the nearest edge when fully outside."""
        left = min(max(self.x, bounds.x), bounds.right)
        top = min(max(self.y, bounds.y), bounds.bottom)
        right = min(max(self.right, bounds.x), bounds.right)
        bottom = min(max(self.bottom, bounds.y), bounds.bottom)
        return Box(left, top, right - left, bottom - top)


class AnchorKind(enum.Enum):
    """Which point of an element's bounding box its (x, y) refers to."""

    TOP_CENTER = "top_center"
    TOP_LEFT = "top_left"
    CENTER = "center"


_ANCHOR_BY_TYPE: dict[ElementType, AnchorKind] = {
    ElementType.TITLE: AnchorKind.TOP_CENTER,
    ElementType.CARD: AnchorKind.TOP_LEFT,
    ElementType.LABEL: AnchorKind.CENTER,
    ElementType.LOGO: AnchorKind.CENTER,
}


def anchor_kind(element_type: ElementType | str) -> AnchorKind:
    return _ANCHOR_BY_TYPE[ElementType(element_type)]


def box_from_anchor(kind: AnchorKind, px: float, py: float, w: float, h: float) -> Box:
    """Pixel box of a ``w`` x ``h`` element whose anchor sits at (px, py)."""
    if kind is AnchorKind.TOP_LEFT:
        return Box(px, py, w, h)
    if kind is AnchorKind.TOP_CENTER:
        return Box(px - w / 2, py, w, h)
    return Box(px - w / 2, py - h / 2, w, h)


def anchor_from_box(kind: AnchorKind, left: float, top: float, w: float, h: float) -> tuple[float, float]:
    """Inverse of ``box_from_anchor``: anchor pixel for a box at (left, top)."""
    if kind is AnchorKind.TOP_LEFT:
        return (left, top)
    if kind is AnchorKind.TOP_CENTER:
        return (left + w / 2, top)
    return (left + w / 2, top + h / 2)


def to_pixels(x: float, y: float, canvas_width: float, canvas_height: float) -> tuple[float, float]:
    return (x * canvas_width, y * canvas_height)


def to_normalized(px: float, py: float, canvas_width: float, canvas_height: float) -> tuple[float, float]:
    return (px / canvas_width, py / canvas_height)
