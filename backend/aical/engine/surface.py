"""Drawing surface — the minimal 2D capability set the engine renders through.

The engine only ever talks to ``Surface``. ``PillowSurface`` implements it on
a Pillow RGBA image for headless preview and export; another backend only
needs the same handful of operations.
"""

from __future__ import annotations

import functools
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont

from aical.config import settings
from aical.engine.scale import Box

logger = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]
Point = tuple[float, float]
Font = ImageFont.FreeTypeFont | ImageFont.ImageFont

TRANSPARENT: RGBA = (0, 0, 0, 0)

# Extra pixels around every composited layer so antialiased edges are kept.
_LAYER_MARGIN = 2


@dataclass(frozen=True)
class Shadow:
    """Drop shadow. ``blur`` follows the canvas convention (about 2 sigma)."""

    color: RGBA
    blur: float
    offset_x: float = 0.0
    offset_y: float = 0.0

    @property
    def extent(self) -> int:
        return math.ceil(self.blur * 1.5 + abs(self.offset_x) + abs(self.offset_y))


def rgba(value: str | Sequence[int] | None, default: RGBA) -> RGBA:
    """Parse a CSS colour ("#fff", "#11182780", "white") into an RGBA tuple."""
    if value is None:
        return default
    if not isinstance(value, str):
        channels = tuple(int(c) for c in value)
        return channels if len(channels) == 4 else (*channels[:3], 255)  # type: ignore[return-value]
    try:
        return ImageColor.getcolor(value, "RGBA")  # type: ignore[return-value]
    except ValueError:
        logger.warning("Unparseable colour %r, using default", value)
        return default


def with_alpha(color: RGBA, alpha: int) -> RGBA:
    return (color[0], color[1], color[2], alpha)


@functools.lru_cache(maxsize=256)
def _load_font(path: str, size: float) -> Font:
    try:
        return ImageFont.truetype(path, size=size)
    except OSError:
        logger.debug("Font %s unavailable, using bundled default", path)
        return ImageFont.load_default(size=size)


def get_font(size: float, bold: bool = False) -> Font:
    """Font at ``size`` pixels. Sizes are rounded to 1/100 px for caching."""
    path = settings.font_bold if bold else settings.font_regular
    return _load_font(path, max(1.0, round(size, 2)))


def px(width: float) -> int:
    """Integer stroke width, never thinner than one pixel."""
    return max(1, round(width))


class Surface(Protocol):
    """Everything the renderers need from a drawing backend."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def fill(self, color: RGBA) -> None: ...

    def draw_image(self, image: Image.Image, box: Box, clip: Box | None = None) -> None: ...

    def rounded_rect(
        self,
        box: Box,
        radius: float,
        fill: RGBA | None = None,
        outline: RGBA | None = None,
        line_width: float = 1.0,
        shadow: Shadow | None = None,
    ) -> None: ...

    def rect(self, box: Box, fill: RGBA) -> None: ...

    def polyline(self, points: Sequence[Point], color: RGBA, line_width: float) -> None: ...

    def polygon(self, points: Sequence[Point], fill: RGBA) -> None: ...

    def circle(
        self,
        cx: float,
        cy: float,
        radius: float,
        fill: RGBA | None = None,
        outline: RGBA | None = None,
        line_width: float = 1.0,
    ) -> None: ...

    def text(
        self,
        x: float,
        y: float,
        text: str,
        font: Font,
        fill: RGBA,
        anchor: str = "la",
        stroke_width: float = 0.0,
        stroke_fill: RGBA | None = None,
        shadow: Shadow | None = None,
    ) -> None: ...

    def measure(self, text: str, font: Font) -> float: ...


class PillowSurface:
    """``Surface`` backed by a Pillow RGBA image.

    Each primitive is drawn on a small transparent layer covering only its own
    bounds and then alpha-composited, so translucent fills blend with what is
    already on the canvas instead of overwriting it.
    """

    def __init__(self, width: int, height: int, background: RGBA = TRANSPARENT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface dimensions must be positive, got {width}x{height}")
        self.image = Image.new("RGBA", (int(width), int(height)), background)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def bounds(self) -> Box:
        return Box(0, 0, self.width, self.height)

    def to_image(self, mode: str = "RGBA") -> Image.Image:
        if mode == "RGBA":
            return self.image.copy()
        return self.image.convert(mode)

    # ── Primitive operations ──

    def fill(self, color: RGBA) -> None:
        self.image.alpha_composite(Image.new("RGBA", self.image.size, color))

    def draw_image(self, image: Image.Image, box: Box, clip: Box | None = None) -> None:
        """Blit ``image`` scaled into ``box``; only the part inside ``clip`` lands."""
        if box.w <= 0 or box.h <= 0:
            return
        visible = box.intersect(self.bounds)
        if visible is not None and clip is not None:
            visible = visible.intersect(clip)
        if visible is None:
            return

        left, top = round(visible.x), round(visible.y)
        right, bottom = round(visible.right), round(visible.bottom)
        if right <= left or bottom <= top:
            return

        # Map the destination pixels back to a (fractional) source rectangle
        sx = image.width / box.w
        sy = image.height / box.h
        source = (
            max(0.0, (left - box.x) * sx),
            max(0.0, (top - box.y) * sy),
            min(float(image.width), (right - box.x) * sx),
            min(float(image.height), (bottom - box.y) * sy),
        )
        tile = image.convert("RGBA").resize(
            (right - left, bottom - top),
            Image.Resampling.LANCZOS,
            box=source,
        )
        self.image.alpha_composite(tile, dest=(left, top))

    def rect(self, box: Box, fill: RGBA) -> None:
        if box.w <= 0 or box.h <= 0:
            return
        self._composite(
            (box.x, box.y, box.right, box.bottom),
            lambda draw, ox, oy: draw.rectangle(
                (box.x - ox, box.y - oy, box.right - ox, box.bottom - oy), fill=fill
            ),
        )

    def rounded_rect(
        self,
        box: Box,
        radius: float,
        fill: RGBA | None = None,
        outline: RGBA | None = None,
        line_width: float = 1.0,
        shadow: Shadow | None = None,
    ) -> None:
        if box.w <= 0 or box.h <= 0:
            return
        width = px(line_width) if outline is not None else 0
        radius = min(radius, box.w / 2, box.h / 2)

        def paint(draw: ImageDraw.ImageDraw, ox: int, oy: int) -> None:
            draw.rounded_rectangle(
                (box.x - ox, box.y - oy, box.right - ox, box.bottom - oy),
                radius=round(radius),
                fill=fill,
                outline=outline,
                width=width,
            )

        self._composite((box.x, box.y, box.right, box.bottom), paint, shadow)

    def polyline(self, points: Sequence[Point], color: RGBA, line_width: float) -> None:
        if len(points) < 2:
            return
        width = px(line_width)

        def paint(draw: ImageDraw.ImageDraw, ox: int, oy: int) -> None:
            draw.line([(x - ox, y - oy) for x, y in points], fill=color, width=width, joint="curve")

        self._composite(_bounds(points, width / 2), paint)

    def polygon(self, points: Sequence[Point], fill: RGBA) -> None:
        if len(points) < 3:
            return
        self._composite(
            _bounds(points, 0),
            lambda draw, ox, oy: draw.polygon([(x - ox, y - oy) for x, y in points], fill=fill),
        )

    def circle(
        self,
        cx: float,
        cy: float,
        radius: float,
        fill: RGBA | None = None,
        outline: RGBA | None = None,
        line_width: float = 1.0,
    ) -> None:
        if radius <= 0:
            return
        width = px(line_width) if outline is not None else 0
        # A canvas stroke is centred on the path; Pillow strokes inward.
        r = radius + width / 2

        def paint(draw: ImageDraw.ImageDraw, ox: int, oy: int) -> None:
            draw.ellipse(
                (cx - r - ox, cy - r - oy, cx + r - ox, cy + r - oy),
                fill=fill,
                outline=outline,
                width=width,
            )

        self._composite((cx - r, cy - r, cx + r, cy + r), paint)

    def text(
        self,
        x: float,
        y: float,
        text: str,
        font: Font,
        fill: RGBA,
        anchor: str = "la",
        stroke_width: float = 0.0,
        stroke_fill: RGBA | None = None,
        shadow: Shadow | None = None,
    ) -> None:
        if not text:
            return
        stroke = round(stroke_width) if stroke_fill is not None else 0
        left, top, right, bottom = font.getbbox(text, anchor=anchor, stroke_width=stroke)

        def paint(draw: ImageDraw.ImageDraw, ox: int, oy: int) -> None:
            draw.text(
                (x - ox, y - oy),
                text,
                fill=fill,
                font=font,
                anchor=anchor,
                stroke_width=stroke,
                stroke_fill=stroke_fill,
            )

        self._composite((x + left, y + top, x + right, y + bottom), paint, shadow)

    def measure(self, text: str, font: Font) -> float:
        return float(font.getlength(text)) if text else 0.0

    # ── Layer compositing ──

    def _composite(
        self,
        bounds: tuple[float, float, float, float],
        paint: Callable[[ImageDraw.ImageDraw, int, int], None],
        shadow: Shadow | None = None,
    ) -> None:
        margin = _LAYER_MARGIN + (shadow.extent if shadow is not None else 0)
        left = max(0, math.floor(bounds[0]) - margin)
        top = max(0, math.floor(bounds[1]) - margin)
        right = min(self.width, math.ceil(bounds[2]) + margin)
        bottom = min(self.height, math.ceil(bounds[3]) + margin)
        if right <= left or bottom <= top:
            return

        layer = Image.new("RGBA", (right - left, bottom - top), TRANSPARENT)
        paint(ImageDraw.Draw(layer), left, top)

        if shadow is not None:
            self.image.alpha_composite(_shadow_of(layer, shadow), dest=(left, top))
        self.image.alpha_composite(layer, dest=(left, top))


def _shadow_of(layer: Image.Image, shadow: Shadow) -> Image.Image:
    """Blurred, offset silhouette of ``layer`` tinted with the shadow colour."""
    r, g, b, a = shadow.color
    alpha = layer.getchannel("A").point(lambda v: v * a // 255)
    silhouette = Image.new("RGBA", layer.size, (r, g, b, 0))
    silhouette.putalpha(alpha)

    shifted = Image.new("RGBA", layer.size, (r, g, b, 0))
    shifted.paste(silhouette, (round(shadow.offset_x), round(shadow.offset_y)))
    if shadow.blur > 0:
        shifted = shifted.filter(ImageFilter.GaussianBlur(shadow.blur / 2))
    return shifted


def _bounds(points: Sequence[Point], pad: float) -> tuple[float, float, float, float]:
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs) - pad, min(ys) - pad, max(xs) + pad, max(ys) + pad)
