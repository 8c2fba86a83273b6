"""Layout value objects — the normalized description of what goes on a photo.

Positions are fractions of the canvas width/height. What (x, y) denotes depends
on the element: title = horizontal centre / top, card = top-left, label and
logo = centre. ``aical.engine.scale.AnchorKind`` owns that mapping.
"""

from __future__ import annotations

import enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python, immutable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class LabelStyle(str, enum.Enum):
    DEFAULT = "default"  # pill + connector line + anchor dot
    PILL = "pill"
    TEXT = "text"  # outlined text only


class AppMode(str, enum.Enum):
    SCAN = "scan"
    COLLAGE = "collage"
    NUTRITION = "nutrition"


class ElementType(str, enum.Enum):
    CARD = "card"
    TITLE = "title"
    LABEL = "label"
    LOGO = "logo"


class ElementState(_WireModel):
    x: float
    y: float
    scale: float = Field(default=1.0, gt=0)
    text: str | None = None
    visible: bool = True
    color: str | None = None
    background_color: str | None = None


class LabelState(ElementState):
    id: int
    anchor_x: float = 0.5
    anchor_y: float = 0.5
    style: LabelStyle = LabelStyle.DEFAULT


class LogoState(ElementState):
    url: str


class ImageLayout(_WireModel):
    card: ElementState
    meal_type: ElementState
    labels: list[LabelState] = Field(default_factory=list)
    logo: LogoState | None = None

    def label(self, label_id: int) -> LabelState | None:
        for label in self.labels:
            if label.id == label_id:
                return label
        return None


class ElementBox(_WireModel):
    x: float
    y: float
    w: float
    h: float


class HitRegion(_WireModel):
    """Pixel bounding box of one drawn element, clipped to the canvas that was rendered.

    When the element runs past a canvas edge, ``unclipped`` holds its full box so
    a drag that starts on the visible part still moves the element by the same delta.
    """

    id: int | str
    type: Literal["card", "title", "label", "logo"]
    x: float
    y: float
    w: float
    h: float
    rotation: float | None = None
    unclipped: ElementBox | None = None

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h


class CollageTransform(_WireModel):
    scale: float = 1.0
    # Pan offsets as fractions of the cell width/height
    x: float = 0.0
    y: float = 0.0


class LayoutConfig(_WireModel):
    default_label_style: LabelStyle = LabelStyle.DEFAULT
    default_title_scale: float = 7.6
    default_card_scale: float = 4.2
    default_label_scale: float = 1.0
    default_card_x: float | None = None
    default_card_y: float | None = None
    default_title_y: float | None = None


class ModeConfig(LayoutConfig):
    card_background_color: str | None = None
    card_text_color: str | None = None
