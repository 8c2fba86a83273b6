"""Layout edits — pure functions from (layout, edit) to a new layout.

Callers apply one discrete edit, then re-render explicitly; nothing here
touches pixels. Pixel/normalized conversions go through ``AnchorKind`` so the
per-element anchor conventions live in one place.
"""

from __future__ import annotations

import logging
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from aical.engine.scale import anchor_from_box, anchor_kind, to_normalized
from aical.models.layout import ElementState, ElementType, HitRegion, ImageLayout, LabelStyle, LogoState

logger = logging.getLogger(__name__)

LABEL_STYLE_CYCLE = (LabelStyle.DEFAULT, LabelStyle.PILL, LabelStyle.TEXT)

# Where a freshly added logo appears.
NEW_LOGO_POSITION = (0.85, 0.1)

MIN_SCALE = 0.05

_SINGLETON_FIELDS = {
    ElementType.CARD: "card",
    ElementType.TITLE: "meal_type",
    ElementType.LOGO: "logo",
}


def _replace(layout: ImageLayout, target: ElementType, label_id: int | None, **changes) -> ImageLayout:
    """Copy of ``layout`` with ``changes`` applied to one element."""
    target = ElementType(target)
    if target is ElementType.LABEL:
        if layout.label(label_id) is None:  # type: ignore[arg-type]
            logger.warning("Edit on unknown label %r ignored", label_id)
            return layout
        labels = [lbl.model_copy(update=changes) if lbl.id == label_id else lbl for lbl in layout.labels]
        return layout.model_copy(update={"labels": labels})

    field = _SINGLETON_FIELDS[target]
    element: ElementState | None = getattr(layout, field)
    if element is None:
        logger.warning("Edit on absent %s ignored", target.value)
        return layout
    return layout.model_copy(update={field: element.model_copy(update=changes)})


def move_element(
    layout: ImageLayout,
    region: HitRegion,
    left: float,
    top: float,
    canvas_width: float,
    canvas_height: float,
) -> ImageLayout:
    """Move the element behind ``region`` so the region's top-left lands on (left, top) pixels.

    A region clipped at a canvas edge moves its full element box by the same delta.
    """
    full = region.unclipped or region
    left += full.x - region.x
    top += full.y - region.y
    px, py = anchor_from_box(anchor_kind(region.type), left, top, full.w, full.h)
    x, y = to_normalized(px, py, canvas_width, canvas_height)
    label_id = region.id if region.type == ElementType.LABEL.value else None
    return _replace(layout, ElementType(region.type), label_id, x=x, y=y)


def set_scale(layout: ImageLayout, target: ElementType, scale: float, label_id: int | None = None) -> ImageLayout:
    return _replace(layout, target, label_id, scale=max(MIN_SCALE, scale))


def set_text(layout: ImageLayout, target: ElementType, text: str, label_id: int | None = None) -> ImageLayout:
    return _replace(layout, target, label_id, text=text)


def set_visible(layout: ImageLayout, target: ElementType, visible: bool, label_id: int | None = None) -> ImageLayout:
    return _replace(layout, target, label_id, visible=visible)


def cycle_label_style(layout: ImageLayout, label_id: int) -> ImageLayout:
    label = layout.label(label_id)
    if label is None:
        logger.warning("Style cycle on unknown label %r ignored", label_id)
        return layout
    nxt = LABEL_STYLE_CYCLE[(LABEL_STYLE_CYCLE.index(label.style) + 1) % len(LABEL_STYLE_CYCLE)]
    return _replace(layout, ElementType.LABEL, label_id, style=nxt)


def delete_label(layout: ImageLayout, label_id: int) -> ImageLayout:
    return layout.model_copy(update={"labels": [lbl for lbl in layout.labels if lbl.id != label_id]})


def set_logo(layout: ImageLayout, url: str | None) -> ImageLayout:
    """Attach a logo at the default position, replace its image, or remove it (``None``)."""
    if url is None:
        return layout.model_copy(update={"logo": None})
    if layout.logo is not None:
        return layout.model_copy(update={"logo": layout.logo.model_copy(update={"url": url})})
    x, y = NEW_LOGO_POSITION
    return layout.model_copy(update={"logo": LogoState(x=x, y=y, scale=1.0, visible=True, url=url)})


# ── Wire-level edit messages ──


class MoveEdit(BaseModel):
    op: Literal["move"] = "move"
    region: HitRegion
    left: float
    top: float


class ScaleEdit(BaseModel):
    op: Literal["scale"] = "scale"
    target: ElementType
    id: int | None = None
    scale: float = Field(gt=0)


class TextEdit(BaseModel):
    op: Literal["text"] = "text"
    target: ElementType
    id: int | None = None
    text: str


class VisibilityEdit(BaseModel):
    op: Literal["visibility"] = "visibility"
    target: ElementType
    id: int | None = None
    visible: bool


class CycleStyleEdit(BaseModel):
    op: Literal["cycle_style"] = "cycle_style"
    id: int


class DeleteLabelEdit(BaseModel):
    op: Literal["delete_label"] = "delete_label"
    id: int


class LogoEdit(BaseModel):
    op: Literal["logo"] = "logo"
    url: str | None = None


Edit = Annotated[
    Union[MoveEdit, ScaleEdit, TextEdit, VisibilityEdit, CycleStyleEdit, DeleteLabelEdit, LogoEdit],
    Field(discriminator="op"),
]


def apply_edit(layout: ImageLayout, edit: Edit, canvas_width: float, canvas_height: float) -> ImageLayout:
    """Dispatch one edit message to the matching pure edit function."""
    if isinstance(edit, MoveEdit):
        return move_element(layout, edit.region, edit.left, edit.top, canvas_width, canvas_height)
    if isinstance(edit, ScaleEdit):
        return set_scale(layout, edit.target, edit.scale, edit.id)
    if isinstance(edit, TextEdit):
        return set_text(layout, edit.target, edit.text, edit.id)
    if isinstance(edit, VisibilityEdit):
        return set_visible(layout, edit.target, edit.visible, edit.id)
    if isinstance(edit, CycleStyleEdit):
        return cycle_label_style(layout, edit.id)
    if isinstance(edit, DeleteLabelEdit):
        return delete_label(layout, edit.id)
    if isinstance(edit, LogoEdit):
        return set_logo(layout, edit.url)
    raise ValueError(f"Unknown edit: {edit!r}")
