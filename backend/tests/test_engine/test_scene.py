"""Tests for the scene compositor and its hit regions."""

from __future__ import annotations

import pytest
from PIL import Image

from aical.engine.errors import NoContextError
from aical.engine.layout import init_layout
from aical.engine.scene import draw_scene, render_scene
from aical.models.layout import AppMode, ElementState, ImageLayout, LabelState, LabelStyle, LogoState
from aical.models.modes import default_mode_config
from tests.conftest import PHOTO_COLOR, close, solid_image


def _title_only(scale: float = 1.0) -> ImageLayout:
    return ImageLayout(
        card=ElementState(x=0.05, y=0.7, visible=False),
        meal_type=ElementState(x=0.5, y=0.08, scale=scale, text="Breakfast"),
    )


def _single_label(style: LabelStyle) -> ImageLayout:
    return ImageLayout(
        card=ElementState(x=0.05, y=0.7, visible=False),
        meal_type=ElementState(x=0.5, y=0.08, visible=False),
        labels=[LabelState(id=0, x=0.5, y=0.35, anchor_x=0.5, anchor_y=0.5, text="Toast", style=style)],
    )


def _by_id(regions):
    return {r.id: r for r in regions}


def test_missing_surface_raises(analysis, square_photo):
    with pytest.raises(NoContextError, match="No Context"):
        draw_scene(None, square_photo, analysis, _title_only())


def test_render_without_image_needs_size(analysis):
    with pytest.raises(ValueError):
        render_scene(None, analysis, _title_only())


def test_overlay_only_render_is_transparent_outside_elements(analysis):
    image, regions = render_scene(None, analysis, _title_only(), width=800, height=600)
    assert image.size == (800, 600)
    assert image.getpixel((5, 595))[3] == 0
    assert [r.type for r in regions] == ["title"]


def test_title_region_position(analysis, square_photo):
    _, regions = render_scene(square_photo, analysis, _title_only())
    title = _by_id(regions)["title"]
    assert title.y == pytest.approx(80)
    assert title.x + title.w / 2 == pytest.approx(500)
    # 80px font at 1000/1200 * 1.0 * 0.15
    assert title.h == pytest.approx(80 * 1000 / 1200 * 0.15)
    assert title.w > 0


def test_scan_draw_order_and_ids(analysis, photo):
    layout = init_layout(photo.width, photo.height, analysis)
    _, regions = render_scene(photo, analysis, layout, AppMode.SCAN)
    assert [r.type for r in regions] == ["title", "label", "label", "label", "card"]
    assert [r.id for r in regions] == ["title", 0, 1, 2, "card"]


def test_hidden_elements_have_no_region(analysis, photo):
    layout = init_layout(photo.width, photo.height, analysis)
    labels = [lbl.model_copy(update={"visible": lbl.id != 1}) for lbl in layout.labels]
    layout = layout.model_copy(update={"labels": labels, "card": layout.card.model_copy(update={"visible": False})})
    _, regions = render_scene(photo, analysis, layout)
    assert [r.id for r in regions] == ["title", 0, 2]


def test_regions_stay_on_canvas(analysis, photo):
    layout = init_layout(photo.width, photo.height, analysis)
    _, regions = render_scene(photo, analysis, layout)
    for region in regions:
        assert region.x >= 0 and region.y >= 0
        assert region.right <= photo.width and region.bottom <= photo.height


@pytest.mark.parametrize("mode", [AppMode.SCAN, AppMode.NUTRITION])
def test_regions_at_canvas_edges_are_clipped(analysis, square_photo, mode):
    layout = ImageLayout(
        card=ElementState(x=0.0, y=1.0, scale=4.2),
        meal_type=ElementState(x=0.0, y=0.0, scale=7.6, text="Breakfast"),
        labels=[
            LabelState(id=0, x=1.0, y=0.0, anchor_x=1.0, anchor_y=1.0, text="Toast"),
            LabelState(id=1, x=0.0, y=1.0, anchor_x=0.0, anchor_y=0.0, text="Jam", style=LabelStyle.TEXT),
        ],
        logo=LogoState(x=1.0, y=1.0, url="data:image/png;base64,"),
    )
    _, regions = render_scene(square_photo, analysis, layout, mode, logo_image=solid_image(200, 100))
    assert regions
    for region in regions:
        assert 0 <= region.x <= region.right <= 1000
        assert 0 <= region.y <= region.bottom <= 1000

    title = _by_id(regions).get("title")
    if title is not None:
        assert title.x == 0
        assert title.unclipped.x < 0
        assert title.unclipped.x + title.unclipped.w == pytest.approx(title.right)


def test_unclipped_box_only_when_clipped(analysis, photo):
    layout = init_layout(photo.width, photo.height, analysis)
    _, regions = render_scene(photo, analysis, layout)
    assert all(r.unclipped is None for r in regions)


def test_card_region_matches_layout(analysis, photo):
    layout = init_layout(photo.width, photo.height, analysis)
    _, regions = render_scene(photo, analysis, layout)
    card = _by_id(regions)["card"]
    s = photo.width / 1200 * 4.2 * 0.25
    assert card.x == pytest.approx(layout.card.x * photo.width)
    assert card.y == pytest.approx(layout.card.y * photo.height)
    assert card.w == pytest.approx(540 * s)
    assert card.h == pytest.approx(330 * s)


def test_rendering_is_deterministic(analysis, photo):
    layout = init_layout(photo.width, photo.height, analysis)
    first, regions_a = render_scene(photo, analysis, layout)
    second, regions_b = render_scene(photo, analysis, layout)
    assert regions_a == regions_b
    assert first.tobytes() == second.tobytes()


@pytest.mark.parametrize("mode", [AppMode.SCAN, AppMode.NUTRITION])
def test_regions_are_resolution_independent(analysis, mode):
    config = default_mode_config(mode)
    layout = init_layout(1024, 1536, analysis, config)
    _, small = render_scene(None, analysis, layout, mode, width=1024, height=1536)
    _, large = render_scene(None, analysis, layout, mode, width=2560, height=3840)
    assert len(small) == len(large)
    for a, b in zip(small, large):
        assert a.id == b.id
        assert a.x / 1024 == pytest.approx(b.x / 2560, abs=0.005)
        assert a.y / 1536 == pytest.approx(b.y / 3840, abs=0.005)
        assert a.w / 1024 == pytest.approx(b.w / 2560, abs=0.005)
        assert a.h / 1024 == pytest.approx(b.h / 2560, abs=0.005)


class TestLabelStyles:
    def test_text_style_draws_no_connector(self, analysis, square_photo):
        image, regions = render_scene(square_photo, analysis, _single_label(LabelStyle.TEXT))
        rgb = image.convert("RGB")
        # Anchor dot and the connector's midpoint stay untouched photo
        assert close(rgb.getpixel((500, 500)), PHOTO_COLOR)
        assert close(rgb.getpixel((500, 440)), PHOTO_COLOR)
        assert regions[0].type == "label"

    def test_default_style_draws_anchor_dot(self, analysis, square_photo):
        image, _ = render_scene(square_photo, analysis, _single_label(LabelStyle.DEFAULT))
        assert close(image.convert("RGB").getpixel((500, 500)), (255, 255, 255))

    def test_pill_style_draws_no_connector(self, analysis, square_photo):
        image, _ = render_scene(square_photo, analysis, _single_label(LabelStyle.PILL))
        assert close(image.convert("RGB").getpixel((500, 500)), PHOTO_COLOR)

    def test_pill_region_centered_on_label(self, analysis, square_photo):
        _, regions = render_scene(square_photo, analysis, _single_label(LabelStyle.PILL))
        cx = regions[0].x + regions[0].w / 2
        cy = regions[0].y + regions[0].h / 2
        assert (cx, cy) == pytest.approx((500, 350))

    def test_text_style_is_narrower_than_pill(self, analysis, square_photo):
        _, text = render_scene(square_photo, analysis, _single_label(LabelStyle.TEXT))
        _, pill = render_scene(square_photo, analysis, _single_label(LabelStyle.PILL))
        assert text[0].w < pill[0].w
        assert text[0].h == pill[0].h


class TestNutritionMode:
    def _layout(self, analysis, width=1200, height=1600, **card):
        layout = init_layout(width, height, analysis, default_mode_config(AppMode.NUTRITION))
        if card:
            layout = layout.model_copy(update={"card": layout.card.model_copy(update=card)})
        return layout

    def test_bar_spans_canvas_width(self, analysis, photo):
        _, regions = render_scene(photo, analysis, self._layout(analysis), AppMode.NUTRITION)
        bar = _by_id(regions)["card"]
        assert (bar.x, bar.w) == (0, photo.width)
        assert bar.y == pytest.approx(0.8 * photo.height)
        assert bar.h == pytest.approx(150)

    def test_bar_clamped_to_canvas_bottom(self, analysis, photo):
        _, regions = render_scene(photo, analysis, self._layout(analysis, y=0.97), AppMode.NUTRITION)
        bar = _by_id(regions)["card"]
        assert bar.bottom == pytest.approx(photo.height)

    def test_bar_covers_photo(self, analysis, photo):
        image, regions = render_scene(photo, analysis, self._layout(analysis), AppMode.NUTRITION)
        bar = _by_id(regions)["card"]
        rgb = image.convert("RGB")
        assert close(rgb.getpixel((5, int(bar.y) - 3)), PHOTO_COLOR)
        assert rgb.getpixel((5, int(bar.bottom) - 3))[2] < PHOTO_COLOR[2] / 2

    def test_bubbles_always_draw_connector(self, analysis, square_photo):
        layout = _single_label(LabelStyle.TEXT)
        image, regions = render_scene(square_photo, analysis, layout, AppMode.NUTRITION)
        assert close(image.convert("RGB").getpixel((500, 500)), (255, 255, 255))
        assert [r.type for r in regions] == ["label"]

    def test_logo_region_keeps_aspect(self, analysis, photo):
        logo = solid_image(200, 100, (255, 0, 0))
        layout = self._layout(analysis).model_copy(
            update={"logo": LogoState(x=0.5, y=0.5, scale=1.0, url="data:image/png;base64,")}
        )
        image, regions = render_scene(photo, analysis, layout, AppMode.NUTRITION, logo_image=logo)
        region = _by_id(regions)["logo"]
        assert region.type == "logo"
        assert (region.w, region.h) == pytest.approx((100, 50))
        assert (region.x + region.w / 2, region.y + region.h / 2) == pytest.approx((600, 800))
        rgb = image.convert("RGB")
        assert close(rgb.getpixel((600, 800)), (255, 0, 0))
        assert close(rgb.getpixel((int(region.right) + 3, 800)), PHOTO_COLOR)

    def test_logo_not_drawn_in_scan_mode(self, analysis, photo):
        layout = init_layout(photo.width, photo.height, analysis).model_copy(
            update={"logo": LogoState(x=0.5, y=0.5, url="data:image/png;base64,")}
        )
        _, regions = render_scene(photo, analysis, layout, AppMode.SCAN, logo_image=Image.new("RGB", (10, 10)))
        assert "logo" not in {r.type for r in regions}
