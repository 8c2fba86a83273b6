"""Tests for image decoding and the working-copy resize."""

from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from aical.engine.errors import ImageDecodeError
from aical.engine.imaging import crop_to_story, decode_image, encode_data_url, fit_within, resize_image
from tests.conftest import data_url, solid_image, to_bytes


class TestDecode:
    def test_bytes(self):
        assert decode_image(to_bytes(solid_image(30, 20))).size == (30, 20)

    def test_data_url_and_bare_base64(self):
        url = data_url(solid_image(30, 20))
        assert decode_image(url).size == (30, 20)
        assert decode_image(url.split(",", 1)[1]).size == (30, 20)

    def test_grayscale_becomes_rgb(self):
        assert decode_image(to_bytes(Image.new("L", (8, 8), 128))).mode == "RGB"

    def test_alpha_is_kept(self):
        assert decode_image(to_bytes(Image.new("RGBA", (8, 8), (1, 2, 3, 4)))).mode == "RGBA"

    def test_exif_orientation_applied(self):
        image = solid_image(40, 20)
        exif = Image.Exif()
        exif[0x0112] = 6  # rotate 90 CW on display
        buf = io.BytesIO()
        image.save(buf, format="JPEG", exif=exif)
        assert decode_image(buf.getvalue()).size == (20, 40)

    @pytest.mark.parametrize("source", ["data:image/png;base64,@@@", "not base64!", b"\x00\x01garbage"])
    def test_invalid_input(self, source):
        with pytest.raises(ImageDecodeError):
            decode_image(source)

    @pytest.mark.parametrize("source", ["data:image/png", "data:image/png;base64,", ""])
    def test_missing_payload(self, source):
        with pytest.raises(ImageDecodeError, match="empty"):
            decode_image(source)

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_image(b"")


def test_encode_data_url_png_keeps_alpha():
    url = encode_data_url(Image.new("RGBA", (4, 4), (0, 0, 0, 0)), "PNG")
    assert url.startswith("data:image/png;base64,")
    assert decode_image(url).getpixel((0, 0))[3] == 0


class TestFitWithin:
    def test_landscape(self):
        assert fit_within(2000, 1000, 1024) == (1024, 512)

    def test_portrait(self):
        assert fit_within(1000, 3000, 1024) == (341, 1024)

    def test_never_upscales(self):
        assert fit_within(500, 400, 1024) == (500, 400)


class TestStoryCrop:
    def test_wide_image_loses_sides(self):
        cropped = crop_to_story(solid_image(1600, 900))
        assert cropped.height == 900
        assert cropped.width / cropped.height == pytest.approx(9 / 16, abs=0.01)

    def test_tall_image_loses_top_and_bottom(self):
        cropped = crop_to_story(solid_image(900, 2400))
        assert cropped.width == 900
        assert cropped.height == 1600


def test_resize_image_returns_jpeg_payload():
    payload, mime = resize_image(to_bytes(solid_image(2048, 1536)))
    assert mime == "image/jpeg"
    image = Image.open(io.BytesIO(base64.b64decode(payload)))
    assert image.format == "JPEG"
    assert image.size == (1024, 768)


def test_resize_image_crop_then_downscale():
    payload, _ = resize_image(solid_image(3000, 2000), max_dimension=800, crop_to_9x16=True)
    width, height = Image.open(io.BytesIO(base64.b64decode(payload))).size
    assert height == 800
    assert width == pytest.approx(450, abs=1)
