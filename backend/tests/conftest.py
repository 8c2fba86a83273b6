"""Shared test fixtures."""

from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from aical.models.analysis import FoodAnalysis


# Background used wherever a test needs to see what the overlays left untouched
PHOTO_COLOR = (40, 90, 160)

SAMPLE_ANALYSIS = {
    "isFood": True,
    "hasExistingText": False,
    "mealType": "Lunch",
    "summary": "Grilled chicken with rice and a side of steamed broccoli",
    "items": [
        {"name": "Chicken", "box_2d": [300, 200, 500, 450], "calories": 320},
        {"name": "Rice", "box_2d": [450, 500, 700, 800], "calories": 210},
        {"name": "Broccoli", "box_2d": None, "calories": 55},
    ],
    "nutrition": {
        "calories": 585,
        "carbs": "62g",
        "protein": "41g",
        "fat": "14g",
        "vitamins": ["C", "K"],
        "totalWeight": "450g",
    },
}


def solid_image(width: int, height: int, color=PHOTO_COLOR) -> Image.Image:
    return Image.new("RGB", (width, height), color)


def to_bytes(image: Image.Image, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


def data_url(image: Image.Image, fmt: str = "PNG") -> str:
    return f"data:image/{fmt.lower()};base64,{base64.b64encode(to_bytes(image, fmt)).decode('ascii')}"


def close(a, b, tol: int = 2) -> bool:
    """Per-channel colour comparison with a small tolerance for resampling/JPEG."""
    return all(abs(x - y) <= tol for x, y in zip(a, b))


@pytest.fixture
def analysis() -> FoodAnalysis:
    return FoodAnalysis.model_validate(SAMPLE_ANALYSIS)


@pytest.fixture
def photo() -> Image.Image:
    return solid_image(1200, 1600)


@pytest.fixture
def square_photo() -> Image.Image:
    return solid_image(1000, 1000)
