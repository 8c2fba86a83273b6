"""Tests for API endpoints."""

from __future__ import annotations

import base64
import io
import time

from fastapi.testclient import TestClient
from PIL import Image

from aical.config import Settings
from aical.dependencies import get_settings
from aical.engine import collage as collage_engine
from aical.main import app
from tests.conftest import SAMPLE_ANALYSIS, data_url, solid_image


client = TestClient(app)


def _layout(width=1024, height=768, mode="scan"):
    response = client.post(
        "/api/layout",
        json={"width": width, "height": height, "analysis": SAMPLE_ANALYSIS, "mode": mode},
    )
    assert response.status_code == 200
    return response.json()


def _decode(url: str) -> Image.Image:
    return Image.open(io.BytesIO(base64.b64decode(url.split(",", 1)[1])))


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["modes"] == ["scan", "collage", "nutrition"]


def test_layout_is_camel_case():
    data = _layout()
    assert data["mealType"]["text"] == "Lunch"
    assert len(data["labels"]) == 3
    assert data["labels"][0]["anchorX"] == 0.325


def test_layout_nutrition_mode_and_collage_source():
    data = _layout(mode="nutrition")
    assert data["card"]["backgroundColor"] == "#000000"
    response = client.post(
        "/api/layout",
        json={"width": 1000, "height": 1000, "analysis": SAMPLE_ANALYSIS, "collageSource": True},
    )
    assert response.json()["labels"] == []
    assert response.json()["mealType"]["text"] == "Chicken"


def test_render_preview():
    layout = _layout()
    response = client.post(
        "/api/render",
        json={"image": data_url(solid_image(1024, 768)), "analysis": SAMPLE_ANALYSIS, "layout": layout},
    )
    assert response.status_code == 200
    data = response.json()
    assert (data["width"], data["height"]) == (1024, 768)
    assert [r["type"] for r in data["hitRegions"]] == ["title", "label", "label", "label", "card"]
    assert data["image"].startswith("data:image/png;base64,")
    assert _decode(data["image"]).size == (1024, 768)


def test_render_overlay_only_needs_size():
    layout = _layout()
    response = client.post("/api/render", json={"analysis": SAMPLE_ANALYSIS, "layout": layout})
    assert response.status_code == 422
    response = client.post(
        "/api/render",
        json={"analysis": SAMPLE_ANALYSIS, "layout": layout, "width": 512, "height": 384},
    )
    assert response.status_code == 200
    assert _decode(response.json()["image"]).mode == "RGBA"


def test_export_upscales():
    response = client.post(
        "/api/export",
        json={"image": data_url(solid_image(1024, 768)), "analysis": SAMPLE_ANALYSIS, "layout": _layout()},
    )
    assert response.status_code == 200
    image = _decode(response.json()["image"])
    assert image.format == "JPEG"
    assert image.size == (2048, 1536)


def test_export_bad_image():
    response = client.post(
        "/api/export",
        json={"image": "data:image/png;base64,AAAA", "analysis": SAMPLE_ANALYSIS, "layout": _layout()},
    )
    assert response.status_code == 422


def test_malformed_data_url_is_rejected():
    layout = _layout()
    for path, body in (
        ("/api/export", {"image": "data:image/png", "analysis": SAMPLE_ANALYSIS, "layout": layout}),
        ("/api/render", {"image": "data:image/png", "analysis": SAMPLE_ANALYSIS, "layout": layout}),
        ("/api/resize", {"image": "data:image/png"}),
        ("/api/collage", {"images": ["data:image/png"]}),
    ):
        assert client.post(path, json=body).status_code == 422, path


def test_collage():
    red = data_url(solid_image(200, 200, (255, 0, 0)))
    response = client.post(
        "/api/collage",
        json={"images": [red, None, None, red], "width": 400, "height": 400, "backgroundColor": "#000000"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["filename"].startswith("collage-")
    assert _decode(data["image"]).size == (400, 400)


def test_collage_bad_image():
    response = client.post("/api/collage", json={"images": ["data:image/png;base64,AAAA"]})
    assert response.status_code == 422


def test_collage_timeout(monkeypatch):
    def slow(*args, **kwargs):
        time.sleep(0.3)
        return b""

    monkeypatch.setattr(collage_engine, "_render_and_encode", slow)
    app.dependency_overrides[get_settings] = lambda: Settings(collage_timeout_seconds=0.05)
    try:
        response = client.post(
            "/api/collage",
            json={"images": [data_url(solid_image(10, 10))], "width": 100, "height": 100},
        )
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 504
    assert "timed out" in response.json()["detail"]


def test_resize():
    response = client.post(
        "/api/resize",
        json={"image": data_url(solid_image(2000, 1000)), "maxDimension": 500, "cropTo9x16": False},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["mimeType"] == "image/jpeg"
    assert Image.open(io.BytesIO(base64.b64decode(data["image"]))).size == (500, 250)


def test_edit():
    layout = _layout()
    response = client.post(
        "/api/edit",
        json={"layout": layout, "edit": {"op": "delete_label", "id": 0}, "width": 1024, "height": 768},
    )
    assert response.status_code == 200
    assert [lbl["id"] for lbl in response.json()["labels"]] == [1, 2]


def test_edit_unknown_op():
    response = client.post(
        "/api/edit",
        json={"layout": _layout(), "edit": {"op": "spin"}, "width": 1024, "height": 768},
    )
    assert response.status_code == 422
