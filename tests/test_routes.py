import io
from types import SimpleNamespace

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app import create_app
from app.core.genai_client import get_genai_client_manager
from app.utils.data_uri import parse_data_uri
from tests.conftest import alpha_of, image_data_uri, make_square_image, png_bytes


@pytest.fixture
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


def decode(uri):
    return Image.open(io.BytesIO(parse_data_uri(uri)[1]))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_presets(client):
    presets = client.get("/background-removal/presets").json()["presets"]
    assert set(presets) == {"simple", "standard", "complex"}
    assert presets["complex"]["threshold"] == 50
    assert presets["simple"]["edge_detection"] is True


def test_remove_returns_image_mask_and_metadata(client, square_data_uri):
    response = client.post("/background-removal/remove", json={"image_data_uri": square_data_uri})
    assert response.status_code == 200

    body = response.json()
    image = decode(body["image_data_uri"])
    assert image.size == (100, 100)
    assert alpha_of(image)[50, 50] == 255
    assert alpha_of(image)[0, 0] == 0
    assert decode(body["mask_data_uri"]).mode == "L"
    assert body["metadata"]["dimensions"] == {"width": 100, "height": 100}
    assert body["metadata"]["background_color"] == {"r": 255, "g": 255, "b": 255}


def test_remove_with_manual_hints(client, square_data_uri):
    response = client.post("/background-removal/remove", json={
        "image_data_uri": square_data_uri,
        "mode": "manual",
        "return_mask": False,
        "manual_hints": {"background_color": {"r": 0, "g": 0, "b": 0}},
    })
    assert response.status_code == 200
    body = response.json()
    assert body["mask_data_uri"] is None
    assert np.all(alpha_of(decode(body["image_data_uri"])) == 255)


def test_remove_rejects_corrupt_image(client):
    response = client.post("/background-removal/remove", json={"image_data_uri": "data:image/png;base64,AAAA"})
    assert response.status_code == 400


def test_remove_rejects_out_of_range_threshold(client, square_data_uri):
    response = client.post(
        "/background-removal/remove", json={"image_data_uri": square_data_uri, "threshold": 300}
    )
    assert response.status_code == 422


def test_remove_rejects_sample_point_outside_image(client, square_data_uri):
    response = client.post("/background-removal/remove", json={
        "image_data_uri": square_data_uri,
        "mode": "manual",
        "manual_hints": {"sample_points": [{"x": 1000, "y": 5}]},
    })
    assert response.status_code == 422


def test_remove_upload_streams_png(client, square_image):
    response = client.post(
        "/background-removal/remove-upload",
        files={"image": ("sticker.png", png_bytes(square_image), "image/png")},
        data={"threshold": "25", "feather_radius": "0"},
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert "x-processing-time-ms" in response.headers
    assert set(np.unique(alpha_of(Image.open(io.BytesIO(response.content)))).tolist()) == {0, 255}


def test_remove_upload_rejects_unknown_mode(client, square_image):
    response = client.post(
        "/background-removal/remove-upload",
        files={"image": ("sticker.png", png_bytes(square_image), "image/png")},
        data={"mode": "fixed"},
    )
    assert response.status_code == 422


def test_remove_upload_rejects_empty_file(client):
    response = client.post(
        "/background-removal/remove-upload",
        files={"image": ("empty.png", b"", "image/png")},
    )
    assert response.status_code == 400


def test_analyze(client, square_data_uri):
    response = client.post("/background-removal/analyze", json={"image_data_uri": square_data_uri})
    assert response.status_code == 200
    body = response.json()
    assert body["background_color"] == {"r": 255, "g": 255, "b": 255}
    assert body["complexity"] in ("simple", "medium", "complex")
    assert isinstance(body["suggested_threshold"], int)


def test_batch_keeps_order_and_per_item_mask_flag(client):
    items = [
        {"image_data_uri": image_data_uri(make_square_image(size=size, start=size // 4, end=3 * size // 4)),
         "return_mask": size != 20}
        for size in (10, 20, 30)
    ]
    response = client.post("/background-removal/batch", json={"items": items, "max_concurrency": 2})
    assert response.status_code == 200

    results = response.json()["results"]
    assert [r["metadata"]["dimensions"]["width"] for r in results] == [10, 20, 30]
    assert [r["mask_data_uri"] is None for r in results] == [False, True, False]


def test_batch_rejects_empty_items(client):
    assert client.post("/background-removal/batch", json={"items": []}).status_code == 422


def test_ai_endpoints_unavailable_without_key(client, monkeypatch, square_data_uri):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.setattr(get_genai_client_manager(), "client", None)

    response = client.post("/ai/remove-background", json={"image_data_uri": square_data_uri})
    assert response.status_code == 503


def fake_genai_client(response):
    models = SimpleNamespace(generate_content=lambda **kwargs: response)
    return SimpleNamespace(models=models)


def test_ai_generate_sticker(client, monkeypatch):
    result = png_bytes(make_square_image(size=8, start=2, end=6))
    part = SimpleNamespace(inline_data=SimpleNamespace(data=result, mime_type="image/png"))
    response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])
    monkeypatch.setattr(get_genai_client_manager(), "client", fake_genai_client(response))

    reply = client.post("/ai/generate-sticker", json={"prompt": "a rocket"})
    assert reply.status_code == 200
    assert parse_data_uri(reply.json()["image_data_uri"])[1] == result


def test_ai_add_border_without_image_in_response(client, monkeypatch, square_data_uri):
    response = SimpleNamespace(candidates=[])
    monkeypatch.setattr(get_genai_client_manager(), "client", fake_genai_client(response))

    reply = client.post("/ai/add-border", json={"image_data_uri": square_data_uri, "border_color": "black"})
    assert reply.status_code == 502
    assert reply.json()["detail"] == "Adding border failed"


def test_ai_generate_sticker_requires_prompt(client):
    assert client.post("/ai/generate-sticker", json={"prompt": ""}).status_code == 422


def test_ai_generate_sticker_rejects_blank_prompt(client):
    response = client.post("/ai/generate-sticker", json={"prompt": "   "})
    assert response.status_code == 422
