"""
Test the HTTP adapter.
"""
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from ekatra import __version__, response
from ekatra.main import app, sdk


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "operational"


def test_health(client):
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["version"] == __version__
    assert set(body["services"]) == {"mime_probe", "sentry"}


def test_flexible_transform_route(client):
    response = client.post("/ekatra/transform", json={"product_id": "P1", "title": "Mug", "price": 10})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["data"]["productId"] == "P1"
    assert body["metadata"]["sdkVersion"] == __version__


def test_invalid_payload_is_400(client):
    response = client.post("/ekatra/transform", json={})

    assert response.status_code == 400
    assert "Product ID is required" in response.json()["metadata"]["validation"]["errors"]


def test_malformed_json_is_400(client):
    response = client.post(
        "/ekatra/transform", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["data"] is None


def test_smart_sync_and_legacy_routes(client):
    smart = client.post("/ekatra/transform/smart", json={"product_id": "P1", "title": "Mug"})
    sync = client.post("/ekatra/transform/sync", json={
        "id": "S1", "title": "Lamp", "currency": "INR", "image": "https://cdn.example.com/l.jpg"
    })
    legacy = client.post("/ekatra/transform/legacy", json=[1, 2])

    assert smart.status_code == 400
    assert smart.json()["metadata"]["dataType"] == "MIXED_STRUCTURE"
    assert sync.status_code == 200
    assert sync.json()["metadata"]["dataType"] == "SYNC_FORMAT"
    assert legacy.status_code == 400


def test_validate_route(client):
    valid = client.post("/ekatra/validate", json={"id": 1, "name": "Mug", "price": 2})
    invalid = client.post("/ekatra/validate", json={"name": "Mug"})

    assert valid.status_code == 200
    assert valid.json()["metadata"]["validation"]["valid"] is True
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Product validation failed"


def test_sample_route(client):
    body = client.get("/ekatra/test/sample").json()

    assert body["status"] == "success"
    assert [variant["color"] for variant in body["data"]["variants"]] == ["Blue", "Blue"]
    assert body["data"]["variants"][1]["variations"][0]["discountLabel"] == "25% OFF"


def test_unexpected_error_is_500_and_reported(client):
    with patch.object(sdk, "transform_flexible", side_effect=RuntimeError("boom")), \
            patch("ekatra.main.capture_transformation_error") as mock_capture:
        response = client.post("/ekatra/transform", json={"product_id": "P1"})

    assert response.status_code == 500
    assert response.json()["message"] == "Internal transformation error"
    mock_capture.assert_called_once()
    assert mock_capture.call_args.args[2] == "/ekatra/transform"


def test_overflowing_discount_is_not_sent_as_infinity(client):
    response = client.post(
        "/ekatra/transform", json={"product_id": "P1", "title": "T", "price": 10, "discount": "1e400"}
    )

    assert response.status_code == 200
    variation = response.json()["data"]["variants"][0]["variations"][0]
    assert variation["discount"] == 0.0
    assert variation["discountLabel"] == "1e400"


def test_unserializable_envelope_is_500(client):
    envelope = response.success({"productId": "P1", "score": float("inf")})

    with patch.object(sdk, "transform_flexible", return_value=envelope), \
            patch("ekatra.main.capture_transformation_error") as mock_capture:
        result = client.post("/ekatra/transform", json={"product_id": "P1"})

    assert result.status_code == 500
    assert result.json()["message"] == "Internal transformation error"
    mock_capture.assert_called_once()
