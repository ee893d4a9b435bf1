"""
Test the minimal catalog sync path.
"""
import itertools

import pytest

from ekatra.errors import InputTypeError, ValidationError
from ekatra.normalizers.sync import SyncProductTransformer


@pytest.fixture
def sync():
    counter = itertools.count(1)
    return SyncProductTransformer(id_factory=lambda: f"id-{next(counter)}")


LAMP = {
    "productId": "S1",
    "name": "Desk Lamp",
    "currency": "inr",
    "images": [{"src": "https://cdn.example.com/lamp.png"}],
}


def test_sync_success_envelope(sync):
    envelope = sync.transform(LAMP)

    assert envelope.status == "success"
    assert envelope.message == "Product synced successfully"
    assert envelope.metadata["dataType"] == "SYNC_FORMAT"

    data = envelope.data
    assert data["productId"] == "S1"
    assert data["title"] == "Desk Lamp"
    assert data["currency"] == "inr"
    assert data["handle"] == "desk-lamp"
    assert data["searchKeywords"] == ""
    assert data["offers"] == [{"productOfferDetails": [{}]}]


def test_sync_default_variant(sync):
    data = sync.transform_data(LAMP)

    variant = data["variants"][0]
    assert variant["weight"] == 1
    assert variant["thumbnail"] == "https://cdn.example.com/lamp.png"
    assert variant["mediaList"][0]["mimeType"] == "image/png"

    variation = variant["variations"][0]
    assert variation["mrp"] == 0.0
    assert variation["discountLabel"] == ""
    assert variation["availability"] is False
    assert data["sizes"] == [{"id": variation["sizeId"], "name": "freestyle"}]


def test_missing_sync_fields(sync):
    envelope = sync.transform({"title": "Only a title"})

    assert envelope.status == "error"
    assert envelope.errors == ["Product ID is required", "Currency is required", "Image URL is required"]

    with pytest.raises(ValidationError) as exc_info:
        sync.transform_data({"title": "Only a title"})
    assert len(exc_info.value.errors) == 3


def test_non_object_payload(sync):
    assert sync.transform([LAMP]).status == "error"

    with pytest.raises(InputTypeError):
        sync.transform_data("nope")


def test_result_wrapper_unwrapped(sync):
    data = sync.transform_data({"success": True, "data": LAMP})

    assert data["productId"] == "S1"


def test_first_image_variants(sync):
    assert sync.first_image(" , a.jpg, b.jpg") == "a.jpg"
    assert sync.first_image({"url": "c.jpg"}) == "c.jpg"
    assert sync.first_image([{"alt": "none"}, "d.jpg"]) == "d.jpg"
    assert sync.first_image(7) == ""
