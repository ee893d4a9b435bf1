"""
Test the flexible transformer end to end.
Covers the documented scenarios and the common platform shapes.
"""
import itertools

import pytest

from ekatra.errors import InputTypeError, ValidationError
from ekatra.normalizers.flexible import FlexibleTransformer


def counter_ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def transformer():
    return FlexibleTransformer(default_currency="INR", id_factory=counter_ids())


def first_variation(envelope):
    return envelope.data["variants"][0]["variations"][0]


class TestScenarios:

    def test_computed_discount(self, transformer):
        envelope = transformer.transform(
            {"product_id": "P1", "title": "T", "variant_mrp": 100, "variant_selling_price": 80}
        )

        assert envelope.status == "success"
        assert first_variation(envelope)["discount"] == 20.0
        assert first_variation(envelope)["discountLabel"] is None
        assert envelope.metadata["dataType"] == "SIMPLE_SINGLE_VARIANT"
        assert envelope.metadata["canAutoTransform"] is True

    def test_text_discount_becomes_label(self, transformer):
        envelope = transformer.transform({
            "product_id": "P1", "title": "T", "variant_mrp": 100, "variant_selling_price": 80,
            "discount": "20% OFF"
        })

        assert first_variation(envelope)["discount"] == 20.0
        assert first_variation(envelope)["discountLabel"] == "20% OFF"

    def test_empty_object_rejected(self, transformer):
        envelope = transformer.transform({})

        assert envelope.status == "error"
        assert envelope.data is None
        assert "Product ID is required" in envelope.errors
        assert "Product title is required" in envelope.errors
        assert envelope.metadata["manualSetupRequired"] is True

    def test_zero_prices_accepted(self, transformer):
        envelope = transformer.transform(
            {"product_id": "P2", "title": "T2", "variant_mrp": 0, "variant_selling_price": 0}
        )

        assert envelope.status == "success"
        variation = first_variation(envelope)
        assert variation["discount"] == 0
        assert variation["availability"] is False

    def test_scalar_payload_never_raises(self, transformer):
        envelope = transformer.transform("not an object")

        assert envelope.status == "error"
        assert envelope.data is None
        assert envelope.errors == ["Product data must be a JSON object"]


def test_loose_price_text_gives_non_negative_prices(transformer):
    negative = transformer.transform(
        {"product_id": "P1", "title": "T", "variant_mrp": "-100", "variant_selling_price": -50}
    )
    prefixed = transformer.transform(
        {"product_id": "P2", "title": "T", "variant_mrp": "Rs. 999", "variant_selling_price": "Rs. 799"}
    )

    assert negative.status == "success"
    assert first_variation(negative)["mrp"] == 0.0
    assert first_variation(negative)["sellingPrice"] == 0.0
    assert prefixed.status == "success"
    assert first_variation(prefixed)["mrp"] == 999.0
    assert first_variation(prefixed)["sellingPrice"] == 799.0
    assert first_variation(prefixed)["discount"] == 20.02


def test_transform_is_deterministic_with_fixed_ids():
    """Same input and the same id sequence give the same output."""
    payload = {
        "product_id": "P1",
        "title": "Tee",
        "keywords": "tee,cotton",
        "image_urls": "a.jpg,b.png",
        "variants": [
            {"variant_name": "M / Blue", "variant_mrp": 999, "variant_selling_price": 799, "variant_quantity": 3},
            {"variant_name": "L / Blue", "variant_mrp": 999, "variant_selling_price": 749},
        ],
    }

    first = FlexibleTransformer(id_factory=counter_ids()).transform_data(payload)
    second = FlexibleTransformer(id_factory=counter_ids()).transform_data(payload)

    assert first == second


def without_ids(product):
    """Product dict with minted ids blanked out."""
    data = dict(product)
    data["sizes"] = [size["name"] for size in product["sizes"]]
    data["variants"] = [
        dict(variant, id=None, variations=[
            dict(variation, sizeId=None, variantId=None) for variation in variant["variations"]
        ])
        for variant in product["variants"]
    ]
    return data


def test_canonical_output_transforms_to_itself(transformer):
    """Feeding a transformed product back in yields the same product, ids aside."""
    first = transformer.transform_data({
        "product_id": "P1",
        "title": "Tee",
        "description": "Cotton tee",
        "url": "https://shop.example.com/tee",
        "keywords": "tee,cotton",
        "countryCode": "IN",
        "image_urls": "https://cdn.example.com/a.jpg,https://cdn.example.com/b.png",
        "variants": [
            {"variant_name": "M / Blue", "variant_mrp": 999, "variant_selling_price": 799, "variant_quantity": 3},
            {"variant_name": "L / Blue", "variant_mrp": 999, "variant_selling_price": 749, "discount": "25% OFF"},
        ],
    })

    envelope = transformer.transform(first)

    assert envelope.metadata["dataType"] == "COMPLEX_STRUCTURE"
    assert without_ids(envelope.data) == without_ids(first)


def test_every_variation_references_a_declared_size(transformer):
    data = transformer.transform_data({
        "product_id": "P1",
        "title": "Tee",
        "variants": [
            {"variant_name": "Red", "size": "M", "price": 10},
            {"variant_name": "Blue", "size": "M", "price": 10},
        ],
    })

    size_ids = [size["id"] for size in data["sizes"]]
    assert len(size_ids) == len(set(size_ids)) == 2
    for variant in data["variants"]:
        for variation in variant["variations"]:
            assert variation["sizeId"] in size_ids
            assert variation["variantId"] == variant["id"]


def test_availability_tracks_quantity(transformer):
    data = transformer.transform_data({
        "product_id": "P1",
        "title": "Tee",
        "variants": [
            {"variant_name": "In stock", "price": 10, "quantity": "4"},
            {"variant_name": "Sold out", "price": 10, "quantity": 0},
        ],
    })

    availability = [variant["variations"][0]["availability"] for variant in data["variants"]]
    assert availability == [True, False]


def test_media_list_from_comma_separated_urls(transformer):
    data = transformer.transform_data(
        {"product_id": "P1", "title": "Tee", "price": 10, "image_urls": "a.jpg, b.png"}
    )

    media = data["variants"][0]["mediaList"]
    assert [m["playUrl"] for m in media] == ["a.jpg", "b.png"]
    assert [m["mimeType"] for m in media] == ["image/jpeg", "image/png"]
    assert [m["weight"] for m in media] == [0, 1]
    assert data["variants"][0]["thumbnail"] == "a.jpg"


def test_shopify_product(transformer):
    payload = {
        "product": {
            "id": 987,
            "title": "Logo Tee",
            "body_html": "<p>Soft tee</p>",
            "tags": "tee, logo",
            "variants": [
                {"id": 1, "title": "Small / Red", "price": "19.99", "compare_at_price": "24.99",
                 "inventory_quantity": 4},
                {"id": 2, "title": "Large / Red", "price": "19.99", "compare_at_price": "24.99",
                 "inventory_quantity": 0},
            ],
            "images": [{"src": "https://cdn.example.com/tee.jpg"}],
        }
    }

    envelope = transformer.transform(payload)

    assert envelope.status == "success"
    assert envelope.metadata["dataType"] == "SIMPLE_MULTI_VARIANT"
    data = envelope.data
    assert data["productId"] == "987"
    assert data["description"] == "<p>Soft tee</p>"
    assert data["searchKeywords"] == "tee, logo"
    assert data["handle"] == "logo-tee"
    assert [variant["color"] for variant in data["variants"]] == ["Red", "Red"]
    assert [size["name"] for size in data["sizes"]] == ["Small", "Large"]
    assert first_variation(envelope)["discount"] == 20.01
    assert data["variants"][1]["mediaList"][0]["playUrl"] == "https://cdn.example.com/tee.jpg"


def test_woocommerce_product(transformer):
    payload = {
        "id": 55,
        "name": "Ceramic Mug",
        "permalink": "https://shop.example.com/product/mug",
        "regular_price": "20",
        "sale_price": "15",
        "price": "15",
        "stock_quantity": 7,
        "tags": [{"id": 1, "name": "kitchen"}, {"id": 2, "name": "mug"}],
        "images": [{"src": "https://cdn.example.com/mug.png"}],
    }

    data = transformer.transform_data(payload)

    assert data["title"] == "Ceramic Mug"
    assert data["existingProductUrl"] == "https://shop.example.com/product/mug"
    assert data["searchKeywords"] == "kitchen,mug"
    variation = data["variants"][0]["variations"][0]
    assert variation["mrp"] == 20.0
    assert variation["sellingPrice"] == 15.0
    assert variation["discount"] == 25.0
    assert variation["quantity"] == 7


def test_magento_product(transformer):
    payload = {
        "sku": "MG-1",
        "name": "Leather Bag",
        "price": 50,
        "custom_attributes": [
            {"attribute_code": "description", "value": "Full grain leather"},
            {"attribute_code": "meta_keyword", "value": "bag,leather"},
        ],
        "media_gallery_entries": [{"file": "/b/a/bag.jpg"}],
    }

    data = transformer.transform_data(payload)

    assert data["productId"] == "MG-1"
    assert data["description"] == "Full grain leather"
    assert data["searchKeywords"] == "bag,leather"
    assert data["variants"][0]["mediaList"][0]["playUrl"] == "/b/a/bag.jpg"
    assert data["variants"][0]["variations"][0]["mrp"] == 50.0


def test_minimal_payload_gets_default_variant(transformer):
    envelope = transformer.transform({"product_id": "P1", "title": "Mug"})

    assert envelope.status == "success"
    data = envelope.data
    assert data["currency"] == "INR"
    assert data["variants"][0]["color"] == "unknown"
    variation = data["variants"][0]["variations"][0]
    assert variation["size"] == "freestyle"
    assert variation["sellingPrice"] == 0.0
    assert data["sizes"] == [{"id": variation["sizeId"], "name": "freestyle"}]


def test_wrapped_and_variants_only_payloads(transformer):
    wrapped = transformer.transform_data(
        {"success": True, "product_details": {"product_id": "W1", "title": "Wrapped", "price": 5}}
    )
    variants_only = transformer.transform_data(
        {"variants": [{"product_id": "V1", "title": "From variant", "variant_selling_price": 9}]}
    )

    assert wrapped["productId"] == "W1"
    assert variants_only["productId"] == "V1"
    assert variants_only["title"] == "From variant"


def test_fail_fast_entry_points(transformer):
    with pytest.raises(InputTypeError):
        transformer.transform_data(["not", "an", "object"])

    with pytest.raises(ValidationError) as exc_info:
        transformer.transform_product({"title": "No id", "price": 1})

    assert exc_info.value.errors == ["Product ID is required"]


def test_validate_and_can_auto_transform(transformer):
    assert transformer.can_auto_transform({"id": 1, "name": "Mug", "price": 3})
    assert not transformer.can_auto_transform({"name": "Mug"})
    assert transformer.validate(42).errors == ["Product data must be a JSON object"]


def test_custom_synonym_table():
    """Alternate synonym sets can be injected without touching the defaults."""
    mappings = {"product_id": ("code",), "title": ("label",), "price": ("amount",)}
    transformer = FlexibleTransformer(field_mappings=mappings, id_factory=counter_ids())

    product = transformer.transform_product({"code": "C-1", "label": "Custom", "amount": 12})

    assert product.product_id == "C-1"
    assert product.title == "Custom"
    assert transformer.field_mappings_table() == {
        "product_id": ["code"], "title": ["label"], "price": ["amount"]
    }
