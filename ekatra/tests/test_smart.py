"""
Test shape-directed transformation.
"""
import itertools
from unittest.mock import patch

import pytest

from ekatra.errors import InputTypeError, NormalizationError
from ekatra.normalizers.smart import SmartTransformer
from ekatra.normalizers.structure import DataType


@pytest.fixture
def smart():
    counter = itertools.count(1)
    return SmartTransformer(default_currency="INR", id_factory=lambda: f"id-{next(counter)}")


def test_single_variant_with_list_keywords(smart):
    raw = {
        "product_id": "P1",
        "title": "Mug",
        "currency": "usd",
        "keywords": "mug, kitchen",
        "tags": ["kitchen", "gift"],
        "variant_name": "Default",
        "variant_mrp": 20,
        "variant_selling_price": 15,
    }

    product = smart.transform_simple(raw, DataType.SIMPLE_SINGLE_VARIANT)

    assert product.currency == "USD"
    assert product.search_keywords == ["mug", "kitchen", "gift"]
    assert product.variations[0].discount == 25.0


def test_data_type_accepted_as_string(smart):
    product = smart.transform_simple(
        {"product_id": "P1", "title": "Tee", "variants": [{"variant_name": "M / Red", "price": 5}]},
        "SIMPLE_MULTI_VARIANT"
    )

    assert product.variants[0].color == "Red"
    assert product.sizes[0].name == "M"


def test_complex_structure_keeps_ids(smart):
    raw = {
        "productId": "P1",
        "title": "Tee",
        "variants": [{
            "id": "v-blue",
            "name": "Blue",
            "mediaList": [{"playUrl": "https://cdn.example.com/blue.jpg", "mimeType": "image/jpeg"}],
            "variations": [{"sizeId": "s-m", "size": "M", "mrp": 100, "sellingPrice": 90, "quantity": 1}],
        }],
        "sizes": [{"id": "s-m", "name": "M"}],
    }

    product = smart.transform_simple(raw, smart.detect_data_type(raw))

    assert product.product_id == "P1"
    assert product.variants[0].id == "v-blue"
    assert product.variants[0].media_list[0].play_url == "https://cdn.example.com/blue.jpg"
    assert product.variations[0].size_id == "s-m"
    assert product.size_ids == ["s-m"]


def test_mixed_structure_links_sizes_by_name(smart):
    """Declared sizes are shared by name; undeclared names are added."""
    raw = {
        "product_id": "P1",
        "title": "Tee",
        "sizes": [{"id": "S-M", "name": "M"}],
        "variants": [
            {"sku": "a", "size": "M", "price": 10},
            {"sku": "b", "size": "M", "price": 10},
            {"sku": "c", "size": "XL", "price": 10},
        ],
    }
    assert smart.detect_data_type(raw) == DataType.MIXED_STRUCTURE

    with patch("ekatra.normalizers.variants.logger") as mock_logger:
        product = smart.transform_simple(raw, DataType.MIXED_STRUCTURE)

    size_ids = [variation.size_id for variation in product.variations]
    assert size_ids[0] == size_ids[1] == "S-M"
    assert [size.name for size in product.sizes] == ["M", "XL"]
    assert size_ids[2] == product.sizes[1].id
    mock_logger.warning.assert_called_once()


def test_mixed_structure_never_repeats_variant_ids(smart):
    raw = {
        "product_id": "P1",
        "title": "Tee",
        "sizes": [{"id": "S-M", "name": "M"}],
        "variants": [
            {"id": "v1", "name": "A", "variations": [{"size": "M", "price": 10}]},
            {"id": "v1", "name": "B", "variations": [{"size": "M", "price": 10}]},
        ],
    }

    product = smart.transform_simple(raw, DataType.MIXED_STRUCTURE)

    variant_ids = [variant.id for variant in product.variants]
    assert variant_ids[0] == "v1"
    assert len(set(variant_ids)) == 2
    for variant in product.variants:
        assert [v.variant_id for v in variant.variations] == [variant.id]


def test_mixed_structure_without_declared_sizes(smart):
    product = smart.transform_simple({"product_id": "P1", "title": "Tee"}, DataType.MIXED_STRUCTURE)

    assert len(product.variants) == 1
    assert product.size_ids == [product.variations[0].size_id]


def test_rejects_bad_input(smart):
    with pytest.raises(InputTypeError):
        smart.transform_simple("nope", DataType.MIXED_STRUCTURE)

    with pytest.raises(NormalizationError):
        smart.transform_simple({"product_id": "P1"}, "SOMETHING_ELSE")


def test_merge_keywords_deduplicates(smart):
    raw = {"product_keywords": ["a", "b"], "keywords": "b,c", "searchKeywords": [{"name": "d"}]}

    assert smart.merge_keywords(raw) == ["a", "b", "c", "d"]
