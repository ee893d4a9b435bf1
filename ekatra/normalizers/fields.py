"""
Field resolution over loosely-shaped JSON records.

Source catalogs name the same thing a dozen different ways. Every canonical
field is backed by an ordered tuple of candidate source keys; the resolver
picks the first one that carries a usable value.
"""
import math
import re
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional


def _freeze(table: Dict[str, Iterable[str]]) -> Mapping[str, tuple]:
    return MappingProxyType({target: tuple(keys) for target, keys in table.items()})


FLEXIBLE_FIELD_MAPPINGS = _freeze({
    "product_id": ["product_id", "id", "item_id", "sku", "productId"],
    "title": ["title", "name", "product_name", "product_title"],
    "description": ["description", "body_html", "product_description", "short_description", "meta_description"],
    "currency": ["currency", "currency_code", "currencyCode"],
    "url": ["existing_url", "existingProductUrl", "existingUrl", "url", "permalink", "link", "product_url"],
    "keywords": ["keywords", "searchKeywords", "product_keywords", "tags", "meta_keyword"],
    "country_code": ["countryCode", "country_code"],
    "offers": ["offers"],
    "specifications": ["specifications", "specs"],
    "variants": ["variants"],
    "variant_mrp": ["variant_mrp", "mrp", "compare_at_price", "regular_price", "original_price", "base_price"],
    "variant_selling_price": ["variant_selling_price", "selling_price", "sellingPrice", "price", "sale_price"],
    "variant_quantity": ["variant_quantity", "quantity", "stock_quantity", "inventory_quantity"],
    "price": ["price"],
})

VARIANT_FIELD_MAPPINGS = _freeze({
    "variant_id": ["id", "_id", "variant_id", "variantId"],
    "variant_name": ["variant_name", "variant_title", "variantName", "name", "title"],
    "color": ["color", "variant_color", "colour", "variantColor"],
    "size": ["size", "variant_size", "variantSize", "size_name"],
    "size_id": ["sizeId", "size_id"],
    "variant_mrp": ["variant_mrp", "mrp", "compare_at_price", "regular_price", "original_price", "base_price"],
    "variant_selling_price": ["variant_selling_price", "selling_price", "sellingPrice", "price", "sale_price"],
    "variant_quantity": ["variant_quantity", "quantity", "stock_quantity", "inventory_quantity"],
    "weight": ["weight", "variant_weight"],
    "thumbnail": ["thumbnail", "thumbnail_url", "thumbnailUrl"],
    "discount": ["discount", "discount_percent", "discountPercent"],
    "discount_label": ["discountLabel", "discount_label"],
    "variations": ["variations"],
})

LEGACY_PRODUCT_FIELD_MAPPINGS = _freeze({
    "product_id": ["productId", "id", "sku", "product_id", "item_id", "product_code"],
    "title": ["title", "name", "productName", "product_name", "item_name", "product_title"],
    "description": ["description", "desc", "details", "summary", "content", "product_desc"],
    "currency": ["currency", "curr", "currency_code"],
    "url": ["existingUrl", "existingProductUrl", "url", "productUrl", "product_url", "existing_url", "link"],
    "keywords": ["keywords", "searchKeywords", "search_keywords", "tags", "search_terms"],
    "handle": ["handle", "slug", "product_handle", "productHandle", "url_slug"],
    "country_code": ["countryCode", "country_code", "country", "origin_country"],
    "specifications": ["specifications", "specs_list", "spec_list", "product_specifications", "specification", "specs"],
    "offers": ["offers", "offer_list", "promotions", "offer"],
    "variants": ["variants", "product_variants", "options"],
    "sizes": ["sizes", "size_list", "available_sizes", "size_options"],
})

LEGACY_VARIANT_FIELD_MAPPINGS = _freeze({
    "variant_id": ["id", "variant_id", "variantId", "item_id"],
    "variant_name": ["name", "title", "variant_name", "variantName", "item_name"],
    "color": ["color", "colour", "variant_color", "variantColor", "item_color"],
    "size": ["size", "variant_size", "variantSize", "item_size", "size_name", "sizeName"],
    "size_id": ["sizeId", "size_id"],
    "variant_mrp": ["mrp", "originalPrice", "listPrice", "price_original", "original_price"],
    "variant_selling_price": ["sellingPrice", "price", "salePrice", "current_price", "sale_price"],
    "variant_quantity": ["quantity", "stock", "available", "inventory", "qty"],
    "weight": ["weight", "item_weight", "variant_weight"],
    "thumbnail": ["thumbnail", "thumb", "thumbnail_url", "thumb_url"],
    "discount": ["discountPercent", "discount", "discount_percent", "discount_percentage"],
    "discount_label": ["discountLabel", "discount_label"],
    "variations": ["variations", "size_variants", "sizeVariants"],
})

SPECIFICATION_FIELDS = _freeze({
    "key": ["key", "name", "title", "label", "spec_name"],
    "value": ["value", "val", "description", "spec_value", "content"],
})

OFFER_FIELDS = _freeze({
    "title": ["title", "name", "offer_title", "promotion_name"],
    "details": ["productOfferDetails", "details", "offer_details", "terms"],
})

OFFER_DETAIL_FIELDS = _freeze({
    "title": ["title", "name", "code", "offer_code", "promo_code"],
    "description": ["description", "desc", "details", "terms", "conditions"],
})

SIZE_FIELDS = _freeze({
    "id": ["id", "_id", "size_id", "sizeId"],
    "name": ["name", "size_name", "sizeName", "label", "display_name"],
})

SYNC_FIELD_MAPPINGS = _freeze({
    "product_id": [
        "productId", "product_id", "id", "item_id", "sku", "productCode", "product_code",
        "itemId", "productSKU", "product_sku",
    ],
    "title": [
        "title", "name", "product_name", "product_title", "productName", "item_name",
        "itemName", "productTitle", "label", "productLabel",
    ],
    "currency": ["currency", "currency_code", "currencyCode", "curr", "curr_code", "currency_symbol"],
    "image_url": [
        "imageUrl", "image_url", "image_urls", "imageUrls", "thumbnailUrl", "thumbnail_url",
        "images", "image", "photo", "photos", "picture", "pictures", "thumbnail", "thumb",
        "thumbUrl", "thumb_url", "mainImage", "main_image", "primaryImage", "primary_image",
        "featuredImage", "featured_image",
    ],
})

SMART_FIELD_MAPPINGS = _freeze({
    "product_id": ["product_id", "productId", "id"],
    "title": ["title"],
    "description": ["description"],
    "currency": ["currency"],
    "url": ["existing_url", "existingProductUrl", "existingUrl"],
    "country_code": ["countryCode", "country_code"],
    "offers": ["offers"],
    "specifications": ["specifications"],
})

SMART_KEYWORD_FIELDS = ("product_keywords", "keywords", "tags", "search_keywords", "searchKeywords")

IMAGE_FIELDS = (
    "image_urls", "imageUrls", "images", "media_gallery_entries", "media", "mediaList",
    "photos", "pictures", "image_url", "imageUrl", "image",
)

MEDIA_URL_KEYS = ("src", "file", "url", "playUrl", "image_url", "imageUrl")

NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?")


def is_present(value: Any) -> bool:
    """A value counts unless it is None, blank text or an empty collection."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple, dict, Mapping)):
        return len(value) > 0
    return True


def to_number(value: Any, default: float = 0.0) -> float:
    """
    Coerce a price-like value to float.

    Text is read as its first number once thousands separators are dropped, so
    "Rs. 999" is 999 and "-100" is -100. Callers clamp the sign where needed.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        match = NUMBER_PATTERN.search(value.replace(",", ""))
        if not match:
            return default
        value = match.group(0)
    if not isinstance(value, (int, float, str)):
        return default

    try:
        number = float(value)
    except (ValueError, OverflowError):
        return default
    return number if math.isfinite(number) else default


def to_quantity(value: Any) -> int:
    """Stock counts are whole and never negative; ``True`` means one in stock."""
    if isinstance(value, bool):
        return int(value)
    return max(0, int(to_number(value)))


def to_text(value: Any, default: str = "") -> str:
    if not is_present(value):
        return default
    if isinstance(value, (list, tuple, dict, Mapping)):
        return default
    return str(value).strip()


class FieldResolver:
    """
    Looks up canonical fields in a raw record.

    Candidates are tried in order with exact key matching first, then again
    with case-insensitive matching. A dotted candidate such as
    ``"product.pricing.mrp"`` walks nested mappings. Missing keys, wrong
    types and empty values all resolve to ``None``.
    """

    def resolve(self, record: Any, candidate_keys: Iterable[str]) -> Optional[Any]:
        if not isinstance(record, Mapping):
            return None

        candidates = tuple(candidate_keys)
        for fold_case in (False, True):
            for key in candidates:
                value = self._lookup(record, key, fold_case)
                if is_present(value):
                    return value
        return None

    def resolve_all(self, record: Any, table: Mapping[str, Iterable[str]]) -> Dict[str, Any]:
        """Resolve every target of a synonym table at once."""
        return {target: self.resolve(record, keys) for target, keys in table.items()}

    def _lookup(self, record: Mapping, key: str, fold_case: bool) -> Optional[Any]:
        value = self._get(record, key, fold_case)
        if is_present(value) or "." not in key:
            return value

        current = record
        for part in key.split("."):
            if not isinstance(current, Mapping):
                return None
            current = self._get(current, part, fold_case)
            if current is None:
                return None
        return current

    @staticmethod
    def _get(record: Mapping, key: str, fold_case: bool) -> Optional[Any]:
        if not fold_case:
            return record.get(key)

        lowered = key.lower()
        for existing_key, value in record.items():
            if isinstance(existing_key, str) and existing_key.lower() == lowered and is_present(value):
                return value
        return None
