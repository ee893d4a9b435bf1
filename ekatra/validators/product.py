"""
Structural validation of canonical products.
"""
import re
from typing import List
from urllib.parse import urlsplit

from ekatra.config import config
from ekatra.models.product import CanonicalProduct, CanonicalVariant
from ekatra.models.results import ValidationResult

COUNTRY_CODE_PATTERN = re.compile(r'^[A-Za-z]{2}$')


def is_valid_url(value: str) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    parts = urlsplit(value.strip())
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class VariantValidator:
    """Checks one variant and its variations. Messages are prefixed with the variant's position."""

    def validate(self, variant: CanonicalVariant, position: int = 1) -> List[str]:
        prefix = f"Variant {position}"
        errors = []

        if not variant.name or not variant.name.strip():
            errors.append(f"{prefix}: name is required")

        if variant.weight < 0:
            errors.append(f"{prefix}: weight cannot be negative")

        if variant.thumbnail and not is_valid_url(variant.thumbnail):
            errors.append(f"{prefix}: thumbnail must be a valid URL")

        if not variant.media_list:
            errors.append(f"{prefix}: at least one image or media entry is required")

        for index, media in enumerate(variant.media_list, start=1):
            if not is_valid_url(media.play_url):
                errors.append(f"{prefix}: media {index} must have a valid URL")
            if not media.media_type:
                errors.append(f"{prefix}: media {index} is missing mediaType")
            if not media.mime_type:
                errors.append(f"{prefix}: media {index} is missing mimeType")

        if not variant.variations:
            errors.append(f"{prefix}: at least one variation is required")

        for index, variation in enumerate(variant.variations, start=1):
            label = f"{prefix}, variation {index}"
            if not variation.size_id:
                errors.append(f"{label}: sizeId is required")
            if variation.quantity < 0:
                errors.append(f"{label}: quantity cannot be negative")
            if variation.mrp <= 0:
                errors.append(f"{label}: MRP must be greater than 0")
            if variation.selling_price <= 0:
                errors.append(f"{label}: selling price must be greater than 0")
            if variation.mrp > 0 and variation.selling_price > variation.mrp:
                errors.append(f"{label}: selling price cannot be greater than MRP")
            if not 0 <= variation.discount <= 100:
                errors.append(f"{label}: discount must be between 0 and 100")

        return errors


class ProductValidator:
    """
    Validates a CanonicalProduct before it is handed to the catalog.

    Size references are checked too: every variation must point at exactly
    one declared size.
    """

    def __init__(self, supported_currencies: List[str] = None, variant_validator: VariantValidator = None):
        self.supported_currencies = list(supported_currencies or config.SUPPORTED_CURRENCIES)
        self.variant_validator = variant_validator or VariantValidator()

    def validate(self, product: CanonicalProduct) -> ValidationResult:
        errors = []
        suggestions = []

        def require(present: bool, message: str, hint: str):
            if not present:
                errors.append(message)
                suggestions.append(hint)

        require(bool(product.product_id and product.product_id.strip()),
                "Product ID is required", "Set 'productId' (or 'id', 'sku')")
        require(bool(product.title and product.title.strip()),
                "Product title is required", "Set 'title' (or 'name')")
        require(bool(product.description and product.description.strip()),
                "Product description is required", "Set 'description'")

        if not product.existing_product_url:
            errors.append("Existing URL is required")
            suggestions.append("Set 'existingUrl' (or 'url', 'product_url')")
        elif not is_valid_url(product.existing_product_url):
            errors.append("Existing URL must be a valid URL")
            suggestions.append("Use an absolute http(s) URL for 'existingUrl'")

        keywords = product.search_keywords
        if isinstance(keywords, str):
            keywords = [term for term in keywords.split(",") if term.strip()]
        require(bool(keywords), "At least one keyword is required", "Set 'keywords' (or 'tags')")

        if product.currency not in self.supported_currencies:
            errors.append(f"Currency must be one of: {', '.join(self.supported_currencies)}")
            suggestions.append("Use a supported currency code for 'currency'")

        if product.country_code is not None and not COUNTRY_CODE_PATTERN.match(product.country_code):
            errors.append("Country code must be a 2-letter code")
            suggestions.append("Use an ISO 3166-1 alpha-2 code such as 'IN' for 'countryCode'")

        for index, offer in enumerate(product.offers, start=1):
            if not isinstance(offer, dict) or not offer.get("title"):
                errors.append(f"Offer {index}: title is required")

        for index, specification in enumerate(product.specifications, start=1):
            if not isinstance(specification, dict) or not specification.get("key") \
                    or specification.get("value") in (None, ""):
                errors.append(f"Specification {index}: key and value are required")

        require(bool(product.variants), "At least one variant is required", "Add a 'variants' list")

        for position, variant in enumerate(product.variants, start=1):
            errors.extend(self.variant_validator.validate(variant, position))

        errors.extend(self._size_reference_errors(product))

        return ValidationResult(valid=not errors, errors=errors, suggestions=suggestions)

    @staticmethod
    def _size_reference_errors(product: CanonicalProduct) -> List[str]:
        errors = []
        size_ids = product.size_ids
        for size_id in sorted(set(size_ids)):
            if size_ids.count(size_id) > 1:
                errors.append(f"Size id {size_id} is declared more than once")

        declared = set(size_ids)
        for variation in product.variations:
            if variation.size_id and variation.size_id not in declared:
                errors.append(f"Variation of variant {variation.variant_id} references unknown size {variation.size_id}")
        return errors
