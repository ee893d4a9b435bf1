"""
Required-field checks for the flexible transform path.
Runs on resolved field values, before any default is applied.
"""
from typing import Any, Mapping

from ekatra.models.results import ValidationResult
from ekatra.normalizers.fields import is_present

VARIANT_DATA_FIELDS = ("variant_mrp", "variants", "variant_selling_price", "price")
MINIMAL_FORMAT_FIELDS = ("description", "currency", "url")


class FlexibleValidator:

    def validate(self, fields: Mapping[str, Any]) -> ValidationResult:
        errors = []
        suggestions = []

        if not is_present(fields.get("product_id")):
            errors.append("Product ID is required")
            suggestions.append("Add a 'product_id' field (or 'id', 'sku', 'productId') to your data")

        if not is_present(fields.get("title")):
            errors.append("Product title is required")
            suggestions.append("Add a 'title' field (or 'name', 'product_name') to your data")

        if not self.has_variant_data(fields) and not self.is_minimal(fields):
            errors.append("No variant data found")
            suggestions.append(
                "Add 'variant_mrp' and 'variant_selling_price' fields, "
                "a 'variants' list or a 'price' field"
            )

        return ValidationResult(valid=not errors, errors=errors, suggestions=suggestions)

    @staticmethod
    def has_variant_data(fields: Mapping[str, Any]) -> bool:
        return any(is_present(fields.get(name)) for name in VARIANT_DATA_FIELDS)

    @staticmethod
    def is_minimal(fields: Mapping[str, Any]) -> bool:
        """A payload without description, currency and url gets a default zero-priced variant."""
        return not any(is_present(fields.get(name)) for name in MINIMAL_FORMAT_FIELDS)
