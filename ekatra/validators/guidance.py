"""
Guided validation for the smart transform path.

Besides errors, every problem carries a suggestion and a concrete fix the
integrator can paste into their payload.
"""
from typing import Any, Dict, List, Mapping

from ekatra.config import config
from ekatra.models.results import ValidationResult
from ekatra.normalizers.fields import FieldResolver

PRODUCT_ID_FIELDS = ("product_id", "productId", "id")
URL_FIELDS = ("existing_url", "existingUrl", "existingProductUrl")
VARIANT_FIELDS = ("variants", "variant_name")
KEYWORD_FIELDS = ("keywords", "product_keywords", "searchKeywords", "tags")


class GuidanceValidator:

    def __init__(self, supported_currencies: List[str] = None, resolver: FieldResolver = None):
        self.supported_currencies = list(supported_currencies or config.SUPPORTED_CURRENCIES)
        self.resolver = resolver or FieldResolver()

    def validate_with_guidance(self, data: Mapping[str, Any]) -> ValidationResult:
        errors = []
        suggestions = []
        fixes = []

        def require(candidates, label, field_name, example):
            if self.resolver.resolve(data, candidates) is None:
                errors.append(f"{label} is required")
                suggestions.append(f"Add '{field_name}' field to your data")
                fixes.append(f"Fix: add \"{field_name}\": {example} to your payload")

        supported = ", ".join(self.supported_currencies)

        require(PRODUCT_ID_FIELDS, "Product ID", "product_id", '"YOUR_PRODUCT_ID"')
        require(("title",), "Product title", "title", '"Your Product Title"')
        require(("currency",), "Currency", "currency", f'"{config.DEFAULT_CURRENCY}" (or {supported})')
        require(("description",), "Product description", "description", '"Your product description"')
        require(URL_FIELDS, "Existing URL", "existing_url", '"https://your-site.com/product"')

        if not self.has_variant_data(data):
            errors.append("No variant data found")
            suggestions.append(
                "Add 'variant_name', 'variant_mrp' and 'variant_selling_price' fields "
                "or a 'variants' list of variant objects"
            )
            fixes.append("Fix: add variant data or build the variants manually")

        if self.resolver.resolve(data, KEYWORD_FIELDS) is None:
            errors.append("At least one keyword is required")
            suggestions.append("Add 'keywords' field to your data")
            fixes.append('Fix: add "keywords": ["keyword1", "keyword2"] to your payload')

        currency = self.resolver.resolve(data, ("currency",))
        if currency is not None and str(currency).strip().upper() not in self.supported_currencies:
            errors.append(f"Currency must be one of: {supported}")
            suggestions.append("Use a supported currency code")
            fixes.append(f"Fix: change \"currency\": \"{currency}\" to one of: {supported}")

        return ValidationResult(
            valid=not errors,
            errors=errors,
            suggestions=suggestions,
            fix_instructions=fixes
        )

    def can_auto_transform(self, data: Mapping[str, Any]) -> bool:
        """Id, title, currency and some variant data are enough to build a product."""
        return (
            self.resolver.resolve(data, PRODUCT_ID_FIELDS) is not None
            and self.resolver.resolve(data, ("title",)) is not None
            and self.resolver.resolve(data, ("currency",)) is not None
            and self.has_variant_data(data)
        )

    def has_variant_data(self, data: Mapping[str, Any]) -> bool:
        return self.resolver.resolve(data, VARIANT_FIELDS) is not None

    @staticmethod
    def supported_formats() -> Dict[str, Dict[str, Any]]:
        return {
            "SIMPLE_SINGLE_VARIANT": {
                "description": "Flat product with variant_* fields",
                "required": ["product_id", "title", "variant_name", "variant_mrp", "variant_selling_price"],
                "autoTransform": True,
            },
            "SIMPLE_MULTI_VARIANT": {
                "description": "Product with a list of flat variants",
                "required": ["product_id", "title", "variants[].variant_name"],
                "autoTransform": True,
            },
            "COMPLEX_STRUCTURE": {
                "description": "Variants that already carry variations and mediaList",
                "required": ["productId", "title", "variants[].variations", "sizes"],
                "autoTransform": True,
            },
            "MIXED_STRUCTURE": {
                "description": "Anything else; variants are reshaped and sizes linked by name",
                "required": ["product_id", "title"],
                "autoTransform": True,
            },
        }
