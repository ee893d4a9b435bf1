"""
Flexible transformation of arbitrary catalog payloads.

Handles Shopify, WooCommerce, Magento and generic shapes through synonym
tables instead of per-platform code paths. searchKeywords is emitted as a
comma-joined string on this path.
"""
from typing import Any, Callable, Dict, Mapping, Tuple

from ekatra import response
from ekatra.errors import InputTypeError, ValidationError
from ekatra.logger import logger
from ekatra.models.product import CanonicalProduct
from ekatra.models.results import ValidationResult
from ekatra.normalizers.fields import (
    FLEXIBLE_FIELD_MAPPINGS,
    VARIANT_FIELD_MAPPINGS,
    FieldResolver,
    is_present,
)
from ekatra.normalizers.identifiers import generate_id
from ekatra.normalizers.media import MediaNormalizer
from ekatra.normalizers.product import KEYWORDS_AS_STRING, ProductAssembler
from ekatra.normalizers.structure import DataType, StructureDetector
from ekatra.normalizers.variants import VariantReshaper
from ekatra.response import ResponseEnvelope
from ekatra.validators.flexible import FlexibleValidator

INPUT_TYPE_MESSAGE = "Product data must be a JSON object"
WRAPPER_KEYS = ("product_details", "product")


class FlexibleTransformer:

    def __init__(self, field_mappings: Mapping[str, tuple] = FLEXIBLE_FIELD_MAPPINGS,
                 variant_mappings: Mapping[str, tuple] = VARIANT_FIELD_MAPPINGS,
                 mime_probe=None, default_currency: str = None,
                 id_factory: Callable[[], str] = generate_id):
        self.field_mappings = field_mappings
        self.resolver = FieldResolver()
        self.detector = StructureDetector(self.resolver)
        self.media = MediaNormalizer(mime_probe, resolver=self.resolver)
        self.reshaper = VariantReshaper(
            variant_mappings, media=self.media, resolver=self.resolver, id_factory=id_factory
        )
        self.assembler = ProductAssembler(KEYWORDS_AS_STRING, default_currency, id_factory)
        self.validator = FlexibleValidator()

    def transform(self, raw: Any) -> ResponseEnvelope:
        """Transform any payload into an envelope. Never raises for bad input."""
        try:
            data, fields, validation = self._prepare(raw)
        except InputTypeError as e:
            rejected = ValidationResult(
                valid=False,
                errors=[str(e)],
                suggestions=["Send the product as a JSON object such as {\"product_id\": ..., \"title\": ...}"]
            )
            return response.validation_error(rejected.to_dict(), "Product transformation failed")

        if not validation.valid:
            return response.validation_error(validation.to_dict(), "Product transformation failed")

        data_type, product = self._build(data, fields)
        return response.success(
            product.to_dict(),
            {
                "validation": validation.to_dict(),
                "dataType": data_type.value,
                "canAutoTransform": True,
                "manualSetupRequired": False
            },
            "Product transformed successfully"
        )

    def transform_data(self, raw: Any) -> Dict[str, Any]:
        """
        Transform and return only the product dict.

        Raises:
            InputTypeError: If ``raw`` is not a JSON object
            ValidationError: If required fields are missing
        """
        return self.transform_product(raw).to_dict()

    def transform_product(self, raw: Any) -> CanonicalProduct:
        data, fields, validation = self._prepare(raw)
        if not validation.valid:
            raise ValidationError(" ".join(validation.errors), validation.errors)
        return self._build(data, fields)[1]

    def validate(self, raw: Any) -> ValidationResult:
        try:
            return self._prepare(raw)[2]
        except InputTypeError as e:
            return ValidationResult(valid=False, errors=[str(e)], suggestions=[])

    def can_auto_transform(self, raw: Any) -> bool:
        return self.validate(raw).valid

    def resolve_fields(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        fields = self.resolver.resolve_all(data, self.field_mappings)

        # Magento keeps description and meta keywords in custom_attributes
        attributes = data.get("custom_attributes")
        if isinstance(attributes, list):
            for attribute in attributes:
                if not isinstance(attribute, Mapping):
                    continue
                code = attribute.get("attribute_code")
                if code == "description" and not is_present(fields.get("description")):
                    fields["description"] = attribute.get("value")
                elif code == "meta_keyword" and not is_present(fields.get("keywords")):
                    fields["keywords"] = attribute.get("value")

        return fields

    @staticmethod
    def unwrap(data: Mapping[str, Any]) -> Mapping[str, Any]:
        """Strip API envelopes like {"success": true, "product_details": {...}}."""
        for key in WRAPPER_KEYS:
            if isinstance(data.get(key), Mapping):
                return data[key]

        variants = data.get("variants")
        if isinstance(variants, list) and variants and "title" not in data:
            # Variants-only response: the first variant carries the product fields
            first = variants[0] if isinstance(variants[0], Mapping) else {}
            merged = dict(data)
            merged.update(first)
            return merged

        return data

    def _prepare(self, raw: Any) -> Tuple[Mapping[str, Any], Dict[str, Any], ValidationResult]:
        if not isinstance(raw, Mapping):
            logger.warning(f"Rejected non-object payload of type {type(raw).__name__}")
            raise InputTypeError(INPUT_TYPE_MESSAGE)

        data = self.unwrap(raw)
        fields = self.resolve_fields(data)
        validation = self.validator.validate(fields)
        if not validation.valid:
            logger.warning(
                "Flexible payload failed validation",
                extra={"extra": {"errors": validation.errors, "keys": sorted(str(key) for key in data)}}
            )
        return data, fields, validation

    def _build(self, data: Mapping[str, Any], fields: Dict[str, Any]) -> Tuple[DataType, CanonicalProduct]:
        data_type = self.detector.classify(data)
        reshaped = self.reshaper.reshape(data_type, data)
        product = self.assembler.assemble(fields, reshaped)

        logger.info(
            f"Transformed product {product.product_id}",
            extra={"extra": {"data_type": data_type.value, "variants": len(product.variants)}}
        )
        return data_type, product

    def field_mappings_table(self) -> Dict[str, list]:
        return {target: list(keys) for target, keys in self.field_mappings.items()}
