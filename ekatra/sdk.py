"""
Public SDK facade.

Every method is a thin call into the normalization engine; the engine
itself holds no state between calls.
"""
from typing import Any, Dict, Mapping, Optional, Union

from ekatra import response
from ekatra.config import Config, config as default_config
from ekatra.errors import InputTypeError, NormalizationError, ValidationError
from ekatra.logger import logger
from ekatra.models.product import CanonicalProduct
from ekatra.models.results import ValidationResult
from ekatra.normalizers.fields import LEGACY_PRODUCT_FIELD_MAPPINGS, LEGACY_VARIANT_FIELD_MAPPINGS
from ekatra.normalizers.flexible import FlexibleTransformer
from ekatra.normalizers.legacy import ProductMapper
from ekatra.normalizers.media import NullMimeProbe
from ekatra.normalizers.smart import SmartTransformer
from ekatra.normalizers.structure import DataType
from ekatra.normalizers.sync import SyncProductTransformer
from ekatra.response import ResponseEnvelope
from ekatra.services.mime_probe import HttpMimeProbe
from ekatra.validators.guidance import GuidanceValidator
from ekatra.validators.product import ProductValidator

SUPPORTED_API_FORMATS = {
    "shopify": "Shopify API format (variants array, images array)",
    "woocommerce": "WooCommerce API format (tags array, pricing)",
    "magento": "Magento API format (custom_attributes)",
    "generic": "Generic e-commerce format",
    "minimal": "Minimal format (id, name, price only)"
}


class EkatraSDK:

    def __init__(self, settings: Config = None, mime_probe=None):
        self.config = settings or default_config
        if mime_probe is None:
            mime_probe = HttpMimeProbe(self.config.MIME_PROBE_TIMEOUT) if self.config.MIME_PROBE_ENABLED \
                else NullMimeProbe()
        self.mime_probe = mime_probe

        currency = self.config.DEFAULT_CURRENCY
        self.flexible = FlexibleTransformer(mime_probe=mime_probe, default_currency=currency)
        self.smart = SmartTransformer(mime_probe=mime_probe, default_currency=currency)
        self.sync = SyncProductTransformer(mime_probe=mime_probe)
        self.product_validator = ProductValidator(self.config.SUPPORTED_CURRENCIES)
        self.mapper = ProductMapper(
            mime_probe=mime_probe, default_currency=currency, validator=self.product_validator
        )
        self.guidance = GuidanceValidator(self.config.SUPPORTED_CURRENCIES)

    # Flexible path

    def transform_flexible(self, raw: Any) -> ResponseEnvelope:
        return self.flexible.transform(raw)

    def transform_flexible_data(self, raw: Any) -> Dict[str, Any]:
        return self.flexible.transform_data(raw)

    def can_auto_transform_flexible(self, raw: Any) -> bool:
        return self.flexible.can_auto_transform(raw)

    # Smart path

    def transform_simple(self, raw: Any, data_type: Union[DataType, str]) -> CanonicalProduct:
        return self.smart.transform_simple(raw, data_type)

    def smart_transform_product(self, raw: Any) -> ResponseEnvelope:
        """Validate with guidance, detect the shape and transform accordingly."""
        if not isinstance(raw, Mapping):
            return response.transformation_error("Product data must be a JSON object")

        validation = self.guidance.validate_with_guidance(raw)
        data_type = self.smart.detect_data_type(raw)

        if not validation.valid:
            return response.validation_error(
                validation.to_dict(),
                "Product validation failed",
                {"dataType": data_type.value}
            )

        try:
            product = self.smart.transform_simple(raw, data_type)
        except NormalizationError as e:
            logger.error(f"Smart transform failed: {e}")
            return response.transformation_error(str(e), {"dataType": data_type.value})

        return response.success(
            product.to_dict(),
            {
                "validation": validation.to_dict(),
                "dataType": data_type.value,
                "canAutoTransform": True,
                "manualSetupRequired": False,
                "autoTransformed": data_type in (DataType.SIMPLE_SINGLE_VARIANT, DataType.SIMPLE_MULTI_VARIANT)
            },
            "Product transformed successfully"
        )

    def validate_with_guidance(self, raw: Any) -> ValidationResult:
        if not isinstance(raw, Mapping):
            return ValidationResult(valid=False, errors=["Product data must be a JSON object"])
        return self.guidance.validate_with_guidance(raw)

    def can_auto_transform(self, raw: Any) -> bool:
        return isinstance(raw, Mapping) and self.guidance.can_auto_transform(raw)

    # Sync path

    def transform_sync(self, raw: Any) -> ResponseEnvelope:
        return self.sync.transform(raw)

    def transform_sync_data(self, raw: Any) -> Dict[str, Any]:
        return self.sync.transform_data(raw)

    # Legacy canonical path

    def transform_product(self, raw: Any) -> ResponseEnvelope:
        return self.mapper.transform_product(raw)

    def validate_customer_product(self, raw: Any) -> ValidationResult:
        """Map with the legacy tables, then validate the canonical result."""
        try:
            product = self.mapper.map_customer_data(raw)
        except InputTypeError as e:
            return ValidationResult(valid=False, errors=[str(e)])
        return self.product_validator.validate(product)

    # Validation and envelopes

    def validate(self, raw: Union[CanonicalProduct, Any]) -> ValidationResult:
        """Raw payloads get the flexible required-field checks; canonical products the structural ones."""
        if isinstance(raw, CanonicalProduct):
            return self.product_validator.validate(raw)
        return self.flexible.validate(raw)

    def validate_or_fail(self, raw: Union[CanonicalProduct, Any]) -> ValidationResult:
        """
        Raises:
            ValidationError: With the full error list when validation fails
        """
        result = self.validate(raw)
        if not result.valid:
            raise ValidationError(" ".join(result.errors), result.errors)
        return result

    @staticmethod
    def build_envelope(status: str, data: Optional[Dict[str, Any]] = None,
                       extras: Optional[Dict[str, Any]] = None, message: str = "") -> ResponseEnvelope:
        return response.build_envelope(status, data, extras, message)

    # Introspection

    def get_field_mappings(self) -> Dict[str, Dict[str, list]]:
        return {
            "flexible": self.flexible.field_mappings_table(),
            "product": {target: list(keys) for target, keys in LEGACY_PRODUCT_FIELD_MAPPINGS.items()},
            "variant": {target: list(keys) for target, keys in LEGACY_VARIANT_FIELD_MAPPINGS.items()}
        }

    @staticmethod
    def get_supported_api_formats() -> Dict[str, str]:
        return dict(SUPPORTED_API_FORMATS)

    def get_supported_formats(self) -> Dict[str, Dict[str, Any]]:
        return self.guidance.supported_formats()


# Global SDK instance
sdk = EkatraSDK()
