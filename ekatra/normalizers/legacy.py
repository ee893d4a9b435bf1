"""
Legacy customer-data mapper.

Maps a customer's product record onto a CanonicalProduct with the older
synonym tables, re-keying offers and specifications structurally. This path
emits searchKeywords as a list and is validated with ProductValidator.
"""
from typing import Any, Callable, Dict, List, Mapping

from ekatra import response
from ekatra.errors import InputTypeError
from ekatra.logger import logger
from ekatra.models.product import CanonicalProduct
from ekatra.normalizers.fields import (
    LEGACY_PRODUCT_FIELD_MAPPINGS,
    LEGACY_VARIANT_FIELD_MAPPINGS,
    OFFER_DETAIL_FIELDS,
    OFFER_FIELDS,
    SPECIFICATION_FIELDS,
    FieldResolver,
    is_present,
    to_text,
)
from ekatra.normalizers.identifiers import generate_id
from ekatra.normalizers.media import MediaNormalizer
from ekatra.normalizers.product import KEYWORDS_AS_LIST, ProductAssembler
from ekatra.normalizers.structure import DataType, StructureDetector
from ekatra.normalizers.variants import VariantReshaper
from ekatra.response import ResponseEnvelope
from ekatra.validators.product import ProductValidator


class ProductMapper:

    def __init__(self, mime_probe=None, default_currency: str = None,
                 field_mappings: Mapping[str, tuple] = LEGACY_PRODUCT_FIELD_MAPPINGS,
                 variant_mappings: Mapping[str, tuple] = LEGACY_VARIANT_FIELD_MAPPINGS,
                 validator: ProductValidator = None,
                 id_factory: Callable[[], str] = generate_id):
        self.field_mappings = field_mappings
        self.resolver = FieldResolver()
        self.detector = StructureDetector(self.resolver)
        self.media = MediaNormalizer(mime_probe, resolver=self.resolver)
        self.reshaper = VariantReshaper(
            variant_mappings, media=self.media, resolver=self.resolver, id_factory=id_factory
        )
        self.assembler = ProductAssembler(KEYWORDS_AS_LIST, default_currency, id_factory)
        self.validator = validator or ProductValidator()

    def map_customer_data(self, raw: Any) -> CanonicalProduct:
        if not isinstance(raw, Mapping):
            raise InputTypeError("Product data must be a JSON object")

        fields = self.resolver.resolve_all(raw, self.field_mappings)
        fields["offers"] = self.map_offers(fields["offers"])
        fields["specifications"] = self.map_specifications(fields["specifications"])

        record = dict(raw)
        record["variants"] = fields["variants"] if isinstance(fields["variants"], list) else []
        record["sizes"] = fields["sizes"]

        data_type = self.detector.classify(record)
        if data_type == DataType.COMPLEX_STRUCTURE:
            reshaped = self.reshaper.adopt(record)
        else:
            reshaped = self.reshaper.reshape(data_type, record)

        return self.assembler.assemble(fields, reshaped)

    def transform_product(self, raw: Any) -> ResponseEnvelope:
        """Map and validate; the envelope carries the product only if it validates."""
        try:
            product = self.map_customer_data(raw)
        except InputTypeError as e:
            return response.transformation_error(str(e))

        validation = self.validator.validate(product)
        if not validation.valid:
            logger.warning(
                f"Mapped product {product.product_id} failed validation",
                extra={"extra": {"errors": validation.errors}}
            )
            return response.validation_error(validation.to_dict())

        return response.success(
            product.to_dict(),
            {
                "validation": validation.to_dict(),
                "canAutoTransform": True,
                "manualSetupRequired": False
            },
            "Product transformed successfully"
        )

    def map_specifications(self, value: Any) -> List[Dict[str, Any]]:
        if isinstance(value, Mapping) and not self._looks_like_record(value, SPECIFICATION_FIELDS):
            # {"Material": "Cotton", ...}
            return [{"key": str(key), "value": item} for key, item in value.items() if is_present(item)]

        specifications = []
        for item in self._as_records(value):
            fields = self.resolver.resolve_all(item, SPECIFICATION_FIELDS)
            specifications.append({"key": to_text(fields["key"]), "value": fields["value"]})
        return specifications

    def map_offers(self, value: Any) -> List[Dict[str, Any]]:
        offers = []
        for item in self._as_records(value):
            fields = self.resolver.resolve_all(item, OFFER_FIELDS)
            offer = {}
            if is_present(fields["title"]):
                offer["title"] = to_text(fields["title"])
            offer["productOfferDetails"] = self.map_offer_details(fields["details"], item)
            offers.append(offer)
        return offers

    def map_offer_details(self, value: Any, offer: Mapping[str, Any]) -> List[Dict[str, str]]:
        if isinstance(value, str):
            return [{"title": to_text(self.resolver.resolve(offer, OFFER_FIELDS["title"])), "description": value}]

        details = []
        for item in self._as_records(value):
            fields = self.resolver.resolve_all(item, OFFER_DETAIL_FIELDS)
            details.append({"title": to_text(fields["title"]), "description": to_text(fields["description"])})
        return details

    @staticmethod
    def _as_records(value: Any) -> List[Mapping[str, Any]]:
        if isinstance(value, Mapping):
            return [value]
        if isinstance(value, list):
            return [item for item in value if isinstance(item, Mapping)]
        return []

    def _looks_like_record(self, value: Mapping[str, Any], table: Mapping[str, tuple]) -> bool:
        return all(self.resolver.resolve(value, keys) is not None for keys in table.values())
