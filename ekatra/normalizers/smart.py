"""
Shape-directed transformation.

Used when the caller already knows (or has detected) the input shape.
searchKeywords is emitted as a list on this path.
"""
from typing import Any, Callable, Dict, List, Mapping, Union

from ekatra.errors import InputTypeError, NormalizationError
from ekatra.logger import logger
from ekatra.models.product import CanonicalProduct
from ekatra.models.results import ReshapeResult
from ekatra.normalizers.fields import (
    SMART_FIELD_MAPPINGS,
    SMART_KEYWORD_FIELDS,
    VARIANT_FIELD_MAPPINGS,
    FieldResolver,
    is_present,
)
from ekatra.normalizers.identifiers import generate_id
from ekatra.normalizers.media import MediaNormalizer
from ekatra.normalizers.product import KEYWORDS_AS_LIST, ProductAssembler, keyword_terms
from ekatra.normalizers.structure import DataType, StructureDetector
from ekatra.normalizers.variants import VariantReshaper


class SmartTransformer:

    def __init__(self, mime_probe=None, default_currency: str = None,
                 variant_mappings: Mapping[str, tuple] = VARIANT_FIELD_MAPPINGS,
                 id_factory: Callable[[], str] = generate_id):
        self.resolver = FieldResolver()
        self.detector = StructureDetector(self.resolver)
        self.media = MediaNormalizer(mime_probe, resolver=self.resolver)
        self.reshaper = VariantReshaper(
            variant_mappings, media=self.media, resolver=self.resolver, id_factory=id_factory
        )
        self.assembler = ProductAssembler(KEYWORDS_AS_LIST, default_currency, id_factory)

    def detect_data_type(self, raw: Any) -> DataType:
        return self.detector.classify(raw)

    def transform_simple(self, raw: Any, data_type: Union[DataType, str]) -> CanonicalProduct:
        """
        Transform a payload whose shape is already known.

        Raises:
            InputTypeError: If ``raw`` is not a JSON object
            NormalizationError: If ``data_type`` is not a known shape
        """
        if not isinstance(raw, Mapping):
            raise InputTypeError("Product data must be a JSON object")

        try:
            data_type = DataType(data_type)
        except ValueError:
            raise NormalizationError(f"Unknown data type: {data_type}")

        if data_type in (DataType.SIMPLE_SINGLE_VARIANT, DataType.SIMPLE_MULTI_VARIANT):
            reshaped = self.reshaper.reshape(data_type, raw)
        elif data_type == DataType.COMPLEX_STRUCTURE:
            reshaped = self.reshaper.adopt(raw)
        else:
            reshaped = self.reshape_mixed(raw)

        product = self.assembler.assemble(self.resolve_fields(raw), reshaped)
        logger.info(
            f"Smart-transformed product {product.product_id}",
            extra={"extra": {"data_type": data_type.value, "sizes": len(product.sizes)}}
        )
        return product

    def reshape_mixed(self, raw: Mapping[str, Any]) -> ReshapeResult:
        """
        Reshape simple elements, adopt nested ones, then link declared sizes by name.

        Without a declared ``sizes`` list the sizes come from the sizeIds the
        variations reference.
        """
        product_media = self.media.normalize(raw)
        elements = raw.get("variants")

        if isinstance(elements, list) and elements:
            variants = [
                self.reshaper.build_variant(
                    element, product_media, parse_title=True,
                    keep_ids=isinstance(element, Mapping) and is_present(element.get("variations"))
                )
                for element in elements
            ]
            variants = self.reshaper.unique_variant_ids(variants)
        else:
            variants = [self.reshaper.build_variant(raw, product_media)]

        if isinstance(raw.get("sizes"), list):
            declared = self.reshaper.parse_sizes(raw["sizes"])
            return self.reshaper.link_sizes_by_name(variants, declared)

        return ReshapeResult(variants=variants, sizes=self.reshaper.collect_sizes(variants))

    def resolve_fields(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        fields = self.resolver.resolve_all(raw, SMART_FIELD_MAPPINGS)
        fields["keywords"] = self.merge_keywords(raw)
        return fields

    def merge_keywords(self, raw: Mapping[str, Any]) -> List[str]:
        """Keywords from every keyword-like field, de-duplicated in order."""
        merged = []
        for name in SMART_KEYWORD_FIELDS:
            for term in keyword_terms(self.resolver.resolve(raw, (name,))):
                if term not in merged:
                    merged.append(term)
        return merged
