"""
Input shape classification.
"""
from enum import Enum
from typing import Any, Mapping

from ekatra.normalizers.fields import FieldResolver, is_present

VARIANT_NAME_FIELDS = ("variant_name", "variant_title", "name", "title")
FLAT_VARIANT_FIELDS = ("variant_name", "variant_title", "variant_mrp", "variant_selling_price")


class DataType(str, Enum):
    SIMPLE_SINGLE_VARIANT = "SIMPLE_SINGLE_VARIANT"
    SIMPLE_MULTI_VARIANT = "SIMPLE_MULTI_VARIANT"
    COMPLEX_STRUCTURE = "COMPLEX_STRUCTURE"
    MIXED_STRUCTURE = "MIXED_STRUCTURE"


class StructureDetector:
    """Classifies a record so the matching reshaping strategy can run. Never rejects input."""

    def __init__(self, resolver: FieldResolver = None):
        self.resolver = resolver or FieldResolver()

    def classify(self, record: Any) -> DataType:
        if not isinstance(record, Mapping):
            return DataType.MIXED_STRUCTURE

        variants = record.get("variants")
        if isinstance(variants, list) and variants:
            first = variants[0] if isinstance(variants[0], Mapping) else {}
            if is_present(first.get("variations")) or is_present(first.get("mediaList")):
                return DataType.COMPLEX_STRUCTURE
            if self.resolver.resolve(first, VARIANT_NAME_FIELDS) is not None:
                return DataType.SIMPLE_MULTI_VARIANT
            return DataType.MIXED_STRUCTURE

        if self.resolver.resolve(record, FLAT_VARIANT_FIELDS) is not None:
            return DataType.SIMPLE_SINGLE_VARIANT

        return DataType.MIXED_STRUCTURE
