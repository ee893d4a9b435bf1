"""
Variant reshaping.

Builds the canonical variant -> variation -> size graph from flat fields,
simple variant lists or already-nested variant structures.
"""
from dataclasses import replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ekatra.logger import logger
from ekatra.models.product import CanonicalSize, CanonicalVariant, CanonicalVariation, MediaDescriptor
from ekatra.models.results import ReshapeResult
from ekatra.normalizers.discount import DiscountCalculator
from ekatra.normalizers.fields import (
    FieldResolver,
    SIZE_FIELDS,
    VARIANT_FIELD_MAPPINGS,
    to_number,
    to_quantity,
    to_text,
)
from ekatra.normalizers.identifiers import generate_id
from ekatra.normalizers.media import MediaNormalizer
from ekatra.normalizers.structure import DataType

DEFAULT_SIZE = "freestyle"
DEFAULT_COLOR = "unknown"
DEFAULT_VARIANT_NAME = "Default Variant"


def split_option_title(title: str) -> Tuple[Optional[str], Optional[str]]:
    """Split a Shopify option title like "Small / Red" into (size, color)."""
    if not title or "/" not in title:
        return None, None
    parts = [part.strip() for part in title.split("/")]
    return parts[0] or None, parts[-1] or None


class VariantReshaper:
    """
    Reshapes raw variant data into canonical variants and sizes.

    ``reshape`` always mints fresh variant and size ids, one size per
    variation, so two variants both sized "M" get two size entries.
    ``adopt`` keeps ids the caller already assigned, and
    ``link_sizes_by_name`` re-points variations at declared sizes by name.
    """

    def __init__(self, field_mappings: Mapping[str, tuple] = VARIANT_FIELD_MAPPINGS,
                 media: MediaNormalizer = None, discounts: DiscountCalculator = None,
                 resolver: FieldResolver = None, id_factory: Callable[[], str] = generate_id):
        self.field_mappings = field_mappings
        self.resolver = resolver or FieldResolver()
        self.media = media or MediaNormalizer(resolver=self.resolver)
        self.discounts = discounts or DiscountCalculator()
        self.id_factory = id_factory

    def reshape(self, data_type: DataType, record: Any) -> ReshapeResult:
        record = record if isinstance(record, Mapping) else {}
        product_media = self.media.normalize(record)
        elements = self._variant_elements(record)

        if data_type != DataType.SIMPLE_SINGLE_VARIANT and elements:
            variants = [
                self.build_variant(element, product_media, parse_title=True)
                for element in elements
            ]
        else:
            variants = [self.build_variant(record, product_media)]

        return ReshapeResult(variants=variants, sizes=self.collect_sizes(variants))

    def adopt(self, record: Any) -> ReshapeResult:
        """Keep caller-assigned ids from an already-nested structure."""
        record = record if isinstance(record, Mapping) else {}
        product_media = self.media.normalize(record)
        elements = self._variant_elements(record)

        if elements:
            variants = [
                self.build_variant(element, product_media, parse_title=True, keep_ids=True)
                for element in elements
            ]
            variants = self.unique_variant_ids(variants)
        else:
            variants = [self.build_variant(record, product_media)]

        declared = self.parse_sizes(record.get("sizes"))
        return ReshapeResult(variants=variants, sizes=self._merge_sizes(declared, variants))

    def link_sizes_by_name(self, variants: List[CanonicalVariant],
                           sizes: List[CanonicalSize]) -> ReshapeResult:
        """
        Point every variation at the first declared size with the same name.

        A variation whose size name was never declared gets a new size
        entry instead of failing.
        """
        linked_sizes = list(sizes)
        ids_by_name: Dict[str, str] = {}
        for size in linked_sizes:
            ids_by_name.setdefault(size.name, size.id)

        linked_variants = []
        for variant in variants:
            variations = []
            for variation in variant.variations:
                size_id = ids_by_name.get(variation.size)
                if size_id is None:
                    size_id = self.id_factory()
                    ids_by_name[variation.size] = size_id
                    linked_sizes.append(CanonicalSize(id=size_id, name=variation.size))
                    logger.warning(
                        f"Synthesized undeclared size '{variation.size}'",
                        extra={"extra": {"variant_id": variant.id, "size_id": size_id}}
                    )
                variations.append(replace(variation, size_id=size_id))
            linked_variants.append(replace(variant, variations=variations))

        return ReshapeResult(variants=linked_variants, sizes=linked_sizes)

    def unique_variant_ids(self, variants: List[CanonicalVariant]) -> List[CanonicalVariant]:
        """Re-mint any kept variant id already taken by an earlier variant."""
        seen = set()
        unique = []
        for variant in variants:
            if variant.id in seen:
                fresh_id = self.id_factory()
                logger.warning(
                    f"Duplicate variant id '{variant.id}' replaced",
                    extra={"extra": {"variant_id": fresh_id}}
                )
                variant = replace(variant, id=fresh_id, variations=[
                    replace(variation, variant_id=fresh_id) for variation in variant.variations
                ])
            seen.add(variant.id)
            unique.append(variant)
        return unique

    def build_variant(self, element: Any, fallback_media: List[MediaDescriptor] = None,
                      parse_title: bool = False, keep_ids: bool = False) -> CanonicalVariant:
        element = element if isinstance(element, Mapping) else {}
        fields = self.resolver.resolve_all(element, self.field_mappings)

        variant_id = self.id_factory()
        if keep_ids:
            variant_id = to_text(fields["variant_id"]) or variant_id

        name = to_text(fields["variant_name"], DEFAULT_VARIANT_NAME)
        title_size, title_color = split_option_title(name) if parse_title else (None, None)

        media_list = self.media.normalize(element) or list(fallback_media or [])
        thumbnail = media_list[0].play_url if media_list else to_text(fields["thumbnail"])

        sources = fields["variations"] if isinstance(fields["variations"], list) else []
        sources = [source for source in sources if isinstance(source, Mapping)]

        if sources:
            variations = [
                self._build_variation(self._inherit(source, fields), variant_id, title_size, keep_ids)
                for source in sources
            ]
        else:
            variations = [self._build_variation(fields, variant_id, title_size, keep_ids)]

        return CanonicalVariant(
            id=variant_id,
            name=name,
            color=to_text(fields["color"]) or title_color or DEFAULT_COLOR,
            weight=max(0.0, to_number(fields["weight"])),
            thumbnail=thumbnail,
            media_list=media_list,
            variations=variations
        )

    def parse_sizes(self, raw_sizes: Any) -> List[CanonicalSize]:
        """Declared sizes, unique by id; missing ids are minted."""
        if not isinstance(raw_sizes, list):
            return []

        sizes = []
        seen = set()
        for raw in raw_sizes:
            if isinstance(raw, str):
                raw = {"name": raw}
            if not isinstance(raw, Mapping):
                continue
            fields = self.resolver.resolve_all(raw, SIZE_FIELDS)
            size_id = to_text(fields["id"]) or self.id_factory()
            if size_id in seen:
                continue
            seen.add(size_id)
            sizes.append(CanonicalSize(id=size_id, name=to_text(fields["name"], DEFAULT_SIZE)))
        return sizes

    @staticmethod
    def collect_sizes(variants: List[CanonicalVariant]) -> List[CanonicalSize]:
        """One size per distinct sizeId referenced by a variation."""
        sizes = []
        seen = set()
        for variant in variants:
            for variation in variant.variations:
                if variation.size_id not in seen:
                    seen.add(variation.size_id)
                    sizes.append(CanonicalSize(id=variation.size_id, name=variation.size))
        return sizes

    def _merge_sizes(self, declared: List[CanonicalSize],
                     variants: List[CanonicalVariant]) -> List[CanonicalSize]:
        sizes = list(declared)
        known = {size.id for size in sizes}
        for size in self.collect_sizes(variants):
            if size.id in known:
                continue
            if declared:
                logger.warning(
                    f"Variation references undeclared size id {size.id}",
                    extra={"extra": {"size_name": size.name}}
                )
            known.add(size.id)
            sizes.append(size)
        return sizes

    def _inherit(self, source: Mapping, parent: Dict[str, Any]) -> Dict[str, Any]:
        """Resolve a nested variation, falling back to its variant's values."""
        own = self.resolver.resolve_all(source, self.field_mappings)
        return {key: value if value is not None else parent.get(key) for key, value in own.items()}

    def _build_variation(self, values: Dict[str, Any], variant_id: str,
                         default_size: Optional[str], keep_ids: bool) -> CanonicalVariation:
        selling_price = max(0.0, to_number(values["variant_selling_price"]))
        raw_mrp = values["variant_mrp"]
        mrp = max(0.0, to_number(raw_mrp)) if raw_mrp is not None else selling_price

        discount = self.discounts.compute(mrp, selling_price, values["discount"], values["discount_label"])

        size_id = self.id_factory()
        if keep_ids:
            size_id = to_text(values["size_id"]) or size_id

        return CanonicalVariation(
            size_id=size_id,
            variant_id=variant_id,
            mrp=mrp,
            selling_price=selling_price,
            discount=discount.discount,
            discount_label=discount.discount_label,
            quantity=to_quantity(values["variant_quantity"]),
            size=to_text(values["size"]) or default_size or DEFAULT_SIZE
        )

    def _variant_elements(self, record: Mapping) -> List[Any]:
        elements = record.get("variants")
        return elements if isinstance(elements, list) else []
