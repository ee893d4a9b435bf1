"""
Minimal catalog sync.

Only productId, title, currency and one image are needed; everything else
is filled with catalog defaults so the product can be enriched later.
"""
from typing import Any, Callable, Dict, Mapping, Tuple

from ekatra import response
from ekatra.errors import InputTypeError, ValidationError
from ekatra.logger import logger
from ekatra.models.product import (
    CanonicalProduct,
    CanonicalSize,
    CanonicalVariant,
    CanonicalVariation,
    MediaDescriptor,
)
from ekatra.models.results import ValidationResult
from ekatra.normalizers.fields import SYNC_FIELD_MAPPINGS, FieldResolver, to_text
from ekatra.normalizers.identifiers import generate_id
from ekatra.normalizers.media import MediaNormalizer
from ekatra.normalizers.product import slugify
from ekatra.response import ResponseEnvelope

WRAPPER_KEYS = ("product_details", "product")
RESULT_WRAPPER_KEYS = ("data", "result")
IMAGE_OBJECT_KEYS = ("url", "src", "image", "imageUrl", "image_url", "thumbnail", "thumbnailUrl")

REQUIRED_FIELDS = (
    ("product_id", "Product ID"),
    ("title", "Product title"),
    ("currency", "Currency"),
    ("image_url", "Image URL"),
)


class SyncProductTransformer:

    def __init__(self, mime_probe=None, field_mappings: Mapping[str, tuple] = SYNC_FIELD_MAPPINGS,
                 id_factory: Callable[[], str] = generate_id):
        self.field_mappings = field_mappings
        self.resolver = FieldResolver()
        self.media = MediaNormalizer(mime_probe, resolver=self.resolver)
        self.id_factory = id_factory

    def transform(self, raw: Any) -> ResponseEnvelope:
        try:
            fields, validation = self._prepare(raw)
        except InputTypeError as e:
            rejected = ValidationResult(valid=False, errors=[str(e)], suggestions=[])
            return response.validation_error(rejected.to_dict(), "Product sync transformation failed")

        if not validation.valid:
            return response.validation_error(validation.to_dict(), "Product sync transformation failed")

        product = self.build(fields)
        return response.success(
            product.to_dict(),
            {
                "validation": validation.to_dict(),
                "dataType": "SYNC_FORMAT",
                "canAutoTransform": True,
                "manualSetupRequired": False
            },
            "Product synced successfully"
        )

    def transform_data(self, raw: Any) -> Dict[str, Any]:
        """
        Return only the product dict.

        Raises:
            InputTypeError: If ``raw`` is not a JSON object
            ValidationError: If any of the four sync fields is missing
        """
        fields, validation = self._prepare(raw)
        if not validation.valid:
            raise ValidationError(" ".join(validation.errors), validation.errors)
        return self.build(fields).to_dict()

    def build(self, fields: Dict[str, Any]) -> CanonicalProduct:
        variant_id = self.id_factory()
        size_id = self.id_factory()
        image_url = fields["image_url"]
        mime_type = self.media.mime_type(image_url)

        variation = CanonicalVariation(
            size_id=size_id,
            variant_id=variant_id,
            mrp=0.0,
            selling_price=0.0,
            discount=0.0,
            discount_label="",
            quantity=0,
            size="freestyle"
        )
        variant = CanonicalVariant(
            id=variant_id,
            color="unknown",
            weight=1,
            thumbnail=image_url,
            media_list=[MediaDescriptor(
                media_type=self.media.player_type(mime_type, image_url),
                play_url=image_url,
                thumbnail_url=image_url,
                mime_type=mime_type
            )],
            variations=[variation]
        )

        return CanonicalProduct(
            product_id=fields["product_id"],
            title=fields["title"],
            currency=fields["currency"],
            search_keywords="",
            handle=slugify(fields["title"]),
            offers=[{"productOfferDetails": [{}]}],
            specifications=[],
            variants=[variant],
            sizes=[CanonicalSize(id=size_id, name="freestyle")]
        )

    def extract_fields(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        fields = {}
        for target, keys in self.field_mappings.items():
            value = self.resolver.resolve(data, keys)
            fields[target] = self.first_image(value) if target == "image_url" else to_text(value)
        return fields

    def first_image(self, value: Any) -> str:
        """First usable image URL from a string, list or image object."""
        if isinstance(value, str):
            return next((url.strip() for url in value.split(",") if url.strip()), "")
        if isinstance(value, Mapping):
            value = [value]
        if isinstance(value, list):
            for item in value:
                if isinstance(item, Mapping):
                    item = self.resolver.resolve(item, IMAGE_OBJECT_KEYS)
                if isinstance(item, str) and item.strip():
                    return item.strip()
        return ""

    @staticmethod
    def unwrap(data: Mapping[str, Any]) -> Mapping[str, Any]:
        for key in WRAPPER_KEYS:
            if isinstance(data.get(key), Mapping):
                return data[key]
        if "title" not in data:
            for key in RESULT_WRAPPER_KEYS:
                if isinstance(data.get(key), Mapping):
                    return data[key]
        return data

    def _prepare(self, raw: Any) -> Tuple[Dict[str, Any], ValidationResult]:
        if not isinstance(raw, Mapping):
            raise InputTypeError("Product data must be a JSON object")

        fields = self.extract_fields(self.unwrap(raw))
        errors = []
        suggestions = []
        for target, label in REQUIRED_FIELDS:
            if not fields[target]:
                errors.append(f"{label} is required")
                suggestions.append(
                    f"Add one of these fields: {', '.join(self.field_mappings[target][:5])}..."
                )

        if errors:
            logger.warning("Sync payload failed validation", extra={"extra": {"errors": errors}})
        return fields, ValidationResult(valid=not errors, errors=errors, suggestions=suggestions)
