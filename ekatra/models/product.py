"""
Canonical Ekatra data contract.
Every transformer builds these shapes; every validator reads them.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Union


@dataclass(frozen=True)
class MediaDescriptor:
    """One image or video attached to a variant."""
    media_type: str
    play_url: str
    thumbnail_url: str
    mime_type: str
    weight: int = 0
    duration: float = 0
    size: int = 0

    @property
    def player_type(self) -> str:
        return self.media_type

    def to_dict(self) -> Dict:
        return {
            "mediaType": self.media_type,
            "playUrl": self.play_url,
            "thumbnailUrl": self.thumbnail_url,
            "mimeType": self.mime_type,
            "playerTypeEnum": self.player_type,
            "weight": self.weight,
            "duration": self.duration,
            "size": self.size
        }


@dataclass(frozen=True)
class CanonicalSize:
    id: str
    name: str

    def to_dict(self) -> Dict:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class CanonicalVariation:
    """A purchasable size of a variant."""
    size_id: str
    variant_id: str
    mrp: float = 0.0
    selling_price: float = 0.0
    discount: float = 0.0
    discount_label: Optional[str] = None
    quantity: int = 0
    size: str = "freestyle"

    @property
    def availability(self) -> bool:
        """Stock flag, always derived from quantity."""
        return self.quantity > 0

    def to_dict(self) -> Dict:
        return {
            "sizeId": self.size_id,
            "variantId": self.variant_id,
            "mrp": self.mrp,
            "sellingPrice": self.selling_price,
            "discount": self.discount,
            "discountLabel": self.discount_label,
            "availability": self.availability,
            "quantity": self.quantity,
            "size": self.size
        }


@dataclass(frozen=True)
class CanonicalVariant:
    """A colour/style of a product with its media and variations."""
    id: str
    variations: List[CanonicalVariation]
    name: str = "Default Variant"
    color: str = "unknown"
    weight: float = 0
    thumbnail: str = ""
    media_list: List[MediaDescriptor] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "weight": self.weight,
            "thumbnail": self.thumbnail,
            "mediaList": [media.to_dict() for media in self.media_list],
            "variations": [variation.to_dict() for variation in self.variations]
        }


@dataclass(frozen=True)
class CanonicalProduct:
    """
    Canonical Ekatra product.

    ``search_keywords`` is a comma-joined string on the flexible and sync
    paths and a list of strings on the smart and legacy paths.
    """
    product_id: str
    title: str
    variants: List[CanonicalVariant]
    sizes: List[CanonicalSize]
    description: str = ""
    currency: str = "INR"
    existing_product_url: str = ""
    search_keywords: Union[str, List[str]] = ""
    handle: str = ""
    country_code: Optional[str] = None
    offers: List[Dict] = field(default_factory=list)
    specifications: List[Dict] = field(default_factory=list)

    @property
    def variations(self) -> List[CanonicalVariation]:
        """All variations across variants, in order."""
        return [variation for variant in self.variants for variation in variant.variations]

    @property
    def size_ids(self) -> List[str]:
        return [size.id for size in self.sizes]

    def to_dict(self) -> Dict:
        """Convert to the camelCase wire shape."""
        return {
            "productId": self.product_id,
            "title": self.title,
            "description": self.description,
            "currency": self.currency,
            "existingProductUrl": self.existing_product_url,
            "searchKeywords": self.search_keywords,
            "handle": self.handle,
            "countryCode": self.country_code,
            "offers": self.offers,
            "specifications": self.specifications,
            "variants": [variant.to_dict() for variant in self.variants],
            "sizes": [size.to_dict() for size in self.sizes]
        }
