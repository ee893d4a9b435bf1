"""
Canonical data contract and result records.
"""

from ekatra.models.product import (
    CanonicalProduct,
    CanonicalSize,
    CanonicalVariant,
    CanonicalVariation,
    MediaDescriptor
)
from ekatra.models.results import DiscountResult, ReshapeResult, ValidationResult

__all__ = [
    'CanonicalProduct',
    'CanonicalSize',
    'CanonicalVariant',
    'CanonicalVariation',
    'MediaDescriptor',
    'DiscountResult',
    'ReshapeResult',
    'ValidationResult'
]
