"""
Validators for raw payloads and canonical products.
"""

from ekatra.validators.flexible import FlexibleValidator
from ekatra.validators.guidance import GuidanceValidator
from ekatra.validators.product import ProductValidator, VariantValidator

__all__ = [
    'FlexibleValidator',
    'GuidanceValidator',
    'ProductValidator',
    'VariantValidator'
]
