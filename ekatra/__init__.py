"""
Ekatra product normalizer - maps heterogeneous e-commerce payloads onto the
canonical Ekatra product shape.
"""

__version__ = "2.1.0"
__author__ = "Engineering Team"

# Export main components for easy import
from ekatra.config import config
from ekatra.logger import logger
from ekatra.errors import (
    ConfigError,
    InputTypeError,
    ValidationError,
    NormalizationError
)

__all__ = [
    'config',
    'logger',
    'ConfigError',
    'InputTypeError',
    'ValidationError',
    'NormalizationError'
]
