"""
Custom domain exceptions for the normalization engine.
Leaf components never raise; these surface only at the entry points.
"""
from typing import List, Optional


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


class InputTypeError(Exception):
    """Raised when the raw payload is not a JSON object."""
    pass


class ValidationError(Exception):
    """
    Raised by the fail-fast entry points when a payload does not validate.

    Carries the same ordered error list the non-throwing entry points
    return inside the envelope metadata.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class NormalizationError(Exception):
    """Raised when a payload cannot be normalized for the requested shape."""
    pass
