"""
Result records passed between normalization steps.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict

from ekatra.models.product import CanonicalVariant, CanonicalSize


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    fix_instructions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        data = {
            "valid": self.valid,
            "errors": list(self.errors),
            "suggestions": list(self.suggestions)
        }
        if self.fix_instructions:
            data["fixInstructions"] = list(self.fix_instructions)
        return data


@dataclass(frozen=True)
class DiscountResult:
    discount: float
    discount_label: Optional[str] = None


@dataclass(frozen=True)
class ReshapeResult:
    variants: List[CanonicalVariant]
    sizes: List[CanonicalSize]
