"""
Discount calculation.

A caller-supplied discount wins only when it is a number. A string such as
"20% OFF" is promotional copy: it becomes the label and the percentage is
computed from the prices.
"""
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from ekatra.models.results import DiscountResult
from ekatra.normalizers.fields import is_present

TWO_PLACES = Decimal("0.01")


def calculate_discount(mrp: float, selling_price: float) -> float:
    """Percentage off MRP, rounded half-up to two places; 0 when nothing is off."""
    if mrp <= 0 or selling_price >= mrp:
        return 0.0

    mrp_value = Decimal(str(mrp))
    selling_value = Decimal(str(selling_price))
    percentage = (mrp_value - selling_value) / mrp_value * Decimal("100")
    return float(percentage.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def _as_numeric(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    if isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except InvalidOperation:
            return None

    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


class DiscountCalculator:

    def compute(self, mrp: float, selling_price: float,
                raw_discount: Any = None, raw_label: Any = None) -> DiscountResult:
        calculated = calculate_discount(mrp, selling_price)
        label = str(raw_label).strip() if is_present(raw_label) else None

        if not is_present(raw_discount):
            return DiscountResult(discount=calculated, discount_label=label)

        numeric = _as_numeric(raw_discount)
        if numeric is not None:
            return DiscountResult(discount=numeric, discount_label=label)
        if not isinstance(raw_discount, str):
            return DiscountResult(discount=calculated, discount_label=label)

        # Non-numeric discount text is a label, never a value
        return DiscountResult(discount=calculated, discount_label=str(raw_discount))
