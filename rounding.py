"""Half-up rounding for displayed percentages and dollar estimates."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float, Decimal]


def round_half_up(value: Number, places: int = 0) -> Union[int, float]:
    """Round like a price tag does: 2.5 -> 3, 0.125 -> 0.13 (places=2).

    The builtin ``round`` rounds halves to even, which shows 42 for 42.5%.
    Returns an int when ``places`` is 0.
    """
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    if places == 0:
        return int(rounded)
    return float(rounded)


def clamp(value: Number, low: Number, high: Number) -> Number:
    return max(low, min(high, value))
