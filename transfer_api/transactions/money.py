from decimal import ROUND_HALF_UP, Decimal
from typing import Union

MINOR_UNITS_PER_MAJOR = 100
# largest value a signed 64-bit amount column holds
MAX_MINOR_UNITS = 2**63 - 1


def to_minor_units(amount: Union[int, float]) -> int:
    # via str() so 0.29 becomes Decimal("0.29"), not its binary approximation
    scaled = Decimal(str(amount)) * MINOR_UNITS_PER_MAJOR
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major_units(minor: int) -> float:
    return minor / MINOR_UNITS_PER_MAJOR
