import math
import random
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP
from typing import Sequence, TypeVar

T = TypeVar("T")


def rand_int(min_value: int, max_value: int) -> int:
    return random.randint(min_value, max_value)


def rand_float(min_value: float, max_value: float) -> float:
    return random.uniform(min_value, max_value)


def random_choice(items: Sequence[T]) -> T:
    return random.choice(items)


def shuffle_list(items: Sequence[T]) -> list[T]:
    shuffled = list(items)
    random.shuffle(shuffled)
    return shuffled


def _quantum(decimals: int) -> Decimal:
    return Decimal(1).scaleb(-decimals)


def rand_decimal_with_dec(
    min_value: float,
    max_value: float,
    min_dec: int,
    max_dec: int
) -> Decimal:
    """
    Uniform value in ``[min_value, max_value]`` with a random number of decimals.

    The precision is drawn from ``[min_dec, max_dec]`` and is kept even when the
    trailing digits are zeros, so ``0.0070`` stays a four-decimal amount.
    """
    low, high = Decimal(str(min_value)), Decimal(str(max_value))
    quantum = _quantum(rand_int(min_dec, max_dec))
    value = Decimal(repr(rand_float(min_value, max_value)))

    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded > high:
        rounded = high.quantize(quantum, rounding=ROUND_FLOOR)
    if rounded < low:
        rounded = low.quantize(quantum, rounding=ROUND_CEILING)
    return rounded


def round_to_appropriate_decimal_place(value: float | Decimal, min_dec: int, max_dec: int) -> Decimal:
    """Round so that ``min_dec..max_dec`` significant digits follow the leading zeros."""
    if value <= 0:
        raise ValueError(f"Value must be positive, got {value}")

    extra = rand_int(min_dec, max_dec)
    decimals = max(0, -math.floor(math.log10(abs(float(value)))) + extra)
    return Decimal(str(value)).quantize(_quantum(decimals), rounding=ROUND_HALF_UP)
