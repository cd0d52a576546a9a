"""
Conversions between ticks, Q64.96 square root prices, and human-readable decimal prices.

Prices are expressed as token1 per token0. A "raw" ratio is measured in the tokens' smallest units,
and a human price is the raw ratio scaled by 10**(decimals0 - decimals1). All arithmetic is exact
rational arithmetic, so conversions do not depend on floating point behavior.
"""

import math
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from fractions import Fraction

from clamm.config import settings
from clamm.constants import MAX_UINT8, MAX_UINT160, MIN_UINT8
from clamm.exceptions.base import ClammValueError
from clamm.exceptions.ranges import PriceOutOfRange
from clamm.libraries.constants import Q192
from clamm.libraries.tick_math import (
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
)
from clamm.types.aliases import SqrtPriceX96, Tick

type PriceLike = str | int | float | Decimal | Fraction

# Ratio of the prices of two adjacent ticks, 1.0001, as an exact fraction
TICK_BASE = Fraction(10001, 10000)


def _check_decimals(*decimals: int) -> None:
    for value in decimals:
        if not (MIN_UINT8 <= value <= MAX_UINT8):
            raise ClammValueError(message=f"Invalid token decimals {value}")


def _decimal_scale(decimals0: int, decimals1: int) -> Fraction:
    # The exponent may be negative, so build the scale as a Fraction rather than an int
    return Fraction(10) ** (decimals0 - decimals1)


def format_price(price: Fraction, significant_digits: int | None = None) -> str:
    """
    Format a non-negative rational price as a plain decimal string, rounded to the given number of
    significant digits.
    """

    if significant_digits is None:
        significant_digits = settings.prices.significant_digits
    if significant_digits <= 0:
        raise ClammValueError(message=f"Invalid significant digit count {significant_digits}")

    if price == 0:
        return "0"

    with localcontext() as ctx:
        ctx.prec = significant_digits
        ctx.rounding = ROUND_HALF_EVEN
        value = Decimal(price.numerator) / Decimal(price.denominator)
        return format(value.normalize(), "f")


def parse_price(price: PriceLike) -> Fraction:
    """
    Convert a caller-supplied price into an exact positive fraction.
    """

    if isinstance(price, bool):
        raise ClammValueError(message=f"Invalid price {price!r}")

    try:
        # Use the shortest decimal representation of a float, not its binary expansion
        value = Fraction(repr(price)) if isinstance(price, float) else Fraction(price)
    except (ValueError, TypeError, ZeroDivisionError, OverflowError):
        raise ClammValueError(message=f"Invalid price {price!r}") from None

    if value <= 0:
        raise ClammValueError(message=f"Price must be positive, got {price!r}")
    return value


def sqrt_price_x96_to_ratio(sqrt_price_x96: SqrtPriceX96) -> Fraction:
    """
    The exact raw ratio of token1 to token0 for a Q64.96 sqrt price.

    ref: https://blog.uniswap.org/uniswap-v3-math-primer
    """

    if not (0 <= sqrt_price_x96 <= MAX_UINT160):
        raise ClammValueError(message=f"Invalid sqrt price {sqrt_price_x96}")
    return Fraction(sqrt_price_x96**2, Q192)


def sqrt_price_x96_to_price(
    sqrt_price_x96: SqrtPriceX96,
    decimals0: int,
    decimals1: int,
    significant_digits: int | None = None,
) -> str:
    """
    Convert a Q64.96 sqrt price to a decimal string giving the price of one whole token0 in whole
    token1 units.
    """

    _check_decimals(decimals0, decimals1)
    return format_price(
        sqrt_price_x96_to_ratio(sqrt_price_x96) * _decimal_scale(decimals0, decimals1),
        significant_digits,
    )


def tick_to_price(
    tick: Tick,
    decimals0: int,
    decimals1: int,
    significant_digits: int | None = None,
) -> str:
    return sqrt_price_x96_to_price(
        get_sqrt_ratio_at_tick(tick),
        decimals0,
        decimals1,
        significant_digits,
    )


def get_nearest_tick_at_ratio(ratio: Fraction) -> Tick:
    """
    Find the tick whose price is nearest to the raw ratio, measured in log space.

    The greatest tick at or below the ratio is found with the exact fixed-point tick search, then
    the tick above it is chosen if the ratio lies above the geometric midpoint of the two. A ratio
    within half a tick step outside the grid snaps to the boundary tick.
    """

    if ratio <= 0:
        raise ClammValueError(message=f"Price ratio must be positive, got {ratio}")

    # The ratio as a Q192 fixed-point number, i.e. the square of a Q64.96 sqrt price
    scaled_ratio = ratio * Q192
    sqrt_price_x96 = math.isqrt(math.floor(scaled_ratio))

    if sqrt_price_x96 < MIN_SQRT_RATIO:
        # accept prices down to P(MIN_TICK) / sqrt(1.0001)
        if scaled_ratio**2 * TICK_BASE >= MIN_SQRT_RATIO**4:
            return MIN_TICK
        raise PriceOutOfRange(message=f"Price ratio {ratio} is below the tick grid.")

    if sqrt_price_x96 >= MAX_SQRT_RATIO:
        # accept prices up to P(MAX_TICK) * sqrt(1.0001)
        if scaled_ratio**2 <= MAX_SQRT_RATIO**4 * TICK_BASE:
            return MAX_TICK
        raise PriceOutOfRange(message=f"Price ratio {ratio} is above the tick grid.")

    tick = get_tick_at_sqrt_ratio(sqrt_price_x96)
    if tick == MAX_TICK:
        return tick

    if scaled_ratio > get_sqrt_ratio_at_tick(tick) * get_sqrt_ratio_at_tick(tick + 1):
        return tick + 1
    return tick


def price_to_tick(price: PriceLike, decimals0: int, decimals1: int) -> Tick:
    """
    Convert a human price of token0 in token1 units to the nearest tick. The inverse of
    `tick_to_price`, with `price_to_tick(tick_to_price(t, ...), ...) == t` for every tick.
    """

    _check_decimals(decimals0, decimals1)
    return get_nearest_tick_at_ratio(parse_price(price) / _decimal_scale(decimals0, decimals1))
