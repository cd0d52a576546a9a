import math

from clamm.constants import MAX_UINT256, MIN_UINT256
from clamm.exceptions.base import ClammValueError
from clamm.exceptions.evm import DivisionByZero, InvalidUint256, Overflow
from clamm.libraries.functions import mulmod


def _check_uint256(*values: int) -> None:
    for value in values:
        if not (MIN_UINT256 <= value <= MAX_UINT256):
            raise InvalidUint256


def muldiv(
    a: int,
    b: int,
    denominator: int,
) -> int:
    """
    The Solidity implementation is designed to calculate a * b / d without risk of overflowing
    the intermediate result.

    Python integers do not overflow and have no bit depth limitation, so this function simply
    checks for an invalid result.

    ref: https://github.com/Uniswap/v3-core/blob/main/contracts/libraries/FullMath.sol
    """

    _check_uint256(a, b, denominator)

    if denominator == 0:
        raise DivisionByZero

    result = (a * b) // denominator

    if not (MIN_UINT256 <= result <= MAX_UINT256):
        raise Overflow(error="Invalid result, does not fit in uint256")

    return result


def muldiv_rounding_up(a: int, b: int, denominator: int) -> int:
    result = muldiv(a, b, denominator)
    if mulmod(a, b, denominator) > 0:
        # must be less than max uint256 since we're rounding up
        if not (MIN_UINT256 <= result < MAX_UINT256):
            raise Overflow(error="Rounded result does not fit in uint256")
        return result + 1
    return result


def mul_shift(a: int, b: int, shift: int, round_up: bool = False) -> int:
    """
    Calculate (a * b) >> shift from the full-width product, optionally rounding any truncated
    bits up. Used for Q64.96 and Q128.128 products.
    """

    _check_uint256(a, b)
    if not (0 <= shift <= 256):  # noqa: PLR2004
        raise ClammValueError(message=f"Invalid shift {shift}")

    product = a * b
    result = product >> shift
    if round_up and product & ((1 << shift) - 1):
        result += 1

    if result > MAX_UINT256:
        raise Overflow(error="Invalid result, does not fit in uint256")

    return result


def encode_sqrt_ratio_x96(amount1: int, amount0: int) -> int:
    """
    Return the Q64.96 square root of the ratio amount1 / amount0, rounded down.

    ref: https://github.com/Uniswap/v3-sdk/blob/main/src/utils/encodeSqrtRatioX96.ts
    """

    _check_uint256(amount1, amount0)
    if amount0 == 0:
        raise DivisionByZero

    # sqrt(amount1 / amount0) * 2**96 == sqrt(amount1 * 2**192 / amount0)
    return math.isqrt((amount1 << 192) // amount0)
