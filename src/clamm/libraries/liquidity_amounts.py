from pydantic import validate_call

from clamm.exceptions.ranges import InvalidTickRange
from clamm.libraries.constants import Q96
from clamm.libraries.full_math import muldiv
from clamm.libraries.functions import to_uint128
from clamm.libraries.sqrt_price_math import get_amount0_delta, get_amount1_delta
from clamm.validation.evm_values import (
    ValidatedUint128,
    ValidatedUint160NonZero,
    ValidatedUint256,
)

"""
Conversions between a position's liquidity and the token amounts it represents. All results round
down, so a liquidity computed from desired amounts never requires more than those amounts.

ref: https://github.com/Uniswap/v3-periphery/blob/main/contracts/libraries/LiquidityAmounts.sol
"""


def _check_bounds(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int) -> None:
    if not (sqrt_ratio_a_x96 < sqrt_ratio_b_x96):
        raise InvalidTickRange(lower=sqrt_ratio_a_x96, upper=sqrt_ratio_b_x96)


@validate_call(validate_return=True)
def get_liquidity_for_amount0(
    sqrt_ratio_a_x96: ValidatedUint160NonZero,
    sqrt_ratio_b_x96: ValidatedUint160NonZero,
    amount0: ValidatedUint256,
) -> ValidatedUint128:
    """
    Computes the amount of liquidity received for a given amount of token0 and price range,
    amount0 * (sqrt(upper) * sqrt(lower)) / (sqrt(upper) - sqrt(lower))
    """

    _check_bounds(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    intermediate = muldiv(sqrt_ratio_a_x96, sqrt_ratio_b_x96, Q96)
    return to_uint128(muldiv(amount0, intermediate, sqrt_ratio_b_x96 - sqrt_ratio_a_x96))


@validate_call(validate_return=True)
def get_liquidity_for_amount1(
    sqrt_ratio_a_x96: ValidatedUint160NonZero,
    sqrt_ratio_b_x96: ValidatedUint160NonZero,
    amount1: ValidatedUint256,
) -> ValidatedUint128:
    """
    Computes the amount of liquidity received for a given amount of token1 and price range,
    amount1 / (sqrt(upper) - sqrt(lower))
    """

    _check_bounds(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    return to_uint128(muldiv(amount1, Q96, sqrt_ratio_b_x96 - sqrt_ratio_a_x96))


@validate_call(validate_return=True)
def get_liquidity_for_amounts(
    sqrt_ratio_x96: ValidatedUint160NonZero,
    sqrt_ratio_a_x96: ValidatedUint160NonZero,
    sqrt_ratio_b_x96: ValidatedUint160NonZero,
    amount0: ValidatedUint256,
    amount1: ValidatedUint256,
) -> ValidatedUint128:
    """
    Computes the maximum amount of liquidity received for the given amounts of token0 and token1,
    the current pool price, and the prices at the range bounds.
    """

    _check_bounds(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        return get_liquidity_for_amount0(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount0)

    if sqrt_ratio_x96 < sqrt_ratio_b_x96:
        return min(
            get_liquidity_for_amount0(sqrt_ratio_x96, sqrt_ratio_b_x96, amount0),
            get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_x96, amount1),
        )

    return get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount1)


@validate_call(validate_return=True)
def get_amounts_for_liquidity(
    sqrt_ratio_x96: ValidatedUint160NonZero,
    sqrt_ratio_a_x96: ValidatedUint160NonZero,
    sqrt_ratio_b_x96: ValidatedUint160NonZero,
    liquidity: ValidatedUint128,
) -> tuple[ValidatedUint256, ValidatedUint256]:
    """
    Computes the token0 and token1 value for a given amount of liquidity, the current pool price,
    and the prices at the range bounds.

    Below the range the position holds only token0, above the range only token1, and inside the
    range it holds token0 for the segment above the current price and token1 for the segment below.
    """

    _check_bounds(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if liquidity == 0:
        return 0, 0

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        return get_amount0_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity, False), 0

    if sqrt_ratio_x96 < sqrt_ratio_b_x96:
        return (
            get_amount0_delta(sqrt_ratio_x96, sqrt_ratio_b_x96, liquidity, False),
            get_amount1_delta(sqrt_ratio_a_x96, sqrt_ratio_x96, liquidity, False),
        )

    return 0, get_amount1_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity, False)
