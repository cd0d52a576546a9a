import dataclasses
import enum
from fractions import Fraction

from clamm.exceptions.base import ClammValueError
from clamm.exceptions.ranges import InvalidTickRange
from clamm.libraries.liquidity_amounts import get_amounts_for_liquidity, get_liquidity_for_amounts
from clamm.libraries.tick_math import MAX_TICK, MIN_TICK, get_sqrt_ratio_at_tick
from clamm.types.aliases import Liquidity, Tick
from clamm.types.pool import PoolState


class PositionStatus(enum.Enum):
    CLOSED = "closed"
    IN_RANGE = "in range"
    BELOW_RANGE = "below range"
    ABOVE_RANGE = "above range"
    UNKNOWN = "unknown"


@dataclasses.dataclass(slots=True, frozen=True)
class PositionRange:
    tick_lower: Tick
    tick_upper: Tick
    liquidity: Liquidity

    def __post_init__(self) -> None:
        if not (self.tick_lower < self.tick_upper):
            raise InvalidTickRange(lower=self.tick_lower, upper=self.tick_upper)
        if self.liquidity < 0:
            raise ClammValueError(message=f"Invalid liquidity {self.liquidity}")


def validate_tick_range(tick_lower: Tick, tick_upper: Tick, tick_spacing: int) -> None:
    """
    Check that a pair of ticks can be used as position bounds in a pool with the given spacing.
    """

    if tick_spacing <= 0:
        raise ClammValueError(message=f"Invalid tick spacing {tick_spacing}")
    if tick_lower >= tick_upper:
        raise InvalidTickRange(lower=tick_lower, upper=tick_upper)
    if tick_lower < MIN_TICK or tick_upper > MAX_TICK:
        raise ClammValueError(message=f"Ticks {tick_lower}, {tick_upper} exceed the tick grid")
    if tick_lower % tick_spacing != 0:
        raise ClammValueError(message=f"Lower tick must be a multiple of {tick_spacing}")
    if tick_upper % tick_spacing != 0:
        raise ClammValueError(message=f"Upper tick must be a multiple of {tick_spacing}")


def get_position_amounts(pool_state: PoolState, position: PositionRange) -> tuple[int, int]:
    """
    The token0 and token1 amounts held by the position at the pool's current price, excluding
    uncollected fees.
    """

    if position.liquidity == 0:
        return 0, 0

    return get_amounts_for_liquidity(
        pool_state.sqrt_price_x96,
        get_sqrt_ratio_at_tick(position.tick_lower),
        get_sqrt_ratio_at_tick(position.tick_upper),
        position.liquidity,
    )


def get_liquidity_for_deposit(
    pool_state: PoolState,
    tick_lower: Tick,
    tick_upper: Tick,
    amount0: int,
    amount1: int,
) -> Liquidity:
    """
    The largest liquidity that the desired amounts can fund inside the range at the pool's current
    price. Depositing this liquidity never requires more than `amount0` or `amount1`.
    """

    validate_tick_range(tick_lower, tick_upper, pool_state.tick_spacing)
    return get_liquidity_for_amounts(
        pool_state.sqrt_price_x96,
        get_sqrt_ratio_at_tick(tick_lower),
        get_sqrt_ratio_at_tick(tick_upper),
        amount0,
        amount1,
    )


def is_in_range(tick: Tick, tick_lower: Tick, tick_upper: Tick) -> bool:
    # The position is active while the current tick is within [tick_lower, tick_upper)
    return tick_lower <= tick < tick_upper


def get_position_status(position: PositionRange, current_tick: Tick | None) -> PositionStatus:
    if position.liquidity == 0:
        return PositionStatus.CLOSED
    if current_tick is None:
        return PositionStatus.UNKNOWN
    if is_in_range(current_tick, position.tick_lower, position.tick_upper):
        return PositionStatus.IN_RANGE
    if current_tick < position.tick_lower:
        return PositionStatus.BELOW_RANGE
    return PositionStatus.ABOVE_RANGE


def get_pool_share(position_liquidity: Liquidity, pool_liquidity: Liquidity) -> Fraction:
    """
    The fraction of the pool's active liquidity provided by the position.
    """

    if position_liquidity < 0 or pool_liquidity < 0:
        raise ClammValueError(message="Liquidity values must be non-negative")
    if pool_liquidity == 0:
        return Fraction(0)
    return Fraction(position_liquidity, pool_liquidity)
