import dataclasses

from clamm.types.aliases import Liquidity, Pip, SqrtPriceX96, Tick


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class PoolState:
    """
    A point-in-time snapshot of a pool's current price and active liquidity.

    For constant-product pools the tick fields carry the equivalent grid position of the reserve
    ratio, and `tick_spacing` is 1.
    """

    sqrt_price_x96: SqrtPriceX96
    tick: Tick
    liquidity: Liquidity
    fee: Pip | None
    tick_spacing: int
