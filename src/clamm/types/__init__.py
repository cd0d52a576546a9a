from clamm.types.aliases import ChainId, Liquidity, Pip, SqrtPriceX96, Tick, Timestamp, TokenId
from clamm.types.pool import PoolState

__all__ = (
    "ChainId",
    "Liquidity",
    "Pip",
    "PoolState",
    "SqrtPriceX96",
    "Tick",
    "Timestamp",
    "TokenId",
)
