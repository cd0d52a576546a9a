from . import full_math as FullMath
from . import liquidity_amounts as LiquidityAmounts
from . import price_math as PriceMath
from . import sqrt_price_math as SqrtPriceMath
from . import tick_math as TickMath
from . import unsafe_math as UnsafeMath

__all__ = (
    "FullMath",
    "LiquidityAmounts",
    "PriceMath",
    "SqrtPriceMath",
    "TickMath",
    "UnsafeMath",
)
