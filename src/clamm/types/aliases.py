type ChainId = int
type Pip = int  # pool fees are expressed in pips equaling one hundredth of 1%
type Liquidity = int
type SqrtPriceX96 = int
type Tick = int
type Timestamp = int  # seconds since the Unix epoch
type TokenId = int
