"""
Reward estimates for positions staked in a liquidity mining incentive.

The staker contract pays rewards from a seconds-per-liquidity accumulator that is maintained by the
pool. The estimate here is a simplified pro-rata approximation that assumes the staked liquidity
share was constant for the whole staking period. It is suitable for display only, and never a
guarantee of the claimable amount. The exact figure is available from the chain data provider and
is reported alongside the estimate by `get_staked_rewards`.
"""

from hexbytes import HexBytes

from clamm.exceptions.base import ClammValueError
from clamm.exceptions.fetching import NotFoundError
from clamm.logging import logger
from clamm.mining.incentives import get_incentive_status
from clamm.mining.types import Incentive, StakedRewards, StakeRecord
from clamm.types.abstract import AbstractChainDataProvider
from clamm.types.aliases import Liquidity, Timestamp, TokenId

SECONDS_PER_YEAR = 365 * 24 * 60 * 60


def estimate_pending_reward(
    stake: StakeRecord,
    incentive: Incentive,
    seconds_staked: int,
    total_liquidity: Liquidity,
    total_reward: int | None = None,
) -> int:
    """
    Estimate the reward accrued by a stake, given the total liquidity staked in the incentive.

    The reward rate is the total reward spread evenly over the incentive duration, rounded down to
    a whole unit per second. The stake earns its liquidity share of that rate for each second
    staked. All multiplication is done before the final division, and the result never exceeds the
    total reward.
    """

    if total_reward is None:
        total_reward = incentive.total_reward_unclaimed

    if seconds_staked < 0:
        raise ClammValueError(message=f"Invalid staking period {seconds_staked}")
    if total_liquidity < 0:
        raise ClammValueError(message=f"Invalid total liquidity {total_liquidity}")
    if total_reward < 0:
        raise ClammValueError(message=f"Invalid total reward {total_reward}")

    duration = incentive.key.duration
    if total_liquidity == 0 or duration == 0:
        return 0

    reward_per_second = total_reward // duration
    reward = reward_per_second * stake.liquidity * seconds_staked // total_liquidity
    return min(reward, total_reward)


def calculate_incentive_apr(
    total_reward: int,
    duration_seconds: int,
    total_staked_value_usd: float,
    reward_token_price_usd: float,
    reward_token_decimals: int = 18,
) -> float:
    """
    Annualize the USD value of an incentive's reward against the USD value of the liquidity staked
    in it. The result is a percentage, e.g. 50.0 for 50%.
    """

    if total_staked_value_usd <= 0 or duration_seconds <= 0:
        return 0.0

    reward_value_usd = total_reward / 10**reward_token_decimals * reward_token_price_usd
    annualized_reward_usd = reward_value_usd / duration_seconds * SECONDS_PER_YEAR
    return annualized_reward_usd / total_staked_value_usd * 100


async def get_staked_rewards(
    provider: AbstractChainDataProvider,
    token_id: TokenId,
    incentive_id: HexBytes,
    now: Timestamp,
    total_liquidity: Liquidity,
    staked_at: Timestamp | None = None,
) -> StakedRewards | None:
    """
    Fetch a stake and its incentive, and report both the pro-rata estimate and the exact on-chain
    reward. The two values are independent; neither replaces the other.

    The staking period runs from `staked_at` (or the incentive start, whichever is later) until
    `now` or the incentive end, whichever is earlier.

    Returns None if the provider has no record of the incentive, or of the token staked in it.
    """

    try:
        incentive = await provider.get_incentive(incentive_id)
        stake = await provider.get_stake(token_id, incentive_id)
    except NotFoundError as exc:
        logger.debug(f"No stake for token {token_id}: {exc}")
        return None

    key = incentive.key
    staking_start = key.start_time if staked_at is None else max(key.start_time, staked_at)
    seconds_staked = max(0, min(now, key.end_time) - staking_start)

    estimated_reward = estimate_pending_reward(
        stake=stake,
        incentive=incentive,
        seconds_staked=seconds_staked,
        total_liquidity=total_liquidity,
    )

    try:
        reward_info = await provider.get_reward_info(key, token_id)
    except NotFoundError as exc:
        logger.debug(f"No exact reward for token {token_id}: {exc}")
        exact_reward = None
    else:
        exact_reward = reward_info.reward

    return StakedRewards(
        token_id=token_id,
        incentive_id=incentive_id,
        status=get_incentive_status(incentive, now),
        liquidity=stake.liquidity,
        seconds_staked=seconds_staked,
        estimated_reward=estimated_reward,
        exact_reward=exact_reward,
    )
