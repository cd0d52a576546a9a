from clamm.mining.incentives import (
    compute_incentive_id,
    get_incentive_duration,
    get_incentive_progress,
    get_incentive_status,
    get_time_remaining,
    get_time_until_start,
)
from clamm.mining.rewards import (
    calculate_incentive_apr,
    estimate_pending_reward,
    get_staked_rewards,
)
from clamm.mining.types import (
    Incentive,
    IncentiveKey,
    IncentiveStatus,
    RewardInfo,
    StakedRewards,
    StakeRecord,
    TimeBreakdown,
)

__all__ = (
    "Incentive",
    "IncentiveKey",
    "IncentiveStatus",
    "RewardInfo",
    "StakeRecord",
    "StakedRewards",
    "TimeBreakdown",
    "calculate_incentive_apr",
    "compute_incentive_id",
    "estimate_pending_reward",
    "get_incentive_duration",
    "get_incentive_progress",
    "get_incentive_status",
    "get_staked_rewards",
    "get_time_remaining",
    "get_time_until_start",
)
