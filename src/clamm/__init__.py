from .checksum_cache import get_checksum_address
from .config import settings
from .logging import logger
from .version import __version__

# isort: split

from . import exceptions, libraries
from .erc20 import Token, WrapOperation
from .mining import (
    Incentive,
    IncentiveKey,
    IncentiveStatus,
    RewardInfo,
    StakedRewards,
    StakeRecord,
    calculate_incentive_apr,
    compute_incentive_id,
    estimate_pending_reward,
    get_staked_rewards,
)
from .positions import PositionRange, PositionStatus, get_position_amounts, get_position_status
from .quoting import (
    AggregateQuote,
    ProtocolType,
    Quote,
    QuoteAggregator,
    QuoteRequest,
    Venue,
    VenueRegistry,
)
from .ranges import (
    AlignedBound,
    RangeConfig,
    RangePreset,
    TickRange,
    align_price_to_bound,
    build_range_config,
    get_preset_range,
)
from .types import PoolState
from .types.abstract import AbstractChainDataProvider

__all__ = (
    "AbstractChainDataProvider",
    "AggregateQuote",
    "AlignedBound",
    "Incentive",
    "IncentiveKey",
    "IncentiveStatus",
    "PoolState",
    "PositionRange",
    "PositionStatus",
    "ProtocolType",
    "Quote",
    "QuoteAggregator",
    "QuoteRequest",
    "RangeConfig",
    "RangePreset",
    "RewardInfo",
    "StakeRecord",
    "StakedRewards",
    "TickRange",
    "Token",
    "Venue",
    "VenueRegistry",
    "WrapOperation",
    "__version__",
    "align_price_to_bound",
    "build_range_config",
    "calculate_incentive_apr",
    "compute_incentive_id",
    "estimate_pending_reward",
    "exceptions",
    "get_checksum_address",
    "get_position_amounts",
    "get_position_status",
    "get_preset_range",
    "get_staked_rewards",
    "libraries",
    "logger",
    "settings",
)
