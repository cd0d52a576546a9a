import dataclasses
import enum

import eth_abi.abi
from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from web3 import Web3

from clamm.checksum_cache import get_checksum_address
from clamm.constants import MAX_UINT128, MAX_UINT256
from clamm.exceptions.base import ClammValueError
from clamm.types.aliases import Liquidity, Timestamp, TokenId


class IncentiveStatus(enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    ENDED = "ended"


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class IncentiveKey:
    """
    The identity of a staking incentive, as passed to the staker contract.
    """

    reward_token: ChecksumAddress
    pool: ChecksumAddress
    start_time: Timestamp
    end_time: Timestamp
    refundee: ChecksumAddress

    def __post_init__(self) -> None:
        for field in ("reward_token", "pool", "refundee"):
            object.__setattr__(self, field, get_checksum_address(getattr(self, field)))
        if not (0 <= self.start_time <= MAX_UINT256 and 0 <= self.end_time <= MAX_UINT256):
            raise ClammValueError(message="Incentive times must be valid uint256 values")
        if self.end_time < self.start_time:
            raise ClammValueError(
                message=f"Incentive ends ({self.end_time}) before it starts ({self.start_time})"
            )

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def incentive_id(self) -> HexBytes:
        """
        The keccak hash of the ABI-encoded key, used by the staker contract to identify the
        incentive.

        ref: https://github.com/Uniswap/v3-staker/blob/main/contracts/libraries/IncentiveId.sol
        """

        return Web3.keccak(
            eth_abi.abi.encode(
                types=("address", "address", "uint256", "uint256", "address"),
                args=(self.reward_token, self.pool, self.start_time, self.end_time, self.refundee),
            )
        )


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class Incentive:
    key: IncentiveKey
    total_reward_unclaimed: int
    total_seconds_claimed_x128: int
    number_of_stakes: int

    def __post_init__(self) -> None:
        if self.total_reward_unclaimed < 0:
            raise ClammValueError(message="Unclaimed reward cannot be negative")
        if self.number_of_stakes < 0:
            raise ClammValueError(message="Stake count cannot be negative")


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class StakeRecord:
    """
    A position's stake in one incentive, captured when it was staked.
    """

    token_id: TokenId
    incentive_id: HexBytes
    liquidity: Liquidity
    seconds_per_liquidity_inside_initial_x128: int

    def __post_init__(self) -> None:
        if not (0 <= self.liquidity <= MAX_UINT128):
            raise ClammValueError(message=f"Invalid stake liquidity {self.liquidity}")


@dataclasses.dataclass(slots=True, frozen=True)
class RewardInfo:
    """
    The exact reward reported by the staker contract for a stake.
    """

    reward: int
    seconds_inside_x128: int


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class TimeBreakdown:
    """
    A countdown split into whole days, hours, minutes and seconds. `elapsed` is True once the
    target time has been reached, in which case every component is zero.
    """

    days: int
    hours: int
    minutes: int
    seconds: int
    total_seconds: int
    elapsed: bool


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class StakedRewards:
    """
    Rewards for a staked position. `estimated_reward` is a pro-rata approximation for display and
    is not a claimable amount. `exact_reward` is the staker contract's own figure, or None if the
    provider could not report one.
    """

    token_id: TokenId
    incentive_id: HexBytes
    status: IncentiveStatus
    liquidity: Liquidity
    seconds_staked: int
    estimated_reward: int
    exact_reward: int | None
