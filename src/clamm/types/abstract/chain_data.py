import abc
from typing import TYPE_CHECKING

from clamm.types.aliases import Pip, TokenId
from clamm.types.pool import PoolState

if TYPE_CHECKING:
    from hexbytes import HexBytes

    from clamm.erc20 import Token
    from clamm.mining.types import Incentive, IncentiveKey, RewardInfo, StakeRecord
    from clamm.quoting.types import PoolQuote
    from clamm.quoting.venues import Venue


class AbstractChainDataProvider(abc.ABC):
    """
    Read-only access to on-chain pool, incentive and stake records.

    Implementations wrap an RPC transport. Every method is idempotent and returns immutable value
    objects. Expected absences are raised as `NotFoundError` subclasses, and retryable transport
    failures as `TransientError` subclasses.
    """

    @abc.abstractmethod
    async def get_pool_state(
        self,
        venue: "Venue",
        token_a: "Token",
        token_b: "Token",
        fee: Pip | None,
    ) -> PoolState:
        """
        Return the current state of the pool for the token pair and fee tier. Constant-product
        venues are called with `fee=None`.

        Raises `PoolNotFound` if the venue has no pool for the pair.
        """

    @abc.abstractmethod
    async def get_pool_exact_quote(
        self,
        venue: "Venue",
        token_in: "Token",
        token_out: "Token",
        fee: Pip | None,
        amount_in: int,
    ) -> "PoolQuote":
        """
        Return the exact-input swap result reported by the venue's quoter.
        """

    @abc.abstractmethod
    async def get_incentive(self, incentive_id: "HexBytes") -> "Incentive":
        """
        Raises `IncentiveNotFound` if the incentive was never created.
        """

    @abc.abstractmethod
    async def get_stake(self, token_id: TokenId, incentive_id: "HexBytes") -> "StakeRecord":
        """
        Raises `StakeNotFound` if the token is not staked in the incentive.
        """

    @abc.abstractmethod
    async def get_reward_info(
        self,
        incentive_key: "IncentiveKey",
        token_id: TokenId,
    ) -> "RewardInfo":
        """
        Return the exact reward accrued by the staker contract's seconds-per-liquidity accumulator.
        """
