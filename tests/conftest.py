import asyncio
import logging
from collections.abc import Generator

import pytest
from hexbytes import HexBytes

from clamm.constants import NATIVE_TOKEN_PLACEHOLDER
from clamm.erc20 import Token
from clamm.exceptions import IncentiveNotFound, PoolNotFound, StakeNotFound
from clamm.logging import logger
from clamm.mining.types import Incentive, IncentiveKey, RewardInfo, StakeRecord
from clamm.quoting.types import PoolQuote
from clamm.quoting.venues import ProtocolType, Venue
from clamm.types.abstract import AbstractChainDataProvider
from clamm.types.aliases import Pip, TokenId
from clamm.types.pool import PoolState

MAINNET_CHAIN_ID = 1

WETH = Token(
    chain_id=MAINNET_CHAIN_ID,
    address="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    decimals=18,
    symbol="WETH",
)
USDC = Token(
    chain_id=MAINNET_CHAIN_ID,
    address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
    decimals=6,
    symbol="USDC",
)
ETH = Token(
    chain_id=MAINNET_CHAIN_ID,
    address=NATIVE_TOKEN_PLACEHOLDER,
    decimals=18,
    symbol="ETH",
)


class FakeChainDataProvider(AbstractChainDataProvider):
    """
    An in-memory provider. Pool states and quotes are keyed by (venue ID, fee), and a stored
    exception is raised instead of returned. Delays are applied before answering.
    """

    def __init__(self) -> None:
        self.pool_states: dict[tuple[str, Pip | None], PoolState | Exception] = {}
        self.pool_quotes: dict[tuple[str, Pip | None], PoolQuote | Exception] = {}
        self.delays: dict[tuple[str, Pip | None], float] = {}
        self.incentives: dict[HexBytes, Incentive] = {}
        self.stakes: dict[tuple[TokenId, HexBytes], StakeRecord] = {}
        self.rewards: dict[tuple[HexBytes, TokenId], RewardInfo] = {}
        self.calls: list[tuple[str, str, Pip | None, str, str]] = []

    async def _answer(self, table, key, venue):
        await asyncio.sleep(self.delays.get(key, 0))
        try:
            result = table[key]
        except KeyError:
            raise PoolNotFound(venue.venue_id, key[1]) from None
        if isinstance(result, Exception):
            raise result
        return result

    async def get_pool_state(self, venue, token_a, token_b, fee):
        self.calls.append(("state", venue.venue_id, fee, token_a.address, token_b.address))
        return await self._answer(self.pool_states, (venue.venue_id, fee), venue)

    async def get_pool_exact_quote(self, venue, token_in, token_out, fee, amount_in):
        self.calls.append(("quote", venue.venue_id, fee, token_in.address, token_out.address))
        return await self._answer(self.pool_quotes, (venue.venue_id, fee), venue)

    async def get_incentive(self, incentive_id):
        try:
            return self.incentives[incentive_id]
        except KeyError:
            raise IncentiveNotFound(incentive_id.to_0x_hex()) from None

    async def get_stake(self, token_id, incentive_id):
        try:
            return self.stakes[token_id, incentive_id]
        except KeyError:
            raise StakeNotFound(token_id, incentive_id.to_0x_hex()) from None

    async def get_reward_info(self, incentive_key, token_id):
        try:
            return self.rewards[incentive_key.incentive_id, token_id]
        except KeyError:
            raise StakeNotFound(token_id, incentive_key.incentive_id.to_0x_hex()) from None


@pytest.fixture(scope="session", autouse=True)
def _set_clamm_logging() -> None:
    """
    Set the logging level to DEBUG for the test run
    """
    logger.setLevel(logging.DEBUG)


@pytest.fixture
def provider() -> Generator[FakeChainDataProvider, None, None]:
    yield FakeChainDataProvider()


@pytest.fixture
def uniswap_v2() -> Venue:
    return Venue(
        venue_id="uniswap_v2",
        protocol=ProtocolType.CONSTANT_PRODUCT,
        chain_id=MAINNET_CHAIN_ID,
    )


@pytest.fixture
def uniswap_v3() -> Venue:
    return Venue(
        venue_id="uniswap_v3",
        protocol=ProtocolType.CONCENTRATED_LIQUIDITY,
        chain_id=MAINNET_CHAIN_ID,
        fee_tiers=(100, 500, 3000, 10000),
    )


@pytest.fixture
def incentive_key() -> IncentiveKey:
    return IncentiveKey(
        reward_token=USDC.address,
        pool="0x88e6A0c2dDD26FEEb64F039a2c41296FcB3f5640",
        start_time=1_700_000_000,
        end_time=1_700_010_000,
        refundee="0x000000000000000000000000000000000000dEaD",
    )


@pytest.fixture
def weth() -> Token:
    return WETH


@pytest.fixture
def usdc() -> Token:
    return USDC


@pytest.fixture
def eth() -> Token:
    return ETH
