import asyncio

import pytest

from clamm.constants import NATIVE_TOKEN_PLACEHOLDER
from clamm.erc20 import Token
from clamm.exceptions import (
    ClammValueError,
    ExternalServiceError,
    InvalidQuoteRequest,
    Overflow,
    PoolNotFound,
    QueryTimeout,
    UnusableQuote,
    VenueMisconfigured,
)
from clamm.libraries.tick_math import get_sqrt_ratio_at_tick
from clamm.quoting import (
    AggregationState,
    PoolQuote,
    ProtocolType,
    QuoteAggregator,
    Venue,
)
from clamm.types import PoolState


def cl_pool_state(fee: int, liquidity: int, tick: int = 1000) -> PoolState:
    return PoolState(
        sqrt_price_x96=get_sqrt_ratio_at_tick(tick),
        tick=tick,
        liquidity=liquidity,
        fee=fee,
        tick_spacing=60,
    )


def cp_pool_state() -> PoolState:
    return PoolState(
        sqrt_price_x96=get_sqrt_ratio_at_tick(0),
        tick=0,
        liquidity=10**18,
        fee=None,
        tick_spacing=1,
    )


def sushiswap_v2() -> Venue:
    return Venue(
        venue_id="sushiswap_v2",
        protocol=ProtocolType.CONSTANT_PRODUCT,
        chain_id=1,
    )


async def test_selects_concentrated_liquidity_venue_when_constant_product_has_no_pool(
    provider, uniswap_v2, uniswap_v3, weth, usdc
):
    provider.pool_states["uniswap_v3", 3000] = cl_pool_state(fee=3000, liquidity=10**21)
    provider.pool_quotes["uniswap_v3", 3000] = PoolQuote(amount_out=998_500)

    aggregator = QuoteAggregator(provider, [uniswap_v2, uniswap_v3])
    result = await aggregator.get_best_quote(weth, usdc, 1_000_000)

    assert result.state is AggregationState.RESOLVED
    assert result.has_quote
    assert result.best is not None
    assert result.best.venue_id == "uniswap_v3"
    assert result.best.amount_out == 998_500
    assert result.best.fee == 3000
    assert result.best.estimated_gas == 180_000

    v2_result, v3_result = result.results
    assert v2_result.venue_id == "uniswap_v2"
    assert not v2_result.ok
    assert isinstance(v2_result.error, PoolNotFound)
    assert v3_result.ok


async def test_all_venues_failing_is_not_an_error(provider, uniswap_v2, uniswap_v3, weth, usdc):
    aggregator = QuoteAggregator(provider, [uniswap_v2, uniswap_v3])
    result = await aggregator.get_best_quote(weth, usdc, 1_000_000)

    assert result.best is None
    assert not result.has_quote
    assert result.state is AggregationState.ALL_FAILED
    assert len(result.results) == 2
    assert all(isinstance(venue_result.error, PoolNotFound) for venue_result in result.results)


async def test_wrap_and_unwrap_shortcut(provider, uniswap_v2, eth, weth):
    aggregator = QuoteAggregator(provider, [uniswap_v2])

    wrap = await aggregator.get_best_quote(eth, weth, 10**18)
    assert wrap.state is AggregationState.WRAP
    assert wrap.best is not None
    assert wrap.best.amount_out == 10**18
    assert wrap.best.estimated_gas == 50_000
    assert wrap.best.venue_id == "wrap"
    assert wrap.best.fee is None

    unwrap = await aggregator.get_best_quote(weth, eth, 10**18)
    assert unwrap.state is AggregationState.WRAP
    assert unwrap.best is not None
    assert unwrap.best.amount_out == 10**18
    assert unwrap.best.estimated_gas == 40_000

    assert provider.calls == []


async def test_native_token_is_quoted_as_wrapped(provider, uniswap_v2, eth, weth, usdc):
    provider.pool_states["uniswap_v2", None] = cp_pool_state()
    provider.pool_quotes["uniswap_v2", None] = PoolQuote(amount_out=3_000_000_000)

    aggregator = QuoteAggregator(provider, [uniswap_v2])
    result = await aggregator.get_best_quote(eth, usdc, 10**18)

    assert result.best is not None
    assert result.best.amount_out == 3_000_000_000
    assert result.best.estimated_gas == 150_000
    for _, _, _, token_in, token_out in provider.calls:
        assert token_in == weth.address
        assert token_out == usdc.address


async def test_venue_without_wrapped_native_token_fails_alone(provider):
    bsc_chain_id = 56
    bnb = Token(
        chain_id=bsc_chain_id,
        address=NATIVE_TOKEN_PLACEHOLDER,
        decimals=18,
        symbol="BNB",
    )
    busd = Token(
        chain_id=bsc_chain_id,
        address="0xe9e7CEA3DedcA5984780Bafc599bD69ADd087D56",
        decimals=18,
        symbol="BUSD",
    )
    biswap = Venue(
        venue_id="biswap",
        protocol=ProtocolType.CONSTANT_PRODUCT,
        chain_id=bsc_chain_id,
    )
    pancakeswap = Venue(
        venue_id="pancakeswap_v2",
        protocol=ProtocolType.CONSTANT_PRODUCT,
        chain_id=bsc_chain_id,
        wrapped_native="0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
    )
    provider.pool_states["pancakeswap_v2", None] = cp_pool_state()
    provider.pool_quotes["pancakeswap_v2", None] = PoolQuote(amount_out=123)

    aggregator = QuoteAggregator(provider, [biswap, pancakeswap])
    result = await aggregator.get_best_quote(bnb, busd, 10**18)

    assert result.state is AggregationState.RESOLVED
    assert result.best is not None
    assert result.best.venue_id == "pancakeswap_v2"
    assert result.best.amount_out == 123

    biswap_result, pancakeswap_result = result.results
    assert isinstance(biswap_result.error, VenueMisconfigured)
    assert pancakeswap_result.ok
    assert all(venue_id == "pancakeswap_v2" for _, venue_id, *_ in provider.calls)


async def test_exact_tie_goes_to_first_registered_venue(provider, uniswap_v2, weth, usdc):
    sushiswap = sushiswap_v2()
    for venue_id in ("uniswap_v2", "sushiswap_v2"):
        provider.pool_states[venue_id, None] = cp_pool_state()
        provider.pool_quotes[venue_id, None] = PoolQuote(amount_out=1_000, gas_estimate=120_000)

    result = await QuoteAggregator(provider, [sushiswap, uniswap_v2]).get_best_quote(
        weth, usdc, 1
    )
    assert result.best is not None
    assert result.best.venue_id == "sushiswap_v2"
    assert result.best.estimated_gas == 120_000

    result = await QuoteAggregator(provider, [uniswap_v2, sushiswap]).get_best_quote(
        weth, usdc, 1
    )
    assert result.best is not None
    assert result.best.venue_id == "uniswap_v2"


async def test_greatest_output_wins(provider, uniswap_v2, weth, usdc):
    sushiswap = sushiswap_v2()
    provider.pool_states["uniswap_v2", None] = cp_pool_state()
    provider.pool_quotes["uniswap_v2", None] = PoolQuote(amount_out=1_000)
    provider.pool_states["sushiswap_v2", None] = cp_pool_state()
    provider.pool_quotes["sushiswap_v2", None] = PoolQuote(amount_out=1_001)

    result = await QuoteAggregator(provider, [uniswap_v2, sushiswap]).get_best_quote(
        weth, usdc, 1
    )
    assert result.best is not None
    assert result.best.venue_id == "sushiswap_v2"
    assert result.best.amount_out == 1_001


async def test_fee_tier_with_most_liquidity_is_quoted(provider, uniswap_v3, weth, usdc):
    provider.pool_states["uniswap_v3", 100] = cl_pool_state(fee=100, liquidity=0)
    provider.pool_states["uniswap_v3", 500] = cl_pool_state(fee=500, liquidity=10**18)
    provider.pool_states["uniswap_v3", 3000] = cl_pool_state(fee=3000, liquidity=10**21)
    provider.pool_states["uniswap_v3", 10000] = cl_pool_state(fee=10000, liquidity=10**21)
    for fee in (100, 500, 3000, 10000):
        provider.pool_quotes["uniswap_v3", fee] = PoolQuote(amount_out=fee, gas_estimate=1)

    result = await QuoteAggregator(provider, [uniswap_v3]).get_best_quote(weth, usdc, 1)

    # equal liquidity at 3000 and 10000 resolves to the tier configured first
    assert result.best is not None
    assert result.best.fee == 3000
    assert result.best.amount_out == 3000
    assert [call[2] for call in provider.calls if call[0] == "quote"] == [3000]
    assert sorted(call[2] for call in provider.calls if call[0] == "state") == [
        100,
        500,
        3000,
        10000,
    ]


async def test_zero_liquidity_and_malformed_tiers_are_skipped(provider, uniswap_v3, weth, usdc):
    provider.pool_states["uniswap_v3", 500] = cl_pool_state(fee=500, liquidity=0)
    # the tick does not match the sqrt price
    provider.pool_states["uniswap_v3", 3000] = PoolState(
        sqrt_price_x96=get_sqrt_ratio_at_tick(1000),
        tick=5000,
        liquidity=10**21,
        fee=3000,
        tick_spacing=60,
    )
    provider.pool_quotes["uniswap_v3", 3000] = PoolQuote(amount_out=1)

    result = await QuoteAggregator(provider, [uniswap_v3]).get_best_quote(weth, usdc, 1)
    assert result.best is None
    assert isinstance(result.results[0].error, PoolNotFound)


async def test_slow_venue_times_out(provider, uniswap_v2, uniswap_v3, weth, usdc):
    provider.pool_states["uniswap_v2", None] = cp_pool_state()
    provider.pool_quotes["uniswap_v2", None] = PoolQuote(amount_out=2_000_000)
    provider.delays["uniswap_v2", None] = 5.0
    provider.pool_states["uniswap_v3", 3000] = cl_pool_state(fee=3000, liquidity=10**21)
    provider.pool_quotes["uniswap_v3", 3000] = PoolQuote(amount_out=998_500)

    aggregator = QuoteAggregator(provider, [uniswap_v2, uniswap_v3], query_timeout=0.05)
    result = await aggregator.get_best_quote(weth, usdc, 1_000_000)

    assert result.best is not None
    assert result.best.venue_id == "uniswap_v3"
    assert isinstance(result.results[0].error, QueryTimeout)


async def test_non_positive_quote_is_unusable(provider, uniswap_v2, weth, usdc):
    provider.pool_states["uniswap_v2", None] = cp_pool_state()
    provider.pool_quotes["uniswap_v2", None] = PoolQuote(amount_out=0)

    result = await QuoteAggregator(provider, [uniswap_v2]).get_best_quote(weth, usdc, 1)
    assert result.best is None
    assert isinstance(result.results[0].error, UnusableQuote)


async def test_transient_errors_are_retried(provider, uniswap_v2, weth, usdc):
    provider.pool_states["uniswap_v2", None] = cp_pool_state()
    provider.pool_quotes["uniswap_v2", None] = ExternalServiceError(error="rate limited")

    single_attempt = QuoteAggregator(provider, [uniswap_v2], query_retries=1)
    result = await single_attempt.get_best_quote(weth, usdc, 1)
    assert isinstance(result.results[0].error, ExternalServiceError)

    attempts = 0

    async def flaky_get_pool_exact_quote(*args):
        nonlocal attempts
        attempts += 1
        if attempts == 1:
            raise ExternalServiceError(error="rate limited")
        return PoolQuote(amount_out=500)

    provider.get_pool_exact_quote = flaky_get_pool_exact_quote
    retrying = QuoteAggregator(provider, [uniswap_v2], query_retries=3)
    result = await retrying.get_best_quote(weth, usdc, 1)
    assert result.best is not None
    assert result.best.amount_out == 500
    assert attempts == 2


async def test_arithmetic_errors_propagate(provider, uniswap_v2, weth, usdc):
    provider.pool_states["uniswap_v2", None] = cp_pool_state()
    provider.pool_quotes["uniswap_v2", None] = Overflow(error="uint256")

    with pytest.raises(Overflow):
        await QuoteAggregator(provider, [uniswap_v2]).get_best_quote(weth, usdc, 1)


async def test_invalid_request_is_rejected_before_dispatch(provider, uniswap_v2, weth, usdc):
    aggregator = QuoteAggregator(provider, [uniswap_v2])

    with pytest.raises(InvalidQuoteRequest):
        await aggregator.get_best_quote(weth, usdc, 0)

    with pytest.raises(InvalidQuoteRequest):
        await aggregator.get_best_quote(usdc, usdc, 1)

    assert provider.calls == []


async def test_venues_on_other_chains_are_not_queried(provider, weth, usdc):
    base_venue = Venue(
        venue_id="aerodrome",
        protocol=ProtocolType.CONSTANT_PRODUCT,
        chain_id=8453,
    )
    result = await QuoteAggregator(provider, [base_venue]).get_best_quote(weth, usdc, 1)
    assert result.results == ()
    assert result.state is AggregationState.ALL_FAILED
    assert provider.calls == []


async def test_cancelling_one_aggregation_leaves_others_running(
    provider, uniswap_v2, weth, usdc
):
    provider.pool_states["uniswap_v2", None] = cp_pool_state()
    provider.pool_quotes["uniswap_v2", None] = PoolQuote(amount_out=1_000)
    provider.delays["uniswap_v2", None] = 0.1

    aggregator = QuoteAggregator(provider, [uniswap_v2])
    cancelled = asyncio.create_task(aggregator.get_best_quote(weth, usdc, 1))
    completed = asyncio.create_task(aggregator.get_best_quote(weth, usdc, 2))
    await asyncio.sleep(0.01)
    cancelled.cancel()

    result = await completed
    assert result.best is not None
    assert result.best.amount_out == 1_000

    with pytest.raises(asyncio.CancelledError):
        await cancelled


async def test_quote_staleness(provider, uniswap_v2, weth, usdc):
    provider.pool_states["uniswap_v2", None] = cp_pool_state()
    provider.pool_quotes["uniswap_v2", None] = PoolQuote(amount_out=1_000)

    result = await QuoteAggregator(provider, [uniswap_v2]).get_best_quote(weth, usdc, 1)
    assert not result.is_stale(now=result.created_at + 1)
    assert result.is_stale(now=result.created_at + 16)
    assert not result.is_stale(now=result.created_at + 16, window=30)


def test_invalid_aggregator_settings(provider, uniswap_v2):
    with pytest.raises(ClammValueError):
        QuoteAggregator(provider, [uniswap_v2], query_timeout=0)

    with pytest.raises(ClammValueError):
        QuoteAggregator(provider, [uniswap_v2], query_retries=0)
