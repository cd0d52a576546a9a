import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import tenacity

from clamm.config import settings
from clamm.erc20 import Token, WrapOperation, get_wrap_operation, swap_token
from clamm.exceptions.base import ClammValueError
from clamm.exceptions.evm import EVMRevertError
from clamm.exceptions.fetching import PoolNotFound, QueryTimeout, TransientError
from clamm.exceptions.quoting import UnusableQuote, VenueMisconfigured
from clamm.libraries.tick_math import MAX_SQRT_RATIO, MIN_SQRT_RATIO, get_tick_at_sqrt_ratio
from clamm.logging import logger
from clamm.quoting.types import (
    AggregateQuote,
    AggregationState,
    PoolQuote,
    Quote,
    QuoteRequest,
    VenueResult,
)
from clamm.quoting.venues import ProtocolType, Venue, VenueRegistry
from clamm.types.abstract import AbstractChainDataProvider
from clamm.types.aliases import Pip
from clamm.types.pool import PoolState


def _raise_if_fatal(result: BaseException) -> None:
    """
    Re-raise errors that indicate a bug rather than a venue failure.
    """

    if isinstance(result, (EVMRevertError, ClammValueError)) or not isinstance(result, Exception):
        raise result


def _is_well_formed(pool_state: PoolState) -> bool:
    if not (MIN_SQRT_RATIO <= pool_state.sqrt_price_x96 < MAX_SQRT_RATIO):
        return False
    # A swap ending exactly on a tick boundary may leave the tick one below its sqrt price
    return abs(get_tick_at_sqrt_ratio(pool_state.sqrt_price_x96) - pool_state.tick) <= 1


class QuoteAggregation:
    """
    The mutable state of a single aggregation request. Results are recorded as venues settle and
    are reported in venue registration order.
    """

    def __init__(self, request: QuoteRequest, venues: list[Venue]) -> None:
        self.request = request
        self.venues = venues
        self.state = AggregationState.INIT
        self._results: dict[str, VenueResult] = {}

    def dispatch(self) -> None:
        self.state = AggregationState.DISPATCHED

    def record(self, result: VenueResult) -> None:
        self._results[result.venue_id] = result
        if result.ok and self.state is AggregationState.DISPATCHED:
            self.state = AggregationState.PARTIAL_RESULTS

    @property
    def results(self) -> tuple[VenueResult, ...]:
        return tuple(
            self._results[venue.venue_id]
            for venue in self.venues
            if venue.venue_id in self._results
        )

    def select_best(self) -> Quote | None:
        best: Quote | None = None
        for result in self.results:
            # strict comparison keeps the earliest registered venue on an exact tie
            if result.quote is not None and (
                best is None or result.quote.amount_out > best.amount_out
            ):
                best = result.quote
        return best

    def resolve(self) -> AggregateQuote:
        best = self.select_best()
        self.state = AggregationState.ALL_FAILED if best is None else AggregationState.RESOLVED
        return AggregateQuote(
            request=self.request,
            best=best,
            results=self.results,
            state=self.state,
        )

    def resolve_wrap(self, quote: Quote) -> AggregateQuote:
        self.state = AggregationState.WRAP
        return AggregateQuote(
            request=self.request,
            best=quote,
            results=(),
            state=self.state,
        )


class QuoteAggregator:
    """
    Queries every registered venue concurrently for an exact-input swap and returns the quote with
    the greatest output.

    A venue that has no pool, times out, or fails is excluded from the result without affecting
    the others. Each call to `get_best_quote` owns its tasks, so cancelling it cancels only the
    queries it dispatched.
    """

    def __init__(
        self,
        provider: AbstractChainDataProvider,
        venues: VenueRegistry | Iterable[Venue],
        *,
        query_timeout: float | None = None,
        query_retries: int | None = None,
    ) -> None:
        self.provider = provider
        self.venues = venues if isinstance(venues, VenueRegistry) else VenueRegistry(venues)
        self.query_timeout = (
            query_timeout if query_timeout is not None else settings.quotes.query_timeout
        )
        self.query_retries = (
            query_retries if query_retries is not None else settings.quotes.query_retries
        )
        if self.query_timeout <= 0:
            raise ClammValueError(message=f"Invalid query timeout {self.query_timeout}")
        if self.query_retries < 1:
            raise ClammValueError(message=f"Invalid query retry count {self.query_retries}")

    async def _query[T](self, func: Callable[..., Awaitable[T]], *args: Any) -> T:
        """
        Await a single provider call under its own timeout, retrying transient failures.
        """

        async def query_with_timeout() -> T:
            try:
                async with asyncio.timeout(self.query_timeout):
                    return await func(*args)
            except TimeoutError:
                raise QueryTimeout(self.query_timeout) from None

        retrying = tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self.query_retries),
            wait=tenacity.wait_exponential_jitter(initial=0.1, max=1.0),
            retry=tenacity.retry_if_exception_type(TransientError),
            reraise=True,
        )
        return await retrying(query_with_timeout)

    async def _get_fee_tier_state(
        self,
        venue: Venue,
        token_in: Token,
        token_out: Token,
        fee: Pip,
    ) -> PoolState:
        return await self._query(self.provider.get_pool_state, venue, token_in, token_out, fee)

    async def _select_fee_tier(self, venue: Venue, token_in: Token, token_out: Token) -> Pip:
        """
        Find the fee tier holding the most active liquidity. Ties go to the tier listed first in
        the venue's configuration.
        """

        tier_states = await asyncio.gather(
            *(
                self._get_fee_tier_state(venue, token_in, token_out, fee)
                for fee in venue.fee_tiers
            ),
            return_exceptions=True,
        )

        best_fee: Pip | None = None
        best_liquidity = 0
        for fee, tier_state in zip(venue.fee_tiers, tier_states, strict=True):
            if isinstance(tier_state, BaseException):
                _raise_if_fatal(tier_state)
                logger.debug(f"{venue.venue_id} fee tier {fee} unavailable: {tier_state}")
                continue
            if not _is_well_formed(tier_state):
                logger.debug(f"{venue.venue_id} fee tier {fee} returned a malformed snapshot")
                continue
            if tier_state.liquidity > best_liquidity:
                best_fee = fee
                best_liquidity = tier_state.liquidity

        if best_fee is None:
            raise PoolNotFound(venue.venue_id)
        return best_fee

    async def _quote_venue(self, venue: Venue, request: QuoteRequest) -> Quote:
        try:
            token_in = swap_token(request.token_in, venue.wrapped_native)
            token_out = swap_token(request.token_out, venue.wrapped_native)
        except ClammValueError as exc:
            raise VenueMisconfigured(venue_id=venue.venue_id, reason=str(exc)) from exc

        match venue.protocol:
            case ProtocolType.CONSTANT_PRODUCT:
                fee = None
                # raises PoolNotFound for a missing pair
                await self._query(self.provider.get_pool_state, venue, token_in, token_out, fee)
                default_gas = settings.quotes.constant_product_gas
            case ProtocolType.CONCENTRATED_LIQUIDITY:
                fee = await self._select_fee_tier(venue, token_in, token_out)
                default_gas = settings.quotes.concentrated_liquidity_gas

        pool_quote: PoolQuote = await self._query(
            self.provider.get_pool_exact_quote,
            venue,
            token_in,
            token_out,
            fee,
            request.amount_in,
        )
        if pool_quote.amount_out <= 0:
            raise UnusableQuote(venue_id=venue.venue_id, amount_out=pool_quote.amount_out)

        return Quote(
            amount_out=pool_quote.amount_out,
            estimated_gas=(
                pool_quote.gas_estimate if pool_quote.gas_estimate is not None else default_gas
            ),
            venue_id=venue.venue_id,
            fee=fee,
        )

    async def _resolve_venue(self, aggregation: QuoteAggregation, venue: Venue) -> None:
        try:
            quote = await self._quote_venue(venue, aggregation.request)
        except Exception as exc:
            _raise_if_fatal(exc)
            logger.debug(f"{venue.venue_id} failed to quote: {exc}")
            aggregation.record(VenueResult(venue_id=venue.venue_id, error=exc))
        else:
            logger.debug(f"{venue.venue_id} quoted {quote.amount_out} (fee {quote.fee})")
            aggregation.record(VenueResult(venue_id=venue.venue_id, quote=quote))

    def _get_wrap_quote(self, request: QuoteRequest) -> Quote | None:
        operation = get_wrap_operation(request.token_in, request.token_out)
        match operation:
            case WrapOperation.WRAP:
                gas = settings.quotes.wrap_gas
            case WrapOperation.UNWRAP:
                gas = settings.quotes.unwrap_gas
            case None:
                return None

        return Quote(
            amount_out=request.amount_in,
            estimated_gas=gas,
            venue_id=operation.value,
            fee=None,
        )

    async def get_best_quote(
        self,
        token_in: Token,
        token_out: Token,
        amount_in: int,
    ) -> AggregateQuote:
        """
        Quote `amount_in` of `token_in` for `token_out` on every venue of the tokens' chain.

        Returns an `AggregateQuote` whose `best` attribute is None if no venue produced a usable
        quote. A malformed request raises `InvalidQuoteRequest` before any query is dispatched.
        """

        request = QuoteRequest(token_in=token_in, token_out=token_out, amount_in=amount_in)
        aggregation = QuoteAggregation(request, self.venues.for_chain(request.chain_id))

        if (wrap_quote := self._get_wrap_quote(request)) is not None:
            logger.debug(f"Quoting {token_in} -> {token_out} as a {wrap_quote.venue_id}")
            return aggregation.resolve_wrap(wrap_quote)

        aggregation.dispatch()
        settled = await asyncio.gather(
            *(self._resolve_venue(aggregation, venue) for venue in aggregation.venues),
            return_exceptions=True,
        )
        for result in settled:
            if isinstance(result, BaseException):
                raise result

        aggregate = aggregation.resolve()
        logger.debug(
            f"Best quote for {amount_in} {token_in} -> {token_out}: "
            f"{aggregate.best.amount_out if aggregate.best is not None else None} "
            f"from {len(aggregate.results)} venue(s)"
        )
        return aggregate
