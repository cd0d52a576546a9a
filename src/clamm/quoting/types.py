import dataclasses
import enum
import time

from clamm.config import settings
from clamm.erc20 import Token
from clamm.exceptions.quoting import InvalidQuoteRequest
from clamm.types.aliases import ChainId, Pip


class AggregationState(enum.Enum):
    INIT = "init"
    DISPATCHED = "dispatched"
    PARTIAL_RESULTS = "partial results"
    RESOLVED = "resolved"
    ALL_FAILED = "all failed"
    WRAP = "wrap"


@dataclasses.dataclass(slots=True, frozen=True)
class PoolQuote:
    """
    An exact-input quote reported by a venue for a single pool.
    """

    amount_out: int
    gas_estimate: int | None = None


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class Quote:
    amount_out: int
    estimated_gas: int
    venue_id: str
    fee: Pip | None


@dataclasses.dataclass(slots=True, frozen=True)
class QuoteRequest:
    token_in: Token
    token_out: Token
    amount_in: int

    def __post_init__(self) -> None:
        if self.amount_in <= 0:
            raise InvalidQuoteRequest(
                message=f"Input amount must be positive, got {self.amount_in}"
            )
        if self.token_in == self.token_out:
            raise InvalidQuoteRequest(message="Input and output tokens cannot be the same")
        if self.token_in.chain_id != self.token_out.chain_id:
            raise InvalidQuoteRequest(message="Input and output tokens are on different chains")
        # Every native placeholder address refers to the same asset
        if self.token_in.is_native and self.token_out.is_native:
            raise InvalidQuoteRequest(message="Input and output tokens cannot be the same")

    @property
    def chain_id(self) -> ChainId:
        return self.token_in.chain_id


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class VenueResult:
    """
    The outcome of querying one venue. Exactly one of `quote` and `error` is set.
    """

    venue_id: str
    quote: Quote | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.quote is not None


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class AggregateQuote:
    """
    The resolved outcome of an aggregation request. `best` is None when no venue produced a usable
    quote, which is a normal outcome.

    Quotes are point-in-time values. Callers must request a new quote if `is_stale` reports that
    the staleness window has elapsed before submitting a transaction.
    """

    request: QuoteRequest
    best: Quote | None
    results: tuple[VenueResult, ...]
    state: AggregationState
    created_at: float = dataclasses.field(default_factory=time.time)

    @property
    def has_quote(self) -> bool:
        return self.best is not None

    def is_stale(self, now: float | None = None, window: float | None = None) -> bool:
        if now is None:
            now = time.time()
        if window is None:
            window = settings.quotes.staleness_window
        return now - self.created_at > window
