from clamm.quoting.aggregator import QuoteAggregation, QuoteAggregator
from clamm.quoting.types import (
    AggregateQuote,
    AggregationState,
    PoolQuote,
    Quote,
    QuoteRequest,
    VenueResult,
)
from clamm.quoting.venues import ProtocolType, Venue, VenueRegistry

__all__ = (
    "AggregateQuote",
    "AggregationState",
    "PoolQuote",
    "ProtocolType",
    "Quote",
    "QuoteAggregation",
    "QuoteAggregator",
    "QuoteRequest",
    "Venue",
    "VenueRegistry",
    "VenueResult",
)
