from clamm.exceptions.base import ClammError, ClammValueError
from clamm.exceptions.evm import DivisionByZero, EVMRevertError, InvalidUint256, Overflow
from clamm.exceptions.fetching import (
    ExternalServiceError,
    FetchingError,
    IncentiveNotFound,
    NotFoundError,
    PoolNotFound,
    QueryTimeout,
    StakeNotFound,
    TransientError,
)
from clamm.exceptions.quoting import (
    InvalidQuoteRequest,
    QuotingError,
    UnusableQuote,
    VenueMisconfigured,
)
from clamm.exceptions.ranges import (
    InvalidTickRange,
    OutOfRangeError,
    PriceOutOfRange,
    RangeTooNarrow,
    TickOutOfRange,
)

from . import evm, fetching, quoting, ranges

__all__ = (
    "ClammError",
    "ClammValueError",
    "DivisionByZero",
    "EVMRevertError",
    "ExternalServiceError",
    "FetchingError",
    "IncentiveNotFound",
    "InvalidQuoteRequest",
    "InvalidTickRange",
    "InvalidUint256",
    "NotFoundError",
    "OutOfRangeError",
    "Overflow",
    "PoolNotFound",
    "PriceOutOfRange",
    "QueryTimeout",
    "QuotingError",
    "RangeTooNarrow",
    "StakeNotFound",
    "TickOutOfRange",
    "TransientError",
    "UnusableQuote",
    "VenueMisconfigured",
    "evm",
    "fetching",
    "quoting",
    "ranges",
)
