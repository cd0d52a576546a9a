"""
Exceptions raised by chain data providers.

`NotFoundError` subclasses mark an expected absence (no pool, incentive or stake). `TransientError`
subclasses mark a retryable failure of the external data source.
"""

from clamm.exceptions.base import ClammError


class FetchingError(ClammError):
    """
    Base exception for data fetching errors.
    """


class NotFoundError(FetchingError):
    """
    Raised when the requested on-chain record does not exist.
    """


class PoolNotFound(NotFoundError):
    def __init__(self, venue_id: str, fee: int | None = None) -> None:
        self.venue_id = venue_id
        self.fee = fee
        super().__init__(
            message=f"No pool found on {venue_id}"
            if fee is None
            else f"No pool found on {venue_id} at fee {fee}"
        )


class IncentiveNotFound(NotFoundError):
    def __init__(self, incentive_id: str) -> None:
        self.incentive_id = incentive_id
        super().__init__(message=f"Incentive {incentive_id} is unknown.")


class StakeNotFound(NotFoundError):
    def __init__(self, token_id: int, incentive_id: str) -> None:
        self.token_id = token_id
        self.incentive_id = incentive_id
        super().__init__(message=f"Token {token_id} is not staked in incentive {incentive_id}.")


class TransientError(FetchingError):
    """
    Raised on a retryable failure of an external query.
    """


class QueryTimeout(TransientError):
    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(message=f"Query timed out after {timeout} seconds.")


class ExternalServiceError(TransientError):
    """
    Raised on errors resulting to some call to an external service.
    """

    def __init__(self, error: str) -> None:
        self.error = error
        super().__init__(message=f"External service error: {error}")
