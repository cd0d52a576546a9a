from clamm.exceptions.base import ClammError, ClammValueError

"""
Exceptions defined here are raised by classes and functions in the `quoting` module.
"""


class QuotingError(ClammError):
    """
    Exception raised inside quoting helpers.
    """


class InvalidQuoteRequest(ClammValueError):
    """
    Raised when the aggregate quote request itself is malformed.
    """


class UnusableQuote(QuotingError):
    """
    Raised when a venue returns a quote that cannot be used for routing.
    """

    def __init__(self, venue_id: str, amount_out: int) -> None:
        self.venue_id = venue_id
        self.amount_out = amount_out
        super().__init__(message=f"Venue {venue_id} returned unusable amount {amount_out}.")


class VenueMisconfigured(QuotingError):
    """
    Raised when a venue cannot be queried for a request because of its own configuration, e.g. a
    native token on a chain with no known wrapped native token.
    """

    def __init__(self, venue_id: str, reason: str) -> None:
        self.venue_id = venue_id
        super().__init__(message=f"Venue {venue_id} is misconfigured: {reason}")
