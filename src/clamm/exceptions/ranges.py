from clamm.exceptions.base import ClammError, ClammValueError

"""
Exceptions defined here are raised by the tick, price and range helpers.
"""


class OutOfRangeError(ClammError):
    """
    Raised when a tick or price falls beyond the bounds of the tick grid.
    """


class TickOutOfRange(OutOfRangeError):
    def __init__(self, tick: int) -> None:
        self.tick = tick
        super().__init__(message=f"Tick {tick} is outside the valid tick range.")


class PriceOutOfRange(OutOfRangeError):
    """
    Raised when a price or sqrt price cannot be represented by a tick on the grid.
    """


class InvalidTickRange(ClammValueError):
    """
    Raised when a lower bound is not strictly below its upper bound.
    """

    def __init__(self, lower: int, upper: int) -> None:
        self.lower = lower
        self.upper = upper
        super().__init__(message=f"Lower bound {lower} must be less than upper bound {upper}.")


class RangeTooNarrow(ClammValueError):
    """
    Raised when aligning a range to the tick spacing collapses it to zero width.
    """

    def __init__(self, tick: int, tick_spacing: int) -> None:
        self.tick = tick
        self.tick_spacing = tick_spacing
        super().__init__(
            message=f"Range collapsed to tick {tick} after alignment to spacing {tick_spacing}."
        )
