from clamm.exceptions.base import ClammError


class EVMRevertError(ClammError):
    """
    Raised when a fixed-point operation would revert in the equivalent contract code.
    """

    def __init__(self, error: str) -> None:
        self.error = error
        super().__init__(message=f"EVM Revert: {error}")


class InvalidUint256(EVMRevertError):
    def __init__(self) -> None:
        super().__init__(error="Not a valid uint256")


class Overflow(EVMRevertError):
    """
    Raised when the mathematical result of an operation does not fit the target integer type.
    """


class DivisionByZero(EVMRevertError):
    def __init__(self) -> None:
        super().__init__(error="division by zero")
