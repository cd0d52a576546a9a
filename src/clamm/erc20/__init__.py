from .token import (
    Token,
    WrapOperation,
    get_wrap_operation,
    get_wrapped_native_address,
    is_wrapped_native,
    swap_token,
)

__all__ = (
    "Token",
    "WrapOperation",
    "get_wrap_operation",
    "get_wrapped_native_address",
    "is_wrapped_native",
    "swap_token",
)
