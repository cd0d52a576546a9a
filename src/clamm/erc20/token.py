import dataclasses
import enum

from eth_typing import ChecksumAddress

from clamm.checksum_cache import get_checksum_address
from clamm.config import settings
from clamm.constants import MAX_UINT8, MIN_UINT8, NATIVE_TOKEN_ADDRESSES, WRAPPED_NATIVE_TOKENS
from clamm.exceptions.base import ClammValueError
from clamm.types.aliases import ChainId


class WrapOperation(enum.Enum):
    WRAP = "wrap"
    UNWRAP = "unwrap"


@dataclasses.dataclass(slots=True, frozen=True)
class Token:
    """
    An immutable reference to a token on a specific chain. The native asset is represented by one
    of the placeholder addresses in `NATIVE_TOKEN_ADDRESSES`.
    """

    chain_id: ChainId
    address: ChecksumAddress
    decimals: int
    symbol: str = dataclasses.field(default="", compare=False)

    def __post_init__(self) -> None:
        if not (MIN_UINT8 <= self.decimals <= MAX_UINT8):
            raise ClammValueError(message=f"Invalid token decimals {self.decimals}")
        # Normalize the address so that equality and hashing ignore input casing
        object.__setattr__(self, "address", get_checksum_address(self.address))

    def __str__(self) -> str:
        return self.symbol or self.address

    @property
    def is_native(self) -> bool:
        return self.address in NATIVE_TOKEN_ADDRESSES


def get_wrapped_native_address(chain_id: ChainId) -> ChecksumAddress:
    """
    Return the wrapped native token for the chain, preferring a configured override.
    """

    try:
        return get_checksum_address(settings.wrapped_native[chain_id])
    except KeyError:
        pass

    try:
        return WRAPPED_NATIVE_TOKENS[chain_id]
    except KeyError:
        raise ClammValueError(
            message=f"No wrapped native token is known for chain {chain_id}"
        ) from None


def _wrapped_native_address(chain_id: ChainId, wrapped_native: str | None) -> ChecksumAddress:
    return (
        get_checksum_address(wrapped_native)
        if wrapped_native is not None
        else get_wrapped_native_address(chain_id)
    )


def is_wrapped_native(token: Token, wrapped_native: str | None = None) -> bool:
    try:
        return token.address == _wrapped_native_address(token.chain_id, wrapped_native)
    except ClammValueError:
        return False


def get_wrap_operation(
    token_in: Token,
    token_out: Token,
    wrapped_native: str | None = None,
) -> WrapOperation | None:
    """
    Identify a swap between the native asset and its wrapped representation on the same chain.
    Such a swap is a deposit to (or withdrawal from) the wrapper contract, not a trade.
    """

    if token_in.chain_id != token_out.chain_id:
        return None
    if token_in.is_native and is_wrapped_native(token_out, wrapped_native):
        return WrapOperation.WRAP
    if is_wrapped_native(token_in, wrapped_native) and token_out.is_native:
        return WrapOperation.UNWRAP
    return None


def swap_token(token: Token, wrapped_native: str | None = None) -> Token:
    """
    Return the token that pools hold in place of the given token. Pools never hold the native
    asset directly, so the native placeholder is replaced by the wrapped native token.
    """

    if not token.is_native:
        return token
    return Token(
        chain_id=token.chain_id,
        address=_wrapped_native_address(token.chain_id, wrapped_native),
        decimals=token.decimals,
        symbol=f"W{token.symbol}" if token.symbol else "",
    )
