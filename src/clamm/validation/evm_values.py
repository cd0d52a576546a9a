from typing import Annotated

from pydantic import Field

from clamm.constants import (
    MAX_UINT128,
    MAX_UINT160,
    MAX_UINT256,
    MIN_UINT128,
    MIN_UINT160,
    MIN_UINT256,
)

type ValidatedUint128 = Annotated[int, Field(strict=True, ge=MIN_UINT128, le=MAX_UINT128)]
type ValidatedUint160NonZero = Annotated[int, Field(strict=True, gt=MIN_UINT160, le=MAX_UINT160)]
type ValidatedUint256 = Annotated[int, Field(strict=True, ge=MIN_UINT256, le=MAX_UINT256)]
