"""
Generation of position bounds from named range presets.

A band preset of p% places the bounds at the ticks whose prices are (1 + p/100) times below and
above the current price, each aligned to the pool's tick spacing.
"""

import dataclasses
import enum
import functools
from fractions import Fraction

from clamm.exceptions.base import ClammValueError
from clamm.exceptions.ranges import InvalidTickRange, RangeTooNarrow, TickOutOfRange
from clamm.libraries.price_math import (
    PriceLike,
    get_nearest_tick_at_ratio,
    price_to_tick,
    tick_to_price,
)
from clamm.libraries.tick_math import (
    MAX_TICK,
    MIN_TICK,
    get_sqrt_ratio_at_tick,
    max_usable_tick,
    min_usable_tick,
    nearest_usable_tick,
)
from clamm.types.aliases import Tick


class RangePreset(enum.Enum):
    FULL = "full"
    WIDE = "wide"
    MEDIUM = "medium"
    NARROW = "narrow"
    CUSTOM = "custom"

    @property
    def percent(self) -> int | None:
        return _PRESET_PERCENTS.get(self)

    @property
    def label(self) -> str:
        return _PRESET_LABELS[self][0]

    @property
    def description(self) -> str:
        return _PRESET_LABELS[self][1]


_PRESET_PERCENTS: dict[RangePreset, int] = {
    RangePreset.WIDE: 50,
    RangePreset.MEDIUM: 20,
    RangePreset.NARROW: 5,
}

_PRESET_LABELS: dict[RangePreset, tuple[str, str]] = {
    RangePreset.FULL: ("Full Range", "Earn fees at any price"),
    RangePreset.WIDE: ("Safe", "±50% from current price"),
    RangePreset.MEDIUM: ("Common", "±20% from current price"),
    RangePreset.NARROW: ("Narrow", "±5% for stable pairs"),
    RangePreset.CUSTOM: ("Custom", "Set your own range"),
}


@dataclasses.dataclass(slots=True, frozen=True)
class TickRange:
    tick_lower: Tick
    tick_upper: Tick


@dataclasses.dataclass(slots=True, frozen=True)
class RangeConfig:
    preset: RangePreset
    tick_lower: Tick
    tick_upper: Tick
    price_lower: str
    price_upper: str


@dataclasses.dataclass(slots=True, frozen=True)
class AlignedBound:
    tick: Tick
    price: str


@functools.cache
def get_tick_delta_for_percent(percent: int | Fraction) -> int:
    """
    The number of ticks whose cumulative price ratio is nearest to 1 + percent/100.
    """

    if percent <= 0:
        raise ClammValueError(message=f"Range percentage must be positive, got {percent}")
    return get_nearest_tick_at_ratio(1 + Fraction(percent) / 100)


def _clamp_to_grid(tick: Tick) -> Tick:
    return max(MIN_TICK, min(MAX_TICK, tick))


def _aligned_range(tick_lower: Tick, tick_upper: Tick, tick_spacing: int) -> TickRange:
    lower = nearest_usable_tick(tick_lower, tick_spacing)
    upper = nearest_usable_tick(tick_upper, tick_spacing)
    if lower >= upper:
        raise RangeTooNarrow(tick=lower, tick_spacing=tick_spacing)
    return TickRange(tick_lower=lower, tick_upper=upper)


def get_preset_range(
    current_tick: Tick,
    tick_spacing: int,
    preset: RangePreset,
    custom: TickRange | None = None,
) -> TickRange:
    """
    Compute aligned bounds for the preset around the current tick. `CUSTOM` aligns the bounds
    given in `custom`; the other presets ignore it.

    The returned bounds are multiples of `tick_spacing` with `tick_lower < tick_upper`.
    `RangeTooNarrow` is raised if alignment collapses the range.
    """

    if not (MIN_TICK <= current_tick <= MAX_TICK):
        raise TickOutOfRange(current_tick)

    match preset:
        case RangePreset.FULL:
            return TickRange(
                tick_lower=min_usable_tick(tick_spacing),
                tick_upper=max_usable_tick(tick_spacing),
            )
        case RangePreset.CUSTOM:
            if custom is None:
                raise ClammValueError(message="A custom range requires explicit bounds")
            if custom.tick_lower >= custom.tick_upper:
                raise InvalidTickRange(lower=custom.tick_lower, upper=custom.tick_upper)
            return _aligned_range(custom.tick_lower, custom.tick_upper, tick_spacing)
        case _:
            delta = get_tick_delta_for_percent(_PRESET_PERCENTS[preset])
            return _aligned_range(
                _clamp_to_grid(current_tick - delta),
                _clamp_to_grid(current_tick + delta),
                tick_spacing,
            )


def build_range_config(
    current_tick: Tick,
    tick_spacing: int,
    preset: RangePreset,
    decimals0: int,
    decimals1: int,
    custom: TickRange | None = None,
) -> RangeConfig:
    tick_range = get_preset_range(current_tick, tick_spacing, preset, custom)
    return RangeConfig(
        preset=preset,
        tick_lower=tick_range.tick_lower,
        tick_upper=tick_range.tick_upper,
        price_lower=tick_to_price(tick_range.tick_lower, decimals0, decimals1),
        price_upper=tick_to_price(tick_range.tick_upper, decimals0, decimals1),
    )


def align_price_to_bound(
    price: PriceLike,
    tick_spacing: int,
    decimals0: int,
    decimals1: int,
) -> AlignedBound:
    """
    Snap a price entered for one bound of a custom range to the nearest usable tick, and report
    the price at that tick.
    """

    tick = nearest_usable_tick(price_to_tick(price, decimals0, decimals1), tick_spacing)
    return AlignedBound(tick=tick, price=tick_to_price(tick, decimals0, decimals1))


def get_range_width_percent(tick_lower: Tick, tick_upper: Tick) -> Fraction:
    """
    The percentage by which the upper bound price exceeds the lower bound price.
    """

    if tick_lower >= tick_upper:
        raise InvalidTickRange(lower=tick_lower, upper=tick_upper)
    if not (MIN_TICK <= tick_lower and tick_upper <= MAX_TICK):
        raise TickOutOfRange(tick_lower if tick_lower < MIN_TICK else tick_upper)

    return (
        Fraction(get_sqrt_ratio_at_tick(tick_upper), get_sqrt_ratio_at_tick(tick_lower)) ** 2 - 1
    ) * 100
