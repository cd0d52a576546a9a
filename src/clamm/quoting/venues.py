import dataclasses
import enum
from collections.abc import Iterable, Iterator

from clamm.config import settings
from clamm.exceptions.base import ClammValueError
from clamm.types.aliases import ChainId, Pip


class ProtocolType(enum.Enum):
    CONSTANT_PRODUCT = "constant product"
    CONCENTRATED_LIQUIDITY = "concentrated liquidity"


def _default_fee_tiers() -> tuple[Pip, ...]:
    return tuple(settings.quotes.fee_tiers)


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class Venue:
    """
    An exchange deployment that can be queried for quotes. `fee_tiers` lists the pools searched on a
    concentrated liquidity venue, in tie-break order, and is ignored for constant product venues.
    `wrapped_native` overrides the chain's default wrapped native token for pool lookups.
    """

    venue_id: str
    protocol: ProtocolType
    chain_id: ChainId
    fee_tiers: tuple[Pip, ...] = dataclasses.field(default_factory=_default_fee_tiers)
    wrapped_native: str | None = None

    def __post_init__(self) -> None:
        if not self.venue_id:
            raise ClammValueError(message="A venue requires a non-empty ID")

        if self.protocol is ProtocolType.CONSTANT_PRODUCT:
            object.__setattr__(self, "fee_tiers", ())
            return

        if not self.fee_tiers:
            raise ClammValueError(message=f"Venue {self.venue_id} has no fee tiers")
        if len(set(self.fee_tiers)) != len(self.fee_tiers):
            raise ClammValueError(message=f"Venue {self.venue_id} has duplicate fee tiers")
        if any(fee <= 0 for fee in self.fee_tiers):
            raise ClammValueError(message=f"Venue {self.venue_id} has an invalid fee tier")


class VenueRegistry:
    """
    An ordered collection of venues. Registration order is the priority used to break exact ties
    between quotes.
    """

    def __init__(self, venues: Iterable[Venue] = ()) -> None:
        self._venues: dict[str, Venue] = {}
        for venue in venues:
            self.add(venue)

    def __contains__(self, venue_id: object) -> bool:
        return venue_id in self._venues

    def __iter__(self) -> Iterator[Venue]:
        return iter(self._venues.values())

    def __len__(self) -> int:
        return len(self._venues)

    def add(self, venue: Venue) -> None:
        if venue.venue_id in self._venues:
            raise ClammValueError(message=f"Venue {venue.venue_id} is already registered")
        self._venues[venue.venue_id] = venue

    def get(self, venue_id: str) -> Venue:
        try:
            return self._venues[venue_id]
        except KeyError:
            raise ClammValueError(message=f"Venue {venue_id} is not registered") from None

    def remove(self, venue_id: str) -> None:
        try:
            del self._venues[venue_id]
        except KeyError:
            raise ClammValueError(message=f"Venue {venue_id} is not registered") from None

    def for_chain(self, chain_id: ChainId) -> list[Venue]:
        return [venue for venue in self._venues.values() if venue.chain_id == chain_id]
