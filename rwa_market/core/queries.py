"""Market Queries — read-only views over a MarketState.

Invariants:
    - Queries never mutate the state
    - Page size defaults to DEFAULT_LIMIT and is clamped to MAX_LIMIT
    - Rental views report the referenced offering's current amount
"""

from dataclasses import dataclass
from decimal import Decimal

from rwa_market.core.domain_types import (
    Identity, OfferingId, RentalId, Timestamp,
)
from rwa_market.core.errors import OrphanedRentalError, RentalNotFoundError
from rwa_market.core.market_state import MarketState, Offering


DEFAULT_LIMIT: int = 10
MAX_LIMIT: int = 30


@dataclass(frozen=True)
class OfferListing:
    id: OfferingId
    offering: Offering


@dataclass(frozen=True)
class RentalView:
    id: RentalId
    offering_id: OfferingId
    renter: Identity
    start_time: Timestamp
    end_time: Timestamp
    amount: int


def clamp_limit(limit: int | None) -> int:
    """Requested page size → effective page size (default 10, max 30)."""
    if limit is None:
        return DEFAULT_LIMIT
    return max(0, min(limit, MAX_LIMIT))


def query_count(state: MarketState) -> int:
    """Number of offerings ever created (the offering counter)."""
    return state.registry.offering_counter


def query_fee(state: MarketState) -> Decimal:
    return state.registry.fee


def query_all_offers(
    state: MarketState, start_after: str | None = None, limit: int | None = None,
) -> list[OfferListing]:
    page = state.offerings.scan(start_after, clamp_limit(limit))
    return [OfferListing(OfferingId(k), v) for k, v in page]


def query_rental(state: MarketState, rental_id: RentalId) -> RentalView:
    rental = state.rentals.may_get(rental_id)
    if rental is None:
        raise RentalNotFoundError(rental_id)
    offering = state.offerings.may_get(rental.offering_id)
    if offering is None:
        raise OrphanedRentalError(rental.id, rental.offering_id)
    return RentalView(
        id=rental.id,
        offering_id=rental.offering_id,
        renter=rental.renter,
        start_time=rental.start_time,
        end_time=rental.end_time,
        amount=offering.amount,
    )
