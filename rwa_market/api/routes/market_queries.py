"""Market Query Routes — read-only views of registry, offerings and rentals.

Invariants:
    - No handler writes to the database
    - Offering pages default to 10 entries and never exceed 30
"""

from fastapi import APIRouter, Depends, Query

from rwa_market.api.dependencies import get_market_service
from rwa_market.schemas.market import (
    CountResponse, FeeResponse, OfferSchema, OffersResponse, RentalInfo,
    RentalResponse,
)
from rwa_market.services.market_service import MarketService

router = APIRouter(prefix="/api/v1/market", tags=["market"])


@router.get("/count", response_model=CountResponse)
async def get_count(service: MarketService = Depends(get_market_service)):
    """Number of offerings ever listed."""
    return CountResponse(count=await service.count())


@router.get("/fee", response_model=FeeResponse)
async def get_fee(service: MarketService = Depends(get_market_service)):
    return FeeResponse(fee=await service.fee())


@router.get("/offerings", response_model=OffersResponse)
async def all_offers(
    start_after: str | None = Query(None, max_length=40),
    limit: int | None = Query(None, ge=0),
    service: MarketService = Depends(get_market_service),
):
    """Offerings in ascending id order, strictly after `start_after`."""
    listings = await service.offers(start_after, limit)
    return OffersResponse(offers=[OfferSchema.from_listing(o) for o in listings])


@router.get("/rentals/{rental_id}", response_model=RentalResponse)
async def get_rental(
    rental_id: str, service: MarketService = Depends(get_market_service),
):
    """Rental joined with its offering's current amount."""
    view = await service.rental(rental_id)
    return RentalResponse(rental=RentalInfo.from_view(view))
