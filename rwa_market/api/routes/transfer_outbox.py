"""Transfer Outbox Routes — the external dispatcher's view of queued transfers.

Invariants:
    - Listing never changes transfer status
    - Listings page by `after_id` (exclusive), at most 30 rows per page
    - Acknowledging a transfer moves it pending -> dispatched exactly once
"""

from fastapi import APIRouter, Depends, Query

from rwa_market.api.dependencies import get_market_service
from rwa_market.core.domain_types import TransferStatus
from rwa_market.schemas.market import (
    OutboundTransferResponse, OutboundTransfersResponse,
)
from rwa_market.services.market_service import MarketService

router = APIRouter(prefix="/api/v1/transfers", tags=["transfers"])


@router.get("", response_model=OutboundTransfersResponse)
async def list_transfers(
    status: TransferStatus | None = Query(TransferStatus.PENDING),
    after_id: int | None = Query(None, ge=0),
    limit: int | None = Query(None, ge=0),
    service: MarketService = Depends(get_market_service),
):
    """Queued transfers in emission order (pending only by default)."""
    rows = await service.transfers(status, limit, after_id)
    return OutboundTransfersResponse(
        transfers=[OutboundTransferResponse(**r) for r in rows],
    )


@router.post("/{transfer_id}/dispatched", response_model=OutboundTransferResponse)
async def mark_dispatched(
    transfer_id: int, service: MarketService = Depends(get_market_service),
):
    """Dispatcher acknowledgement that a transfer was executed."""
    row = await service.mark_dispatched(transfer_id)
    return OutboundTransferResponse(**row)
