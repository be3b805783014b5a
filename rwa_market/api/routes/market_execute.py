"""Market Execute Routes — state-changing market operations.

Invariants:
    - Request bodies are validated by Pydantic before reaching the handler
    - Handlers only map request -> operation and outcome -> response
    - Block time always comes from get_block_time
"""

from fastapi import APIRouter, Depends, status

from rwa_market.api.dependencies import get_block_time, get_market_service
from rwa_market.core.domain_types import Timestamp
from rwa_market.core.transaction_engine import Outcome
from rwa_market.schemas.market import (
    BuyRequest, ChangeFeeRequest, ClawbackRequest, EndRentalRequest,
    ExecuteResponse, FeeResponse, InstantiateRequest, ReceiveRwaRequest,
    RentRwaRequest, TransferSchema, WithdrawFeesRequest, WithdrawRwaRequest,
)
from rwa_market.services.market_service import MarketService

router = APIRouter(prefix="/api/v1/market", tags=["market"])


def _to_response(outcome: Outcome, transfer_ids: list[int]) -> ExecuteResponse:
    return ExecuteResponse(
        action=outcome.action.value,
        attributes=outcome.attributes,
        transfers=[TransferSchema.from_transfer(t) for t in outcome.transfers],
        transfer_ids=transfer_ids,
    )


@router.post(
    "/instantiate", response_model=FeeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def instantiate_market(
    body: InstantiateRequest,
    service: MarketService = Depends(get_market_service),
):
    """Create the registry; the sender becomes the owner."""
    state = await service.instantiate(body.sender, body.fee)
    return FeeResponse(fee=state.registry.fee)


@router.post(
    "/receive", response_model=ExecuteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def receive_rwa(
    body: ReceiveRwaRequest,
    service: MarketService = Depends(get_market_service),
    now: Timestamp = Depends(get_block_time),
):
    """Deposit notification from an asset custodian: lists the deposit."""
    operation = body.to_operation()
    outcome, ids = await service.execute(body.asset_contract, operation, now=now)
    return _to_response(outcome, ids)


@router.post("/offerings/{offering_id}/buy", response_model=ExecuteResponse)
async def buy(
    offering_id: str,
    body: BuyRequest,
    service: MarketService = Depends(get_market_service),
    now: Timestamp = Depends(get_block_time),
):
    outcome, ids = await service.execute(
        body.sender, body.to_operation(offering_id), body.coins(), now,
    )
    return _to_response(outcome, ids)


@router.post("/offerings/{offering_id}/withdraw", response_model=ExecuteResponse)
async def withdraw_rwa(
    offering_id: str,
    body: WithdrawRwaRequest,
    service: MarketService = Depends(get_market_service),
    now: Timestamp = Depends(get_block_time),
):
    outcome, ids = await service.execute(
        body.sender, body.to_operation(offering_id), body.coins(), now,
    )
    return _to_response(outcome, ids)


@router.post(
    "/offerings/{offering_id}/rent", response_model=ExecuteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def rent_rwa(
    offering_id: str,
    body: RentRwaRequest,
    service: MarketService = Depends(get_market_service),
    now: Timestamp = Depends(get_block_time),
):
    outcome, ids = await service.execute(
        body.sender, body.to_operation(offering_id), body.coins(), now,
    )
    return _to_response(outcome, ids)


@router.post("/rentals/{rental_id}/end", response_model=ExecuteResponse)
async def end_rental(
    rental_id: str,
    body: EndRentalRequest,
    service: MarketService = Depends(get_market_service),
    now: Timestamp = Depends(get_block_time),
):
    outcome, ids = await service.execute(
        body.sender, body.to_operation(rental_id), body.coins(), now,
    )
    return _to_response(outcome, ids)


@router.post("/rentals/{rental_id}/clawback", response_model=ExecuteResponse)
async def clawback(
    rental_id: str,
    body: ClawbackRequest,
    service: MarketService = Depends(get_market_service),
    now: Timestamp = Depends(get_block_time),
):
    outcome, ids = await service.execute(
        body.sender, body.to_operation(rental_id), body.coins(), now,
    )
    return _to_response(outcome, ids)


@router.put("/fee", response_model=ExecuteResponse)
async def change_fee(
    body: ChangeFeeRequest,
    service: MarketService = Depends(get_market_service),
    now: Timestamp = Depends(get_block_time),
):
    """Owner only."""
    outcome, ids = await service.execute(
        body.sender, body.to_operation(), body.coins(), now,
    )
    return _to_response(outcome, ids)


@router.post("/fees/withdraw", response_model=ExecuteResponse)
async def withdraw_fees(
    body: WithdrawFeesRequest,
    service: MarketService = Depends(get_market_service),
    now: Timestamp = Depends(get_block_time),
):
    """Owner only. Pays out of the market's real balance."""
    outcome, ids = await service.execute(
        body.sender, body.to_operation(), body.coins(), now,
    )
    return _to_response(outcome, ids)
