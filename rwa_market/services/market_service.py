"""Market Service — imperative shell around the pure transaction engine.

Invariants:
    - Operations run one at a time per process (_execute_lock)
    - load snapshot -> apply (pure) -> persist diff -> enqueue transfers -> commit,
      all in one transaction; any failure rolls back the whole operation
    - Caller identities are validated before the engine sees them
    - Block time is supplied by the caller of execute(), never read here
    - Queries never write
"""

import asyncio
import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from rwa_market.core.domain_types import (
    Coin, MarketAction, RentalId, TransferStatus,
)
from rwa_market.core.errors import AlreadyInstantiatedError, MarketError
from rwa_market.core.market_state import MarketState
from rwa_market.core.operations import ListOffering, MarketOperation
from rwa_market.core.queries import (
    OfferListing, RentalView, clamp_limit, query_all_offers, query_count,
    query_fee, query_rental,
)
from rwa_market.core.repository_protocols import (
    AddressValidator, MarketRepository, TransferOutbox,
)
from rwa_market.core.transaction_engine import Outcome, apply, instantiate
from rwa_market.infrastructure.market_repository import SqlMarketRepository
from rwa_market.infrastructure.transfer_outbox import SqlTransferOutbox

logger = logging.getLogger(__name__)

# Single-process serialization of state-changing operations
_execute_lock = asyncio.Lock()


class MarketService:
    """Orchestrates one market operation or query over a DB session."""

    def __init__(
        self,
        db: AsyncSession,
        validator: AddressValidator,
        repository: MarketRepository | None = None,
        outbox: TransferOutbox | None = None,
    ):
        self._db = db
        self._validator = validator
        self._repository = repository or SqlMarketRepository(db)
        self._outbox = outbox or SqlTransferOutbox(db)

    async def instantiate(self, sender: str, fee: Decimal) -> MarketState:
        """Create the registry with `sender` as owner."""
        owner = self._validator.validate(sender)
        async with _execute_lock:
            if await self._repository.registry_exists():
                raise AlreadyInstantiatedError()
            state = instantiate(owner, fee)
            await self._repository.create_registry(state.registry)
            await self._db.commit()
        logger.info(
            f"Market instantiated with fee {fee}",
            extra={"action": MarketAction.INSTANTIATE.value, "caller": owner},
        )
        return state

    async def execute(
        self,
        sender: str,
        operation: MarketOperation,
        funds: list[Coin] | None = None,
        now: int = 0,
    ) -> tuple[Outcome, list[int]]:
        """Run `operation` for `sender`. Returns the outcome and outbox ids."""
        caller = self._validator.validate(sender)
        if isinstance(operation, ListOffering):
            self._validator.validate(operation.sender)
        async with _execute_lock:
            try:
                before = await self._repository.load_snapshot(operation)
                outcome = apply(before, caller, operation, funds or [], now)
                await self._repository.persist(before, outcome.state)
                transfer_ids = await self._outbox.enqueue(
                    outcome.action, outcome.transfers,
                    offering_id=outcome.attributes.get("offering_id"),
                    rental_id=outcome.attributes.get("rental_id"),
                )
                await self._db.commit()
            except MarketError as e:
                await self._db.rollback()
                logger.warning(
                    f"{type(operation).__name__} rejected: {e.message}",
                    extra={"error_code": e.code, "caller": caller},
                )
                raise
        logger.info(
            f"{outcome.action.value} committed",
            extra={
                "action": outcome.action.value,
                "caller": caller,
                "offering_id": outcome.attributes.get("offering_id"),
                "rental_id": outcome.attributes.get("rental_id"),
                "transfer_count": len(outcome.transfers),
            },
        )
        return outcome, transfer_ids

    # ─── queries ─────────────────────────────────────────────────

    async def count(self) -> int:
        return query_count(MarketState(registry=await self._repository.load_registry()))

    async def fee(self) -> Decimal:
        return query_fee(MarketState(registry=await self._repository.load_registry()))

    async def offers(
        self, start_after: str | None, limit: int | None,
    ) -> list[OfferListing]:
        state = await self._repository.load_offerings_page(
            start_after, clamp_limit(limit),
        )
        return query_all_offers(state, start_after, limit)

    async def rental(self, rental_id: str) -> RentalView:
        state = await self._repository.load_rental_view(RentalId(rental_id))
        return query_rental(state, RentalId(rental_id))

    # ─── outbox ──────────────────────────────────────────────────

    async def transfers(
        self, status: TransferStatus | None, limit: int | None,
        after_id: int | None = None,
    ) -> list[dict]:
        return await self._outbox.list_transfers(
            status, clamp_limit(limit), after_id,
        )

    async def mark_dispatched(self, transfer_id: int) -> dict:
        row = await self._outbox.mark_dispatched(transfer_id)
        await self._db.commit()
        return row
