"""Market Repository — loads partial MarketState snapshots and persists their diffs.

Invariants:
    - A snapshot holds the registry plus only the records the operation can touch
    - The registry row is read FOR UPDATE while executing (no-op on SQLite)
    - persist() writes inserts, deletes and registry changes; it never commits
    - Row <-> record conversion is lossless (u128 amounts, u64 times and fee kept as strings)

Design Decisions:
    - Engine works on in-memory snapshots; the repository is the only SQL-aware piece
"""

import logging
from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rwa_market.core.domain_types import (
    Coin, Identity, OfferingId, RentalId, Timestamp,
)
from rwa_market.core.errors import NotInstantiatedError
from rwa_market.core.market_state import (
    MarketState, Offering, OfferingStore, Registry, Rental, RentalStore,
)
from rwa_market.core.operations import Clawback, EndRental, MarketOperation
from rwa_market.core.transaction_engine import offering_id_of
from rwa_market.models.offering import OfferingRow
from rwa_market.models.registry import REGISTRY_ROW_ID, RegistryRow
from rwa_market.models.rental import RentalRow

logger = logging.getLogger(__name__)


# ─── Row conversion ──────────────────────────────────────────────

def registry_from_row(row: RegistryRow) -> Registry:
    return Registry(
        owner=Identity(row.owner),
        fee=Decimal(row.fee),
        offering_counter=row.offering_counter,
        rental_counter=row.rental_counter,
    )


def offering_from_row(row: OfferingRow) -> Offering:
    return Offering(
        asset_contract=Identity(row.asset_contract),
        amount=int(row.amount),
        seller=Identity(row.seller),
        list_price=Coin(row.price_denom, int(row.price_amount)),
    )


def offering_to_row(offering_id: str, offering: Offering) -> OfferingRow:
    return OfferingRow(
        id=offering_id,
        asset_contract=offering.asset_contract,
        seller=offering.seller,
        amount=str(offering.amount),
        price_denom=offering.list_price.denom,
        price_amount=str(offering.list_price.amount),
    )


def rental_from_row(row: RentalRow) -> Rental:
    return Rental(
        id=RentalId(row.id),
        offering_id=OfferingId(row.offering_id),
        renter=Identity(row.renter),
        start_time=Timestamp(int(row.start_time)),
        end_time=Timestamp(int(row.end_time)),
        amount=int(row.amount),
    )


def rental_to_row(rental: Rental) -> RentalRow:
    return RentalRow(
        id=rental.id,
        offering_id=rental.offering_id,
        renter=rental.renter,
        start_time=str(rental.start_time),
        end_time=str(rental.end_time),
        amount=str(rental.amount),
    )


# ─── Repository ──────────────────────────────────────────────────

class SqlMarketRepository:
    """MarketRepository over an AsyncSession. Caller owns the transaction."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def create_registry(self, registry: Registry) -> None:
        self._db.add(RegistryRow(
            id=REGISTRY_ROW_ID,
            owner=registry.owner,
            fee=str(registry.fee),
            offering_counter=registry.offering_counter,
            rental_counter=registry.rental_counter,
        ))
        await self._db.flush()

    async def registry_exists(self) -> bool:
        return await self._get_registry_row() is not None

    async def load_registry(self, for_update: bool = False) -> Registry:
        row = await self._get_registry_row(for_update)
        if row is None:
            raise NotInstantiatedError()
        return registry_from_row(row)

    async def load_snapshot(self, operation: MarketOperation) -> MarketState:
        """Registry + every record `operation` may read or remove."""
        state = MarketState(registry=await self.load_registry(for_update=True))
        offering_ids: set[str] = set()
        direct = offering_id_of(operation)
        if direct is not None:
            offering_ids.add(direct)
        if isinstance(operation, (EndRental, Clawback)):
            rental = await self._get_rental(operation.rental_id)
            if rental is not None:
                state.rentals.insert(rental.id, rental)
                offering_ids.add(rental.offering_id)
        for offering_id in offering_ids:
            offering = await self._get_offering(offering_id)
            if offering is not None:
                state.offerings.insert(offering_id, offering)
        return state

    async def load_offerings_page(
        self, start_after: str | None, limit: int,
    ) -> MarketState:
        stmt = select(OfferingRow).order_by(OfferingRow.id).limit(limit)
        if start_after is not None:
            stmt = stmt.where(OfferingRow.id > start_after)
        rows = (await self._db.execute(stmt)).scalars().all()
        return MarketState(
            registry=await self.load_registry(),
            offerings=OfferingStore({r.id: offering_from_row(r) for r in rows}),
        )

    async def load_rental_view(self, rental_id: RentalId) -> MarketState:
        state = MarketState(registry=await self.load_registry())
        rental = await self._get_rental(rental_id)
        if rental is not None:
            state.rentals.insert(rental.id, rental)
            offering = await self._get_offering(rental.offering_id)
            if offering is not None:
                state.offerings.insert(rental.offering_id, offering)
        return state

    async def persist(self, before: MarketState, after: MarketState) -> None:
        """Write the difference between two snapshots of the same load."""
        await self._persist_registry(before.registry, after.registry)
        await self._persist_offerings(before.offerings, after.offerings)
        await self._persist_rentals(before.rentals, after.rentals)
        await self._db.flush()

    # ─── internals ───────────────────────────────────────────────

    async def _get_registry_row(self, for_update: bool = False) -> RegistryRow | None:
        stmt = select(RegistryRow).where(RegistryRow.id == REGISTRY_ROW_ID)
        if for_update:
            stmt = stmt.with_for_update()
        return (await self._db.execute(stmt)).scalar_one_or_none()

    async def _get_offering(self, offering_id: str) -> Offering | None:
        row = await self._db.get(OfferingRow, offering_id)
        return offering_from_row(row) if row is not None else None

    async def _get_rental(self, rental_id: str) -> Rental | None:
        row = await self._db.get(RentalRow, rental_id)
        return rental_from_row(row) if row is not None else None

    async def _persist_registry(self, before: Registry, after: Registry) -> None:
        if before == after:
            return
        row = await self._get_registry_row()
        row.owner = after.owner
        row.fee = str(after.fee)
        row.offering_counter = after.offering_counter
        row.rental_counter = after.rental_counter

    async def _persist_offerings(
        self, before: OfferingStore, after: OfferingStore,
    ) -> None:
        for offering_id, _ in before.items():
            if offering_id not in after:
                await self._db.execute(
                    delete(OfferingRow).where(OfferingRow.id == offering_id),
                )
        for offering_id, offering in after.items():
            if offering_id not in before:
                self._db.add(offering_to_row(offering_id, offering))

    async def _persist_rentals(
        self, before: RentalStore, after: RentalStore,
    ) -> None:
        for rental_id, _ in before.items():
            if rental_id not in after:
                await self._db.execute(
                    delete(RentalRow).where(RentalRow.id == rental_id),
                )
        for rental_id, rental in after.items():
            if rental_id not in before:
                self._db.add(rental_to_row(rental))
