"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but the transaction engine that consumes their snapshots is never async
"""

from typing import Protocol

from rwa_market.core.domain_types import (
    Identity, MarketAction, OfferingId, RentalId, TransferStatus,
)
from rwa_market.core.market_state import MarketState, Registry
from rwa_market.core.operations import MarketOperation
from rwa_market.core.transfers import Transfer


class MarketRepository(Protocol):
    """Contract for market state persistence — implemented by shell."""
    async def create_registry(self, registry: Registry) -> None: ...
    async def registry_exists(self) -> bool: ...
    async def load_registry(self, for_update: bool = False) -> Registry: ...
    async def load_snapshot(self, operation: MarketOperation) -> MarketState: ...
    async def load_offerings_page(
        self, start_after: str | None, limit: int,
    ) -> MarketState: ...
    async def load_rental_view(self, rental_id: RentalId) -> MarketState: ...
    async def persist(self, before: MarketState, after: MarketState) -> None: ...


class TransferOutbox(Protocol):
    """Contract for queuing outbound transfers for the external dispatcher."""
    async def enqueue(
        self, action: MarketAction, transfers: list[Transfer],
        offering_id: OfferingId | None = None, rental_id: RentalId | None = None,
    ) -> list[int]: ...
    async def list_transfers(
        self, status: TransferStatus | None, limit: int, after_id: int | None = None,
    ) -> list[dict]: ...
    async def mark_dispatched(self, transfer_id: int) -> dict: ...


class AddressValidator(Protocol):
    """Contract for the identity-validation service."""
    def validate(self, address: str) -> Identity: ...
