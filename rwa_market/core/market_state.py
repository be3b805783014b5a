"""Market State — Registry, ordered record stores, and the state snapshot passed to the engine.

Invariants:
    - Offering and Rental records are frozen; stores only insert and remove them
    - Store scans are ascending by id in string order ("10" sorts before "2")
    - A scan cursor is exclusive: results start strictly after it
    - Offering ids come from Registry.offering_counter, rental ids from
      Registry.rental_counter — both increment-then-stringify, never reused
    - clone() yields an independent state: mutating the clone never touches the original

Design Decisions:
    - Plain dict per store, sorted on scan: snapshots are small partial views
      loaded per operation by the repository
    - Registry is a mutable dataclass owned by exactly one MarketState
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Callable, Generic, Iterator, TypeVar

from rwa_market.core.domain_types import (
    Coin, Identity, OfferingId, RentalId, Timestamp,
)
from rwa_market.core.errors import (
    MarketError, RentalNotFoundError, ResourceNotFoundError,
)


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Offering:
    """A custodied asset quantity listed at a price."""
    asset_contract: Identity
    amount: int
    seller: Identity
    list_price: Coin


@dataclass(frozen=True)
class Rental:
    """A time-boxed lease of an offering's asset to a renter."""
    id: RentalId
    offering_id: OfferingId
    renter: Identity
    start_time: Timestamp
    end_time: Timestamp
    amount: int


@dataclass
class Registry:
    """Singleton protocol settings and id counters."""
    owner: Identity
    fee: Decimal
    offering_counter: int = 0
    rental_counter: int = 0

    def next_offering_id(self) -> OfferingId:
        self.offering_counter += 1
        return OfferingId(str(self.offering_counter))

    def next_rental_id(self) -> RentalId:
        self.rental_counter += 1
        return RentalId(str(self.rental_counter))


# ─── Stores ──────────────────────────────────────────────────────

T = TypeVar("T")


class RecordStore(Generic[T]):
    """String-keyed ordered mapping with point lookup and range scan."""

    def __init__(
        self,
        not_found: Callable[[str], MarketError],
        records: dict[str, T] | None = None,
    ):
        self._not_found = not_found
        self._records: dict[str, T] = dict(records or {})

    def insert(self, record_id: str, record: T) -> None:
        self._records[record_id] = record

    def get(self, record_id: str) -> T:
        record = self._records.get(record_id)
        if record is None:
            raise self._not_found(record_id)
        return record

    def may_get(self, record_id: str) -> T | None:
        return self._records.get(record_id)

    def remove(self, record_id: str) -> None:
        self._records.pop(record_id, None)

    def scan(
        self, cursor: str | None = None, limit: int | None = None,
    ) -> list[tuple[str, T]]:
        """Ascending (id, record) pairs strictly after cursor, at most limit."""
        keys = sorted(self._records)
        if cursor is not None:
            keys = [k for k in keys if k > cursor]
        if limit is not None:
            keys = keys[:limit]
        return [(k, self._records[k]) for k in keys]

    def items(self) -> Iterator[tuple[str, T]]:
        return iter(self._records.items())

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def copy(self) -> "RecordStore[T]":
        clone = object.__new__(type(self))
        clone._not_found = self._not_found
        clone._records = dict(self._records)
        return clone


class OfferingStore(RecordStore[Offering]):
    """Offerings keyed by offering id."""

    def __init__(self, records: dict[str, Offering] | None = None):
        super().__init__(lambda oid: ResourceNotFoundError("Offering", oid), records)


class RentalStore(RecordStore[Rental]):
    """Rentals keyed by rental id."""

    def __init__(self, records: dict[str, Rental] | None = None):
        super().__init__(RentalNotFoundError, records)


# ─── Snapshot ────────────────────────────────────────────────────

@dataclass
class MarketState:
    """Everything the engine reads or writes for one operation."""
    registry: Registry
    offerings: OfferingStore = field(default_factory=OfferingStore)
    rentals: RentalStore = field(default_factory=RentalStore)

    def clone(self) -> "MarketState":
        return MarketState(
            registry=replace(self.registry),
            offerings=self.offerings.copy(),
            rentals=self.rentals.copy(),
        )
