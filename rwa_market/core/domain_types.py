"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Identity, OfferingId, RentalId wrap str — never pass raw strings between layers
    - Token amounts are unsigned 128-bit integers (0 ≤ n ≤ UINT128_MAX)
    - Timestamps are unsigned 64-bit seconds (0 ≤ t ≤ UINT64_MAX)
    - Coin is immutable; equality is by (denom, amount)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Amounts as plain int: Python ints are arbitrary precision, range checks live in fee_math
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Identity = NewType("Identity", str)
OfferingId = NewType("OfferingId", str)
RentalId = NewType("RentalId", str)

Timestamp = NewType("Timestamp", int)     # seconds


# ─── Numeric Bounds ──────────────────────────────────────────────

UINT128_MAX: int = 2**128 - 1
UINT64_MAX: int = 2**64 - 1


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class Coin:
    """An amount of a native-currency denomination."""
    denom: str
    amount: int

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


# ─── Enums ───────────────────────────────────────────────────────

class TransferKind(str, Enum):
    """Outbound instruction kinds understood by the dispatcher."""
    BANK_SEND = "bank_send"
    ASSET_TRANSFER = "asset_transfer"


class TransferStatus(str, Enum):
    """Outbox lifecycle — maps to DB `status` column."""
    PENDING = "pending"
    DISPATCHED = "dispatched"


class MarketAction(str, Enum):
    """Action names reported in operation attributes and logs."""
    INSTANTIATE = "instantiate"
    SELL_RWA = "sell_rwa"
    BUY_RWA = "buy_rwa"
    WITHDRAW_RWA = "withdraw_rwa"
    RENT_RWA = "rent_rwa"
    END_RENTAL = "end_rental"
    CLAWBACK = "clawback"
    CHANGE_FEE = "change_fee"
    WITHDRAW_FEES = "withdraw_fees"
