"""Market Operations — the closed set of commands the transaction engine accepts.

Invariants:
    - Every operation is a frozen dataclass; MarketOperation is their union
    - OPERATION_TYPES lists every member of the union exactly once
    - The caller identity, attached funds and block time are NOT part of an
      operation — they come from the execution context passed to apply()
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Union, get_args

from rwa_market.core.domain_types import Coin, Identity, OfferingId, RentalId


@dataclass(frozen=True)
class ListOffering:
    """Deposit notification from an asset custodian carrying a sell instruction.

    The caller of apply() is the notifying asset contract; `sender` is the
    holder who deposited the asset and becomes the seller.
    """
    sender: Identity
    amount: int
    list_price: Coin


@dataclass(frozen=True)
class Buy:
    offering_id: OfferingId


@dataclass(frozen=True)
class WithdrawRwa:
    offering_id: OfferingId


@dataclass(frozen=True)
class RentRwa:
    offering_id: OfferingId
    duration: int   # seconds


@dataclass(frozen=True)
class EndRental:
    rental_id: RentalId


@dataclass(frozen=True)
class Clawback:
    rental_id: RentalId


@dataclass(frozen=True)
class ChangeFee:
    fee: Decimal


@dataclass(frozen=True)
class WithdrawFees:
    amount: int
    denom: str


MarketOperation = Union[
    ListOffering, Buy, WithdrawRwa, RentRwa,
    EndRental, Clawback, ChangeFee, WithdrawFees,
]

OPERATION_TYPES: tuple[type, ...] = get_args(MarketOperation)
