"""Transfer Instructions — declarative value movements emitted by the engine.

Invariants:
    - Instructions are immutable; the engine never executes them
    - BankSend moves native currency held by the market to a recipient
    - AssetTransfer moves custodied asset units out of the asset contract
"""

from dataclasses import dataclass
from typing import Union

from rwa_market.core.domain_types import Coin, Identity, TransferKind


@dataclass(frozen=True)
class BankSend:
    recipient: Identity
    coin: Coin

    @property
    def kind(self) -> TransferKind:
        return TransferKind.BANK_SEND


@dataclass(frozen=True)
class AssetTransfer:
    asset_contract: Identity
    recipient: Identity
    amount: int

    @property
    def kind(self) -> TransferKind:
        return TransferKind.ASSET_TRANSFER


Transfer = Union[BankSend, AssetTransfer]


def describe_transfer(transfer: Transfer) -> dict:
    """Flatten an instruction into a JSON-safe dict (amounts as strings)."""
    if isinstance(transfer, BankSend):
        return {
            "kind": transfer.kind.value,
            "recipient": transfer.recipient,
            "denom": transfer.coin.denom,
            "asset_contract": None,
            "amount": str(transfer.coin.amount),
        }
    return {
        "kind": transfer.kind.value,
        "recipient": transfer.recipient,
        "denom": None,
        "asset_contract": transfer.asset_contract,
        "amount": str(transfer.amount),
    }
