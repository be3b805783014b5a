"""Transfer Instructions — kinds and flattened representation."""

from rwa_market.core.domain_types import UINT128_MAX, Coin, Identity, TransferKind
from rwa_market.core.transfers import AssetTransfer, BankSend, describe_transfer


def test_bank_send_description():
    transfer = BankSend(Identity("alice"), Coin("earth", 980))
    assert transfer.kind is TransferKind.BANK_SEND
    assert describe_transfer(transfer) == {
        "kind": "bank_send",
        "recipient": "alice",
        "denom": "earth",
        "asset_contract": None,
        "amount": "980",
    }


def test_asset_transfer_description():
    transfer = AssetTransfer(Identity("rwa.token"), Identity("bob"), UINT128_MAX)
    assert transfer.kind is TransferKind.ASSET_TRANSFER
    desc = describe_transfer(transfer)
    assert desc["asset_contract"] == "rwa.token"
    assert desc["denom"] is None
    assert desc["amount"] == str(UINT128_MAX)
