"""Market Service — transaction boundaries around the engine."""

from decimal import Decimal

import pytest
from sqlalchemy import select

from rwa_market.core.domain_types import Coin, TransferStatus
from rwa_market.core.errors import (
    AlreadyInstantiatedError, InsufficientFundsError, InvalidAddressError,
)
from rwa_market.core.operations import Buy, ListOffering
from rwa_market.models.outbound_transfer import OutboundTransfer


@pytest.fixture
async def instantiated(service):
    await service.instantiate("owner", Decimal("0.02"))
    return service


def _listing(price: int = 1000) -> ListOffering:
    return ListOffering(sender="alice", amount=100, list_price=Coin("earth", price))


async def test_instantiate_only_once(instantiated):
    with pytest.raises(AlreadyInstantiatedError):
        await instantiated.instantiate("owner", Decimal("0.01"))


async def test_instantiate_validates_owner(service):
    with pytest.raises(InvalidAddressError):
        await service.instantiate(" owner", Decimal("0.01"))


async def test_execute_commits_state_and_transfers(instantiated):
    await instantiated.execute("rwa.token", _listing())
    outcome, ids = await instantiated.execute(
        "bob", Buy("1"), [Coin("earth", 1000)], now=10,
    )
    assert len(ids) == 2
    assert await instantiated.count() == 1
    assert await instantiated.offers(None, None) == []
    queued = await instantiated.transfers(TransferStatus.PENDING, None)
    assert [t["id"] for t in queued] == ids


async def test_execute_validates_listing_sender(instantiated):
    bad = ListOffering(sender="ALICE", amount=1, list_price=Coin("earth", 1))
    with pytest.raises(InvalidAddressError):
        await instantiated.execute("rwa.token", bad)


async def test_rejected_execute_writes_nothing(instantiated, test_db):
    await instantiated.execute("rwa.token", _listing())
    with pytest.raises(InsufficientFundsError):
        await instantiated.execute("bob", Buy("1"), [Coin("earth", 1)])

    assert len(await instantiated.offers(None, None)) == 1
    rows = (await test_db.execute(select(OutboundTransfer))).scalars().all()
    assert rows == []


async def test_fee_query(instantiated):
    assert await instantiated.fee() == Decimal("0.02")
