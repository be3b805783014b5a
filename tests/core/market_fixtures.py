"""Shared builders for core tests — a market with one listed offering."""

from decimal import Decimal

from rwa_market.core.domain_types import Coin, Identity
from rwa_market.core.market_state import MarketState
from rwa_market.core.operations import ListOffering
from rwa_market.core.transaction_engine import apply, instantiate

OWNER = Identity("owner")
SELLER = Identity("alice")
BUYER = Identity("bob")
ASSET = Identity("rwa.token")


def make_market(fee: str = "0.02") -> MarketState:
    return instantiate(OWNER, Decimal(fee))


def list_offering(
    state: MarketState, price: int = 1000, denom: str = "earth",
    amount: int = 100, seller: Identity = SELLER,
) -> MarketState:
    """Return the state after ASSET notifies a deposit by `seller`."""
    op = ListOffering(sender=seller, amount=amount, list_price=Coin(denom, price))
    return apply(state, ASSET, op).state
