"""Request helpers shared by route tests."""

from httpx import AsyncClient

from rwa_market.core.domain_types import Coin
from rwa_market.schemas.market import encode_sell_instruction


async def deposit(
    client: AsyncClient, price: int = 1000, amount: int = 100,
    seller: str = "alice", denom: str = "earth",
) -> str:
    """Notify a deposit from `rwa.token`; returns the new offering id."""
    res = await client.post("/api/v1/market/receive", json={
        "asset_contract": "rwa.token",
        "sender": seller,
        "amount": str(amount),
        "msg": encode_sell_instruction(Coin(denom, price)),
    })
    assert res.status_code == 201, res.text
    return res.json()["attributes"]["offering_id"]


def earth(amount: int) -> list[dict]:
    return [{"denom": "earth", "amount": str(amount)}]
