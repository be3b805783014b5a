"""Market Routes — end-to-end operation flows over HTTP.

Invariants:
    - Amounts cross the wire as strings
    - A rejected operation changes nothing: no state, no queued transfers
    - Block time comes from the overridden clock
"""

from tests.services.market_client import deposit, earth


# ─── instantiate ─────────────────────────────────────────────────

async def test_instantiate_returns_fee(client):
    res = await client.post(
        "/api/v1/market/instantiate", json={"sender": "owner", "fee": "0.02"},
    )
    assert res.status_code == 201
    assert res.json() == {"fee": "0.02"}


async def test_instantiate_twice_conflicts(market):
    res = await market.post(
        "/api/v1/market/instantiate", json={"sender": "owner", "fee": "0.01"},
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "ALREADY_INSTANTIATED"


async def test_operations_before_instantiate_conflict(client):
    res = await client.post(
        "/api/v1/market/offerings/1/buy", json={"sender": "bob", "funds": earth(1)},
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "NOT_INSTANTIATED"


# ─── sell / buy ──────────────────────────────────────────────────

async def test_receive_lists_offering(market):
    offering_id = await deposit(market, price=1000, amount=100)
    assert offering_id == "1"

    res = await market.get("/api/v1/market/offerings")
    assert res.json() == {"offers": [{
        "id": "1",
        "amount": "100",
        "contract": "rwa.token",
        "seller": "alice",
        "list_price": {"denom": "earth", "amount": "1000"},
    }]}


async def test_receive_rejects_bad_instruction(market):
    res = await market.post("/api/v1/market/receive", json={
        "asset_contract": "rwa.token", "sender": "alice",
        "amount": "100", "msg": "%%%",
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_INSTRUCTION"


async def test_buy_pays_seller_and_delivers_asset(market):
    await deposit(market, price=1000, amount=100)
    res = await market.post(
        "/api/v1/market/offerings/1/buy",
        json={"sender": "bob", "funds": earth(1000)},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["action"] == "buy_rwa"
    assert body["transfers"] == [
        {"kind": "bank_send", "recipient": "alice", "denom": "earth",
         "asset_contract": None, "amount": "980"},
        {"kind": "asset_transfer", "recipient": "bob", "denom": None,
         "asset_contract": "rwa.token", "amount": "100"},
    ]
    assert len(body["transfer_ids"]) == 2

    offers = await market.get("/api/v1/market/offerings")
    assert offers.json() == {"offers": []}
    count = await market.get("/api/v1/market/count")
    assert count.json() == {"count": 1}


async def test_rejected_buy_changes_nothing(market):
    await deposit(market)
    res = await market.post(
        "/api/v1/market/offerings/1/buy",
        json={"sender": "alice", "funds": earth(1000)},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_BUYER"

    offers = await market.get("/api/v1/market/offerings")
    assert len(offers.json()["offers"]) == 1
    queued = await market.get("/api/v1/transfers")
    assert queued.json() == {"transfers": []}


async def test_buy_with_insufficient_funds(market):
    await deposit(market, price=1000)
    res = await market.post(
        "/api/v1/market/offerings/1/buy",
        json={"sender": "bob", "funds": earth(999)},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INSUFFICIENT_FUNDS"


async def test_buy_missing_offering(market):
    res = await market.post(
        "/api/v1/market/offerings/7/buy",
        json={"sender": "bob", "funds": earth(1000)},
    )
    assert res.status_code == 404


async def test_withdraw_by_seller(market):
    await deposit(market, amount=100)
    res = await market.post(
        "/api/v1/market/offerings/1/withdraw", json={"sender": "alice"},
    )
    assert res.status_code == 200
    assert res.json()["transfers"][0]["recipient"] == "alice"
    assert res.json()["transfers"][0]["amount"] == "100"


async def test_withdraw_by_stranger_forbidden(market):
    await deposit(market)
    res = await market.post(
        "/api/v1/market/offerings/1/withdraw", json={"sender": "bob"},
    )
    assert res.status_code == 403


async def test_invalid_sender_rejected(market):
    await deposit(market)
    res = await market.post(
        "/api/v1/market/offerings/1/buy",
        json={"sender": "Bob", "funds": earth(1000)},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_ADDRESS"


# ─── rentals ─────────────────────────────────────────────────────

async def test_rental_lifecycle(market, clock):
    await deposit(market, price=10, amount=100)
    res = await market.post(
        "/api/v1/market/offerings/1/rent",
        json={"sender": "bob", "duration": 30, "funds": earth(300)},
    )
    assert res.status_code == 201
    attrs = res.json()["attributes"]
    assert attrs["rental_price"] == "300"
    assert attrs["fee_amount"] == "6"
    assert res.json()["transfers"][0]["amount"] == "294"

    rental = (await market.get("/api/v1/market/rentals/1")).json()["rental"]
    assert rental["renter"] == "bob"
    assert rental["amount"] == "100"
    assert rental["start_time"] == clock.now
    assert rental["end_time"] == clock.now + 30

    early = await market.post("/api/v1/market/rentals/1/end", json={"sender": "bob"})
    assert early.status_code == 400
    assert early.json()["error"]["code"] == "RENTAL_NOT_EXPIRED"

    clock.advance(30)
    ended = await market.post("/api/v1/market/rentals/1/end", json={"sender": "bob"})
    assert ended.status_code == 200
    assert ended.json()["transfers"] == [
        {"kind": "asset_transfer", "recipient": "alice", "denom": None,
         "asset_contract": "rwa.token", "amount": "100"},
    ]

    late = await market.post(
        "/api/v1/market/rentals/1/clawback", json={"sender": "alice"},
    )
    assert late.status_code == 404
    assert late.json()["error"]["code"] == "RENTAL_NOT_FOUND"


async def test_clawback_by_seller(market, clock):
    await deposit(market, price=10)
    await market.post(
        "/api/v1/market/offerings/1/rent",
        json={"sender": "bob", "duration": 5, "funds": earth(50)},
    )
    clock.advance(5)
    res = await market.post(
        "/api/v1/market/rentals/1/clawback", json={"sender": "alice"},
    )
    assert res.status_code == 200
    assert res.json()["action"] == "clawback"

    gone = await market.get("/api/v1/market/rentals/1")
    assert gone.status_code == 404


async def test_rent_rejects_zero_duration(market):
    await deposit(market, price=10)
    res = await market.post(
        "/api/v1/market/offerings/1/rent",
        json={"sender": "bob", "duration": 0, "funds": earth(0)},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


# ─── administration ──────────────────────────────────────────────

async def test_change_fee_by_owner(market):
    res = await market.put(
        "/api/v1/market/fee", json={"sender": "owner", "fee": "0.05"},
    )
    assert res.status_code == 200
    assert (await market.get("/api/v1/market/fee")).json() == {"fee": "0.05"}


async def test_change_fee_by_stranger_forbidden(market):
    res = await market.put(
        "/api/v1/market/fee", json={"sender": "alice", "fee": "0.05"},
    )
    assert res.status_code == 403
    assert (await market.get("/api/v1/market/fee")).json() == {"fee": "0.02"}


async def test_withdraw_fees(market):
    res = await market.post(
        "/api/v1/market/fees/withdraw",
        json={"sender": "owner", "amount": "6", "denom": "earth"},
    )
    assert res.status_code == 200
    assert res.json()["transfers"] == [
        {"kind": "bank_send", "recipient": "owner", "denom": "earth",
         "asset_contract": None, "amount": "6"},
    ]


async def test_withdraw_fees_by_stranger_forbidden(market):
    res = await market.post(
        "/api/v1/market/fees/withdraw",
        json={"sender": "bob", "amount": "6", "denom": "earth"},
    )
    assert res.status_code == 403


async def test_rent_with_end_time_beyond_signed_64_bits(market, clock):
    await deposit(market, price=1)
    duration = 2**63
    res = await market.post(
        "/api/v1/market/offerings/1/rent",
        json={"sender": "bob", "duration": duration, "funds": earth(duration)},
    )
    assert res.status_code == 201, res.text

    rental = (await market.get("/api/v1/market/rentals/1")).json()["rental"]
    assert rental["end_time"] == clock.now + duration


async def test_error_response_is_timestamped(market):
    res = await market.post(
        "/api/v1/market/offerings/9/withdraw", json={"sender": "alice"},
    )
    assert res.status_code == 404
    assert res.json()["error"]["timestamp"] is not None
