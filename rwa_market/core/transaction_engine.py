"""Transaction Engine — pure reducer over MarketState for every market operation.

Invariants:
    - apply() is PURE: it never mutates the state it is given, never reads a clock,
      never performs IO
    - On success the returned Outcome holds the new state AND every transfer that
      state change implies; on failure an exception is raised and nothing is emitted
    - Self-dealing is rejected: a seller cannot buy or rent their own offering
    - End-rental and clawback both remove the rental, so only the first succeeds;
      the second sees RentalNotFoundError
    - Expiry is `now >= end_time`
    - Renting does not remove or lock the offering (several rentals, and a buy,
      can reference the same custodied amount)

Design Decisions:
    - Explicit type -> handler dict: every operation mapping visible in one place
    - Each handler works on a clone of the input state
"""

from dataclasses import dataclass, field
from decimal import Decimal

from rwa_market.core.domain_types import (
    Coin, Identity, MarketAction, OfferingId, Timestamp,
)
from rwa_market.core.errors import (
    ErrorContext, InsufficientFundsError, InvalidBuyerError, InvalidListingError,
    InvalidRenterError, InvalidRentalError, OrphanedRentalError,
    RentalNotExpiredError, RentalNotFoundError, UnauthorizedError,
    UnknownOperationError,
)
from rwa_market.core.fee_math import (
    add_seconds, checked_amount, net_of_fee, rental_price,
    split_rental_payment, validate_fee,
)
from rwa_market.core.market_state import MarketState, Offering, Registry, Rental
from rwa_market.core.operations import (
    Buy, ChangeFee, Clawback, EndRental, ListOffering, MarketOperation,
    RentRwa, WithdrawFees, WithdrawRwa,
)
from rwa_market.core.transfers import AssetTransfer, BankSend, Transfer


@dataclass(frozen=True)
class ExecutionContext:
    """Who is calling, what they attached, and the block time."""
    caller: Identity
    funds: tuple[Coin, ...] = ()
    now: Timestamp = Timestamp(0)


@dataclass
class Outcome:
    """Result of one successful operation."""
    state: MarketState
    action: MarketAction
    transfers: list[Transfer] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)


def instantiate(owner: Identity, fee: Decimal) -> MarketState:
    """Create the initial state: empty stores, zeroed counters."""
    return MarketState(registry=Registry(owner=owner, fee=validate_fee(fee)))


def apply(
    state: MarketState,
    caller: Identity,
    operation: MarketOperation,
    funds: tuple[Coin, ...] | list[Coin] = (),
    now: Timestamp | int = 0,
) -> Outcome:
    """Run one operation against a copy of `state`. Raises MarketError on rejection."""
    handler = _HANDLERS.get(type(operation))
    if handler is None:
        raise UnknownOperationError(type(operation).__name__)
    ctx = ExecutionContext(caller=caller, funds=tuple(funds), now=Timestamp(now))
    return handler(state.clone(), ctx, operation)


def find_fund(funds: tuple[Coin, ...], denom: str) -> Coin | None:
    """First attached coin in `denom`, if any."""
    for coin in funds:
        if coin.denom == denom:
            return coin
    return None


def _require_payment(
    ctx: ExecutionContext, required: int, denom: str, err_ctx: ErrorContext,
) -> Coin:
    payment = find_fund(ctx.funds, denom)
    if payment is None or payment.amount < required:
        raise InsufficientFundsError(required, denom, err_ctx)
    return payment


# ─── Offering lifecycle ──────────────────────────────────────────

def _list_offering(
    state: MarketState, ctx: ExecutionContext, op: ListOffering,
) -> Outcome:
    err_ctx = ErrorContext(caller=ctx.caller, action=MarketAction.SELL_RWA.value)
    if op.amount <= 0:
        raise InvalidListingError("Deposited amount must be positive", "amount", err_ctx)
    if op.list_price.amount <= 0:
        raise InvalidListingError(
            "List price must be positive", "list_price.amount", err_ctx,
        )
    checked_amount(op.amount, "deposit amount")
    checked_amount(op.list_price.amount, "list price")

    offering_id = state.registry.next_offering_id()
    offering = Offering(
        asset_contract=ctx.caller,
        amount=op.amount,
        seller=op.sender,
        list_price=op.list_price,
    )
    state.offerings.insert(offering_id, offering)

    return Outcome(state, MarketAction.SELL_RWA, attributes={
        "offering_id": offering_id,
        "rwa_contract": offering.asset_contract,
        "seller": offering.seller,
        "list_price": str(offering.list_price),
        "amount": str(offering.amount),
    })


def _buy(state: MarketState, ctx: ExecutionContext, op: Buy) -> Outcome:
    err_ctx = ErrorContext(
        caller=ctx.caller, action=MarketAction.BUY_RWA.value,
        offering_id=op.offering_id,
    )
    offering = state.offerings.get(op.offering_id)
    if offering.seller == ctx.caller:
        raise InvalidBuyerError(err_ctx)

    price = offering.list_price
    payment = _require_payment(ctx, price.amount, price.denom, err_ctx)
    net_amount = net_of_fee(price.amount, state.registry.fee)

    state.offerings.remove(op.offering_id)

    transfers: list[Transfer] = [
        BankSend(offering.seller, Coin(price.denom, net_amount)),
        AssetTransfer(offering.asset_contract, ctx.caller, offering.amount),
    ]
    return Outcome(state, MarketAction.BUY_RWA, transfers, {
        "offering_id": op.offering_id,
        "buyer": ctx.caller,
        "seller": offering.seller,
        "paid_price": str(payment),
        "amount": str(offering.amount),
        "rwa_contract": offering.asset_contract,
    })


def _withdraw_rwa(
    state: MarketState, ctx: ExecutionContext, op: WithdrawRwa,
) -> Outcome:
    offering = state.offerings.get(op.offering_id)
    if offering.seller != ctx.caller:
        raise UnauthorizedError("seller", ErrorContext(
            caller=ctx.caller, action=MarketAction.WITHDRAW_RWA.value,
            offering_id=op.offering_id,
        ))

    state.offerings.remove(op.offering_id)

    transfers: list[Transfer] = [
        AssetTransfer(offering.asset_contract, offering.seller, offering.amount),
    ]
    return Outcome(state, MarketAction.WITHDRAW_RWA, transfers, {
        "offering_id": op.offering_id,
        "seller": ctx.caller,
    })


# ─── Rentals ─────────────────────────────────────────────────────

def _rent_rwa(state: MarketState, ctx: ExecutionContext, op: RentRwa) -> Outcome:
    err_ctx = ErrorContext(
        caller=ctx.caller, action=MarketAction.RENT_RWA.value,
        offering_id=op.offering_id,
    )
    offering = state.offerings.get(op.offering_id)
    if offering.seller == ctx.caller:
        raise InvalidRenterError(err_ctx)
    if op.duration <= 0:
        raise InvalidRentalError("Rental duration must be positive", "duration", err_ctx)

    price = rental_price(offering.list_price.amount, op.duration)
    denom = offering.list_price.denom
    _require_payment(ctx, price, denom, err_ctx)
    fee_amount, seller_amount = split_rental_payment(price, state.registry.fee)
    end_time = add_seconds(ctx.now, op.duration)

    rental_id = state.registry.next_rental_id()
    state.rentals.insert(rental_id, Rental(
        id=rental_id,
        offering_id=op.offering_id,
        renter=ctx.caller,
        start_time=ctx.now,
        end_time=Timestamp(end_time),
        amount=offering.amount,
    ))

    transfers: list[Transfer] = [
        BankSend(offering.seller, Coin(denom, seller_amount)),
        AssetTransfer(offering.asset_contract, ctx.caller, offering.amount),
    ]
    return Outcome(state, MarketAction.RENT_RWA, transfers, {
        "rental_id": rental_id,
        "offering_id": op.offering_id,
        "renter": ctx.caller,
        "duration": str(op.duration),
        "rental_price": str(price),
        "fee_amount": str(fee_amount),
    })


def _offering_for(state: MarketState, rental: Rental) -> Offering:
    offering = state.offerings.may_get(rental.offering_id)
    if offering is None:
        raise OrphanedRentalError(rental.id, rental.offering_id)
    return offering


def _end_rental(
    state: MarketState, ctx: ExecutionContext, op: EndRental,
) -> Outcome:
    err_ctx = ErrorContext(
        caller=ctx.caller, action=MarketAction.END_RENTAL.value,
        rental_id=op.rental_id,
    )
    rental = state.rentals.may_get(op.rental_id)
    if rental is None:
        raise RentalNotFoundError(op.rental_id, err_ctx)
    if ctx.now < rental.end_time:
        raise RentalNotExpiredError(rental.end_time, err_ctx)
    if ctx.caller != rental.renter:
        raise UnauthorizedError("renter", err_ctx)
    offering = _offering_for(state, rental)

    state.rentals.remove(op.rental_id)

    transfers: list[Transfer] = [
        AssetTransfer(offering.asset_contract, offering.seller, rental.amount),
    ]
    return Outcome(state, MarketAction.END_RENTAL, transfers, {
        "rental_id": op.rental_id,
        "renter": rental.renter,
    })


def _clawback(state: MarketState, ctx: ExecutionContext, op: Clawback) -> Outcome:
    err_ctx = ErrorContext(
        caller=ctx.caller, action=MarketAction.CLAWBACK.value,
        rental_id=op.rental_id,
    )
    rental = state.rentals.may_get(op.rental_id)
    if rental is None:
        raise RentalNotFoundError(op.rental_id, err_ctx)
    offering = _offering_for(state, rental)
    if ctx.caller != offering.seller:
        raise UnauthorizedError("seller", err_ctx)
    if ctx.now < rental.end_time:
        raise RentalNotExpiredError(rental.end_time, err_ctx)

    state.rentals.remove(op.rental_id)

    transfers: list[Transfer] = [
        AssetTransfer(offering.asset_contract, offering.seller, rental.amount),
    ]
    return Outcome(state, MarketAction.CLAWBACK, transfers, {
        "rental_id": op.rental_id,
        "seller": offering.seller,
    })


# ─── Administration ──────────────────────────────────────────────

def _require_owner(state: MarketState, ctx: ExecutionContext, action: MarketAction) -> None:
    if state.registry.owner != ctx.caller:
        raise UnauthorizedError(
            "owner", ErrorContext(caller=ctx.caller, action=action.value),
        )


def _change_fee(state: MarketState, ctx: ExecutionContext, op: ChangeFee) -> Outcome:
    _require_owner(state, ctx, MarketAction.CHANGE_FEE)
    state.registry.fee = validate_fee(op.fee)
    return Outcome(state, MarketAction.CHANGE_FEE, attributes={
        "fee": str(op.fee),
    })


def _withdraw_fees(
    state: MarketState, ctx: ExecutionContext, op: WithdrawFees,
) -> Outcome:
    _require_owner(state, ctx, MarketAction.WITHDRAW_FEES)
    coin = Coin(op.denom, checked_amount(op.amount, "withdrawal amount"))
    transfers: list[Transfer] = [BankSend(state.registry.owner, coin)]
    return Outcome(state, MarketAction.WITHDRAW_FEES, transfers, {
        "amount": str(coin),
    })


# Every operation type must appear here; see OPERATION_TYPES.
_HANDLERS = {
    ListOffering: _list_offering,
    Buy: _buy,
    WithdrawRwa: _withdraw_rwa,
    RentRwa: _rent_rwa,
    EndRental: _end_rental,
    Clawback: _clawback,
    ChangeFee: _change_fee,
    WithdrawFees: _withdraw_fees,
}


def registered_operations() -> frozenset[type]:
    return frozenset(_HANDLERS)


def offering_id_of(operation: MarketOperation) -> OfferingId | None:
    """Offering touched by an operation, when known before loading any rental."""
    if isinstance(operation, (Buy, WithdrawRwa, RentRwa)):
        return operation.offering_id
    return None
