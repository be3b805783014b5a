"""Market Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - u128 amounts accept ints or numeric strings and serialize to JSON as strings
    - Fees are Decimals ≥ 0 and serialize as strings ("0.02")
    - Every execute request names its `sender`; funds default to none
    - decode_sell_instruction() is the only place the deposit `msg` is parsed

Design Decisions:
    - to_operation() on each request keeps route handlers free of mapping code
"""

import base64
import binascii
from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer, ValidationError, field_validator

from rwa_market.core.domain_types import (
    UINT64_MAX, UINT128_MAX, Coin, Identity, OfferingId, RentalId,
)
from rwa_market.core.errors import InstructionDecodeError
from rwa_market.core.market_state import Offering
from rwa_market.core.operations import (
    Buy, ChangeFee, Clawback, EndRental, ListOffering, RentRwa,
    WithdrawFees, WithdrawRwa,
)
from rwa_market.core.queries import OfferListing, RentalView
from rwa_market.core.transfers import Transfer, describe_transfer


Uint128 = Annotated[
    int,
    Field(ge=0, le=UINT128_MAX),
    PlainSerializer(str, return_type=str, when_used="json"),
]

FeeFraction = Annotated[
    Decimal,
    Field(ge=0),
    PlainSerializer(str, return_type=str, when_used="json"),
]


# --- Shared value types ------------------------------------------------------

class CoinSchema(BaseModel):
    """Native-currency amount."""
    denom: str = Field(min_length=1, max_length=128)
    amount: Uint128

    def to_coin(self) -> Coin:
        return Coin(self.denom, self.amount)

    @classmethod
    def from_coin(cls, coin: Coin) -> "CoinSchema":
        return cls(denom=coin.denom, amount=coin.amount)


class SellInstruction(BaseModel):
    """Decoded `msg` of a deposit notification."""
    list_price: CoinSchema


def decode_sell_instruction(msg: str) -> SellInstruction:
    """Decode base64(JSON) sell instruction. Raises InstructionDecodeError."""
    try:
        raw = base64.b64decode(msg, validate=True)
    except (binascii.Error, ValueError):
        raise InstructionDecodeError("msg is not valid base64")
    try:
        return SellInstruction.model_validate_json(raw)
    except ValidationError as e:
        raise InstructionDecodeError(
            "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ) or "malformed JSON",
        )


def encode_sell_instruction(list_price: Coin) -> str:
    """Inverse of decode_sell_instruction — used by custodians and tests."""
    body = SellInstruction(list_price=CoinSchema.from_coin(list_price))
    return base64.b64encode(body.model_dump_json().encode()).decode()


# --- Requests ----------------------------------------------------------------

class InstantiateRequest(BaseModel):
    sender: str
    fee: FeeFraction


class ReceiveRwaRequest(BaseModel):
    """Deposit notification from an asset custodian.

    `asset_contract` is the notifying custodian, `sender` the depositing holder.
    """
    asset_contract: str
    sender: str
    amount: Uint128
    msg: str = Field(min_length=1)

    def to_operation(self) -> ListOffering:
        instruction = decode_sell_instruction(self.msg)
        return ListOffering(
            sender=Identity(self.sender),
            amount=self.amount,
            list_price=instruction.list_price.to_coin(),
        )


class ExecuteRequest(BaseModel):
    """Common execute envelope: caller identity and attached funds."""
    sender: str
    funds: list[CoinSchema] = Field(default_factory=list)

    def coins(self) -> list[Coin]:
        return [f.to_coin() for f in self.funds]


class BuyRequest(ExecuteRequest):
    def to_operation(self, offering_id: str) -> Buy:
        return Buy(OfferingId(offering_id))


class WithdrawRwaRequest(ExecuteRequest):
    def to_operation(self, offering_id: str) -> WithdrawRwa:
        return WithdrawRwa(OfferingId(offering_id))


class RentRwaRequest(ExecuteRequest):
    duration: int = Field(gt=0, le=UINT64_MAX)

    def to_operation(self, offering_id: str) -> RentRwa:
        return RentRwa(OfferingId(offering_id), self.duration)


class EndRentalRequest(ExecuteRequest):
    def to_operation(self, rental_id: str) -> EndRental:
        return EndRental(RentalId(rental_id))


class ClawbackRequest(ExecuteRequest):
    def to_operation(self, rental_id: str) -> Clawback:
        return Clawback(RentalId(rental_id))


class ChangeFeeRequest(ExecuteRequest):
    fee: FeeFraction

    def to_operation(self) -> ChangeFee:
        return ChangeFee(self.fee)


class WithdrawFeesRequest(ExecuteRequest):
    amount: Uint128
    denom: str = Field(min_length=1, max_length=128)

    @field_validator("denom")
    @classmethod
    def strip_denom(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("denom cannot be empty or whitespace")
        return v

    def to_operation(self) -> WithdrawFees:
        return WithdrawFees(self.amount, self.denom)


# --- Responses ---------------------------------------------------------------

class TransferSchema(BaseModel):
    kind: str
    recipient: str
    denom: str | None = None
    asset_contract: str | None = None
    amount: str

    @classmethod
    def from_transfer(cls, transfer: Transfer) -> "TransferSchema":
        return cls(**describe_transfer(transfer))


class ExecuteResponse(BaseModel):
    action: str
    attributes: dict[str, str]
    transfers: list[TransferSchema]
    transfer_ids: list[int] = Field(default_factory=list)


class CountResponse(BaseModel):
    count: int


class FeeResponse(BaseModel):
    fee: FeeFraction


class OfferSchema(BaseModel):
    id: str
    amount: Uint128
    contract: str
    seller: str
    list_price: CoinSchema

    @classmethod
    def from_listing(cls, listing: OfferListing) -> "OfferSchema":
        offering: Offering = listing.offering
        return cls(
            id=listing.id,
            amount=offering.amount,
            contract=offering.asset_contract,
            seller=offering.seller,
            list_price=CoinSchema.from_coin(offering.list_price),
        )


class OffersResponse(BaseModel):
    offers: list[OfferSchema]


class RentalInfo(BaseModel):
    id: str
    offering_id: str
    renter: str
    start_time: int
    end_time: int
    amount: Uint128

    @classmethod
    def from_view(cls, view: RentalView) -> "RentalInfo":
        return cls(
            id=view.id,
            offering_id=view.offering_id,
            renter=view.renter,
            start_time=view.start_time,
            end_time=view.end_time,
            amount=view.amount,
        )


class RentalResponse(BaseModel):
    rental: RentalInfo


class OutboundTransferResponse(BaseModel):
    id: int
    action: str
    sequence: int
    kind: str
    recipient: str
    denom: str | None = None
    asset_contract: str | None = None
    amount: str
    offering_id: str | None = None
    rental_id: str | None = None
    status: str
    created_at: datetime
    dispatched_at: datetime | None = None


class OutboundTransfersResponse(BaseModel):
    transfers: list[OutboundTransferResponse]
