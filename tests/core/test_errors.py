"""Error Hierarchy — codes, HTTP statuses and response envelope."""

import pytest

from rwa_market.core.errors import (
    AlreadyInstantiatedError, ArithmeticOverflowError, DatabaseError,
    ErrorCategory, ErrorContext, InputValidationError, InstructionDecodeError,
    InsufficientFundsError, InvalidAddressError, InvalidBuyerError,
    InvalidFeeError, InvalidListingError, InvalidRentalError, InvalidRenterError,
    MarketError, NotInstantiatedError, OrphanedRentalError, RentalNotExpiredError,
    RentalNotFoundError, ResourceNotFoundError, UnauthorizedError,
    UnknownOperationError,
)
from rwa_market.core.operations import Buy
from rwa_market.core.transaction_engine import apply
from tests.core.market_fixtures import make_market


def test_codes_and_statuses():
    cases = [
        (UnauthorizedError("owner"), "UNAUTHORIZED", 403),
        (InvalidBuyerError(), "INVALID_BUYER", 400),
        (InvalidRenterError(), "INVALID_RENTER", 400),
        (InsufficientFundsError(10, "earth"), "INSUFFICIENT_FUNDS", 400),
        (RentalNotExpiredError(5), "RENTAL_NOT_EXPIRED", 400),
        (ArithmeticOverflowError("x"), "ARITHMETIC_OVERFLOW", 400),
        (ResourceNotFoundError("Offering", "1"), "RESOURCE_NOT_FOUND", 404),
        (RentalNotFoundError("1"), "RENTAL_NOT_FOUND", 404),
        (OrphanedRentalError("1", "2"), "ORPHANED_RENTAL", 409),
        (InvalidListingError("m", "amount"), "INVALID_LISTING", 400),
        (InvalidRentalError("m", "duration"), "INVALID_RENTAL", 400),
        (InvalidFeeError("m"), "INVALID_FEE", 400),
        (InvalidAddressError("X", "bad"), "INVALID_ADDRESS", 400),
        (InstructionDecodeError("bad"), "INVALID_INSTRUCTION", 400),
        (AlreadyInstantiatedError(), "ALREADY_INSTANTIATED", 409),
        (NotInstantiatedError(), "NOT_INSTANTIATED", 409),
        (UnknownOperationError("Foo"), "UNKNOWN_OPERATION", 500),
        (DatabaseError("down", "execute"), "DATABASE_ERROR", 503),
    ]
    for error, code, status in cases:
        assert isinstance(error, MarketError)
        assert error.code == code
        assert error.http_status == status


def test_validation_errors_share_a_base():
    for error in (
        InvalidListingError("m", "amount"), InvalidFeeError("m"),
        InvalidAddressError("X", "bad"), InstructionDecodeError("bad"),
    ):
        assert isinstance(error, InputValidationError)
        assert error.category is ErrorCategory.VALIDATION


def test_insufficient_funds_message_names_requirement():
    assert "300earth" in InsufficientFundsError(300, "earth").message


def test_to_response_envelope():
    ctx = ErrorContext(caller="bob", action="buy_rwa", offering_id="1")
    body = InvalidBuyerError(ctx).to_response()["error"]
    assert body["code"] == "INVALID_BUYER"
    assert body["category"] == "business_rule"
    assert body["severity"] == "error"
    assert body["context"] == {
        "caller": "bob", "action": "buy_rwa", "offering_id": "1", "rental_id": None,
    }
    assert "timestamp" in body


def test_engine_errors_carry_no_timestamp():
    with pytest.raises(MarketError) as exc:
        apply(make_market(), "bob", Buy("1"))
    assert exc.value.context.timestamp is None
    assert exc.value.to_response()["error"]["timestamp"] is None
