"""Fee & Escrow Arithmetic — fixed-point fee fractions over unsigned integer amounts.

Invariants:
    - Fees are fixed-point fractions with 18 decimal places (atomics / 10**18)
    - Every product with a fee is truncated toward zero
    - Results outside 0..UINT128_MAX raise ArithmeticOverflowError, never wrap
    - All functions are pure

Design Decisions:
    - decimal.Decimal at the boundary, integer atomics inside: no float rounding anywhere
"""

from decimal import Decimal

from rwa_market.core.domain_types import UINT64_MAX, UINT128_MAX
from rwa_market.core.errors import ArithmeticOverflowError, InvalidFeeError


FEE_DECIMAL_PLACES: int = 18
FEE_FRACTIONAL: int = 10**FEE_DECIMAL_PLACES


def validate_fee(fee: Decimal) -> Decimal:
    """Check the fee is representable: finite, non-negative, ≤ 18 decimal places."""
    if not fee.is_finite():
        raise InvalidFeeError(f"Fee must be a finite number, got {fee}")
    if fee < 0:
        raise InvalidFeeError(f"Fee cannot be negative, got {fee}")
    if fee.normalize().as_tuple().exponent < -FEE_DECIMAL_PLACES:
        raise InvalidFeeError(
            f"Fee supports at most {FEE_DECIMAL_PLACES} decimal places, got {fee}",
        )
    if fee_atomics(fee) > UINT128_MAX:
        raise InvalidFeeError(f"Fee is out of range, got {fee}")
    return fee


def fee_atomics(fee: Decimal) -> int:
    """Fixed-point representation of the fee (fee × 10**18)."""
    return int(fee.scaleb(FEE_DECIMAL_PLACES))


def checked_amount(value: int, operation: str) -> int:
    if value < 0 or value > UINT128_MAX:
        raise ArithmeticOverflowError(operation)
    return value


def mul_floor(amount: int, fee: Decimal) -> int:
    """amount × fee, truncated toward zero."""
    return checked_amount(
        amount * fee_atomics(fee) // FEE_FRACTIONAL, "fee multiplication",
    )


def net_of_fee(amount: int, fee: Decimal) -> int:
    """amount × (1 − fee), truncated. Fees above 1 have no unsigned result."""
    remainder = FEE_FRACTIONAL - fee_atomics(fee)
    if remainder < 0:
        raise ArithmeticOverflowError("net amount (fee exceeds 1)")
    return amount * remainder // FEE_FRACTIONAL


def rental_price(price_per_unit: int, duration: int) -> int:
    """Linear rental price: list price × duration, exact."""
    return checked_amount(price_per_unit * duration, "rental price")


def split_rental_payment(price: int, fee: Decimal) -> tuple[int, int]:
    """Return (fee_amount, seller_amount) for a rental price."""
    fee_amount = mul_floor(price, fee)
    seller_amount = checked_amount(price - fee_amount, "seller amount")
    return fee_amount, seller_amount


def add_seconds(start: int, duration: int) -> int:
    end = start + duration
    if end > UINT64_MAX:
        raise ArithmeticOverflowError("rental end time")
    return end
