"""Error Hierarchy — typed, categorized exceptions for all market failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are raised before any state is committed
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages
    - Errors never read the clock; ErrorContext.timestamp is set by the API layer

Design Decisions:
    - Single hierarchy with MarketError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any
from datetime import datetime


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime | None = None    # stamped by the shell, never by core
    caller: str | None = None
    action: str | None = None
    offering_id: str | None = None
    rental_id: str | None = None
    debug_info: dict[str, Any] | None = None


class MarketError(Exception):
    """Base exception for all market errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": (
                    self.context.timestamp.isoformat()
                    if self.context.timestamp else None
                ),
                "context": {
                    "caller": self.context.caller,
                    "action": self.context.action,
                    "offering_id": self.context.offering_id,
                    "rental_id": self.context.rental_id,
                },
            }
        }


# ─── Authorization Errors ───────────────────────────────────────

class UnauthorizedError(MarketError):
    """Caller lacks the role required by the operation."""
    def __init__(self, required_role: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unauthorized: caller is not the {required_role}",
            "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )
        self.required_role = required_role


class InvalidBuyerError(MarketError):
    """Seller attempted to buy their own offering."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid buyer: the seller cannot buy their own offering",
            "INVALID_BUYER", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidRenterError(MarketError):
    """Seller attempted to rent their own offering."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid renter: the seller cannot rent their own offering",
            "INVALID_RENTER", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Business Rule Errors ───────────────────────────────────────

class InsufficientFundsError(MarketError):
    """Attached payment is missing the price denom or below the required amount."""
    def __init__(
        self, required_amount: int, denom: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Insufficient funds: {required_amount}{denom} required",
            "INSUFFICIENT_FUNDS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.required_amount = required_amount
        self.denom = denom


class RentalNotExpiredError(MarketError):
    """End-rental or clawback attempted before the rental end time."""
    def __init__(self, end_time: int, context: ErrorContext | None = None):
        super().__init__(
            f"Rental has not expired yet (ends at {end_time})",
            "RENTAL_NOT_EXPIRED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.end_time = end_time


class ArithmeticOverflowError(MarketError):
    """Amount or time arithmetic left its unsigned range."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Arithmetic overflow in {operation}",
            "ARITHMETIC_OVERFLOW", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.operation = operation


# ─── Not Found Errors ───────────────────────────────────────────

class ResourceNotFoundError(MarketError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class RentalNotFoundError(MarketError):
    """Rental already concluded (ended or clawed back) or never existed."""
    def __init__(self, rental_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Rental '{rental_id}' not found",
            "RENTAL_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.rental_id = rental_id


class OrphanedRentalError(MarketError):
    """Rental references an offering that was bought or withdrawn."""
    def __init__(
        self, rental_id: str, offering_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Rental '{rental_id}' references missing offering '{offering_id}'",
            "ORPHANED_RENTAL", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.rental_id = rental_id
        self.offering_id = offering_id


# ─── Input Validation Errors ────────────────────────────────────

class InputValidationError(MarketError):
    """Operation input failed validation."""
    def __init__(
        self, message: str, field: str, code: str = "VALIDATION_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidListingError(InputValidationError):
    """Deposit notification would create an empty or free offering."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(message, field, "INVALID_LISTING", context)


class InvalidRentalError(InputValidationError):
    """Rental request has a non-positive duration."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(message, field, "INVALID_RENTAL", context)


class InvalidFeeError(InputValidationError):
    """Fee is negative or finer than 18 decimal places."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, "fee", "INVALID_FEE", context)


class InvalidAddressError(InputValidationError):
    """Identity failed validation by the address validator."""
    def __init__(self, address: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid address '{address}': {reason}", "address",
            "INVALID_ADDRESS", context,
        )
        self.address = address


class InstructionDecodeError(InputValidationError):
    """Encoded sell instruction in a deposit notification could not be decoded."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid sell instruction: {reason}", "msg",
            "INVALID_INSTRUCTION", context,
        )


# ─── Lifecycle Errors ───────────────────────────────────────────

class AlreadyInstantiatedError(MarketError):
    """Registry already exists."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Market is already instantiated",
            "ALREADY_INSTANTIATED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class NotInstantiatedError(MarketError):
    """Registry does not exist yet."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Market has not been instantiated",
            "NOT_INSTANTIATED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class UnknownOperationError(MarketError):
    """Operation type has no registered handler."""
    def __init__(self, operation_type: str, context: ErrorContext | None = None):
        super().__init__(
            f"No handler registered for operation '{operation_type}'",
            "UNKNOWN_OPERATION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(MarketError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
