"""Custom exception classes for budgeting and payment operations.

Every domain error inherits from BudgetError and maps to an error code in
errors.py. The API layer turns them into JSON responses with the catalog
messages (see api/middleware/error_handler.py).
"""

from decimal import Decimal
from typing import Any


class BudgetError(Exception):
    """Base exception for all budgeting errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "PAY_004")
        http_status: HTTP status code to return
        details: Additional context (logged in debug mode, never returned)
        public: Extra fields that are safe to return to the client
        violations: Codes of every failed check when several were evaluated
    """

    error_code: str = "SYS_001"
    http_status: int = 500

    def __init__(
        self,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
        public: dict[str, Any] | None = None,
    ):
        if error_code is not None:
            self.error_code = error_code
        if http_status is not None:
            self.http_status = http_status
        self.details = details or {}
        self.public = public or {}
        self.violations: list[str] = []
        super().__init__(self.error_code)


# Allocation engine


class NoSalarySet(BudgetError):
    """Raised when balances are recalculated before a salary exists."""

    error_code = "ALLOC_001"
    http_status = 400


class InvalidPercentage(BudgetError):
    """Raised when a category percentage is outside [0, 100]."""

    error_code = "ALLOC_002"
    http_status = 400


class DuplicateName(BudgetError):
    """Raised when a category name collides (case-insensitively) for the user."""

    error_code = "ALLOC_003"
    http_status = 409


class RecalculationFailed(BudgetError):
    """Raised when the recalculation batch could not be committed.

    The batch is rolled back, so callers can treat balances as unchanged.
    """

    error_code = "ALLOC_004"
    http_status = 500


class InvalidAllocation(BudgetError):
    """Raised when a category sets both a percentage and a fixed amount."""

    error_code = "ALLOC_005"
    http_status = 400


# Payment validator


class InvalidAmount(BudgetError):
    error_code = "PAY_001"
    http_status = 400


class CategoryNotFound(BudgetError):
    error_code = "PAY_002"
    http_status = 404


class InvalidUpiFormat(BudgetError):
    error_code = "PAY_003"
    http_status = 400


class InsufficientBalance(BudgetError):
    """Raised when a payment exceeds the category's current balance."""

    error_code = "PAY_004"
    http_status = 400

    def __init__(self, available: Decimal, requested: Decimal | None = None):
        super().__init__(
            details={"requested": str(requested)} if requested is not None else None,
            public={"available_balance": float(available)},
        )
        self.available = available


# Transaction lifecycle


class TransactionNotFound(BudgetError):
    error_code = "TXN_001"
    http_status = 404


class AlreadyFinalized(BudgetError):
    """Raised when a transaction is no longer pending."""

    error_code = "TXN_002"
    http_status = 400


class BalanceUpdateFailed(BudgetError):
    """Raised when the success debit failed and the status write was undone."""

    error_code = "TXN_003"
    http_status = 500
