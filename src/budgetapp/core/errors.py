"""Error codes and user-friendly messages.

This module defines the error catalog for budgeting and payment operations.
Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

ERROR_CATALOG: dict[str, dict] = {
    # Allocation engine
    "ALLOC_001": {
        "code": "ALLOC_001",
        "message": "Salary is not set for this user",
        "user_message": "Please set your salary first.",
        "suggestion": "Update your monthly salary in your profile, then recalculate.",
        "retry_allowed": False,
    },
    "ALLOC_002": {
        "code": "ALLOC_002",
        "message": "Category percentage outside the range 0-100",
        "user_message": "Percentage must be between 0 and 100.",
        "suggestion": "Enter a percentage between 0 and 100.",
        "retry_allowed": False,
    },
    "ALLOC_003": {
        "code": "ALLOC_003",
        "message": "Category name already exists for this user",
        "user_message": "A category with this name already exists.",
        "suggestion": "Choose a different name or edit the existing category.",
        "retry_allowed": False,
    },
    "ALLOC_004": {
        "code": "ALLOC_004",
        "message": "Category balance recalculation failed; no balances were changed",
        "user_message": "We couldn't recalculate your balances.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "ALLOC_005": {
        "code": "ALLOC_005",
        "message": "Category has both a percentage and a fixed amount",
        "user_message": "A category can use a percentage or a fixed amount, not both.",
        "suggestion": "Set either the percentage or the fixed amount to zero.",
        "retry_allowed": False,
    },
    # Payment validator
    "PAY_001": {
        "code": "PAY_001",
        "message": "Amount must be a finite number greater than zero",
        "user_message": "Please enter a valid amount.",
        "suggestion": "The amount must be greater than zero.",
        "retry_allowed": False,
    },
    "PAY_002": {
        "code": "PAY_002",
        "message": "Category not found or not owned by user",
        "user_message": "We couldn't find this category.",
        "suggestion": "Please refresh and choose one of your categories.",
        "retry_allowed": False,
    },
    "PAY_003": {
        "code": "PAY_003",
        "message": "UPI id does not match local@handle",
        "user_message": "This doesn't look like a valid UPI ID.",
        "suggestion": "UPI IDs look like name@bank.",
        "retry_allowed": False,
    },
    "PAY_004": {
        "code": "PAY_004",
        "message": "Amount exceeds category balance",
        "user_message": "Insufficient balance in category.",
        "suggestion": "Lower the amount or pick a category with enough balance.",
        "retry_allowed": False,
    },
    # Transaction lifecycle
    "TXN_001": {
        "code": "TXN_001",
        "message": "Transaction not found or not owned by user",
        "user_message": "We couldn't find this transaction.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "TXN_002": {
        "code": "TXN_002",
        "message": "Transaction already finalized",
        "user_message": "Transaction status cannot be changed.",
        "suggestion": "This transaction has already been processed.",
        "retry_allowed": False,
    },
    "TXN_003": {
        "code": "TXN_003",
        "message": "Category balance update failed; transaction reverted to pending",
        "user_message": "We couldn't update your category balance.",
        "suggestion": "The payment is still pending. Please confirm it again.",
        "retry_allowed": True,
    },
    # Generic
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request data failed validation",
        "user_message": "Invalid input data",
        "suggestion": "Please check your input and try again",
        "retry_allowed": True,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "A database error occurred",
        "suggestion": "Please try again later",
        "retry_allowed": True,
    },
    "DB_002": {
        "code": "DB_002",
        "message": "Resource already exists",
        "user_message": "This record already exists",
        "suggestion": "Please check if the record was already created",
        "retry_allowed": False,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred",
        "suggestion": "Please try again later or contact support",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Unknown codes resolve to a generic definition instead of raising.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
