"""Transaction endpoints: initiate UPI payments and record their outcome."""

import math
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from budgetapp.api.deps import get_current_user, get_transaction_service
from budgetapp.config import settings
from budgetapp.models.transaction import Transaction, TransactionStatus
from budgetapp.models.user import User
from budgetapp.schemas.common import MoneyMeta, PaginationMeta
from budgetapp.schemas.transaction import (
    CategorySpending,
    SpendingSummary,
    TransactionCreateRequest,
    TransactionCreateResult,
    TransactionListResult,
    TransactionResponse,
    TransactionStatusRequest,
    TransactionStatusResult,
)
from budgetapp.services.transactions import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _money_meta() -> MoneyMeta:
    return MoneyMeta(currency=settings.currency, minor_unit=settings.currency_minor_unit)


def _response(
    txn: Transaction, category_name: str | None = None, category_color: str | None = None
) -> TransactionResponse:
    return TransactionResponse.model_validate(txn).model_copy(
        update={"category_name": category_name, "category_color": category_color}
    )


@router.get(
    "",
    response_model=TransactionListResult,
    summary="List transactions",
    description="""
    Transactions of the authenticated user, newest first, with the category
    name and color joined in.

    Supports filtering by:
    - status (pending, success, failed, cancelled)
    - category_id
    """,
)
async def list_transactions(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(50, ge=1, le=100, description="Items per page (max 100)"),
    status_filter: TransactionStatus | None = Query(
        None, alias="status", description="Filter by status"
    ),
    category_id: UUID | None = Query(None, description="Filter by category"),
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResult:
    rows, total = await service.list_for_user(
        current_user, page=page, limit=limit, status=status_filter, category_id=category_id
    )
    return TransactionListResult(
        transactions=[_response(txn, name, color) for txn, name, color in rows],
        pagination=PaginationMeta(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if total else 0,
        ),
        money=_money_meta(),
    )


@router.post(
    "",
    response_model=TransactionCreateResult,
    status_code=status.HTTP_201_CREATED,
    summary="Initiate payment",
    description="""
    Validate a payment against the category balance and record it as pending.

    Returns a `upi://pay` URL for the payment app. The balance is only
    debited when the payment is confirmed via `PUT /transactions/{id}/status`.
    """,
    responses={
        400: {"description": "Invalid amount, UPI id or insufficient balance"},
        404: {"description": "Category not found"},
    },
)
async def create_transaction(
    data: TransactionCreateRequest,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionCreateResult:
    """
    Initiate a UPI payment.

    Args:
        data: Category, amount and merchant details
        current_user: Authenticated user
        service: Transaction service

    Returns:
        The pending transaction and its UPI intent URL
    """
    initiated = await service.initiate(
        current_user,
        category_id=data.category_id,
        amount=data.amount,
        merchant_upi=data.merchant_upi.strip(),
        merchant_name=data.merchant_name,
        note=data.note,
    )
    return TransactionCreateResult(
        message="Transaction initiated",
        transaction=_response(initiated.transaction),
        upi_url=initiated.upi_url,
    )


@router.get(
    "/summary",
    response_model=SpendingSummary,
    summary="Spending summary",
    description="Successful spend per category with each category's share of the total.",
)
async def spending_summary(
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> SpendingSummary:
    summary = await service.summary(current_user)
    return SpendingSummary(
        total_spent=summary["total_spent"],
        total_balance=summary["total_balance"],
        by_category=[CategorySpending(**row) for row in summary["by_category"]],
        money=_money_meta(),
    )


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get transaction",
    responses={404: {"description": "Transaction not found"}},
)
async def get_transaction(
    transaction_id: UUID,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    txn, name, color = await service.get(current_user, transaction_id)
    return _response(txn, name, color)


@router.put(
    "/{transaction_id}/status",
    response_model=TransactionStatusResult,
    summary="Finalize transaction",
    description="""
    Record the outcome reported by the payment app.

    Only pending transactions can be finalized, exactly once. `success`
    debits the category balance in the same database transaction;
    `failed` and `cancelled` leave it unchanged.
    """,
    responses={
        400: {"description": "Transaction already finalized"},
        404: {"description": "Transaction not found"},
        500: {"description": "Balance update failed; transaction left pending"},
    },
)
async def update_transaction_status(
    transaction_id: UUID,
    data: TransactionStatusRequest,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionStatusResult:
    finalized = await service.finalize(
        current_user, transaction_id, TransactionStatus(data.status)
    )
    return TransactionStatusResult(
        message="Transaction status updated",
        transaction=_response(finalized.transaction),
        category_balance=finalized.category_balance,
    )
