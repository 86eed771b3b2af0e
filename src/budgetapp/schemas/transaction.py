"""Transaction request/response schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from budgetapp.schemas.common import MoneyMeta, Money, PaginationMeta


class TransactionCreateRequest(BaseModel):
    """Payment intent.

    Amount and UPI id are checked by the payment validator, which reports
    every failed rule at once.
    """

    category_id: UUID
    amount: Decimal
    merchant_upi: str = Field(..., max_length=255)
    merchant_name: str | None = Field(None, max_length=255)
    note: str | None = Field(None, max_length=255)


class TransactionStatusRequest(BaseModel):
    status: Literal["success", "failed", "cancelled"]


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    transaction_id: str
    category_id: UUID
    category_name: str | None = None
    category_color: str | None = None
    amount: Money
    merchant_upi: str
    merchant_name: str
    status: str
    note: str | None
    created_at: datetime
    updated_at: datetime


class TransactionCreateResult(BaseModel):
    message: str
    transaction: TransactionResponse
    upi_url: str = Field(description="upi://pay intent URL for the payment app")


class TransactionStatusResult(BaseModel):
    message: str
    transaction: TransactionResponse
    category_balance: Money | None = Field(
        None, description="Authoritative category balance after the update"
    )


class TransactionListResult(BaseModel):
    transactions: list[TransactionResponse]
    pagination: PaginationMeta
    money: MoneyMeta = Field(description="How to interpret amount fields")


class CategorySpending(BaseModel):
    category_id: UUID
    name: str
    color: str
    spent: Money = Field(description="Sum of successful transactions")
    count: int = Field(description="Number of successful transactions")
    current_balance: Money
    share: float = Field(description="Percentage of total spend (0-100)")


class SpendingSummary(BaseModel):
    total_spent: Money
    total_balance: Money
    by_category: list[CategorySpending]
    money: MoneyMeta
