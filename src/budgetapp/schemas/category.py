"""Category request/response schemas.

Range checks on percentage and fixed amount are done by the allocation
service so they surface with their own error codes (ALLOC_002, PAY_001).
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from budgetapp.core.allocation import FixedAmountRule, PercentageRule, rule_from_fields
from budgetapp.schemas.common import Money

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CategoryRequest(BaseModel):
    """Create/update payload. Set either ``percentage`` or ``fixed_amount``."""

    name: str = Field(..., max_length=100, description="Category name")
    percentage: Decimal | None = Field(None, description="Share of salary (0-100)")
    fixed_amount: Decimal | None = Field(None, description="Fixed monthly amount")
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN, description="#RRGGBB")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


class CategoryBulkRequest(BaseModel):
    categories: list[CategoryRequest] = Field(..., min_length=1)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    percentage: Money
    fixed_amount: Money
    current_balance: Money
    color: str
    created_at: datetime

    @computed_field
    @property
    def allocation_type(self) -> Literal["percentage", "fixed", "none"]:
        rule = rule_from_fields(self.percentage, self.fixed_amount)
        if isinstance(rule, PercentageRule):
            return "percentage"
        if isinstance(rule, FixedAmountRule):
            return "fixed"
        return "none"


class CategoryListResult(BaseModel):
    categories: list[CategoryResponse]
    total: int
    total_balance: Money = Field(description="Sum of current balances")
    allocated_percentage: Money = Field(description="Sum of percentage allocations")
    allocated_fixed_amount: Money = Field(description="Sum of fixed allocations")


class CategoryBulkResult(BaseModel):
    message: str
    categories: list[CategoryResponse]


class RecalculateResult(BaseModel):
    message: str
    salary: Money
    categories: list[CategoryResponse]
