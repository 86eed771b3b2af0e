"""Category model: a named slice of the user's salary."""
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from budgetapp.core.allocation import AllocationRule, rule_from_fields
from budgetapp.models.base import BaseModel


class Category(BaseModel):
    """Spending category with an allocation rule and a spendable balance."""

    __tablename__ = "categories"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), nullable=False
    )
    fixed_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    current_balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    color: Mapped[str] = mapped_column(String(7), default="#4F46E5", nullable=False)

    @property
    def allocation_rule(self) -> AllocationRule:
        return rule_from_fields(self.percentage, self.fixed_amount)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name}, balance={self.current_balance})>"


# Names are unique per user regardless of case.
Index(
    "uq_categories_user_id_lower_name",
    Category.user_id,
    func.lower(Category.name),
    unique=True,
)
