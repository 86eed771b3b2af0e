"""Payment validator: business rules a payment must pass before it is recorded."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.core.exceptions import (
    BudgetError,
    CategoryNotFound,
    InsufficientBalance,
    InvalidAmount,
    InvalidUpiFormat,
)
from budgetapp.core.allocation import is_whole_paise
from budgetapp.core.upi import is_valid_upi_id
from budgetapp.models.category import Category
from budgetapp.repositories.category import CategoryRepository


class PaymentValidator:
    """Runs every payment check and reports all failures together."""

    def __init__(self, db: AsyncSession):
        self.category_repo = CategoryRepository(db)

    async def validate(
        self,
        user_id: UUID,
        category_id: UUID,
        amount: Decimal | None,
        upi_id: str | None,
    ) -> tuple[Category | None, list[BudgetError]]:
        """Check a proposed payment.

        Checks (in reporting order):
            1. amount is finite, > 0 and in whole paise
            2. category exists and belongs to the user
            3. UPI id looks like local@handle
            4. amount does not exceed the category balance (needs 1 and 2)

        Returns:
            The resolved category (or None) and the list of violations
        """
        violations: list[BudgetError] = []

        amount_ok = (
            amount is not None
            and amount.is_finite()
            and amount > 0
            and is_whole_paise(amount)
        )
        if not amount_ok:
            violations.append(InvalidAmount(details={"amount": str(amount)}))

        category = await self.category_repo.get_by_user(user_id, category_id)
        if category is None:
            violations.append(CategoryNotFound(details={"category_id": str(category_id)}))

        if not is_valid_upi_id(upi_id):
            violations.append(InvalidUpiFormat())

        if amount_ok and category is not None and amount > category.current_balance:
            violations.append(InsufficientBalance(category.current_balance, requested=amount))

        return category, violations

    async def ensure_valid(
        self,
        user_id: UUID,
        category_id: UUID,
        amount: Decimal | None,
        upi_id: str | None,
    ) -> Category:
        """Validate and raise the first violation, listing every failed code on it.

        Raises:
            BudgetError: first failed check (InvalidAmount, CategoryNotFound,
                InvalidUpiFormat or InsufficientBalance)
        """
        category, violations = await self.validate(user_id, category_id, amount, upi_id)
        if violations:
            first = violations[0]
            first.violations = [v.error_code for v in violations]
            raise first
        return category
