"""Allocation engine: category creation and salary-based balance recalculation.

Balances are a two-step workflow: categories are declared with a rule and a
zero balance, and only materialize money when ``recalculate`` runs against
the user's salary.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.config import settings
from budgetapp.core.allocation import (
    HUNDRED,
    ZERO,
    has_conflicting_fields,
)
from budgetapp.core.exceptions import (
    CategoryNotFound,
    DuplicateName,
    InvalidAllocation,
    InvalidAmount,
    InvalidPercentage,
    NoSalarySet,
    RecalculationFailed,
)
from budgetapp.models.category import Category
from budgetapp.models.user import User
from budgetapp.repositories.category import CategoryRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategorySpec:
    """Validated input for creating or updating a category."""

    name: str
    percentage: Decimal | None = None
    fixed_amount: Decimal | None = None
    color: str | None = None


DEFAULT_BUDGET_PLAN: tuple[CategorySpec, ...] = (
    CategorySpec("Dining & Restaurants", percentage=Decimal("25"), color="#EF4444"),
    CategorySpec("Transportation", percentage=Decimal("15"), color="#3B82F6"),
    CategorySpec("Entertainment", percentage=Decimal("10"), color="#8B5CF6"),
    CategorySpec("Shopping", percentage=Decimal("15"), color="#F59E0B"),
    CategorySpec("Bills & Utilities", percentage=Decimal("20"), color="#10B981"),
    CategorySpec("Healthcare", percentage=Decimal("5"), color="#EC4899"),
    CategorySpec("Savings", percentage=Decimal("10"), color="#6B7280"),
)


def validate_rule(spec: CategorySpec) -> None:
    """Check the allocation fields of one category.

    Raises:
        InvalidPercentage: percentage outside [0, 100]
        InvalidAmount: negative fixed amount
        InvalidAllocation: both percentage and fixed amount are nonzero
    """
    if spec.percentage is not None and (
        not spec.percentage.is_finite() or not (ZERO <= spec.percentage <= HUNDRED)
    ):
        raise InvalidPercentage(details={"name": spec.name, "percentage": str(spec.percentage)})
    if spec.fixed_amount is not None and (
        not spec.fixed_amount.is_finite() or spec.fixed_amount < ZERO
    ):
        raise InvalidAmount(details={"name": spec.name, "fixed_amount": str(spec.fixed_amount)})
    if has_conflicting_fields(spec.percentage, spec.fixed_amount):
        raise InvalidAllocation(details={"name": spec.name})


class AllocationService:
    """Service layer for categories and their balances."""

    def __init__(self, db: AsyncSession):
        """Initialize allocation service with database session.

        Args:
            db: Database session
        """
        self.db = db
        self.category_repo = CategoryRepository(db)

    def _build(self, user_id: UUID, spec: CategorySpec) -> Category:
        return Category(
            user_id=user_id,
            name=spec.name,
            percentage=spec.percentage or ZERO,
            fixed_amount=spec.fixed_amount or ZERO,
            color=spec.color or settings.default_category_color,
            current_balance=ZERO,
        )

    async def list_categories(self, user_id: UUID) -> list[Category]:
        return await self.category_repo.get_all_by_user(user_id)

    async def create_category(self, user: User, spec: CategorySpec) -> Category:
        """Create a single category with a zero balance.

        Raises:
            InvalidPercentage, InvalidAmount, InvalidAllocation: rule is invalid
            DuplicateName: a category with the same name (any case) exists
        """
        validate_rule(spec)
        user_id = user.id
        if await self.category_repo.name_exists(user_id, spec.name):
            raise DuplicateName(details={"name": spec.name})

        try:
            category = await self.category_repo.create(self._build(user_id, spec))
        except IntegrityError as exc:
            # Lost a race with a concurrent create of the same name.
            await self.db.rollback()
            raise DuplicateName(details={"name": spec.name}) from exc
        logger.info(
            "Category created",
            extra={"user_id": str(user_id), "category_id": str(category.id)},
        )
        return category

    async def bulk_create(self, user: User, specs: list[CategorySpec]) -> list[Category]:
        """Create several categories in one database transaction.

        Names that already exist for the user, or that repeat an earlier item
        of the same batch, are skipped without error.

        Returns:
            Only the newly created categories

        Raises:
            DuplicateName: a concurrent request created one of the names first
        """
        for spec in specs:
            validate_rule(spec)

        user_id = user.id
        seen = await self.category_repo.get_names_by_user(user_id)
        new_categories: list[Category] = []
        for spec in specs:
            key = spec.name.lower()
            if key in seen:
                continue
            seen.add(key)
            new_categories.append(self._build(user_id, spec))

        if not new_categories:
            return []

        self.db.add_all(new_categories)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateName(details={"user_id": str(user_id)}) from exc
        except SQLAlchemyError:
            await self.db.rollback()
            logger.error("Bulk category creation failed", extra={"user_id": str(user_id)})
            raise
        for category in new_categories:
            await self.db.refresh(category)

        logger.info(
            "Bulk categories created",
            extra={"user_id": str(user_id), "created": len(new_categories)},
        )
        return new_categories

    async def seed_defaults(self, user: User) -> list[Category]:
        """Create the default budget plan, skipping names the user already has."""
        return await self.bulk_create(user, list(DEFAULT_BUDGET_PLAN))

    async def update_category(
        self, user: User, category_id: UUID, spec: CategorySpec
    ) -> Category:
        """Replace name, rule and color of a category; the balance is kept.

        Raises:
            CategoryNotFound: category missing or owned by someone else
            DuplicateName: another category already uses the name
        """
        validate_rule(spec)
        category = await self.category_repo.get_by_user(user.id, category_id)
        if category is None:
            raise CategoryNotFound(details={"category_id": str(category_id)})
        if await self.category_repo.name_exists(user.id, spec.name, exclude_id=category.id):
            raise DuplicateName(details={"name": spec.name})

        category.name = spec.name
        category.percentage = spec.percentage or ZERO
        category.fixed_amount = spec.fixed_amount or ZERO
        category.color = spec.color or settings.default_category_color
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateName(details={"name": spec.name}) from exc
        await self.db.refresh(category)
        return category

    async def delete_category(self, user: User, category_id: UUID) -> None:
        if not await self.category_repo.delete_by_user(user.id, category_id):
            raise CategoryNotFound(details={"category_id": str(category_id)})
        logger.info(
            "Category deleted",
            extra={"user_id": str(user.id), "category_id": str(category_id)},
        )

    async def recalculate(self, user: User) -> list[Category]:
        """Reset every category balance from the user's salary.

        All balances are written in one commit; on failure the session is
        rolled back and nothing changes.

        Raises:
            NoSalarySet: salary is missing or not positive
            RecalculationFailed: the batch could not be committed
        """
        user_id = user.id
        salary = user.salary or ZERO
        if salary <= ZERO:
            raise NoSalarySet(details={"user_id": str(user_id)})

        categories = await self.category_repo.get_all_by_user(user_id)
        for category in categories:
            if has_conflicting_fields(category.percentage, category.fixed_amount):
                logger.warning(
                    "Category has both percentage and fixed amount; using percentage",
                    extra={"category_id": str(category.id)},
                )
            category.current_balance = category.allocation_rule.entitled_balance(salary)

        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(
                "Balance recalculation failed; rolled back",
                extra={"user_id": str(user_id), "error_type": type(exc).__name__},
            )
            raise RecalculationFailed(details={"user_id": str(user_id)}) from exc

        logger.info(
            "Category balances recalculated",
            extra={"user_id": str(user_id), "categories": len(categories)},
        )
        return categories
