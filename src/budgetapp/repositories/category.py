"""Category repository with user-scoped queries."""
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.models.base import utcnow
from budgetapp.models.category import Category
from budgetapp.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model; every query is scoped to one user."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Category)

    async def get_by_user(self, user_id: UUID, category_id: UUID) -> Category | None:
        """Get category only if it belongs to the specified user."""
        result = await self.db.execute(
            select(Category).where(Category.id == category_id, Category.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_all_by_user(self, user_id: UUID) -> list[Category]:
        """All categories for a user, oldest first."""
        result = await self.db.execute(
            select(Category)
            .where(Category.user_id == user_id)
            .order_by(Category.created_at.asc())
        )
        return list(result.scalars().all())

    async def get_names_by_user(self, user_id: UUID) -> set[str]:
        """Lower-cased category names for case-insensitive duplicate checks."""
        result = await self.db.execute(
            select(Category.name).where(Category.user_id == user_id)
        )
        return {name.lower() for name in result.scalars().all()}

    async def name_exists(
        self, user_id: UUID, name: str, exclude_id: UUID | None = None
    ) -> bool:
        """Check for a case-insensitive name collision within the user's categories."""
        query = select(Category.id).where(
            Category.user_id == user_id,
            func.lower(Category.name) == name.lower(),
        )
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def debit_balance(
        self, user_id: UUID, category_id: UUID, amount: Decimal
    ) -> int:
        """Decrement the balance in SQL; does not commit.

        Returns:
            Number of rows updated (0 when the category no longer exists)
        """
        result = await self.db.execute(
            update(Category)
            .where(Category.id == category_id, Category.user_id == user_id)
            .values(
                current_balance=Category.current_balance - amount,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_by_user(self, user_id: UUID, category_id: UUID) -> bool:
        """Delete a category; its transactions go with it via ON DELETE CASCADE."""
        result = await self.db.execute(
            delete(Category)
            .where(Category.id == category_id, Category.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount > 0
