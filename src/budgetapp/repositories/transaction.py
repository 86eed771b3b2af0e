"""Transaction repository with listing, status and aggregation queries."""
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.core.allocation import quantize_money
from budgetapp.models.base import utcnow
from budgetapp.models.category import Category
from budgetapp.models.transaction import Transaction, TransactionStatus
from budgetapp.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model with user-scoped queries."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    def _with_category(self):
        return select(Transaction, Category.name, Category.color).join(
            Category, Transaction.category_id == Category.id
        )

    async def get_by_user(self, user_id: UUID, transaction_id: UUID) -> Transaction | None:
        """Get transaction only if it belongs to the specified user."""
        result = await self.db.execute(
            select(Transaction).where(
                Transaction.id == transaction_id, Transaction.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def get_with_category(
        self, user_id: UUID, transaction_id: UUID
    ) -> tuple[Transaction, str, str] | None:
        """Transaction plus its category name and color."""
        result = await self.db.execute(
            self._with_category().where(
                Transaction.id == transaction_id, Transaction.user_id == user_id
            )
        )
        row = result.one_or_none()
        return tuple(row) if row is not None else None

    async def list_with_category(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 50,
        status: str | None = None,
        category_id: UUID | None = None,
    ) -> tuple[list[tuple[Transaction, str, str]], int]:
        """Newest-first page of transactions and the total matching count."""
        filters = [Transaction.user_id == user_id]
        if status:
            filters.append(Transaction.status == status)
        if category_id:
            filters.append(Transaction.category_id == category_id)

        count_result = await self.db.execute(
            select(func.count()).select_from(Transaction).where(*filters)
        )
        total = count_result.scalar_one()

        result = await self.db.execute(
            self._with_category()
            .where(*filters)
            .order_by(Transaction.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return [tuple(row) for row in result.all()], total

    async def transition_from_pending(
        self, user_id: UUID, transaction_id: UUID, new_status: TransactionStatus
    ) -> bool:
        """Atomically move a pending transaction to ``new_status``; does not commit.

        The WHERE clause doubles as the compare-and-swap: a second caller
        updates zero rows.
        """
        result = await self.db.execute(
            update(Transaction)
            .where(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id,
                Transaction.status == TransactionStatus.PENDING.value,
            )
            .values(status=new_status.value, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def spending_by_category(self, user_id: UUID) -> list[dict[str, Any]]:
        """Successful spend per category (categories without spend included)."""
        is_success = Transaction.status == TransactionStatus.SUCCESS.value
        spent = func.coalesce(
            func.sum(case((is_success, Transaction.amount), else_=0)), 0
        )
        count = func.count(case((is_success, Transaction.id)))
        result = await self.db.execute(
            select(
                Category.id,
                Category.name,
                Category.color,
                Category.current_balance,
                spent.label("spent"),
                count.label("txn_count"),
            )
            .outerjoin(Transaction, Transaction.category_id == Category.id)
            .where(Category.user_id == user_id)
            .group_by(
                Category.id,
                Category.name,
                Category.color,
                Category.current_balance,
                Category.created_at,
            )
            .order_by(Category.created_at.asc())
        )
        return [
            {
                "category_id": row.id,
                "name": row.name,
                "color": row.color,
                "current_balance": row.current_balance,
                "spent": quantize_money(Decimal(str(row.spent))),
                "count": row.txn_count,
            }
            for row in result.all()
        ]
