"""Integration tests for repository layer."""

from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.models.category import Category
from budgetapp.models.transaction import Transaction, TransactionStatus
from budgetapp.models.user import User
from budgetapp.repositories.category import CategoryRepository
from budgetapp.repositories.transaction import TransactionRepository
from budgetapp.repositories.user import UserRepository


@pytest.fixture
async def category(db_session: AsyncSession, test_user: User) -> Category:
    return await CategoryRepository(db_session).create(
        Category(
            user_id=test_user.id,
            name="Food",
            percentage=Decimal("25"),
            current_balance=Decimal("1000"),
        )
    )


async def _transaction(
    db_session: AsyncSession, user: User, category: Category, amount: str, status: str = "pending"
) -> Transaction:
    return await TransactionRepository(db_session).create(
        Transaction(
            user_id=user.id,
            category_id=category.id,
            amount=Decimal(amount),
            merchant_upi="shop@upi",
            merchant_name="Shop",
            transaction_id=f"TXN{uuid4().hex[:16]}",
            status=status,
        )
    )


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_lookups(self, db_session: AsyncSession, test_user: User):
        repo = UserRepository(db_session)

        assert (await repo.get_by_email(test_user.email)).id == test_user.id
        assert await repo.email_exists(test_user.email) is True
        assert await repo.email_exists("missing@example.com") is False
        assert await repo.phone_exists("9999999999") is False


class TestCategoryRepository:
    @pytest.mark.asyncio
    async def test_user_scoping(
        self, db_session: AsyncSession, category: Category, other_user: User
    ):
        repo = CategoryRepository(db_session)

        assert await repo.get_by_user(category.user_id, category.id) is not None
        assert await repo.get_by_user(other_user.id, category.id) is None
        assert await repo.get_all_by_user(other_user.id) == []

    @pytest.mark.asyncio
    async def test_name_exists_case_insensitive(self, db_session: AsyncSession, category: Category):
        repo = CategoryRepository(db_session)

        assert await repo.name_exists(category.user_id, "fOOD") is True
        assert await repo.name_exists(category.user_id, "food", exclude_id=category.id) is False
        assert await repo.get_names_by_user(category.user_id) == {"food"}

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected_by_schema(
        self, db_session: AsyncSession, category: Category, other_user: User
    ):
        repo = CategoryRepository(db_session)
        user_id = category.user_id

        # Same name for a different user is fine.
        await repo.create(Category(user_id=other_user.id, name="Food"))

        with pytest.raises(IntegrityError):
            await repo.create(Category(user_id=user_id, name="FOOD"))
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_debit_balance(self, db_session: AsyncSession, category: Category):
        repo = CategoryRepository(db_session)

        updated = await repo.debit_balance(category.user_id, category.id, Decimal("250.50"))
        await db_session.commit()
        await db_session.refresh(category)

        assert updated == 1
        assert category.current_balance == Decimal("749.50")

    @pytest.mark.asyncio
    async def test_debit_balance_wrong_user(
        self, db_session: AsyncSession, category: Category, other_user: User
    ):
        repo = CategoryRepository(db_session)
        assert await repo.debit_balance(other_user.id, category.id, Decimal("1")) == 0

    @pytest.mark.asyncio
    async def test_delete_by_user(
        self, db_session: AsyncSession, category: Category, other_user: User
    ):
        repo = CategoryRepository(db_session)

        assert await repo.delete_by_user(other_user.id, category.id) is False
        assert await repo.delete_by_user(category.user_id, category.id) is True
        assert await repo.get_by_user(category.user_id, category.id) is None


class TestTransactionRepository:
    @pytest.mark.asyncio
    async def test_transition_only_from_pending(
        self, db_session: AsyncSession, test_user: User, category: Category
    ):
        repo = TransactionRepository(db_session)
        txn = await _transaction(db_session, test_user, category, "100")

        assert await repo.transition_from_pending(test_user.id, txn.id, TransactionStatus.SUCCESS)
        assert not await repo.transition_from_pending(
            test_user.id, txn.id, TransactionStatus.FAILED
        )
        await db_session.commit()
        await db_session.refresh(txn)
        assert txn.status == "success"

    @pytest.mark.asyncio
    async def test_transition_wrong_user(
        self, db_session: AsyncSession, test_user: User, other_user: User, category: Category
    ):
        repo = TransactionRepository(db_session)
        txn = await _transaction(db_session, test_user, category, "100")

        assert not await repo.transition_from_pending(
            other_user.id, txn.id, TransactionStatus.SUCCESS
        )

    @pytest.mark.asyncio
    async def test_list_with_category(
        self, db_session: AsyncSession, test_user: User, category: Category
    ):
        repo = TransactionRepository(db_session)
        for amount in ("10", "20", "30"):
            await _transaction(db_session, test_user, category, amount)

        rows, total = await repo.list_with_category(test_user.id, skip=0, limit=2)

        assert total == 3
        assert len(rows) == 2
        txn, name, color = rows[0]
        assert txn.amount == Decimal("30")
        assert name == "Food"
        assert color == "#4F46E5"

    @pytest.mark.asyncio
    async def test_spending_by_category(
        self, db_session: AsyncSession, test_user: User, category: Category
    ):
        empty = await CategoryRepository(db_session).create(
            Category(user_id=test_user.id, name="Unused")
        )
        await _transaction(db_session, test_user, category, "100.25", status="success")
        await _transaction(db_session, test_user, category, "50", status="success")
        await _transaction(db_session, test_user, category, "999", status="failed")
        await _transaction(db_session, test_user, category, "999", status="pending")

        rows = await TransactionRepository(db_session).spending_by_category(test_user.id)

        by_id = {row["category_id"]: row for row in rows}
        assert by_id[category.id]["spent"] == Decimal("150.25")
        assert by_id[category.id]["count"] == 2
        assert by_id[empty.id]["spent"] == Decimal("0.00")
        assert by_id[empty.id]["count"] == 0
