"""Transaction lifecycle: pending payment creation and one-time finalization.

Money moves in an external UPI app, so the only balance-changing edge is
``pending -> success`` reported by the client. That edge runs as a single
database transaction: the conditional status update and the category debit
commit together or not at all.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.config import settings
from budgetapp.core.allocation import ZERO, quantize_money
from budgetapp.core.exceptions import (
    AlreadyFinalized,
    BalanceUpdateFailed,
    TransactionNotFound,
)
from budgetapp.core.upi import build_upi_url, generate_transaction_id
from budgetapp.models.transaction import Transaction, TransactionStatus
from budgetapp.models.user import User
from budgetapp.repositories.category import CategoryRepository
from budgetapp.repositories.transaction import TransactionRepository
from budgetapp.services.payments import PaymentValidator

logger = logging.getLogger(__name__)

DEFAULT_MERCHANT_NAME = "Unknown Merchant"


@dataclass
class InitiatedPayment:
    transaction: Transaction
    upi_url: str


@dataclass
class FinalizedPayment:
    transaction: Transaction
    category_balance: Decimal | None


class TransactionService:
    """Creates pending transactions and applies their final status."""

    def __init__(self, db: AsyncSession):
        """Initialize the service.

        Args:
            db: Database session for persistence
        """
        self.db = db
        self.validator = PaymentValidator(db)
        self.category_repo = CategoryRepository(db)
        self.transaction_repo = TransactionRepository(db)

    async def initiate(
        self,
        user: User,
        category_id: UUID,
        amount: Decimal,
        merchant_upi: str,
        merchant_name: str | None = None,
        note: str | None = None,
    ) -> InitiatedPayment:
        """Record a pending payment and build its UPI intent URL.

        The category balance is not touched until the payment is confirmed.

        Raises:
            BudgetError: any payment validator failure
        """
        await self.validator.ensure_valid(user.id, category_id, amount, merchant_upi)

        merchant_name = (merchant_name or "").strip() or None
        note = (note or "").strip() or None
        transaction = await self.transaction_repo.create(
            Transaction(
                user_id=user.id,
                category_id=category_id,
                amount=quantize_money(amount),
                merchant_upi=merchant_upi,
                merchant_name=merchant_name or DEFAULT_MERCHANT_NAME,
                transaction_id=generate_transaction_id(),
                status=TransactionStatus.PENDING.value,
                note=note,
            )
        )
        upi_url = build_upi_url(
            merchant_upi=transaction.merchant_upi,
            amount=transaction.amount,
            transaction_id=transaction.transaction_id,
            merchant_name=merchant_name,
            note=note,
            app_name=settings.project_name,
        )

        logger.info(
            "Transaction initiated",
            extra={"user_id": str(user.id), "transaction_id": transaction.transaction_id},
        )
        return InitiatedPayment(transaction=transaction, upi_url=upi_url)

    async def finalize(
        self, user: User, transaction_id: UUID, status: TransactionStatus
    ) -> FinalizedPayment:
        """Move a pending transaction to a terminal status.

        Args:
            user: Owner of the transaction
            transaction_id: Row id of the transaction
            status: success, failed or cancelled

        Returns:
            The refreshed transaction and, for success, the new category balance

        Raises:
            TransactionNotFound: no such transaction for this user
            AlreadyFinalized: transaction is not pending (including a lost race)
            BalanceUpdateFailed: the debit failed; status is back to pending
        """
        if not status.is_terminal:
            raise ValueError("Transactions can only be finalized to a terminal status")

        user_id = user.id
        transaction = await self.transaction_repo.get_by_user(user_id, transaction_id)
        if transaction is None:
            raise TransactionNotFound(details={"transaction_id": str(transaction_id)})
        if transaction.status != TransactionStatus.PENDING.value:
            raise AlreadyFinalized(public={"status": transaction.status})

        category_id = transaction.category_id
        amount = transaction.amount
        reference = transaction.transaction_id

        if not await self.transaction_repo.transition_from_pending(
            user_id, transaction_id, status
        ):
            # Another request finalized it between the read and the update.
            await self.db.rollback()
            raise AlreadyFinalized()

        if status is TransactionStatus.SUCCESS:
            try:
                debited = await self.category_repo.debit_balance(user_id, category_id, amount)
            except SQLAlchemyError as exc:
                await self._revert_to_pending(reference, user_id, type(exc).__name__)
                raise BalanceUpdateFailed(details={"transaction_id": reference}) from exc
            if debited != 1:
                await self._revert_to_pending(reference, user_id, "CategoryMissing")
                raise BalanceUpdateFailed(details={"transaction_id": reference})

        await self.db.commit()
        await self.db.refresh(transaction)

        category_balance = None
        category = await self.category_repo.get_by_user(user_id, category_id)
        if category is not None:
            await self.db.refresh(category)
            category_balance = category.current_balance

        logger.info(
            "Transaction finalized",
            extra={"user_id": str(user_id), "transaction_id": reference, "status": status.value},
        )
        return FinalizedPayment(transaction=transaction, category_balance=category_balance)

    async def _revert_to_pending(self, reference: str, user_id: UUID, reason: str) -> None:
        await self.db.rollback()
        logger.error(
            "Category debit failed; transaction status reverted to pending",
            extra={"user_id": str(user_id), "transaction_id": reference, "error_type": reason},
        )

    async def get(self, user: User, transaction_id: UUID) -> tuple[Transaction, str, str]:
        row = await self.transaction_repo.get_with_category(user.id, transaction_id)
        if row is None:
            raise TransactionNotFound(details={"transaction_id": str(transaction_id)})
        return row

    async def list_for_user(
        self,
        user: User,
        page: int = 1,
        limit: int = 50,
        status: TransactionStatus | None = None,
        category_id: UUID | None = None,
    ) -> tuple[list[tuple[Transaction, str, str]], int]:
        return await self.transaction_repo.list_with_category(
            user.id,
            skip=(page - 1) * limit,
            limit=limit,
            status=status.value if status else None,
            category_id=category_id,
        )

    async def summary(self, user: User) -> dict:
        """Spending per category over successful transactions."""
        rows = await self.transaction_repo.spending_by_category(user.id)
        total_spent = sum((row["spent"] for row in rows), ZERO)
        total_balance = sum((row["current_balance"] for row in rows), ZERO)
        for row in rows:
            row["share"] = (
                round(float(row["spent"] / total_spent * 100), 1) if total_spent else 0.0
            )
        return {
            "total_spent": total_spent,
            "total_balance": total_balance,
            "by_category": rows,
        }
