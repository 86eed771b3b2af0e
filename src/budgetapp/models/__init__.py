"""Database models."""
from budgetapp.models.base import Base, BaseModel
from budgetapp.models.user import User
from budgetapp.models.category import Category
from budgetapp.models.transaction import Transaction, TransactionStatus
from budgetapp.models.password_reset import PasswordResetCode

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Category",
    "Transaction",
    "TransactionStatus",
    "PasswordResetCode",
]
