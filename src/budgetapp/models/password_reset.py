"""Password reset codes (hashed one-time codes with expiry and attempt count)."""
from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from budgetapp.models.base import BaseModel


class PasswordResetCode(BaseModel):
    """One live code per e-mail; issuing a new code replaces the old one."""

    __tablename__ = "password_reset_codes"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    code_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    def __repr__(self) -> str:
        return f"<PasswordResetCode(email={self.email}, attempts={self.attempts})>"
