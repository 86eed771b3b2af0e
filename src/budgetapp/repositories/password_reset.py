"""Password reset code repository."""
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.models.password_reset import PasswordResetCode
from budgetapp.repositories.base import BaseRepository


class PasswordResetRepository(BaseRepository[PasswordResetCode]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, PasswordResetCode)

    async def get_by_email(self, email: str) -> PasswordResetCode | None:
        result = await self.db.execute(
            select(PasswordResetCode).where(PasswordResetCode.email == email)
        )
        return result.scalar_one_or_none()

    async def delete_by_email(self, email: str, commit: bool = True) -> None:
        """Drop the live code for an e-mail (if any)."""
        await self.db.execute(
            delete(PasswordResetCode)
            .where(PasswordResetCode.email == email)
            .execution_options(synchronize_session=False)
        )
        if commit:
            await self.db.commit()
