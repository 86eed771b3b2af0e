"""Password reset with e-mailed one-time codes.

Flow: ``send`` issues a six-digit code (stored hashed, 10 minute TTL),
``verify`` checks it (3 wrong tries burn it), ``reset`` sets the new password
once the code has been verified and before it expires.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Protocol

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.config import settings
from budgetapp.core.security import generate_otp, hash_otp, hash_password, verify_otp
from budgetapp.models.base import utcnow
from budgetapp.models.password_reset import PasswordResetCode
from budgetapp.repositories.password_reset import PasswordResetRepository
from budgetapp.repositories.user import UserRepository

logger = logging.getLogger(__name__)


class OTPSender(Protocol):
    """Delivers a reset code to the user (e-mail, SMS, ...)."""

    async def send(self, email: str, code: str) -> None: ...


class LogOTPSender:
    """Development sender: writes the code to the application log in debug mode."""

    async def send(self, email: str, code: str) -> None:
        if settings.debug:
            logger.info("Password reset code for %s: %s", email, code)
        else:
            logger.info("Password reset code issued", extra={"email": email})


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class PasswordResetService:
    """Issues, verifies and redeems password reset codes."""

    def __init__(self, db: AsyncSession, sender: OTPSender):
        self.db = db
        self.sender = sender
        self.user_repo = UserRepository(db)
        self.code_repo = PasswordResetRepository(db)

    @property
    def ttl(self) -> timedelta:
        return timedelta(minutes=settings.otp_ttl_minutes)

    async def send(self, email: str) -> int:
        """
        Issue a fresh code for a registered e-mail, replacing any previous one.

        Returns:
            Seconds until the code expires

        Raises:
            HTTPException: 404 if the e-mail is not registered, 503 if delivery failed
        """
        email = email.lower()
        if not await self.user_repo.email_exists(email):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Email address not registered",
            )

        code = generate_otp()
        await self.code_repo.delete_by_email(email, commit=False)
        await self.code_repo.create(
            PasswordResetCode(
                email=email,
                code_hash=hash_otp(code),
                expires_at=utcnow() + self.ttl,
                attempts=0,
            )
        )

        try:
            await self.sender.send(email, code)
        except Exception as exc:
            logger.error(
                "Reset code delivery failed",
                extra={"email": email, "error_type": type(exc).__name__},
            )
            await self.code_repo.delete_by_email(email)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Unable to send reset code. Please try again later.",
            ) from exc

        return int(self.ttl.total_seconds())

    async def verify(self, email: str, otp: str) -> None:
        """
        Check a code and mark it verified.

        Raises:
            HTTPException: 400 if the code is missing, expired, locked or wrong
        """
        email = email.lower()
        record = await self.code_repo.get_by_email(email)
        if record is None:
            raise _bad_request("OTP not found or expired")

        if utcnow() > _as_utc(record.expires_at):
            await self.code_repo.delete_by_email(email)
            raise _bad_request("OTP has expired")

        if record.attempts >= settings.otp_max_attempts:
            await self.code_repo.delete_by_email(email)
            raise _bad_request("Too many failed attempts")

        if not verify_otp(otp, record.code_hash):
            record.attempts += 1
            await self.db.commit()
            logger.warning(
                "Invalid reset code",
                extra={"email": email, "attempts": record.attempts},
            )
            raise _bad_request("Invalid OTP")

        record.verified_at = utcnow()
        await self.db.commit()

    async def reset(self, email: str, new_password: str) -> None:
        """
        Replace the password using a verified, unexpired code (single use).

        Raises:
            HTTPException: 400 if there is no verified code, 404 if the user is gone
        """
        email = email.lower()
        record = await self.code_repo.get_by_email(email)
        if (
            record is None
            or record.verified_at is None
            or utcnow() > _as_utc(record.expires_at)
        ):
            raise _bad_request("OTP verification required")

        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Email not registered",
            )

        user.password_hash = hash_password(new_password)
        await self.code_repo.delete_by_email(email, commit=False)
        await self.db.commit()
        logger.info("Password reset", extra={"user_id": str(user.id)})
