"""FastAPI dependency injection for authentication, database and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.core.security import get_user_id_from_token
from budgetapp.db.session import get_db
from budgetapp.models.user import User
from budgetapp.repositories.user import UserRepository
from budgetapp.services.allocation import AllocationService
from budgetapp.services.auth import AuthService
from budgetapp.services.password_reset import LogOTPSender, OTPSender, PasswordResetService
from budgetapp.services.transactions import TransactionService

# OAuth2 bearer token scheme
security = HTTPBearer()


async def get_user_repository(
    db: AsyncSession = Depends(get_db),
) -> UserRepository:
    return UserRepository(db)


async def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
) -> AuthService:
    """
    Get authentication service instance.

    Args:
        user_repo: User repository

    Returns:
        AuthService instance
    """
    return AuthService(user_repo)


def get_otp_sender() -> OTPSender:
    """Delivery channel for reset codes; override in tests or deployments."""
    return LogOTPSender()


async def get_password_reset_service(
    db: AsyncSession = Depends(get_db),
    sender: OTPSender = Depends(get_otp_sender),
) -> PasswordResetService:
    return PasswordResetService(db, sender)


async def get_allocation_service(
    db: AsyncSession = Depends(get_db),
) -> AllocationService:
    return AllocationService(db)


async def get_transaction_service(
    db: AsyncSession = Depends(get_db),
) -> TransactionService:
    return TransactionService(db)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    user_repo: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Extract and validate user from a JWT access token.

    Args:
        credentials: HTTP bearer token credentials
        user_repo: User repository for database queries

    Returns:
        Authenticated user object

    Raises:
        HTTPException: If token is invalid, expired, not an access token,
            or the user is not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        user_id = get_user_id_from_token(credentials.credentials, expected_type="access")
    except (JWTError, ValueError):
        raise credentials_exception

    user = await user_repo.get_by_id(user_id)
    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated",
        )

    return user
