"""Authentication service with business logic."""

from uuid import UUID

from fastapi import HTTPException, status
from jose import JWTError

from budgetapp.core.security import (
    create_access_token,
    create_refresh_token,
    get_user_id_from_token,
    hash_password,
    verify_password,
)
from budgetapp.models.user import User
from budgetapp.repositories.user import UserRepository
from budgetapp.schemas.auth import TokenPair


def _token_pair(user_id: UUID) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(user_id),
        refresh_token=create_refresh_token(user_id),
    )


class AuthService:
    """Service for authentication operations."""

    def __init__(self, user_repo: UserRepository):
        """
        Initialize authentication service.

        Args:
            user_repo: User repository for database operations
        """
        self.user_repo = user_repo

    async def register(
        self, email: str, password: str, name: str, phone: str | None = None
    ) -> User:
        """
        Register a new user with a zero salary.

        Args:
            email: User email address
            password: Plain text password
            name: Display name
            phone: Optional phone number

        Returns:
            Created user object

        Raises:
            HTTPException: 409 if the email or phone is already registered
        """
        email = email.lower()
        if await self.user_repo.email_exists(email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered",
            )
        if phone and await self.user_repo.phone_exists(phone):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Phone number already registered",
            )

        user = User(
            email=email,
            phone=phone or None,
            password_hash=hash_password(password),
            name=name.strip(),
        )
        return await self.user_repo.create(user)

    async def login(self, email: str, password: str) -> TokenPair:
        """
        Authenticate user and return JWT tokens.

        Raises:
            HTTPException: 401 on bad credentials, 403 if the account is deactivated
        """
        user = await self.user_repo.get_by_email(email.lower())
        if user is None or not verify_password(password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User account is deactivated",
            )

        return _token_pair(user.id)

    async def refresh_tokens(self, refresh_token: str) -> TokenPair:
        """
        Generate new token pair using refresh token.

        Access tokens are rejected here; only a token with type "refresh" works.

        Raises:
            HTTPException: If refresh token is invalid
        """
        try:
            user_id = get_user_id_from_token(refresh_token, expected_type="refresh")
        except (JWTError, ValueError):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired refresh token",
            )

        user = await self.get_current_user(user_id)
        return _token_pair(user.id)

    async def get_current_user(self, user_id: UUID) -> User:
        """
        Get user by ID for authenticated requests.

        Raises:
            HTTPException: If user not found or inactive
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found",
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User account is deactivated",
            )

        return user
