"""Authentication endpoints: registration, login, tokens and password reset."""

from fastapi import APIRouter, Depends, status

from budgetapp.api.deps import get_auth_service, get_current_user, get_password_reset_service
from budgetapp.models.user import User
from budgetapp.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    ResetPasswordRequest,
    SendOtpRequest,
    SendOtpResponse,
    TokenPair,
    UserRegister,
    UserResponse,
    VerifyOtpRequest,
)
from budgetapp.schemas.common import MessageResponse
from budgetapp.services.auth import AuthService
from budgetapp.services.password_reset import PasswordResetService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a new user account. The salary starts at zero.",
)
async def register(
    data: UserRegister,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """
    Register a new user account.

    Args:
        data: Registration data (email, password, name, phone)
        auth_service: Authentication service

    Returns:
        Created user data (without password)

    Raises:
        400: Validation error
        409: Email or phone already registered
    """
    user = await auth_service.register(
        email=data.email,
        password=data.password,
        name=data.name,
        phone=data.phone,
    )
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=TokenPair,
    summary="User login",
    description="Authenticate with email and password to receive JWT tokens.",
)
async def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenPair:
    """
    Authenticate user and return JWT tokens.

    Returns:
        Access token (30 min) and refresh token (7 days)

    Raises:
        401: Invalid credentials
        403: User account deactivated
    """
    return await auth_service.login(email=data.email, password=data.password)


@router.post(
    "/refresh",
    response_model=TokenPair,
    summary="Refresh access token",
    description="Get new token pair using a valid refresh token.",
)
async def refresh(
    data: RefreshRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenPair:
    return await auth_service.refresh_tokens(data.refresh_token)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_me(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.post(
    "/send-otp",
    response_model=SendOtpResponse,
    summary="Send password reset code",
    description="E-mail a six-digit code valid for 10 minutes to a registered address.",
)
async def send_otp(
    data: SendOtpRequest,
    reset_service: PasswordResetService = Depends(get_password_reset_service),
) -> SendOtpResponse:
    """
    Issue a password reset code.

    Raises:
        404: Email not registered
        503: Code could not be delivered
    """
    expires_in = await reset_service.send(data.email)
    return SendOtpResponse(
        message="OTP sent successfully to your email",
        expires_in_seconds=expires_in,
    )


@router.post(
    "/verify-otp",
    response_model=MessageResponse,
    summary="Verify password reset code",
)
async def verify_otp(
    data: VerifyOtpRequest,
    reset_service: PasswordResetService = Depends(get_password_reset_service),
) -> MessageResponse:
    """
    Verify a reset code. Three wrong codes invalidate it.

    Raises:
        400: Code missing, expired, locked or wrong
    """
    await reset_service.verify(data.email, data.otp)
    return MessageResponse(message="OTP verified successfully")


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset password",
    description="Set a new password after the reset code has been verified.",
)
async def reset_password(
    data: ResetPasswordRequest,
    reset_service: PasswordResetService = Depends(get_password_reset_service),
) -> MessageResponse:
    await reset_service.reset(data.email, data.new_password)
    return MessageResponse(message="Password reset successfully")
