"""Profile and salary endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.api.deps import get_current_user
from budgetapp.core.allocation import quantize_money
from budgetapp.db.session import get_db
from budgetapp.models.user import User
from budgetapp.schemas.auth import UserResponse
from budgetapp.schemas.user import (
    ProfileUpdateRequest,
    SalaryUpdateRequest,
    SalaryUpdateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/profile", response_model=UserResponse, summary="Get profile")
async def get_profile(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put(
    "/salary",
    response_model=SalaryUpdateResponse,
    summary="Update monthly salary",
    description="""
    Set the monthly salary used by balance recalculation.

    Category balances are not changed until `POST /categories/recalculate`
    is called.
    """,
)
async def update_salary(
    data: SalaryUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SalaryUpdateResponse:
    """
    Update the authenticated user's salary.

    Raises:
        400: Salary missing or not greater than zero
    """
    current_user.salary = quantize_money(data.salary)
    await db.commit()
    await db.refresh(current_user)
    logger.info("Salary updated", extra={"user_id": str(current_user.id)})
    return SalaryUpdateResponse(
        message="Salary updated successfully",
        salary=current_user.salary,
    )


@router.put("/profile", response_model=UserResponse, summary="Update profile")
async def update_profile(
    data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    current_user.name = data.name
    await db.commit()
    await db.refresh(current_user)
    return UserResponse.model_validate(current_user)
