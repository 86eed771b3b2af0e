"""Category endpoints: CRUD, bulk creation and salary-based recalculation."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from budgetapp.api.deps import get_allocation_service, get_current_user
from budgetapp.core.allocation import ZERO
from budgetapp.models.category import Category
from budgetapp.models.user import User
from budgetapp.schemas.category import (
    CategoryBulkRequest,
    CategoryBulkResult,
    CategoryListResult,
    CategoryRequest,
    CategoryResponse,
    RecalculateResult,
)
from budgetapp.services.allocation import AllocationService, CategorySpec

router = APIRouter(prefix="/categories", tags=["categories"])


def _spec(data: CategoryRequest) -> CategorySpec:
    return CategorySpec(
        name=data.name,
        percentage=data.percentage,
        fixed_amount=data.fixed_amount,
        color=data.color,
    )


def _responses(categories: list[Category]) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get(
    "",
    response_model=CategoryListResult,
    summary="List categories",
    description="All categories of the authenticated user, oldest first, with totals.",
)
async def list_categories(
    current_user: User = Depends(get_current_user),
    service: AllocationService = Depends(get_allocation_service),
) -> CategoryListResult:
    categories = await service.list_categories(current_user.id)
    return CategoryListResult(
        categories=_responses(categories),
        total=len(categories),
        total_balance=sum((c.current_balance for c in categories), ZERO),
        allocated_percentage=sum((c.percentage for c in categories), ZERO),
        allocated_fixed_amount=sum((c.fixed_amount for c in categories), ZERO),
    )


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
    description="""
    Create a category with either a percentage of salary or a fixed amount.

    The balance starts at zero; call `POST /categories/recalculate` to fund it.
    """,
    responses={409: {"description": "Category name already exists"}},
)
async def create_category(
    data: CategoryRequest,
    current_user: User = Depends(get_current_user),
    service: AllocationService = Depends(get_allocation_service),
) -> CategoryResponse:
    """
    Create a single category.

    Raises:
        400: Invalid percentage, amount or allocation
        409: Duplicate name (case-insensitive)
    """
    category = await service.create_category(current_user, _spec(data))
    return CategoryResponse.model_validate(category)


@router.post(
    "/bulk",
    response_model=CategoryBulkResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create several categories",
    description="""
    Create many categories in one database transaction.

    Names that already exist (case-insensitive) are skipped. Only newly
    created categories are returned; when nothing was created the status is 200.
    """,
)
async def bulk_create_categories(
    data: CategoryBulkRequest,
    response: Response,
    current_user: User = Depends(get_current_user),
    service: AllocationService = Depends(get_allocation_service),
) -> CategoryBulkResult:
    created = await service.bulk_create(current_user, [_spec(c) for c in data.categories])
    if not created:
        response.status_code = status.HTTP_200_OK
        message = "All categories already exist"
    else:
        message = f"{len(created)} categories created successfully"
    return CategoryBulkResult(message=message, categories=_responses(created))


@router.post(
    "/defaults",
    response_model=CategoryBulkResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create default budget plan",
    description="Seed the standard seven-category plan, skipping names that already exist.",
)
async def seed_default_categories(
    response: Response,
    current_user: User = Depends(get_current_user),
    service: AllocationService = Depends(get_allocation_service),
) -> CategoryBulkResult:
    created = await service.seed_defaults(current_user)
    if not created:
        response.status_code = status.HTTP_200_OK
    return CategoryBulkResult(
        message=f"{len(created)} default categories created",
        categories=_responses(created),
    )


@router.post(
    "/recalculate",
    response_model=RecalculateResult,
    summary="Recalculate balances from salary",
    description="""
    Reset every category balance from the current salary:
    - percentage categories get salary * percentage / 100
    - fixed categories get their fixed amount
    - anything else gets zero

    Spending already recorded is not carried over.
    """,
    responses={400: {"description": "No salary set"}},
)
async def recalculate_balances(
    current_user: User = Depends(get_current_user),
    service: AllocationService = Depends(get_allocation_service),
) -> RecalculateResult:
    salary = current_user.salary
    categories = await service.recalculate(current_user)
    return RecalculateResult(
        message="Category balances recalculated successfully",
        salary=salary,
        categories=_responses(categories),
    )


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Update category",
    description="Change name, allocation rule or color. The current balance is kept.",
)
async def update_category(
    category_id: UUID,
    data: CategoryRequest,
    current_user: User = Depends(get_current_user),
    service: AllocationService = Depends(get_allocation_service),
) -> CategoryResponse:
    category = await service.update_category(current_user, category_id, _spec(data))
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete category",
    description="Delete a category together with its transactions.",
)
async def delete_category(
    category_id: UUID,
    current_user: User = Depends(get_current_user),
    service: AllocationService = Depends(get_allocation_service),
) -> Response:
    await service.delete_category(current_user, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
