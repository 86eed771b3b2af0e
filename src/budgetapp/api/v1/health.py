from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from budgetapp.db.session import get_db
from budgetapp.models.category import Category

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/ready")
async def health_ready(db: AsyncSession = Depends(get_db)):
    """Readiness check: the budget store is reachable and its tables exist."""
    dialect = db.bind.dialect.name
    try:
        await db.execute(select(Category.id).limit(1))
    except (SQLAlchemyError, OSError) as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not ready",
                "database": "unavailable",
                "dialect": dialect,
                "error": type(e).__name__,
            },
        )
    return {"status": "ready", "database": "connected", "dialect": dialect}
