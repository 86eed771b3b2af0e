"""API version 1 routes."""

from fastapi import APIRouter

from budgetapp.api.v1 import auth, categories, health, transactions, users

router = APIRouter(prefix="/api/v1")

# Include routers
router.include_router(health.router)
router.include_router(auth.router)
router.include_router(users.router)
router.include_router(categories.router)
router.include_router(transactions.router)
