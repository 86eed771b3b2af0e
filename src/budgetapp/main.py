import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError

from budgetapp.api.middleware.error_handler import (
    handle_budget_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from budgetapp.api.middleware.logging import RequestLoggingMiddleware
from budgetapp.api.v1 import router as v1_router
from budgetapp.api.v1.health import router as health_router
from budgetapp.config import settings
from budgetapp.core.exceptions import BudgetError
from budgetapp.core.logging_config import setup_logging
from budgetapp.db.session import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings.log_level, json_format=settings.log_json, log_file=settings.log_file)
    await init_db()
    logger.info("Application started (%s)", settings.app_env)
    yield
    # Shutdown


def create_app() -> FastAPI:
    app = FastAPI(
        title=f"{settings.project_name} API",
        description="Salary-based category budgeting with UPI payments",
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(BudgetError, handle_budget_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    # Register routers
    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "budgetapp.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
