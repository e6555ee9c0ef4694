import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.dal import Database
from .db.migrate import apply_migrations
from .routers import budgets, categories, expenses, health, rates, users
from .services.budget_service import BudgetEvaluator
from .services.errors import ServiceError
from .services.expense_service import ExpenseAggregator
from .services.rates.base import RateSource
from .services.rates.cache_service import RateCache
from .services.rates.conversion import CurrencyConverter
from .services.rates.providers import make_rate_source


def create_app(
    settings_override: Settings | None = None,
    rate_source: RateSource | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    rate_source: replaces the provider selected by settings (tests, offline use).
    """
    settings = settings_override or get_settings()
    init_logging(debug=settings.debug)

    # Ensure database schema (idempotent) so test-injected fresh DBs have tables
    try:
        apply_migrations(settings.db_path)  # type: ignore[arg-type]
    except Exception:
        logging.getLogger("expense_manager").exception(
            "failed to apply migrations on startup"
        )
        raise

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )

    # One rate cache per application instance
    db = Database(settings.db_path)  # type: ignore[arg-type]
    rate_cache = RateCache(
        rate_source or make_rate_source(settings),
        ttl_seconds=settings.rates_cache_ttl_seconds,
    )
    converter = CurrencyConverter(rate_cache)
    expense_aggregator = ExpenseAggregator(db, converter)
    app.state.settings = settings
    app.state.db = db
    app.state.rate_cache = rate_cache
    app.state.converter = converter
    app.state.expenses = expense_aggregator
    app.state.budgets = BudgetEvaluator(
        db, expense_aggregator, default_base_currency=settings.default_base_currency
    )

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(ServiceError, errors.service_error_handler)
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(categories.router)
    app.include_router(expenses.router)
    app.include_router(budgets.router)
    app.include_router(rates.router)

    @app.get("/")
    async def root():
        return {"message": "Expense Manager API", "version": settings.version}

    return app
