# expense_tracker/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from expense_tracker.config import get_settings
from expense_tracker.db import create_db_and_tables
from expense_tracker.errors import STATUS_BY_KIND, AppError, ValidationError, classify_error
from expense_tracker.observability import RequestLogMiddleware, configure_logging
from expense_tracker.routers.budget import router as budget_router
from expense_tracker.routers.categories import router as categories_router
from expense_tracker.routers.dashboard import router as dashboard_router
from expense_tracker.routers.expenses import router as expenses_router
from expense_tracker.routers.push import router as push_router
from expense_tracker.routers.settings import router as settings_router
from expense_tracker.routers.system import router as system_router
from expense_tracker.services.aggregation import AggregationCancelled
from expense_tracker.services.dashboard import DashboardService
from expense_tracker.services.fx import FxConverter
from expense_tracker.services.notifications import PushRelayClient

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    # One FX cache per process: historical rates never change, so it is never cleared.
    app.state.fx = FxConverter.from_settings(settings)
    app.state.push = PushRelayClient.from_settings(settings)
    app.state.dashboard = DashboardService()
    try:
        yield
    finally:
        await app.state.fx.aclose()
        await app.state.push.aclose()


app = FastAPI(title="Expense Tracker", version="0.1.0", lifespan=lifespan)

app.add_middleware(RequestLogMiddleware)

# Routers
app.include_router(system_router)
app.include_router(categories_router)
app.include_router(expenses_router)
app.include_router(budget_router)
app.include_router(settings_router)
app.include_router(push_router)
app.include_router(dashboard_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=STATUS_BY_KIND[exc.kind],
        content={"error": exc.kind.value, "detail": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # malformed bodies / params share the 400 "validation" shape with service checks
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request.")
    if field:
        message = f"{field}: {message}"
    return await app_error_handler(request, ValidationError(message))


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    # driver errors that escaped a service's storage_guard
    return await app_error_handler(request, classify_error(exc))


@app.exception_handler(AggregationCancelled)
async def superseded_handler(request: Request, exc: AggregationCancelled):
    return JSONResponse(
        status_code=409,
        content={"error": "superseded", "detail": "A newer refresh replaced this one."},
    )
