from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from acutrace import __version__
from acutrace.api.middleware.error_handler import (
    handle_analytics_error,
    handle_generic_error,
    handle_validation_error,
)
from acutrace.api.middleware.logging import RequestLoggingMiddleware
from acutrace.api.v1 import router as v1_router
from acutrace.api.v1.health import router as health_router
from acutrace.config import settings
from acutrace.core.exceptions import AnalyticsError
from acutrace.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    yield
    # Shutdown


def create_app() -> FastAPI:
    setup_logging(settings.log_level, json_format=settings.log_json)

    app = FastAPI(
        title="AcuTrace Analytics API",
        description="Transaction analytics for bank-statement investigation dashboards",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(AnalyticsError, handle_analytics_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
