"""FastAPI application factory with async lifespan for the database and seed data."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from speakers.api.v1.router import speakers_router, system_router
from speakers.config import Settings, get_settings
from speakers.database import close_db, create_schema, get_session_factory, init_db
from speakers.errors import ServiceFailureError
from speakers.resilience import BulkheadFullError, CircuitBreakerOpenError
from speakers.schemas.errors import ErrorObject, ErrorResponse
from speakers.services.fault_tolerance import build_policies
from speakers.services.health_state import HealthState
from speakers.services.seed import seed_speakers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle.

    On startup: initialize the database engine and session factory, create
    missing tables when configured, and seed speakers from ``seed_file``.
    On shutdown: dispose of the engine.
    """
    settings: Settings = app.state.settings

    engine = await init_db(settings.database_url, echo=settings.debug)
    app.state.db_engine = engine
    app.state.session_factory = get_session_factory(engine)

    if settings.auto_create_schema:
        await create_schema(engine)
    if settings.seed_file:
        await seed_speakers(app.state.session_factory, settings.seed_file)

    yield

    await close_db(engine)


def _error_response(
    status_code: int,
    title: str,
    detail: str | None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(errors=[ErrorObject(status=str(status_code), title=title, detail=detail)])
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else None
    return _error_response(
        exc.status_code,
        HTTPStatus(exc.status_code).phrase,
        detail,
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        ErrorObject(
            status="422",
            title="Validation error",
            detail=error.get("msg"),
            source={"pointer": "/" + "/".join(str(part) for part in error.get("loc", ()))},
        )
        for error in exc.errors()
    ]
    body = ErrorResponse(errors=errors)
    return JSONResponse(status_code=422, content=body.model_dump(exclude_none=True))


async def service_failure_handler(request: Request, exc: ServiceFailureError) -> JSONResponse:
    return _error_response(500, "Service failure", str(exc))


async def fault_tolerance_handler(
    request: Request, exc: CircuitBreakerOpenError | BulkheadFullError
) -> JSONResponse:
    return _error_response(503, "Service unavailable", str(exc))


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Speaker store failure on %s %s", request.method, request.url.path)
    return _error_response(500, "Store failure", type(exc).__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This is the app factory. Uvicorn calls it with the --factory flag:
        uvicorn speakers.app:create_app --factory
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    app = FastAPI(
        title="Speaker Service",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Shared across requests for the process lifetime.
    app.state.settings = settings
    app.state.health_state = HealthState()
    app.state.policies = build_policies(settings)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ServiceFailureError, service_failure_handler)
    app.add_exception_handler(CircuitBreakerOpenError, fault_tolerance_handler)
    app.add_exception_handler(BulkheadFullError, fault_tolerance_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    app.include_router(system_router, tags=["system"])
    app.include_router(speakers_router, prefix=settings.api_prefix.rstrip("/"), tags=["speakers"])

    return app
