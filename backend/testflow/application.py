from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .api.router import register_routes
from .core import settings
from .core.logging import configure_logging
from .db.session import AsyncSessionLocal
from .lifecycle import register_events
from .services.scheduler import ExecutionScheduler

logger = logging.getLogger(__name__)


def build_scheduler() -> ExecutionScheduler:
    return ExecutionScheduler(
        AsyncSessionLocal,
        min_delay_ms=settings.EXECUTION_MIN_DELAY_MS,
        max_delay_ms=settings.EXECUTION_MAX_DELAY_MS,
        pass_probability=settings.EXECUTION_PASS_PROBABILITY,
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request.", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(SQLAlchemyError)
    async def _database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Database error while handling %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Database operation failed."},
        )


def create_app(scheduler: ExecutionScheduler | None = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title="Testflow Backend")
    app.state.scheduler = scheduler or build_scheduler()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    register_routes(app)
    register_events(app)

    return app
