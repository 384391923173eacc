"""FastAPI application with lifespan, error handlers and router mounting."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nomina.api.routes import health, upload
from nomina.api.routes.upload import NO_FILE_MESSAGE
from nomina.core.config import AppSettings
from nomina.core.exceptions import (
    NominaError,
    ParseError,
    PersistenceError,
    ReadError,
    UploadError,
    ValidationError,
)
from nomina.core.protocols import IBatchStore
from nomina.persistence import create_persistence
from nomina.services.batch_persistence import BatchPersistenceCoordinator
from nomina.services.uploads import ensure_upload_dir

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[NominaError], int] = {
    UploadError: 400,
    ValidationError: 400,
    ParseError: 400,
    ReadError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize and tear down application resources."""
    settings: AppSettings = app.state.settings
    ensure_upload_dir(settings.upload.directory)

    if app.state.store is None:
        app.state.store = create_persistence(settings)
    app.state.coordinator = BatchPersistenceCoordinator(
        app.state.store,
        atomic=settings.atomic_insert,
        timeout=settings.mysql.timeout,
    )
    yield
    app.state.store.close()


async def nomina_error_handler(request: Request, exc: NominaError) -> JSONResponse:
    status = next(
        (code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)), 400
    )
    logger.warning("Upload rejected (%s): %s", type(exc).__name__, exc)
    return JSONResponse(status_code=status, content={"ok": False, "error": str(exc)})


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    content = {"ok": False, "step": exc.phase, "error": exc.message}
    if exc.batch_id is not None:
        content["batch_id"] = exc.batch_id
    return JSONResponse(status_code=500, content=content)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """A non-file ``archivo`` value counts as no file at all."""
    if any(tuple(error.get("loc", ()))[-1:] == ("archivo",) for error in exc.errors()):
        return await nomina_error_handler(request, UploadError(NO_FILE_MESSAGE))
    return await nomina_error_handler(request, UploadError(f"invalid request: {exc.errors()}"))


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"ok": False, "error": "Route not found"})
    return await http_exception_handler(request, exc)


def create_app(
    settings: AppSettings | None = None,
    store: IBatchStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings; loaded from the environment if omitted.
        store: Batch store to use instead of the MySQL one built from settings.
    """
    settings = settings or AppSettings()

    app = FastAPI(
        title="Nomina Payroll Upload Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(NominaError, nomina_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)

    app.include_router(health.router)
    app.include_router(upload.router)
    return app
