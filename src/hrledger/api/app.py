"""FastAPI application with lifespan, error envelope and router mounting."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hrledger.api.routes import employees, health, users
from hrledger.auth.tokens import SessionTokens
from hrledger.core.config import AppSettings
from hrledger.core.exceptions import HRLedgerError
from hrledger.importing.service import EmployeeImportService
from hrledger.persistence import Persistence, create_persistence
from hrledger.services import EmployeeService, UserService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def error_envelope(message: str, status_code: int, **payload) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **payload},
    )


async def handle_hrledger_error(request: Request, exc: HRLedgerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_envelope(exc.message, exc.status_code, **exc.payload())


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()]
    return error_envelope(f"Missing or invalid fields: {', '.join(fields)}", 400)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_envelope(f"Internal server error: {exc}", 500)


def create_app(
    settings: AppSettings | None = None,
    persistence: Persistence | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``persistence`` overrides the backends chosen from ``settings`` (tests).
    """
    settings = settings or AppSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize and tear down application resources."""
        configure_logging(settings.log_level)
        stores = persistence or create_persistence(settings)
        app.state.settings = settings
        app.state.persistence = stores
        app.state.tokens = SessionTokens(settings.auth, stores.cache)
        app.state.user_service = UserService(stores.users)
        app.state.employee_service = EmployeeService(stores.employees, stores.users)
        app.state.import_service = EmployeeImportService(
            employees=stores.employees, users=stores.users, settings=settings,
        )
        logger.info("hrledger started (environment=%s, backend=%s)",
                    settings.environment, settings.backend)
        yield

    app = FastAPI(
        title="hrledger HR Records API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(HRLedgerError, handle_hrledger_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)

    app.include_router(health.router)
    app.include_router(users.router, prefix="/api/user")
    app.include_router(employees.router, prefix="/api/employee")
    return app
