"""
FastAPI application factory
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from remote_config.api.responses import error_response
from remote_config.api.routes import api_router
from remote_config.core.config import settings
from remote_config.core.database import init_db
from remote_config.core.errors import AppError, HandlerError, NotFound, ValidationError
from remote_config.services.config_store import ConfigStore, SqlConfigStore, get_config_store

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}")
    else:
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.code, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and known paths with the wrong method both fall back to 404
    if exc.status_code in (404, 405):
        not_found = NotFound()
        return error_response(not_found.status_code, not_found.message, not_found.code)
    return error_response(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = ValidationError("Invalid request")
    return error_response(error.status_code, error.message, error.code, details=jsonable_encoder(exc.errors()))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    error = HandlerError()
    return error_response(error.status_code, error.message, error.code)


def create_app(store: Optional[ConfigStore] = None) -> FastAPI:
    """Build the API. A store can be injected; otherwise one is built from settings at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME} (environment={settings.ENVIRONMENT})")
        if store is not None:
            app.state.config_store = store
        else:
            app.state.config_store = get_config_store()
            if isinstance(app.state.config_store, SqlConfigStore):
                await init_db()
        logger.info(f"Config store ready: {type(app.state.config_store).__name__}")
        yield
        logger.info(f"{settings.APP_NAME} stopped.")

    app = FastAPI(
        title="Remote Config Service",
        description="Published app configuration for client applications",
        version="1.0.0",
        lifespan=lifespan,
    )

    cors_origins = settings.get_cors_origins()
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.monotonic()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = round((time.monotonic() - start) * 1000, 2)
            logger.info(f"{request.method} {request.url.path} -> {status_code} ({duration_ms} ms)")

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "store": settings.STORE_BACKEND,
        }

    return app
