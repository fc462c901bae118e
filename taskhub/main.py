"""
taskhub application entry point.

create_app() assembles the FastAPI app: routers, error handlers, request
logging, CORS and the startup/shutdown lifespan.
"""
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskhub.auth.router import router as auth_router, users_router
from taskhub.base_microservice import ApiResponse, Base, BaseMicroservice, configure_logging
from taskhub.config import Settings, load_settings
from taskhub.container import ServiceContainer, build_container
from taskhub.errors import AppError, ErrorKind, format_error, status_for
from taskhub.tasks.router import router as tasks_router

base_service = BaseMicroservice("main")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Request payload is invalid"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location or 'body'}: {first.get('msg', 'invalid value')}"


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to the response envelope."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return ApiResponse(status_code=status_for(exc), error=format_error(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        error = AppError(ErrorKind.ILLEGAL_ARGUMENT, _validation_message(exc))
        return ApiResponse(status_code=error.status_code, error=str(error))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            error = AppError(ErrorKind.NO_HANDLER_FOUND, f"No handler found for {request.method} {request.url.path}")
            return ApiResponse(status_code=404, error=str(error))
        return ApiResponse(status_code=exc.status_code, error=f"HTTPException: {exc.detail}", headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        base_service.log_error(exc, context=f"{request.method} {request.url.path}")
        return ApiResponse(status_code=status_for(exc), error=format_error(exc))


def register_middleware(app: FastAPI) -> None:

    @app.middleware("http")
    async def request_logger(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        base_service.logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed:.4f}s)"
        )
        return response


def create_app(settings: Optional[Settings] = None, container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Runtime settings, read from the environment when omitted
        container: Pre-built services; built from settings when omitted

    Returns:
        The configured app
    """
    if settings is None:
        settings = container.settings if container is not None else load_settings()
    configure_logging(settings.log_level)
    if container is None:
        container = build_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        base_service.log_event("service.startup", {"service": "main"})
        if container.engine is not None:
            async with container.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            base_service.logger.info("Database tables ready")
        yield
        if container.engine is not None:
            await container.engine.dispose()
        base_service.log_event("service.shutdown", {"service": "main"})

    app = FastAPI(
        title="taskhub API",
        description="Task management backend with JWT authentication",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Authorization"],
    )
    register_middleware(app)
    register_exception_handlers(app)

    app.include_router(auth_router, prefix="/api/v1/auth")
    app.include_router(users_router, prefix="/api/v1/users")
    app.include_router(tasks_router, prefix="/api/v1/users/{user_id}/tasks")

    @app.get("/health", tags=["health"])
    async def health_check():
        return base_service.response(data={"status": "ok"})

    return app
