from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Callable, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .exceptions import ApiError, StoreConnectionError
from .logging_config import setup_logging
from .request_logger import RequestLoggerMiddleware
from .routers import health as health_router
from .routers import todos as todos_router
from .service import TodoService
from .settings import Settings, get_settings
from .store import TodoStore, build_store

log = structlog.get_logger()

openapi_tags = [
    {"name": "health", "description": "Service health and Redis connection status."},
    {"name": "todos", "description": "List, create, toggle and delete todos."},
]


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Verify the store on startup and close it on shutdown."""
    service: TodoService = application.state.todo_service
    try:
        service.open()
    except StoreConnectionError as exc:
        log.error("Store unreachable at startup", error=str(exc))
        raise
    log.info("API server started")

    yield

    service.close()
    log.info("API server stopped, store connection closed")


# PUBLIC_INTERFACE
def create_app(
    store: Optional[TodoStore] = None,
    settings: Optional[Settings] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    When ``store`` is omitted it is built from ``settings`` (STORE_BACKEND,
    REDIS_HOST, REDIS_PORT). The store is opened by the application lifespan
    and closed when the server shuts down.
    """
    settings = settings or get_settings()
    setup_logging(settings.app_env, settings.log_level)

    application = FastAPI(
        title="Redis Todo API",
        description="Todo list demo API backed by a single expiring Redis list.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    application.state.todo_service = TodoService(store or build_store(settings), clock=clock)

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(RequestLoggerMiddleware)

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Missing, blank or malformed create payloads are a 400 with
        ``{"error": "Name and task are required"}``.
        """
        log.info("Request validation failed", path=request.url.path, detail=exc.errors())
        return JSONResponse(status_code=400, content={"error": "Name and task are required"})

    @application.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    application.include_router(health_router.router)
    application.include_router(todos_router.router)
    return application
