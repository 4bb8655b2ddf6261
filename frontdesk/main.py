from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from frontdesk.api.v1.router import router as api_v1_router
from frontdesk.config.logging import get_logger, setup_logging
from frontdesk.config.settings import settings
from frontdesk.core.exceptions import BaseAppException, ErrorCode
from frontdesk.core.middleware import register_middlewares
from frontdesk.db.init_db import init_db
from frontdesk.schemas.common import ErrorResponse

logger = get_logger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Render application exceptions and unexpected errors as ErrorResponse."""

    @app.exception_handler(BaseAppException)
    async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        body = ErrorResponse(
            message=exc.message,
            error_code=exc.error_code.value,
            details=exc.details or None,
        )
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=True,
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
        body = ErrorResponse(message="Internal server error", error_code=ErrorCode.INTERNAL_ERROR.value)
        return JSONResponse(status_code=500, content=body.model_dump())


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Registers CORS, request middlewares and exception handlers.
    - Includes the versioned API router under /api/v1.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=settings.CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok", "app": settings.APP_NAME, "version": settings.API_VERSION}

    # Schema creation for development; production schemas come from migrations
    @app.on_event("startup")
    async def on_startup() -> None:
        if not settings.is_production():
            init_db()
        logger.info(f"{settings.APP_NAME} started in {settings.ENVIRONMENT} mode")

    return app


app = create_app()
