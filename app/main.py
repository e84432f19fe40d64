"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_pagination import add_pagination
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.errors import to_app_error
from app.db import db_manager, get_db
from app.exceptions import AppError
from app.infra.logging_config import LoggingConfig, get_logger
from app.routers.chat_router import chat_router
from app.routers.documents_router import documents_router
from app.routers.system_prompts_router import router as system_prompts_router

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s", get_settings().app_name)
    yield
    await db_manager.dispose()


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed with %s: %s",
            request.method,
            request.url.path,
            exc.error_code,
            exc.details or exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error_code": "VALIDATION_ERROR",
            "error": _first_validation_message(exc),
            "retryable": False,
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = to_app_error(exc)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app(testing: bool = False) -> FastAPI:
    settings = get_settings()
    LoggingConfig(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Customer support chat with knowledge-base answers",
        lifespan=None if testing else lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(chat_router)
    app.include_router(documents_router)
    app.include_router(system_prompts_router)

    @app.get("/health")
    async def health(db: AsyncSession = Depends(get_db)) -> dict:
        """Liveness plus a database round trip."""
        await db.execute(text("SELECT 1"))
        return {"status": "ok", "environment": settings.environment}

    add_pagination(app)
    return app


app = create_app()
