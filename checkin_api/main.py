from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from checkin_api.core.config import Settings, get_settings
from checkin_api.core.logging import configure_logging
from checkin_api.api.routes import checkins, health
from checkin_api.db.init_db import init_db
from checkin_api.db.session import build_engine, build_session_factory
from checkin_api.schemas.common import ErrorResponse, DatabaseError
from checkin_api.services.ai import SuggestionProvider
import logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.DB_AUTO_CREATE:
        await init_db(app.state.engine)
    yield
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    logger = logging.getLogger(__name__)

    # Built once per process and shared read-only by every request
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.suggestion_provider = SuggestionProvider.from_settings(settings)
    if not settings.OPENROUTER_API_KEY:
        logger.warning("OPENROUTER_API_KEY is not set; check-ins will be saved without suggestions")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(), allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(StarletteHTTPException)
    async def envelope_http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Route errors carry the {success, message, error} body as a dict detail
        if isinstance(exc.detail, dict):
            return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={
                    "success": False,
                    "message": "Route not found",
                    "path": request.url.path,
                    "method": request.method,
                },
            )
        return await http_exception_handler(request, exc)

    @app.exception_handler(OperationalError)
    async def operational_error_handler(request: Request, exc: OperationalError):
        logger.error(f"Database operational error: {exc}")
        return JSONResponse(
            status_code=503,
            content=ErrorResponse(
                message="Unable to connect to the database. Please try again later.",
                error_code="DATABASE_CONNECTION_ERROR",
            ).model_dump(),
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error: {exc}")
        return JSONResponse(
            status_code=500,
            content=DatabaseError(message="There was an error executing the database query").model_dump(),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        # Exception text is only exposed when debugging
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                message="Internal server error",
                error=str(exc) if settings.APP_DEBUG else None,
                error_code="INTERNAL_ERROR",
            ).model_dump(),
        )

    # routes
    app.include_router(health.router)
    app.include_router(checkins.router)
    return app


app = create_app()
