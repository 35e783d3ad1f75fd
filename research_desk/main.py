"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api import get_api_router, get_pages_router
from .cache import close_redis, get_page_cache, init_redis
from .config import get_settings
from .core.errors import ResearchDeskError
from .core.logging import configure_logging
from .db.session import init_db
from .dependencies import get_broker_adapter
from .middleware import RequestTracingMiddleware
from .workers import CancellationReconciler

settings = get_settings()
configure_logging(settings.log_level, json_logs=settings.log_json)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("application_starting", environment=settings.environment)

    db_manager = init_db(settings.database_url, echo=settings.database_echo)
    if settings.debug:
        await db_manager.create_tables()
        logger.info("database_tables_created")

    if settings.redis_enabled:
        redis_manager = init_redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
        )
        if await redis_manager.ping():
            logger.info("redis_connected", host=settings.redis_host, port=settings.redis_port)
        else:
            logger.warning("redis_unreachable_page_cache_disabled", host=settings.redis_host)
            await close_redis()

    reconciler = None
    if settings.reconciler_enabled:
        reconciler = CancellationReconciler(
            db_manager,
            get_broker_adapter(settings),
            get_page_cache(),
            interval_seconds=settings.reconciler_interval_seconds,
        )
        reconciler.start()
    app.state.reconciler = reconciler

    yield

    logger.info("application_stopping")
    if reconciler is not None:
        await reconciler.stop()
    await close_redis()
    await db_manager.close()


app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    lifespan=lifespan,
)

app.add_middleware(RequestTracingMiddleware)


@app.exception_handler(ResearchDeskError)
async def research_desk_error_handler(request: Request, exc: ResearchDeskError) -> JSONResponse:
    logger.warning(
        "application_error",
        code=exc.code,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, "code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("request_validation_failed", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "An unexpected error occurred"},
    )


app.include_router(get_api_router())
app.include_router(get_pages_router())


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.api_version}
