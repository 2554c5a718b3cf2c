from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from contextlib import asynccontextmanager
from typing import Optional
import structlog
import uvicorn

from app.core.config import Settings, get_settings
from app.core.database import create_engine, create_session_factory, ensure_schema
from app.core.exceptions import PersistenceError, StartupError, ValidationError
from app.core.logging import setup_logging, get_logger
from app.core.middleware import RequestLogMiddleware
from app.api.api import api_router
from app.api.schemas.common import HealthCheckResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings: Settings = app.state.settings

    # Startup
    setup_logging(settings)
    logger = get_logger()

    logger.info("Starting transaction ledger", version=settings.APP_VERSION)

    # Table must exist before the first write
    try:
        await ensure_schema(app.state.engine)
    except (PersistenceError, OSError) as e:
        logger.error("Database unavailable at startup", error=str(e))
        raise StartupError(f"Error opening database: {e}") from e
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down transaction ledger")
    await app.state.engine.dispose()


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Map service errors onto HTTP responses"""
    logger = structlog.get_logger("errors")

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return await validation_error_handler(request, ValidationError.from_errors(exc.errors()))

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info("Rejected request payload", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("Persistence failure", path=request.url.path, error=str(exc))
        detail = str(exc) if settings.EXPOSE_ERROR_DETAILS else "Internal server error"
        return PlainTextResponse(detail, status_code=500)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Records and retrieves financial transactions",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # Shared storage handle, injected into handlers through get_db
    engine = create_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(RequestLogMiddleware)
    register_exception_handlers(app, settings)

    app.include_router(api_router)

    @app.get("/health", response_model=HealthCheckResponse)
    async def health_check():
        """Health check endpoint"""
        return HealthCheckResponse(status="healthy", version=settings.APP_VERSION)

    return app


app = create_application()


def run() -> None:
    """Serve the application on the configured host and port"""
    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
