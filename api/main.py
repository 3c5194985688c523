import logging
import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic_core import _pydantic_core
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request

from api.shared.dtos import HealthCheckResponse
from api.shared.exceptions import PortalException
from core.logging_config import configure_logging
from core.settings import SETTINGS
from di.container import ApplicationContainer as DependencyContainer

configure_logging()

logger = logging.getLogger("hostel")


class CustomFastAPI(FastAPI):
    container: DependencyContainer


@asynccontextmanager
async def lifespan(_app: CustomFastAPI):
    logger.info("Starting application initialization...")
    start_time = time.time()

    try:
        logger.info("Initializing database connection...")
        db_start = time.time()
        db_resource = _app.container.infrastructure.database()
        await db_resource.init()
        await db_resource.ping()
        logger.info(
            f"✅ Database connection established in {time.time() - db_start:.2f}s"
        )

        logger.info(
            f"✅ Application startup completed in {time.time() - start_time:.2f}s"
        )
    except Exception as e:
        logger.exception(f"❌ Failed to initialize application: {str(e)}")
        raise

    yield

    try:
        db_resource = _app.container.infrastructure.database()
        if db_resource:
            await db_resource.shutdown()
        logger.info("Application shutdown complete")
    except Exception:
        logger.exception("Error during shutdown")


def create_fastapi_app() -> CustomFastAPI:
    origins = {
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:8000",
    }

    _app = CustomFastAPI(
        title="Hostel Portal Messaging API",
        description="Direct messages, message requests and notifications for the hostel portal",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Initialize dependency container
    _app.container = DependencyContainer()
    _app.container.infrastructure.config.from_dict(SETTINGS.model_dump())
    _app.container.wire(modules=[sys.modules[__name__]])
    _app.container.init_resources()

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=list(origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include feature routers
    from api.features.conversation.router import conversations_router, messages_router
    from api.features.notifications.router import router as notifications_router

    _app.include_router(messages_router, prefix="/api/messages", tags=["Messages"])
    _app.include_router(
        conversations_router, prefix="/api/conversations", tags=["Conversations"]
    )
    _app.include_router(
        notifications_router, prefix="/api/notifications", tags=["Notifications"]
    )

    return _app


app = create_fastapi_app()


# Health check endpoints
@app.get("/")
async def root():
    return {"message": "Hostel portal messaging API is running", "status": "ok"}


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ready", response_model=HealthCheckResponse)
async def ready():
    """Readiness: the database answers a ping."""
    try:
        await app.container.infrastructure.database().ping()
        database = "ok"
    except (RuntimeError, SQLAlchemyError):
        logger.warning("Readiness check failed", exc_info=True)
        database = "unavailable"
    return HealthCheckResponse(
        status="ok" if database == "ok" else "degraded",
        dependencies={"database": database},
    )


# Exception handlers
@app.exception_handler(PortalException)
async def portal_exception_handler(request: Request, exc: PortalException):
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.message} ({request.url.path})")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "detail": exc.message,
            "status_code": exc.status_code,
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"error": "Validation Error", "detail": str(exc), "status_code": 422},
    )


@app.exception_handler(_pydantic_core.ValidationError)
async def pydantic_validation_handler(
    request: Request, exc: _pydantic_core.ValidationError
):
    return JSONResponse(
        status_code=422,
        content={"error": "Validation Error", "detail": str(exc), "status_code": 422},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "status_code": 500,
        },
    )
