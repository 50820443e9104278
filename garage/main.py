"""
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from garage.config import Settings, get_settings
from garage.database import Database
from garage.errors import GarageError, InternalError
from garage.logging_config import setup_logging
from garage.routers import customers, services, vehicles

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Map every failure to an ``{"error": ...}`` body."""

    @app.exception_handler(GarageError)
    async def garage_error_handler(request: Request, exc: GarageError):
        if isinstance(exc, InternalError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning(
                "%s %s -> %s (%s): %s",
                request.method, request.url.path, exc.status_code, exc.kind, exc.message,
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        path = request.url.path
        if exc.status_code == status.HTTP_404_NOT_FOUND and path.startswith(settings.api_prefix):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"error": "API endpoint not found", "path": path},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "message": str(exc)},
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around its own database gateway."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Open the gateway (creating tables if needed) on startup and
        dispose of it on shutdown.
        """
        logger.info("Starting %s %s", settings.app_name, settings.app_version)
        db = Database(settings.database_url, echo=settings.database_echo)
        await db.connect()
        app.state.db = db
        logger.info("API available at %s", settings.api_prefix)

        yield

        logger.info("Shutting down %s", settings.app_name)
        await db.disconnect()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        ## Grand Auto Garage API

        Record keeping for a small garage.

        ### Entities:
        * **Customers**: contact details; own vehicles
        * **Vehicles**: make, model, year and a unique license plate
        * **Services**: dated work records with cost and status
        """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app, settings)

    app.include_router(customers.router, prefix=settings.api_prefix)
    app.include_router(vehicles.router, prefix=settings.api_prefix)
    app.include_router(services.router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "api": settings.api_prefix,
            "docs": "/docs",
        }

    @app.get(f"{settings.api_prefix}/health")
    async def health_check():
        """Liveness probe."""
        return {
            "status": "OK",
            "message": f"{settings.app_name} is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "garage.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
