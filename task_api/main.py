"""
Task API - Main application module.
Project and task management with per-owner access control.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from .core.config import get_settings
from .core.database import Database
from .core.errors import register_exception_handlers
from .routers import projects, tasks, users

# Get settings
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

UNLOGGED_PATHS = {"/health"}


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application around a store handle.

    Args:
        database: Store to serve from; one is created from DATABASE_URL
            when omitted.
    """
    db = database or Database(settings.database_url, echo=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.service_name}...")
        # Exhausted retries propagate and abort startup
        db.init(max_retries=settings.db_connect_retries, delay=settings.db_connect_delay)
        app.state.db = db
        logger.info(f"{settings.service_name} startup completed")
        yield
        logger.info(f"Shutting down {settings.service_name}...")
        db.dispose()

    app = FastAPI(
        title="Task API",
        description="Projects and tasks with token authentication and soft deletion",
        version=settings.service_version,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(
        GZipMiddleware,
        minimum_size=settings.gzip_minimum_size
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.allowed_methods,
        allow_headers=settings.allowed_headers,
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        """Log all requests with timing"""
        start_time = time.time()
        path = request.url.path

        if path not in UNLOGGED_PATHS:
            client = request.client.host if request.client else "-"
            logger.info(f"{request.method} {path} - Client: {client}")

        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        if path not in UNLOGGED_PATHS:
            logger.info(f"{request.method} {path} - {response.status_code} ({process_time:.3f}s)")

        return response

    register_exception_handlers(app)

    app.include_router(users.router, prefix=settings.api_prefix + "/user", tags=["users"])
    app.include_router(projects.router, prefix=settings.api_prefix + "/projects", tags=["projects"])
    app.include_router(tasks.router, prefix=settings.api_prefix + "/projects", tags=["tasks"])

    @app.get("/", tags=["service"])
    async def root() -> Dict[str, Any]:
        """Root endpoint"""
        return {
            "service": settings.service_name,
            "version": settings.service_version,
            "status": "running",
            "message": "Task API is operational"
        }

    @app.get("/health", tags=["service"])
    def health_check() -> Dict[str, Any]:
        """Health check endpoint"""
        db_healthy = db.check_connection()
        return {
            "service": settings.service_name,
            "version": settings.service_version,
            "status": "healthy" if db_healthy else "unhealthy",
            "database": "connected" if db_healthy else "disconnected",
            "timestamp": time.time()
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("task_api.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
