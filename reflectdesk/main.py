"""
ReflectDesk - Main Application Entry Point

FastAPI application serving the documents, Next Actions board, work sessions
and reviews APIs.
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from .database import init_database, close_database, get_database
from .middleware.slowapi_limiter import setup_rate_limiting
from .web.auth import router as auth_router
from .web.board import router as board_router
from .web.documents import router as documents_router
from .web.reviews import router as reviews_router
from .web.sessions import router as sessions_router
from .web.task_groups import router as task_groups_router
from .web.tasks import router as tasks_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    logger.info("Starting ReflectDesk...")

    if await init_database():
        logger.info("Database initialized")
    else:
        logger.warning("Database not configured or failed to initialize")

    logger.info(f"Review store: {settings.review_store}")

    yield

    logger.info("Shutting down...")
    try:
        await close_database()
    except Exception as e:
        logger.warning(f"Failed to close database during shutdown: {e}")

    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Personal documents, task board, work sessions and reviews",
    version=settings.app_version,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_rate_limiting(app)

app.include_router(auth_router)
app.include_router(documents_router)
app.include_router(task_groups_router)
app.include_router(tasks_router)
app.include_router(board_router)
app.include_router(sessions_router)
app.include_router(reviews_router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health")
async def health_check():
    """Detailed health check endpoint."""
    db_health = {"status": "not_configured"}
    try:
        db_health = await get_database().health_check()
    except Exception as e:
        db_health = {"status": "error", "error": str(e)}

    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "services": {
            "database": db_health.get("status", "unknown"),
            "review_store": settings.review_store,
        },
    }


# Error handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed payloads: 400 with per-field detail, nothing persisted."""
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid data", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "reflectdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
