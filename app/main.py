"""
Leave Request Service - Main Application Entry Point.

This service handles leave requests including:
- Account registration and token login
- Leave request submission and tracking
- Admin approval workflows
- Leave summary with Redis caching
- Kafka event publishing for the leave lifecycle
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.routes.auth import router as auth_router
from app.api.routes.leaves import router as leaves_router
from app.api.routes.users import router as users_router
from app.core.cache import RedisClient
from app.core.config import settings
from app.core.database import create_db_and_tables
from app.core.kafka import KafkaProducer
from app.core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting Leave Request Service...")

    logger.info("Creating database and tables...")
    create_db_and_tables()
    logger.info("Database and tables created successfully")

    if settings.CACHE_ENABLED:
        logger.info("Initializing Redis client...")
        if RedisClient.ping():
            logger.info("Redis client connected successfully")
        else:
            logger.warning("Redis connection failed, caching will be unavailable")

    logger.info("Initializing Kafka producer...")
    KafkaProducer.start()

    logger.info("Leave Request Service startup complete")

    yield

    # Shutdown
    logger.info("Leave Request Service shutting down...")

    KafkaProducer.stop()
    RedisClient.close()

    logger.info("Leave Request Service shutdown complete")


# Initialize FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Leave Request Service - Handles leave submissions, reviews and access control",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

register_exception_handlers(app)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(leaves_router, prefix="/api")
app.include_router(users_router, prefix="/api")


# Health check endpoint
@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint for container orchestration and monitoring.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/", tags=["root"])
async def root():
    """
    Root endpoint with service information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


def run() -> None:
    """Console entry point: serve the app on the configured port."""
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
