"""FastAPI application entry point for MoviePoll."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.database import Database
from app.routers import (
    movies_router,
    voting_router,
    appeal_router,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting MoviePoll API...")
    await Database.connect()
    logger.info("MoviePoll API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down MoviePoll API...")
    await Database.disconnect()
    logger.info("MoviePoll API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Rate movies together and rank them by visibility-adjusted appeal",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Configure CORS
    origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(movies_router, prefix="/api")
    app.include_router(voting_router, prefix="/api")
    app.include_router(appeal_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        try:
            # Check database connection
            db = Database.get_db()
            await db.command("ping")
            return {
                "status": "healthy",
                "database": "connected",
            }
        except Exception as e:
            return {
                "status": "unhealthy",
                "database": "disconnected",
                "error": str(e),
            }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
