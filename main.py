import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from talentmatch.core.config import settings
from talentmatch.core.database import Database
from talentmatch.core.logging_config import setup_logging
from talentmatch.services.match_scorer import MatchScorer
from talentmatch.api.endpoints import admin, candidates, health, jobs, matches, recruiters

# Configure logging
setup_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Owns the two long-lived resources: the database handle and the scorer
    client. Both are stored on app.state for the request dependencies.
    """
    # Startup
    logger.info("Starting up TalentMatch API...")
    logger.info("Initializing database...")
    database = Database(settings.DATABASE_URL)
    database.init()
    app.state.database = database
    app.state.scorer = MatchScorer.from_settings(settings)
    logger.info("Database initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down TalentMatch API...")
    app.state.scorer.close()
    database.dispose()


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Recruiting match engine: AI scoring of jobs against candidates",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(recruiters.router, prefix=settings.API_V1_STR)
app.include_router(jobs.router, prefix=settings.API_V1_STR)
app.include_router(candidates.router, prefix=settings.API_V1_STR)
app.include_router(matches.router, prefix=settings.API_V1_STR)
app.include_router(admin.router, prefix=settings.API_V1_STR)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "message": "TalentMatch API",
        "version": "1.0.0",
        "status": "healthy"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
