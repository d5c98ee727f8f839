"""
FastAPI application entry point with async lifespan.
"""
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from certflow.core.config import get_settings
from certflow.core.database import init_db, close_db
from certflow.core.logging import configure_logging, get_logger
from certflow.routes import health, profiles, projects, certificate_requests, reports

settings = get_settings()

configure_logging(
    log_level=settings.log_level,
    environment=settings.environment,
    debug=settings.debug
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async lifespan manager for startup and shutdown."""
    # Startup
    await init_db()
    logger.info("Database initialised", extra={"database_url": settings.database_url})
    yield
    # Shutdown
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Project verification and certificate issuance workflow",
    lifespan=lifespan
)

# CORS middleware (for Streamlit dashboard)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(health.router)
app.include_router(profiles.router)
app.include_router(projects.router)
app.include_router(certificate_requests.router)
app.include_router(reports.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    uvicorn.run(
        app,
        host='0.0.0.0',
        port=settings.port,
        log_level="debug" if settings.debug else "info"
    )
