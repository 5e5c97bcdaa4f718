"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pick_assistant import __version__
from pick_assistant.api.routes.recommendations import router as recommendations_router
from pick_assistant.config import settings
from pick_assistant.services.draft_service import DraftService

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Tests may install their own service before startup
    if not hasattr(app.state, "draft_service"):
        app.state.draft_service = DraftService(settings)
    await app.state.draft_service.start()
    yield
    await app.state.draft_service.close()


app = FastAPI(
    title="Pick Assistant",
    description="LoL champion select assistant - ranked pick recommendations",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "pick-assistant"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Pick Assistant API",
        "version": __version__,
        "docs": "/docs",
    }


# Register routers
app.include_router(recommendations_router)


def run():
    """Serve the API with uvicorn using host/port from settings."""
    logger.info(f"Starting Pick Assistant on http://{settings.host}:{settings.port}")
    uvicorn.run(
        "pick_assistant.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
