"""Main FastAPI application with hexagonal architecture."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

# Load environment variables
load_dotenv()

from wincon.config import data_config_from_env  # noqa: E402

from . import __version__  # noqa: E402
from .api.rest.routes import router as analysis_router  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    config = data_config_from_env()
    if not config.data_path.exists():
        logger.warning("Match data file %s not found; GET routes will return 404", config.data_path)
    yield


app = FastAPI(
    title="WinCon API",
    description="Esports win-condition scouting API: side identity, closing ability and player dependence",
    version=__version__,
    lifespan=lifespan,
)

# CORS configuration for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
        "*",  # Allow all for development
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    data_available: bool


@app.get("/", tags=["meta"])
async def root():
    """API root with information and available endpoints."""
    return {
        "name": "WinCon API",
        "version": __version__,
        "description": "Esports win-condition scouting API",
        "docs": "/docs",
        "endpoints": {
            "health": "GET /health",
            "wincon": "GET /api/teams/{team_id}/wincon",
            "generate": "POST /api/wincon/generate",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["meta"])
async def health_check():
    """Check API health and whether the match data file is present."""
    config = data_config_from_env()
    return HealthResponse(
        status="healthy",
        version=__version__,
        data_available=config.data_path.exists(),
    )


# Include REST routes
app.include_router(analysis_router)


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=os.environ.get("WINCON_HOST", "0.0.0.0"),
        port=int(os.environ.get("WINCON_PORT", "8000")),
        reload=False,
    )
