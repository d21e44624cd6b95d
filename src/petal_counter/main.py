"""FastAPI application entry point."""

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from petal_counter.api.routes import router
from petal_counter.core.config import LOG_FORMAT, LOG_LEVEL
from petal_counter.processing.session import AnalysisSession

# Configure logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO), format=LOG_FORMAT)

app = FastAPI(
    title="Petal Counter API",
    description="API for estimating flower petal counts from photographs",
    version="0.1.0",
)

# Single-user session shared by the upload page
app.state.session = AnalysisSession()

# Get the static directory path
STATIC_DIR = Path(__file__).parent / "static"

# Mount static files
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Include API routes
app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    """Serve the frontend."""
    return FileResponse(STATIC_DIR / "index.html")
