"""
true-iso API - Isometric sprite correction over HTTP

This FastAPI application provides endpoints for:
- Correcting sprites to an exact isometric ratio
- Inspecting detected diagonal angles

Run with any ASGI server, e.g. ``uvicorn true_iso.main:app``.
"""

from fastapi import FastAPI

from . import __version__
from .config import get_config
from .models import HealthResponse
from .routers import correction_router
from .utils.logger import setup_from_config

setup_from_config(get_config())

app = FastAPI(
    title="true-iso API",
    description="Correct isometric tile sprites to mathematically consistent proportions",
    version=__version__
)

app.include_router(correction_router)


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns:
        Service status and version
    """
    return HealthResponse(status="healthy", version=__version__)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
