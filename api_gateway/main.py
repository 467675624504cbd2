"""
FastAPI application entry point.
"""

from fastapi import FastAPI

from shared.config import settings
from shared.logging import get_logger

from api_gateway.routes import aura

logger = get_logger(__name__)

app = FastAPI(title="Aura Analysis API", version="1.0.0")

app.include_router(aura.router, prefix="/api/v1", tags=["aura"])


@app.get("/health")
async def health_check():
    """Liveness probe."""
    return {"status": "healthy", "environment": settings.environment}
