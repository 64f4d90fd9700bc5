"""
No-Hitter Predictor API Server

FastAPI server exposing the daily no-hitter prediction and its history.

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8001

Environment Variables:
    DATABASE_URL - peewee database URL (default sqlite:///nohitter.db)
    API_TOKEN    - Bearer token for POST /v1/predictions/refresh
    TIMEZONE     - Timezone that defines "today" (default US/Eastern)
"""

from contextlib import asynccontextmanager
from datetime import datetime

import pytz
from fastapi import FastAPI

from api.v1 import predictions
from core.logging import setup_logging, get_logger
from core.middleware import setup_middleware
from core.settings import settings
from db.base import close_db, init_db
from schemas.api import HealthResponse
from schemas.common import ApiStatus


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(
        log_level=settings.log_level,
        json_format=settings.log_format == "json",
        service_name=settings.service_name,
    )
    log = get_logger()
    log.info("api_starting", service=settings.service_name)

    init_db()
    log.info("database_initialized")

    yield

    close_db()
    log.info("api_stopped")


app = FastAPI(
    title="No-Hitter Predictor",
    description="Daily no-hitter candidate built from MLB schedule, stats, venue and weather data",
    version="1.0.0",
    lifespan=lifespan,
)

setup_middleware(app)

app.include_router(predictions.router, prefix="/v1")


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint (no auth required)."""
    now = datetime.now(pytz.timezone(settings.timezone))
    return HealthResponse(status=ApiStatus.SUCCESS, message="healthy", timestamp=now.isoformat())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
