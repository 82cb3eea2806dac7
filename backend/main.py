"""
SaaS Pricer - Main Application Entry Point

HTTP API over the pricing engines and the shared report store.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import get_settings
from backend.db.session import engine, init_db
from backend.routers.v1 import calculations, reports, share

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    init_db(engine)
    logger.info(f"{settings.app_name} {settings.app_version} started ({settings.environment})")
    yield
    # Shutdown
    engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description=(
        "SaaS pricing calculator: COGS breakdowns, gross margins, break-even "
        "customer counts, investor metrics and shareable pricing reports."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
    openapi_url="/api/openapi.json" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoints
@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "saas-pricer-api"}


# API v1 routes
app.include_router(
    calculations.router,
    prefix=f"{settings.api_v1_prefix}/calculations",
    tags=["Calculations"],
)
app.include_router(
    reports.router,
    prefix=f"{settings.api_v1_prefix}/reports",
    tags=["Reports"],
)
app.include_router(
    share.router,
    tags=["Share Links"],
)
