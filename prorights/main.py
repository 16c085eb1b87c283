"""
PRO Rights - FastAPI Application

Performing-rights management: work registration, business licensing,
usage reporting and royalty distribution.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import prorights.models  # noqa: F401  registers every table on Base.metadata
from prorights.core.config import settings
from prorights.core.database import engine, Base
from prorights.core.exceptions import PROError
from prorights.routers.auth import router as auth_router
from prorights.routers.works import router as works_router, contributors_router
from prorights.routers.licenses import router as licenses_router
from prorights.routers.royalties import router as royalties_router, usage_router
from prorights.routers.dashboard import router as dashboard_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    # Create tables on startup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield
    # Cleanup on shutdown
    await engine.dispose()


app = FastAPI(
    title="PRO Rights",
    description="Performing-rights organization: works, licenses, usage and royalties",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PROError)
async def domain_error_handler(request: Request, exc: PROError) -> JSONResponse:
    """Report domain errors with the failing condition."""
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Include routers
app.include_router(auth_router)
app.include_router(works_router)
app.include_router(contributors_router)
app.include_router(licenses_router)
app.include_router(usage_router)
app.include_router(royalties_router)
app.include_router(dashboard_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
