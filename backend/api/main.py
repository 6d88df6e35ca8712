"""
Ops Dashboard API — FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from core.config import get_settings

settings = get_settings()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info(
        "Ops Dashboard API starting up",
        version=settings.app_version,
        wms_configured=bool(settings.wms_api_token),
        metabase_configured=bool(settings.metabase_api_key),
    )
    yield
    logger.info("Ops Dashboard API shutting down")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Alert, user and report endpoints for the operations dashboard",
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Log anything a handler did not map to an HTTP error and answer with a generic 500."""
    logger.error(
        "api.unhandled_error",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Import and register routers
from api.v1.routers import alerts, auth, reports, users

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(alerts.router)
app.include_router(reports.router)


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers."""
    return {"status": "healthy", "version": settings.app_version}
