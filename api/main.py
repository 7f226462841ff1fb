"""Marketplace Admin FastAPI Application."""

from contextlib import asynccontextmanager

import duckdb
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from api.config import get_settings
from api.middleware.schema_validation import SchemaVersionMiddleware, validate_schema_on_startup
from api.models.schemas import HealthResponse
from api.routers import advisors, listings, presets
from api.services.database import close_db, get_db
from config.logging_config import get_logger, setup_logging
from src.database.schema import get_schema_version, get_table_counts

settings = get_settings()
logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("DEBUG" if settings.debug else "INFO")
    validate_schema_on_startup()
    yield
    close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Admin API for browsing and moderating marketplace listings and advisors",
    lifespan=lifespan,
)


class CacheHeaderMiddleware(BaseHTTPMiddleware):
    """Middleware to add Cache-Control headers to responses."""

    # Endpoints that can be cached
    CACHEABLE_PATHS = {
        "/api/listings/counts": 60,
        "/api/advisors/counts": 60,
        "/api/presets": 300,
    }

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        if request.method != "GET":
            return response

        path = request.url.path
        for cacheable_path, max_age in self.CACHEABLE_PATHS.items():
            if path.startswith(cacheable_path):
                response.headers["Cache-Control"] = f"public, max-age={max_age}"
                break
        else:
            response.headers["Cache-Control"] = "no-cache"

        return response


app.add_middleware(CacheHeaderMiddleware)
app.add_middleware(SchemaVersionMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(listings.router, prefix="/api/listings", tags=["Listings"])
app.include_router(advisors.router, prefix="/api/advisors", tags=["Advisors"])
app.include_router(presets.router, prefix="/api/presets", tags=["Presets"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "docs": "/docs",
        "endpoints": {
            "listings": "/api/listings",
            "advisors": "/api/advisors",
            "presets": "/api/presets",
        },
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    try:
        conn = get_db().connect()
        return {
            "status": "healthy",
            "database": "connected",
            "schema_version": get_schema_version(conn),
            "tables": get_table_counts(conn),
        }
    except duckdb.Error as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e),
        }


def run() -> None:
    """Serve the API with uvicorn (``marketplace-api`` console script)."""
    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
