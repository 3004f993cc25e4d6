"""
FastAPI backend for the Regatta performance engine.

Provides REST API endpoints for:
- Course inspection (buoys)
- Boat performance estimates between buoys at a race hour
- Path exploration and targeted path search over the course
"""

import logging
from pathlib import Path
import sys

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

sys.path.insert(0, str(Path(__file__).parent.parent))

from api.config import settings
from api.routers.course import router as course_router
from api.state import get_app_state, get_race_state

API_VERSION = "1.0.0"

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Application factory for the Regatta API.

    Creates and configures the FastAPI application with CORS, the course
    router and the system endpoints.

    Returns:
        FastAPI: Configured application instance
    """
    application = FastAPI(
        title="Regatta API",
        description="""
## Regatta Performance API

Estimates boat speed between course buoys from a wind schedule and a
boat polar, and enumerates the paths a boat can sail over the course.

### Features
- Wind interpolation over race time (direction wraps through north)
- Polar lookup with bilinear interpolation
- Sailing mode classification
- Path exploration and targeted path search
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_credentials,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})

    @application.on_event("startup")
    async def startup_event():
        """Load race data up front so the first request does not pay for it."""
        if settings.preload_race_data and get_race_state().preload():
            logger.info("Startup complete")

    @application.get("/", tags=["System"])
    async def root():
        """
        API root endpoint.

        Returns basic API information and available endpoints.
        """
        return {
            "name": "Regatta API",
            "version": API_VERSION,
            "status": "operational",
            "docs": "/api/docs",
            "endpoints": {
                "health": "/api/health",
                "buoys": "/api/buoys",
                "estimate": "/api/estimate",
                "estimate_leg": "/api/estimate-leg",
                "find_paths": "/api/find-paths",
                "find_targets": "/api/find-targets",
            },
        }

    @application.get("/api/health", tags=["System"])
    async def health():
        """Liveness and race data status."""
        checks = get_app_state().health_check()
        status = "healthy" if checks["race_data"] != "unhealthy" else "degraded"
        return {"status": status, "version": API_VERSION, **checks}

    application.include_router(course_router)

    return application


# Create the application
app = create_app()

# Initialize application state (thread-safe singleton)
_ = get_app_state()
