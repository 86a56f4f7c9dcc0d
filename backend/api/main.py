"""
FastAPI application entry point.

Run with: uvicorn api.main:create_app --factory --reload
"""
import logging
import time
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import geocode, landmarks, searches
from repositories import create_store
from services.geocoding import geocode_search
from services.landmark_service import LandmarkQueryService
from services.places_client import build_places_client
from settings import Settings, settings as default_settings

logger = logging.getLogger("api")

# Longer access-log lines are cut to keep the console readable
MAX_LOG_LINE = 80


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def create_app(
    store=None,
    client=None,
    geocoder: Optional[Callable] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the application with an explicitly constructed store and provider
    client. Tests pass fresh instances or fakes; production uses settings.
    """
    cfg = app_settings or default_settings
    configure_logging(cfg.LOG_LEVEL)

    app = FastAPI(
        title="Landmark Browser API",
        description="Map landmarks backed by GeoNames and Wikipedia",
        version="0.1.0",
    )

    app.state.store = store if store is not None else create_store(cfg)
    app.state.client = client if client is not None else build_places_client(cfg)
    app.state.geocoder = geocoder or geocode_search
    app.state.service = LandmarkQueryService(
        app.state.store,
        app.state.client,
        max_landmarks=cfg.MAX_LANDMARKS_PER_BOUNDS,
        backfill_enabled=cfg.BACKFILL_ENABLED,
    )

    # CORS middleware for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def api_access_log_middleware(request: Request, call_next):
        """Log one line per /api request: method, path, status and duration."""
        start = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if path.startswith("/api"):
            duration_ms = (time.perf_counter() - start) * 1000
            line = f"{request.method} {path} {response.status_code} in {duration_ms:.0f}ms"
            if len(line) > MAX_LOG_LINE:
                line = line[: MAX_LOG_LINE - 1] + "…"
            logger.info(line)
        return response

    # Include routers
    app.include_router(landmarks.router, prefix="/api/landmarks", tags=["landmarks"])
    app.include_router(geocode.router, prefix="/api/geocode", tags=["geocode"])
    app.include_router(searches.router, prefix="/api/searches", tags=["searches"])

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "Landmark Browser API"}

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    logger.info("Landmark Browser API ready (store=%s)", type(app.state.store).__name__)
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
