"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from moodboard.core.config import get_settings
from moodboard.core.logging import setup_logging

# Setup logging
logger = setup_logging("main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize services at startup, clean up at shutdown."""
    settings = get_settings()
    try:
        from moodboard.services.analysis import ImageAnalysisService
        from moodboard.services.image import ImageGenerationService
        from moodboard.services.location import LocationCache, LocationContextService
        from moodboard.services.moodboard import MoodboardService

        image_service = ImageGenerationService(
            project_id=settings.gcp_project_id,
            location=settings.vertex_ai_location,
            images_dir=Path(settings.images_dir),
            model=settings.image_model,
        )
        analysis_service = ImageAnalysisService(
            generator=image_service.generate_single_photo,
            project_id=settings.gcp_project_id,
            vision_model=settings.vision_model,
            image_locator=image_service.resolve_local_path,
            conflict_threshold=settings.conflict_threshold,
            regeneration_delay_s=settings.regeneration_delay_s,
        )
        location_service = LocationContextService(
            cache=LocationCache(ttl_seconds=settings.location_cache_ttl_hours * 3600),
            lookup_enabled=settings.location_lookup_enabled,
            timeout_s=settings.location_lookup_timeout_s,
        )

        app.state.moodboard_service = MoodboardService(
            image_service=image_service,
            analysis_service=analysis_service,
            location_service=location_service,
        )
        if not image_service.available:
            logger.warning("GCP_PROJECT_ID not set, moodboards will use placeholder photos")
        logger.info("Services initialized successfully")
    except Exception as exc:
        logger.error(
            "Service initialization failed, running in degraded mode",
            exc_info=True,
            extra={"service": "main", "error_type": type(exc).__name__},
        )
        # Continue without services; endpoints return 503 until fixed

    yield


# Create FastAPI app
app = FastAPI(
    title="Wedding Moodboard",
    description="Seeded wedding moodboard generation with Gemini images",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[f"http://localhost:{settings.frontend_port}"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
from moodboard.api.moodboard import router as moodboard_router  # noqa: E402

app.include_router(moodboard_router)

# Serve generated images at /images
_images_dir = Path(settings.images_dir)
_images_dir.mkdir(parents=True, exist_ok=True)
app.mount("/images", StaticFiles(directory=str(_images_dir)), name="images")


@app.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint.

    Always returns HTTP 200; check `services` for actual status.
    """
    svc = getattr(request.app.state, "moodboard_service", None)
    image_ok = svc is not None and svc.image_service.available

    logger.info("Health check requested")
    return {
        "status": "ok",
        "version": app.version,
        "services": {
            "moodboard": "ok" if svc is not None else "unavailable",
            "image_generation": "ok" if image_ok else "fallback",
        },
    }
