"""Moodboard API router."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from moodboard.models.moodboard import MoodboardRequest, MoodboardResult, ScenePreview
from moodboard.services.moodboard import MoodboardService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/moodboard", tags=["moodboard"])


def get_moodboard_service(request: Request) -> MoodboardService:
    """FastAPI dependency: retrieve MoodboardService from app.state.

    Returns HTTP 503 if the service was not initialized at startup.
    """
    svc: MoodboardService | None = getattr(request.app.state, "moodboard_service", None)
    if svc is None:
        raise HTTPException(
            status_code=503,
            detail="Moodboard service unavailable. Service not initialized.",
        )
    return svc


@router.post("/preview", response_model=ScenePreview)
async def preview_moodboard(
    body: MoodboardRequest,
    service: MoodboardService = Depends(get_moodboard_service),
) -> ScenePreview:
    """Build the scene and prompts for the onboarding answers, without images."""
    return service.preview(body.onboarding_data, body.seed)


@router.post("/generate", response_model=MoodboardResult)
async def generate_moodboard(
    body: MoodboardRequest,
    service: MoodboardService = Depends(get_moodboard_service),
) -> MoodboardResult:
    """Generate a full moodboard.

    Runs in a worker thread because image generation blocks.

    Raises:
        HTTPException 503: The pipeline raised unexpectedly.
        HTTPException 422: Validation error (handled by FastAPI automatically).
    """
    try:
        return await run_in_threadpool(service.generate, body.onboarding_data, body.seed)
    except Exception as exc:
        logger.error(
            "generate_moodboard failed",
            exc_info=True,
            extra={"service": "MoodboardRouter", "error_type": type(exc).__name__},
        )
        raise HTTPException(
            status_code=503,
            detail="Moodboard generation unavailable. Please try again later.",
        ) from exc
