"""
MRI Soundscape Backend - Soundscape Generation Route Handlers
==============================================================

What:  Simulated AI generation and download endpoints.
How:   Delegate to GenerationService; no audio is synthesized or served.
"""

import logging

from fastapi import APIRouter

from soundscape_api.schemas.soundscape import (
    DownloadInfo,
    ErrorResponse,
    GeneratedSoundscape,
    GenerateRequest,
)
from soundscape_api.services.generation_service import generation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/soundscapes", tags=["Soundscapes"])


@router.post(
    "/generate",
    response_model=GeneratedSoundscape,
    responses={
        400: {"description": "Invalid generation request", "model": ErrorResponse},
        500: {"description": "Generation failed", "model": ErrorResponse},
    },
    summary="Generate a soundscape (simulated)",
    description=(
        "Waits about one second, then returns metadata for a generated soundscape: "
        "duration, sample rate, channels, an effectiveness score between 0.7 and 1.0, "
        "the masked frequency band and a download URL."
    ),
)
async def generate_soundscape(request: GenerateRequest) -> GeneratedSoundscape:
    logger.info("Generation requested: type=%s", request.soundscape_type)
    return await generation_service.generate(request)


@router.get(
    "/download/{soundscape_type}",
    response_model=DownloadInfo,
    responses={500: {"description": "Download failed", "model": ErrorResponse}},
    summary="Download a generated soundscape (metadata only)",
)
async def download_soundscape(soundscape_type: str) -> DownloadInfo:
    return generation_service.download_info(soundscape_type)
