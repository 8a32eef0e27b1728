"""
MRI Soundscape Backend - Soundscape Generation Service (Simulated)
===================================================================

What:  Stand-in for AI soundscape generation and file download.
How:   Waits `generation_delay_seconds` to mimic processing, then returns
       fabricated metadata built from the request. No audio is produced.
Who:   Called by the /api/soundscapes routes.

Generated metadata:
    soundscape_id        "generated_<epoch millis>"
    duration             custom_settings.duration, else generation_default_duration
    sample_rate/channels fixed from settings (48000 / 2)
    effectiveness_score  uniform random in [0.7, 1.0)
    frequency_masking    custom_settings bounds, else 100 / 4000 Hz
"""

import asyncio
import logging
import random
import time
from datetime import datetime, timezone
from typing import Optional

from soundscape_api.config import settings
from soundscape_api.models.records import DEFAULT_FREQUENCY_HIGH, DEFAULT_FREQUENCY_LOW
from soundscape_api.schemas.soundscape import (
    CustomSettings,
    DownloadInfo,
    FrequencyMasking,
    GeneratedSoundscape,
    GenerateRequest,
)

logger = logging.getLogger(__name__)


class GenerationService:
    """
    Simulated generator.

    Args:
        delay_seconds: Artificial processing time; defaults to settings.
    """

    def __init__(self, delay_seconds: Optional[float] = None):
        self.delay_seconds = (
            delay_seconds if delay_seconds is not None else settings.generation_delay_seconds
        )

    async def generate(self, request: GenerateRequest) -> GeneratedSoundscape:
        """Produce metadata for a "generated" soundscape."""
        start = time.perf_counter()
        await asyncio.sleep(self.delay_seconds)

        custom = request.custom_settings or CustomSettings()
        result = GeneratedSoundscape(
            soundscape_id=f"generated_{int(time.time() * 1000)}",
            type=request.soundscape_type,
            duration=custom.duration or settings.generation_default_duration,
            sample_rate=settings.generation_sample_rate,
            channels=settings.generation_channels,
            effectiveness_score=random.random() * 0.3 + 0.7,
            frequency_masking=FrequencyMasking(
                low=custom.frequency_low or DEFAULT_FREQUENCY_LOW,
                high=custom.frequency_high or DEFAULT_FREQUENCY_HIGH,
            ),
            download_url=f"/api/soundscapes/download/{request.soundscape_type}",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

        logger.info(
            "Generated soundscape %s (type=%s) in %.1fms",
            result.soundscape_id,
            result.type,
            (time.perf_counter() - start) * 1000,
        )
        return result

    def download_info(self, soundscape_type: str) -> DownloadInfo:
        """Metadata describing the file a real download would return."""
        return DownloadInfo(filename=f"mri-soundscape-{soundscape_type}.wav")


# Module-level instance used by the routes
generation_service = GenerationService()
