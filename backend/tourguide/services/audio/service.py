"""Audio guide generation.

No server-side text-to-speech provider is wired in. Every request returns
the narration text with ``fallbackToClientTTS`` set so the client speaks it
with its own speech synthesis.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field

from tourguide.models import InputMissingError

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Audio generation service not configured. Using client-side TTS."


class AudioResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    audio_url: str | None = Field(None, alias="audioUrl")
    message: str
    fallback_to_client_tts: bool = Field(..., alias="fallbackToClientTTS")


class AudioGenerationService:
    """Returns a client-side TTS fallback for every request."""

    async def generate_audio(
        self,
        text: str | None,
        language: str = "en",
        voice: str = "alloy",
        speed: float = 1.0,
    ) -> AudioResult:
        if not text or not text.strip():
            raise InputMissingError("Text is required for audio generation")

        logger.info(
            f"[AUDIO] {len(text)} chars ({language}, voice={voice}, speed={speed}) "
            f"-> client-side TTS"
        )
        return AudioResult(
            text=text,
            audio_url=None,
            message=FALLBACK_MESSAGE,
            fallback_to_client_tts=True,
        )
