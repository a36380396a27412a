"""Audio guide generation (client-side TTS fallback)."""

from .service import FALLBACK_MESSAGE, AudioGenerationService, AudioResult

__all__ = ["FALLBACK_MESSAGE", "AudioGenerationService", "AudioResult"]
