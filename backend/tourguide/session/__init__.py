"""Client-side tour session state."""

from .audio import AudioPlaybackRegistry
from .progress import TourProgress

__all__ = ["AudioPlaybackRegistry", "TourProgress"]
