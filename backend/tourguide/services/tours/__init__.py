"""Tour generation pipeline."""

from .service import TourOrchestrator, TourStage

__all__ = ["TourOrchestrator", "TourStage"]
