"""Tour persistence (Supabase PostgREST, in-memory)."""

from .service import (
    Found,
    InMemoryTourRepository,
    Lookup,
    NotFound,
    SupabaseTourRepository,
    TourRepository,
)

__all__ = [
    "Found",
    "InMemoryTourRepository",
    "Lookup",
    "NotFound",
    "SupabaseTourRepository",
    "TourRepository",
]
