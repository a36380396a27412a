"""Tour progress for a single viewing session.

Not persisted. Once a tour is started the current stop index stays within
``[0, total_stops - 1]`` and the visited set only grows.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass
class TourProgress:
    """Where the visitor is in the tour and which stops they have seen."""

    total_stops: int = 0
    current_stop: int = 0
    visited_stops: set[int] = field(default_factory=set)
    is_active: bool = False
    start_time: Optional[datetime] = None

    def start(self, total_stops: int | None = None) -> None:
        """Begin the tour at the first stop."""
        if total_stops is not None:
            self.total_stops = total_stops
        if self.total_stops < 1:
            raise ValueError("Cannot start a tour with no stops")
        self.is_active = True
        self.current_stop = 0
        # A restart with fewer stops keeps only indices that still exist
        self.visited_stops = {i for i in self.visited_stops if i < self.total_stops}
        self.visited_stops.add(0)
        self.start_time = datetime.now(timezone.utc)

    def go_to(self, stop_index: int) -> None:
        """Jump to ``stop_index`` and mark it visited."""
        if not self.is_active:
            raise RuntimeError("Tour has not been started")
        if not 0 <= stop_index < self.total_stops:
            raise IndexError(f"Stop {stop_index} out of range 0..{self.total_stops - 1}")
        self.current_stop = stop_index
        self.visited_stops.add(stop_index)

    def next(self) -> bool:
        """Advance one stop; returns False at the last stop."""
        if self.current_stop >= self.total_stops - 1:
            return False
        self.go_to(self.current_stop + 1)
        return True

    def previous(self) -> bool:
        """Go back one stop; returns False at the first stop."""
        if self.current_stop <= 0:
            return False
        self.go_to(self.current_stop - 1)
        return True

    @property
    def is_complete(self) -> bool:
        return self.total_stops > 0 and len(self.visited_stops) == self.total_stops

    @property
    def completion(self) -> float:
        """Fraction of stops visited, 0.0 to 1.0."""
        if self.total_stops == 0:
            return 0.0
        return len(self.visited_stops) / self.total_stops
