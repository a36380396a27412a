"""Coordination between audio-guide players.

At most one spoken guide should play at a time. Players register a stop
callback with a shared ``AudioPlaybackRegistry``; a player that starts
calls ``request_exclusive`` so every other registered player stops.
Coordination is advisory: nothing is locked, and a player that never
registers is never stopped.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)

StopCallback = Callable[[], None]


class AudioPlaybackRegistry:
    """Maps player ids to their stop callbacks."""

    def __init__(self) -> None:
        self._players: dict[str, StopCallback] = {}

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._players

    def __len__(self) -> int:
        return len(self._players)

    def register(self, player_id: str, stop: StopCallback) -> None:
        """Register (or replace) the stop callback for ``player_id``."""
        self._players[player_id] = stop

    def unregister(self, player_id: str) -> None:
        self._players.pop(player_id, None)

    @contextmanager
    def registration(self, player_id: str, stop: StopCallback) -> Iterator["AudioPlaybackRegistry"]:
        """Keep ``player_id`` registered for the duration of the block."""
        self.register(player_id, stop)
        try:
            yield self
        finally:
            self.unregister(player_id)

    def _invoke(self, player_id: str, stop: StopCallback) -> None:
        try:
            stop()
        except Exception as e:
            logger.warning(f"[AUDIO] Error stopping player {player_id}: {e}")

    def stop(self, player_id: str) -> bool:
        """Stop one player; returns False if it is not registered."""
        stop = self._players.get(player_id)
        if stop is None:
            return False
        self._invoke(player_id, stop)
        return True

    def stop_all(self) -> None:
        # Copy: a callback may unregister its own player
        for player_id, stop in list(self._players.items()):
            self._invoke(player_id, stop)

    def request_exclusive(self, player_id: str) -> int:
        """Stop every player except ``player_id``; returns how many were stopped."""
        stopped = 0
        for other_id, stop in list(self._players.items()):
            if other_id == player_id:
                continue
            self._invoke(other_id, stop)
            stopped += 1
        return stopped
