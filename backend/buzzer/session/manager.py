"""Channel to GameState registry."""

import threading

import structlog

from buzzer.logic.exceptions import GameCapacityError
from buzzer.logic.game_state import GameState

logger = structlog.get_logger()


class GameStateManager:
    """Own one independent GameState per channel.

    Games are created lazily on first reference and removed when they end.
    A single lock guards the mapping; each GameState serializes its own
    operations, so games in different channels never contend.
    """

    def __init__(self, max_games: int | None = None) -> None:
        self._games: dict[int, GameState] = {}  # channel_id -> GameState
        self._lock = threading.Lock()
        self._max_games = max_games

    @property
    def game_count(self) -> int:
        with self._lock:
            return len(self._games)

    def try_get(self, channel_id: int) -> GameState | None:
        with self._lock:
            return self._games.get(channel_id)

    def get_or_create(self, channel_id: int) -> GameState:
        """Return the channel's game, creating an empty one if none exists.

        Raises GameCapacityError when a new game would exceed max_games.
        """
        with self._lock:
            game = self._games.get(channel_id)
            if game is not None:
                return game

            if self._max_games is not None and len(self._games) >= self._max_games:
                raise GameCapacityError(self._max_games)

            game = GameState(channel_id=channel_id)
            self._games[channel_id] = game

        logger.info("game created", channel_id=channel_id)
        return game

    def remove(self, channel_id: int) -> bool:
        with self._lock:
            removed = self._games.pop(channel_id, None) is not None

        if removed:
            logger.info("game removed", channel_id=channel_id)
        return removed

    def list_all(self) -> list[tuple[int, GameState]]:
        """Return a snapshot of (channel_id, GameState) pairs for maintenance sweeps."""
        with self._lock:
            return list(self._games.items())
