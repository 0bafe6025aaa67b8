"""Reader commands: start, next, clear, undo, end and scoreboard.

Checking that the caller actually is the reader happens before these
handlers are invoked.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from buzzer.logic.exceptions import GameCapacityError, ReaderConflictError
from buzzer.logic.scoreboard import player_scores, team_scores
from buzzer.messaging.events import (
    ErrorCode,
    ErrorEvent,
    GameEndedEvent,
    GameStartedEvent,
    QueueClearedEvent,
    ReaderChangedEvent,
    ScoresEvent,
    TrackerEvent,
)
from buzzer.messaging.router import prompt_next_player

if TYPE_CHECKING:
    from collections.abc import Callable

    from buzzer.logic.game_state import GameState
    from buzzer.session.manager import GameStateManager

logger = structlog.get_logger()


def _no_game(channel_id: int) -> ErrorEvent:
    return ErrorEvent(channel_id=channel_id, code=ErrorCode.NO_GAME, message="no game is running in this channel")


class ReaderCommandHandler:
    def __init__(self, manager: GameStateManager) -> None:
        self._manager = manager

    def start(self, channel_id: int, reader_id: int) -> TrackerEvent:
        """Start a game with reader_id as the reader, or rejoin it if they already are."""
        try:
            game = self._manager.get_or_create(channel_id)
            with game.transaction():
                if game.reader_id is not None and game.reader_id != reader_id:
                    raise ReaderConflictError(channel_id=channel_id, reader_id=game.reader_id)
                game.reader_id = reader_id
        except ReaderConflictError as e:
            return ErrorEvent(channel_id=channel_id, code=ErrorCode.READER_CONFLICT, message=str(e))
        except GameCapacityError as e:
            logger.warning("game capacity reached", channel_id=channel_id, max_games=e.max_games)
            return ErrorEvent(channel_id=channel_id, code=ErrorCode.CAPACITY_REACHED, message=str(e))

        logger.info("game started", channel_id=channel_id, reader_id=reader_id)
        return GameStartedEvent(channel_id=channel_id, reader_id=reader_id)

    def set_new_reader(self, channel_id: int, reader_id: int) -> TrackerEvent:
        game = self._manager.try_get(channel_id)
        if game is None:
            return _no_game(channel_id)

        game.reader_id = reader_id
        logger.info("reader changed", channel_id=channel_id, reader_id=reader_id)
        return ReaderChangedEvent(channel_id=channel_id, reader_id=reader_id)

    def next(self, channel_id: int) -> TrackerEvent:
        """Move on to the next question; use when nobody answered correctly."""
        return self._reset_cycle(channel_id, lambda game: game.next_question())

    def clear(self, channel_id: int) -> TrackerEvent:
        """Restart the current question."""
        return self._reset_cycle(channel_id, lambda game: game.clear_current_round())

    def undo(self, channel_id: int) -> TrackerEvent:
        game = self._manager.try_get(channel_id)
        if game is None:
            return _no_game(channel_id)

        with game.transaction():
            player_id = game.undo()
            if player_id is None:
                return ErrorEvent(
                    channel_id=channel_id,
                    code=ErrorCode.NOTHING_TO_UNDO,
                    message="there is no score to undo",
                )
            logger.info("score undone", channel_id=channel_id, player_id=player_id)
            return prompt_next_player(channel_id, game)

    def end(self, channel_id: int) -> TrackerEvent:
        """End the game, clearing the scores and letting someone else read."""
        game = self._manager.try_get(channel_id)
        if game is None:
            return _no_game(channel_id)

        game.clear_all()
        self._manager.remove(channel_id)
        return GameEndedEvent(channel_id=channel_id)

    def scores(self, channel_id: int) -> TrackerEvent:
        game = self._manager.try_get(channel_id)
        if game is None:
            return _no_game(channel_id)

        with game.transaction():
            splits = game.get_last_scoring_splits()
            counts = game.get_point_counts()
        return ScoresEvent(
            channel_id=channel_id,
            players=player_scores(splits, counts),
            teams=team_scores(splits),
        )

    def _reset_cycle(self, channel_id: int, reset: Callable[[GameState], None]) -> TrackerEvent:
        game = self._manager.try_get(channel_id)
        if game is None:
            return _no_game(channel_id)

        reset(game)
        return QueueClearedEvent(channel_id=channel_id)
