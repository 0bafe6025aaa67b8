"""Apply chat messages to the channel's GameState."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from buzzer.messaging.events import PlayerWithdrewEvent, PromptPlayerEvent, QueueClearedEvent, TrackerEvent
from buzzer.messaging.parser import BuzzIntent, MessageParser, ScoreIntent, WithdrawIntent
from shared.logging import log_context

if TYPE_CHECKING:
    from buzzer.logic.game_state import GameState
    from buzzer.server.settings import BuzzerSettings
    from buzzer.session.manager import GameStateManager

logger = structlog.get_logger()


def prompt_next_player(channel_id: int, game: GameState) -> TrackerEvent:
    """Prompt whoever is next, or signal that nobody is left to answer."""
    next_player = game.try_get_next_player()
    if next_player is None:
        return QueueClearedEvent(channel_id=channel_id)
    return PromptPlayerEvent(channel_id=channel_id, player_id=next_player)


class MessageRouter:
    """Route chat messages from a channel into its game.

    Messages in channels without a running game are ignored. Each handled
    message runs under the game's lock so the follow-up "who is next" check
    sees the state the message produced.
    """

    def __init__(self, manager: GameStateManager, parser: MessageParser) -> None:
        self._manager = manager
        self._parser = parser

    @classmethod
    def from_settings(cls, manager: GameStateManager, settings: BuzzerSettings) -> MessageRouter:
        return cls(manager, MessageParser(settings.accepted_points, settings.buzz_emojis))

    def handle_message(
        self,
        channel_id: int,
        author_id: int,
        display_name: str,
        content: str,
        team_id: int | None = None,
    ) -> list[TrackerEvent]:
        game = self._manager.try_get(channel_id)
        if game is None:
            return []

        with log_context(channel_id=channel_id), game.transaction():
            intent = self._parser.parse(content, is_reader=game.reader_id == author_id)
            match intent:
                case ScoreIntent(points=points):
                    return self._handle_score(channel_id, game, points)
                case BuzzIntent():
                    return self._handle_buzz(channel_id, game, author_id, display_name, team_id)
                case WithdrawIntent():
                    return self._handle_withdraw(channel_id, game, author_id)
                case _:
                    return []

    @staticmethod
    def _handle_score(channel_id: int, game: GameState, points: int) -> list[TrackerEvent]:
        if game.try_get_next_player() is None:
            return []
        game.score_player(points)
        logger.info("reader scored buzz", points=points)
        return [prompt_next_player(channel_id, game)]

    @staticmethod
    def _handle_buzz(
        channel_id: int,
        game: GameState,
        player_id: int,
        display_name: str,
        team_id: int | None,
    ) -> list[TrackerEvent]:
        if not game.add_player(player_id, display_name, team_id):
            return []
        # only prompt when the buzz landed at the front of the eligible queue
        if game.try_get_next_player() == player_id:
            return [PromptPlayerEvent(channel_id=channel_id, player_id=player_id)]
        return []

    @staticmethod
    def _handle_withdraw(channel_id: int, game: GameState, player_id: int) -> list[TrackerEvent]:
        was_prompted = game.try_get_next_player() == player_id
        if not game.withdraw_player(player_id):
            return []

        next_player = game.try_get_next_player()
        if next_player is None:
            return [PlayerWithdrewEvent(channel_id=channel_id, player_id=player_id)]
        if was_prompted:
            return [PromptPlayerEvent(channel_id=channel_id, player_id=next_player)]
        return []
