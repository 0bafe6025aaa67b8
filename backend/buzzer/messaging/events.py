"""Outbound event models.

The router and the reader command handler return these to describe what the
caller should broadcast. They carry only plain identifiers and values.
"""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from buzzer.logic.scoreboard import PlayerScore


class EventType(StrEnum):
    """Types of tracker events."""

    PROMPT_PLAYER = "prompt_player"
    PLAYER_WITHDREW = "player_withdrew"
    QUEUE_CLEARED = "queue_cleared"
    GAME_STARTED = "game_started"
    GAME_ENDED = "game_ended"
    READER_CHANGED = "reader_changed"
    SCORES = "scores"
    ERROR = "error"


class ErrorCode(StrEnum):
    NO_GAME = "no_game"
    READER_CONFLICT = "reader_conflict"
    CAPACITY_REACHED = "capacity_reached"
    NOTHING_TO_UNDO = "nothing_to_undo"


class TrackerEvent(BaseModel):
    """Base class for all tracker events."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    channel_id: int


class PromptPlayerEvent(TrackerEvent):
    """A player is now first in line and should answer."""

    type: Literal[EventType.PROMPT_PLAYER] = EventType.PROMPT_PLAYER
    player_id: int


class PlayerWithdrewEvent(TrackerEvent):
    """A player withdrew and nobody else is waiting to be prompted."""

    type: Literal[EventType.PLAYER_WITHDREW] = EventType.PLAYER_WITHDREW
    player_id: int


class QueueClearedEvent(TrackerEvent):
    """Nobody is eligible to answer; status displays should reset."""

    type: Literal[EventType.QUEUE_CLEARED] = EventType.QUEUE_CLEARED


class GameStartedEvent(TrackerEvent):
    type: Literal[EventType.GAME_STARTED] = EventType.GAME_STARTED
    reader_id: int


class GameEndedEvent(TrackerEvent):
    type: Literal[EventType.GAME_ENDED] = EventType.GAME_ENDED


class ReaderChangedEvent(TrackerEvent):
    type: Literal[EventType.READER_CHANGED] = EventType.READER_CHANGED
    reader_id: int


class ScoresEvent(TrackerEvent):
    """Scoreboard for the channel's game."""

    type: Literal[EventType.SCORES] = EventType.SCORES
    players: list[PlayerScore] = Field(default_factory=list)
    teams: dict[int, int] = Field(default_factory=dict)  # team_id -> points


class ErrorEvent(TrackerEvent):
    type: Literal[EventType.ERROR] = EventType.ERROR
    code: ErrorCode
    message: str
