"""Typed domain exceptions for collaborator misuse.

Engine operations never raise for game conditions (duplicate buzz, empty
queue, nothing to undo); they report those through return values. The
exceptions here cover callers asking for something the surrounding layers
cannot provide, and are converted to ErrorEvent responses at the command
boundary.
"""


class BuzzerError(Exception):
    """Base exception for the buzzer score tracker."""


class GameCapacityError(BuzzerError):
    """The registry already tracks the configured maximum number of games."""

    def __init__(self, max_games: int) -> None:
        self.max_games = max_games
        super().__init__(f"cannot track more than {max_games} games")


class ReaderConflictError(BuzzerError):
    """A game in the channel already has a different reader.

    Attributes:
        channel_id: Channel the game lives in.
        reader_id: The reader currently running the game.

    """

    def __init__(self, *, channel_id: int, reader_id: int) -> None:
        self.channel_id = channel_id
        self.reader_id = reader_id
        super().__init__(f"channel {channel_id} is already being read by {reader_id}")
