"""Buzz queue and scoring engine for a single channel."""

from __future__ import annotations

import contextlib
import threading
from collections import Counter
from typing import TYPE_CHECKING

import structlog

from buzzer.logic.selection import find_next_eligible
from buzzer.logic.types import (
    Buzz,
    LastScoringSplit,
    PlayerTeamPair,
    ScoringAction,
    ScoringSplit,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = structlog.get_logger()


class GameState:
    """
    Turn queue, eligibility and scoring ledger for one competition.

    Players buzz into a FIFO queue. The reader scores whoever is first among
    the eligible entries: a positive score resolves the question and opens a
    fresh buzz window, a non-positive score excludes the player's team for the
    rest of the question. Every score is recorded on an undo stack with the
    snapshot needed to reverse it exactly.

    All operations are serialized on a per-instance re-entrant lock, so one
    GameState can be shared across threads. Failure paths return False or
    None and leave every field untouched.
    """

    def __init__(self, channel_id: int | None = None) -> None:
        self._lock = threading.RLock()
        self._log = logger.bind(channel_id=channel_id) if channel_id is not None else logger
        self._reader_id: int | None = None
        self._queue: list[Buzz] = []
        self._attempted: set[int] = set()
        self._ineligible_teams: set[int] = set()
        self._ledger: dict[PlayerTeamPair, ScoringSplit] = {}
        self._history: list[ScoringAction] = []

    @property
    def reader_id(self) -> int | None:
        with self._lock:
            return self._reader_id

    @reader_id.setter
    def reader_id(self, value: int | None) -> None:
        with self._lock:
            self._reader_id = value
            if value is not None:
                # the reader may not sit in the queue
                self._remove_from_queue(value)

    @property
    def queue(self) -> tuple[Buzz, ...]:
        with self._lock:
            return tuple(self._queue)

    @property
    def ineligible_teams(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._ineligible_teams)

    @property
    def has_history(self) -> bool:
        with self._lock:
            return bool(self._history)

    @contextlib.contextmanager
    def transaction(self) -> Iterator[GameState]:
        """Hold the lock across a compound sequence, e.g. buzz then check who is next."""
        with self._lock:
            yield self

    def add_player(self, player_id: int, display_name: str, team_id: int | None = None) -> bool:
        with self._lock:
            if player_id == self._reader_id or player_id in self._attempted:
                return False

            self._queue.append(Buzz(player_id=player_id, display_name=display_name, team_id=team_id))
            self._attempted.add(player_id)
            self._log.debug("player buzzed", player_id=player_id, team_id=team_id)
            return True

    def withdraw_player(self, player_id: int) -> bool:
        """Remove a queued buzz, releasing the player to buzz again this question."""
        with self._lock:
            if not self._remove_from_queue(player_id):
                return False
            self._log.debug("player withdrew", player_id=player_id)
            return True

    def try_get_next_player(self) -> int | None:
        """Return the id of the player to prompt, or None if nobody is eligible."""
        with self._lock:
            index = find_next_eligible(self._queue, self._ineligible_teams)
            return None if index is None else self._queue[index].player_id

    def score_player(self, points: int) -> None:
        """
        Score the player try_get_next_player would return.

        Does nothing when no eligible player is queued.
        """
        with self._lock:
            index = find_next_eligible(self._queue, self._ineligible_teams)
            if index is None:
                return

            buzz = self._queue[index]
            pair = buzz.pair
            previous_split = self._ledger.get(pair)
            self._history.append(
                ScoringAction(
                    buzz=buzz,
                    points=points,
                    queue=tuple(self._queue),
                    attempted=frozenset(self._attempted),
                    ineligible_teams=frozenset(self._ineligible_teams),
                    previous_split=previous_split,
                ),
            )

            del self._queue[index]
            self._ledger[pair] = (previous_split or ScoringSplit()).add(points)

            if points > 0:
                self._clear_cycle()
            else:
                self._ineligible_teams.add(buzz.exclusion_key)

            self._log.debug("player scored", player_id=buzz.player_id, team_id=buzz.team_id, points=points)

    def undo(self) -> int | None:
        """
        Reverse the most recent score and return the reinstated player's id.

        Returns None when there is nothing to undo.
        """
        with self._lock:
            if not self._history:
                return None

            action = self._history.pop()
            pair = action.buzz.pair
            if action.previous_split is None:
                self._ledger.pop(pair, None)
            else:
                self._ledger[pair] = action.previous_split

            self._queue = list(action.queue)
            self._attempted = set(action.attempted)
            self._ineligible_teams = set(action.ineligible_teams)

            self._log.debug("score undone", player_id=action.buzz.player_id, points=action.points)
            return action.buzz.player_id

    def clear_current_round(self) -> None:
        """Restart the current question without touching scores."""
        with self._lock:
            self._clear_cycle()

    def next_question(self) -> None:
        with self._lock:
            self._clear_cycle()

    def clear_all(self) -> None:
        """End the game: forget the reader, the scores and the undo history."""
        with self._lock:
            self._clear_cycle()
            self._ledger.clear()
            self._history.clear()
            self._reader_id = None
            self._log.debug("game state cleared")

    def get_last_scoring_splits(self) -> dict[PlayerTeamPair, LastScoringSplit]:
        """Return each pair's running total with the latest action that touched it."""
        with self._lock:
            last_actions: dict[PlayerTeamPair, ScoringAction] = {}
            for action in self._history:
                last_actions[action.buzz.pair] = action

            # every ledger entry was produced by an action still on the stack
            return {
                pair: LastScoringSplit(split=split, action=last_actions[pair]) for pair, split in self._ledger.items()
            }

    def get_point_counts(self) -> dict[PlayerTeamPair, Counter[int]]:
        """Return how many times each pair was scored with each point value."""
        with self._lock:
            counts: dict[PlayerTeamPair, Counter[int]] = {}
            for action in self._history:
                counts.setdefault(action.buzz.pair, Counter())[action.points] += 1
            return counts

    def _remove_from_queue(self, player_id: int) -> bool:
        for index, buzz in enumerate(self._queue):
            if buzz.player_id == player_id:
                del self._queue[index]
                self._attempted.discard(player_id)
                return True
        return False

    def _clear_cycle(self) -> None:
        self._queue.clear()
        self._attempted.clear()
        self._ineligible_teams.clear()
