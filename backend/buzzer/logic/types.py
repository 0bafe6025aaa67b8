"""
Pydantic models for buzz queue and scoring data structures.

All models are frozen: a ScoringAction captures the engine state it needs to
reverse itself, so nothing it references may change after it is recorded.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Buzz(BaseModel):
    """A player's claim on the current question."""

    model_config = ConfigDict(frozen=True)

    player_id: int
    display_name: str
    team_id: int | None = None

    @property
    def exclusion_key(self) -> int:
        """Key blocked after a wrong answer: the team, or the player when teamless."""
        return self.team_id if self.team_id is not None else self.player_id

    @property
    def pair(self) -> PlayerTeamPair:
        return PlayerTeamPair(player_id=self.player_id, team_id=self.team_id)


class PlayerTeamPair(BaseModel):
    """Ledger key. The same player on two different teams gets two entries."""

    model_config = ConfigDict(frozen=True)

    player_id: int
    team_id: int | None = None


class ScoringSplit(BaseModel):
    """Cumulative points for one PlayerTeamPair over one game."""

    model_config = ConfigDict(frozen=True)

    points: int = 0

    def add(self, points: int) -> ScoringSplit:
        return ScoringSplit(points=self.points + points)


class ScoringAction(BaseModel):
    """
    One resolved scoring event plus the snapshot needed to undo it.

    Snapshots are taken before the score is applied. previous_split is None
    when the pair had no ledger entry yet, so undo can drop the entry instead
    of leaving a zero behind.
    """

    model_config = ConfigDict(frozen=True)

    buzz: Buzz
    points: int
    queue: tuple[Buzz, ...]
    attempted: frozenset[int]
    ineligible_teams: frozenset[int]
    previous_split: ScoringSplit | None = None


class LastScoringSplit(BaseModel):
    """Ledger export row: running total plus the latest action for the pair."""

    model_config = ConfigDict(frozen=True)

    split: ScoringSplit
    action: ScoringAction
