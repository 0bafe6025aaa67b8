"""Score summaries derived from a ledger snapshot."""

from collections import Counter
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from buzzer.logic.types import LastScoringSplit, PlayerTeamPair


class PlayerScore(BaseModel):
    """One scoreboard row."""

    model_config = ConfigDict(frozen=True)

    player_id: int
    display_name: str
    team_id: int | None = None
    points: int
    buzz_counts: dict[int, int] = Field(default_factory=dict)  # point value -> times scored


def player_scores(
    splits: Mapping[PlayerTeamPair, LastScoringSplit],
    buzz_counts: Mapping[PlayerTeamPair, Counter[int]] | None = None,
) -> list[PlayerScore]:
    """Build scoreboard rows ordered by points descending, then display name."""
    rows = [
        PlayerScore(
            player_id=pair.player_id,
            display_name=entry.action.buzz.display_name,
            team_id=pair.team_id,
            points=entry.split.points,
            buzz_counts=dict(buzz_counts.get(pair, {})) if buzz_counts else {},
        )
        for pair, entry in splits.items()
    ]
    return sorted(rows, key=lambda row: (-row.points, row.display_name))


def team_scores(splits: Mapping[PlayerTeamPair, LastScoringSplit]) -> dict[int, int]:
    """Total points per team. Teamless players are left out."""
    totals: dict[int, int] = {}
    for pair, entry in splits.items():
        if pair.team_id is None:
            continue
        totals[pair.team_id] = totals.get(pair.team_id, 0) + entry.split.points
    return totals
