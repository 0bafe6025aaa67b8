"""Turn chat text into buzz, withdraw and score intents."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

BUZZ_PATTERN = re.compile(r"^\s*bu?z+\s*$", re.IGNORECASE)
WITHDRAW_TEXT = "wd"
NO_PENALTY_TEXT = "no penalty"


@dataclass(frozen=True)
class BuzzIntent:
    pass


@dataclass(frozen=True)
class WithdrawIntent:
    pass


@dataclass(frozen=True)
class ScoreIntent:
    points: int


Intent = BuzzIntent | WithdrawIntent | ScoreIntent


def build_emoji_patterns(buzz_emojis: Iterable[str]) -> list[re.Pattern[str]]:
    """Compile one pattern per custom emoji name, e.g. ":buzz:" matches "<:buzz:1234>"."""
    return [re.compile(rf"^<{re.escape(emoji)}\d+>$") for emoji in buzz_emojis]


class MessageParser:
    """Classify a chat message.

    Only the reader can score, and only with one of the accepted point
    values (or "no penalty", which scores 0). Anyone's message can be a buzz
    or a withdrawal; whether it takes effect is up to the GameState.
    """

    def __init__(self, accepted_points: Iterable[int], buzz_emojis: Iterable[str] = ()) -> None:
        self._accepted_points = frozenset(accepted_points)
        self._emoji_patterns = build_emoji_patterns(buzz_emojis)

    def parse(self, content: str, *, is_reader: bool) -> Intent | None:
        if is_reader:
            score = self._parse_score(content)
            if score is not None:
                return score

        if self.is_buzz(content):
            return BuzzIntent()
        if content.strip().lower() == WITHDRAW_TEXT:
            return WithdrawIntent()
        return None

    def is_buzz(self, content: str) -> bool:
        return BUZZ_PATTERN.match(content) is not None or any(p.match(content) for p in self._emoji_patterns)

    def _parse_score(self, content: str) -> ScoreIntent | None:
        if content.strip() == NO_PENALTY_TEXT:
            return ScoreIntent(points=0)
        try:
            points = int(content)
        except ValueError:
            return None
        return ScoreIntent(points=points) if points in self._accepted_points else None
