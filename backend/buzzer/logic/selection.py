"""Next-player selection shared by the prompt path and the scoring path."""

from collections.abc import Iterable, Sequence

from buzzer.logic.types import Buzz


def find_next_eligible(queue: Sequence[Buzz], ineligible_teams: Iterable[int]) -> int | None:
    """
    Return the queue index of the first buzz whose team is still eligible.

    Teamless buzzes are checked against the player's own id. Returns None
    when every queued buzz belongs to an excluded team or the queue is empty.
    """
    excluded = frozenset(ineligible_teams)
    for index, buzz in enumerate(queue):
        if buzz.exclusion_key not in excluded:
            return index
    return None
