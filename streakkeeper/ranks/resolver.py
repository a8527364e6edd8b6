"""
Rank resolution: elapsed days of a journey -> (threshold, label).

The tier matched by elapsed days is shifted by ``offset`` (0 = current,
1 = next) and both threshold and label are those of the shifted tier.

Policy when the requested offset runs past the last tier (user already at the
top asking for the next rank): the index is clamped to the last tier, so a user
already on the top tier gets that tier back. Use ``RankTable.is_top_tier`` to
tell the user they hold the max rank.
"""
from datetime import datetime
from typing import NamedTuple

from streakkeeper.core import clock
from streakkeeper.ranks.table import RankTable


class Rank(NamedTuple):
    threshold: int
    label: str


# Rank system unknown/unset or every threshold already passed
NO_RANK = Rank(0, "")

CURRENT = 0
NEXT = 1


def resolve_rank(
    table: RankTable,
    start: datetime,
    rank_system: str | None,
    offset: int = CURRENT,
    now: datetime | None = None,
) -> Rank:
    ladder = table.get(rank_system)
    if ladder is None or not ladder.levels:
        return NO_RANK

    elapsed = clock.days_between(start, now or clock.now())
    last = len(ladder.levels) - 1

    for index, (threshold, _) in enumerate(ladder.levels):
        if elapsed <= threshold:
            target = min(max(index + offset, 0), last)
            return Rank(*ladder.levels[target])

    return NO_RANK
