"""
In-memory rank table.

Built once from the rank_systems/rank_levels rows (or a plain mapping) into
ordered ladders, then shared read-only by every conversation.
"""
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.orm import Session, selectinload

from streakkeeper.ranks.models import RankSystem


@dataclass(frozen=True)
class RankLadder:
    name: str
    display_name: str
    # (threshold_days, label), ascending by threshold
    levels: tuple[tuple[int, str], ...]

    @property
    def thresholds(self) -> tuple[int, ...]:
        return tuple(days for days, _ in self.levels)


class RankTable:
    def __init__(self, ladders: Iterable[RankLadder]):
        self._ladders: dict[str, RankLadder] = {}
        for ladder in ladders:
            ordered = tuple(sorted(ladder.levels, key=lambda level: level[0]))
            key = ladder.name.strip().lower()
            self._ladders[key] = RankLadder(key, ladder.display_name, ordered)

    @classmethod
    def from_mapping(cls, mapping: dict) -> "RankTable":
        """
        Build from ``{name: {"display_name": str, "levels": {days: label}}}``.
        A bare ``{name: {days: label}}`` is accepted too.
        """
        ladders = []
        for name, spec in mapping.items():
            levels = spec.get("levels", spec)
            display = spec.get("display_name", name) if "levels" in spec else name
            ladders.append(
                RankLadder(name, display, tuple((int(days), label) for days, label in levels.items()))
            )
        return cls(ladders)

    @classmethod
    def load(cls, db: Session) -> "RankTable":
        systems = (
            db.query(RankSystem)
            .options(selectinload(RankSystem.levels))
            .order_by(RankSystem.id)
            .all()
        )
        return cls(
            RankLadder(
                s.name,
                s.display_name,
                tuple((level.days, level.label) for level in s.levels),
            )
            for s in systems
        )

    def __len__(self) -> int:
        return len(self._ladders)

    def names(self) -> list[str]:
        return list(self._ladders)

    def get(self, name: str | None) -> RankLadder | None:
        """Case-insensitive lookup; None for unknown or unset names."""
        if not name:
            return None
        return self._ladders.get(name.strip().lower())

    def is_top_tier(self, name: str | None, threshold: int) -> bool:
        ladder = self.get(name)
        if not ladder or not ladder.levels:
            return False
        return threshold == ladder.levels[-1][0]

    def describe(self, name: str | None = None, preview: int = 3) -> list[dict]:
        """
        Ladder listing for display.
        With *name*: the full ladder of that system. Without: the first *preview*
        tiers of every system.
        """
        if name is not None:
            ladder = self.get(name)
            if ladder is None:
                return []
            selected = [(ladder, ladder.levels)]
        else:
            selected = [(ladder, ladder.levels[:preview]) for ladder in self._ladders.values()]

        return [
            {
                "name": ladder.name,
                "display_name": ladder.display_name,
                "levels": [{"days": days, "label": label} for days, label in levels],
                "truncated": len(levels) < len(ladder.levels),
            }
            for ladder, levels in selected
        ]
