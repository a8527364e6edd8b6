"""
Default rank ladders.
Each ladder maps a day threshold to the label held while elapsed days <= threshold.
"""
import logging

from sqlalchemy.orm import Session

from streakkeeper.ranks.models import RankLevel, RankSystem

logger = logging.getLogger(__name__)

DEFAULT_RANK_SYSTEMS = {
    "classic": {
        "display_name": "Classic",
        "levels": {
            1: "First Step",
            3: "Beginner",
            7: "One Week Strong",
            14: "Two Weeks Clean",
            30: "Monthly Master",
            60: "Steady Mind",
            90: "Reboot Complete",
            180: "Half Year Hero",
            365: "Legend",
        },
    },
    "military": {
        "display_name": "Military",
        "levels": {
            2: "Recruit",
            7: "Private",
            14: "Corporal",
            30: "Sergeant",
            60: "Lieutenant",
            90: "Captain",
            180: "Major",
            270: "Colonel",
            365: "General",
        },
    },
    "mythic": {
        "display_name": "Mythic",
        "levels": {
            3: "Mortal",
            10: "Squire",
            21: "Knight",
            45: "Champion",
            90: "Demigod",
            200: "Titan",
            365: "Olympian",
        },
    },
}


def seed_rank_systems(db: Session, catalog: dict | None = None) -> int:
    """Insert missing ladders from *catalog*. Existing systems are left untouched. Returns created count."""
    catalog = DEFAULT_RANK_SYSTEMS if catalog is None else catalog
    existing = {name for (name,) in db.query(RankSystem.name).all()}

    created = 0
    for name, spec in catalog.items():
        key = name.strip().lower()
        if key in existing:
            continue
        system = RankSystem(name=key, display_name=spec.get("display_name", name))
        for days, label in spec["levels"].items():
            system.levels.append(RankLevel(days=int(days), label=label))
        db.add(system)
        created += 1

    if created:
        db.commit()
    logger.info("[SEED] rank systems created=%s existing=%s", created, len(existing))
    return created
