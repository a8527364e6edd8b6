"""
Default micro-task catalog.
Texts live in the gateway's locale files under ``prompt_key``.
"""
import logging

from sqlalchemy.orm import Session

from streakkeeper.tasks.models import TaskDefinition

logger = logging.getLogger(__name__)

DEFAULT_TASKS = [
    {"prompt_key": "task-cold-shower", "points": 3},
    {"prompt_key": "task-walk-30-minutes", "points": 3},
    {"prompt_key": "task-pushups-50", "points": 4},
    {"prompt_key": "task-read-20-pages", "points": 3},
    {"prompt_key": "task-meditate-10-minutes", "points": 2},
    {"prompt_key": "task-call-a-friend", "points": 2},
    {"prompt_key": "task-no-phone-hour", "points": 3},
    {"prompt_key": "task-clean-room", "points": 2},
    {"prompt_key": "task-journal-gratitude", "points": 1},
    {"prompt_key": "task-sleep-before-11", "points": 5},
]


def seed_task_definitions(db: Session, catalog: list[dict] | None = None) -> int:
    """Insert catalog rows whose prompt_key is missing. Returns created count."""
    catalog = DEFAULT_TASKS if catalog is None else catalog
    existing = {key for (key,) in db.query(TaskDefinition.prompt_key).all()}

    created = 0
    for item in catalog:
        if item["prompt_key"] in existing:
            continue
        db.add(TaskDefinition(prompt_key=item["prompt_key"], points=int(item["points"])))
        created += 1

    if created:
        db.commit()
    logger.info("[SEED] task definitions created=%s existing=%s", created, len(existing))
    return created
