"""
Score computation.

  all history:      2 pts per day of every journey (end or now)
                    + points of every task handed out + 1 per entry
  current journey:  2 pts per day of the open journey
                    + points of tasks updated after its start
                    + 1 per entry created after its start

Read-only: nothing here writes to the session.
"""
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from streakkeeper.core import clock
from streakkeeper.core.config import POINTS_PER_DAY, POINTS_PER_ENTRY
from streakkeeper.entries.models import Entry
from streakkeeper.journey.lifecycle import get_open_journey
from streakkeeper.journey.models import Journey
from streakkeeper.tasks.models import Task, TaskDefinition


def _task_points(db: Session, user_id: int, since: datetime | None = None) -> int:
    query = (
        db.query(func.coalesce(func.sum(TaskDefinition.points), 0))
        .select_from(Task)
        .join(TaskDefinition, TaskDefinition.id == Task.task_ref)
        .filter(Task.user_id == user_id)
    )
    if since is not None:
        query = query.filter(Task.updated_at > since)
    return int(query.scalar() or 0)


def _entry_count(db: Session, user_id: int, since: datetime | None = None) -> int:
    query = db.query(func.count(Entry.id)).filter(Entry.user_id == user_id)
    if since is not None:
        query = query.filter(Entry.created_at > since)
    return int(query.scalar() or 0)


def calculate_score(
    db: Session, user_id: int, all_journeys: bool = True, now: datetime | None = None
) -> int:
    now = now or clock.now()
    score = 0

    if all_journeys:
        journeys = (
            db.query(Journey.start, Journey.end)
            .filter(Journey.user_id == user_id)
            .all()
        )
        for start, end in journeys:
            score += clock.days_between(start, end or now) * POINTS_PER_DAY
        score += _task_points(db, user_id)
        score += _entry_count(db, user_id) * POINTS_PER_ENTRY
        return score

    journey = get_open_journey(db, user_id)
    if journey is None:
        return 0

    score += clock.days_between(journey.start, now) * POINTS_PER_DAY
    score += _task_points(db, user_id, since=journey.start)
    score += _entry_count(db, user_id, since=journey.start) * POINTS_PER_ENTRY
    return score
