"""
Profile / account summaries and community stats.
Everything is derived on read from journeys, entries and tasks.
"""
from datetime import datetime

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from streakkeeper.core import clock
from streakkeeper.core.errors import NotFoundError
from streakkeeper.entries.models import Entry
from streakkeeper.journey.lifecycle import get_latest_journey
from streakkeeper.journey.models import Journey
from streakkeeper.journey.scoring import calculate_score
from streakkeeper.ranks.resolver import CURRENT, NEXT, resolve_rank
from streakkeeper.ranks.table import RankTable
from streakkeeper.tasks.models import Task
from streakkeeper.users.models import User


def _count(db: Session, model, user_id: int, since: datetime | None = None) -> int:
    query = db.query(func.count(model.id)).filter(model.user_id == user_id)
    if since is not None:
        query = query.filter(model.created_at > since)
    return query.scalar() or 0


def _journey_totals(db: Session, user_id: int, now: datetime) -> dict:
    rows = db.query(Journey.start, Journey.end).filter(Journey.user_id == user_id).all()
    total_days = sum(clock.days_between(start, end or now) for start, end in rows)
    return {
        "journeys_count": len(rows),
        "total_days": total_days,
        "average_days": total_days // len(rows) if rows else 0,
    }


def _rank_block(table: RankTable, journey: Journey, now: datetime) -> dict:
    current = resolve_rank(table, journey.start, journey.rank_system, CURRENT, now=now)
    upcoming = resolve_rank(table, journey.start, journey.rank_system, NEXT, now=now)
    return {
        "rank_system": journey.rank_system,
        "current_rank": current.label,
        "next_rank": upcoming.label,
        "next_rank_days": upcoming.threshold,
        "max_rank": table.is_top_tier(journey.rank_system, current.threshold),
    }


def build_profile(
    db: Session, table: RankTable, user: User, now: datetime | None = None
) -> dict:
    """Public profile: latest journey, ranks, scores and lifetime totals."""
    now = now or clock.now()
    journey = get_latest_journey(db, user.id)
    if journey is None:
        raise NotFoundError("No journey yet.", reason="NO_JOURNEY")

    return {
        "user_id": user.id,
        "username": user.username,
        "total_score": calculate_score(db, user.id, all_journeys=True, now=now),
        "current_score": calculate_score(db, user.id, all_journeys=False, now=now),
        "journey_is_current": journey.is_open,
        "start": journey.start.isoformat(),
        "days": clock.days_between(journey.start, journey.end or now),
        **_rank_block(table, journey, now),
        "entries_since_start": _count(db, Entry, user.id, since=journey.start),
        "tasks_since_start": _count(db, Task, user.id, since=journey.start),
        **_journey_totals(db, user.id, now),
        "total_entries": _count(db, Entry, user.id),
        "total_tasks": _count(db, Task, user.id),
    }


def build_account(
    db: Session, table: RankTable, user_id: int, now: datetime | None = None
) -> dict:
    """Private account overview for the user themself."""
    now = now or clock.now()
    journey = get_latest_journey(db, user_id)
    if journey is None:
        raise NotFoundError("No journey yet.", reason="NO_JOURNEY")

    return {
        "user_id": user_id,
        "total_score": calculate_score(db, user_id, all_journeys=True, now=now),
        **_rank_block(table, journey, now),
        **_journey_totals(db, user_id, now),
        "entries_count": _count(db, Entry, user_id),
        "tasks_count": _count(db, Task, user_id),
    }


def count_tracked_users(db: Session) -> int:
    """Distinct users that ever started a journey."""
    return db.query(func.count(distinct(Journey.user_id))).scalar() or 0
