"""
Journey lifecycle.
Core rules:
  - At most one open journey (end IS NULL) per user
  - start = now - declared streak days; rank system chosen afterwards
  - Relapse closes the open journey (end + note); journeys are never deleted
"""
import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from streakkeeper.core import clock
from streakkeeper.core.errors import ConflictError, NotFoundError, ValidationError
from streakkeeper.journey.models import Journey

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# QUERIES
# ---------------------------------------------------------------------------

def get_open_journey(db: Session, user_id: int) -> Journey | None:
    """Latest journey of the user that has no end."""
    return (
        db.query(Journey)
        .filter(Journey.user_id == user_id, Journey.end.is_(None))
        .order_by(Journey.id.desc())
        .first()
    )


def has_open_journey(db: Session, user_id: int) -> bool:
    return bool(db.query(
        db.query(Journey.id)
        .filter(Journey.user_id == user_id, Journey.end.is_(None))
        .exists()
    ).scalar())


def get_latest_journey(db: Session, user_id: int) -> Journey | None:
    """Open journey if any, otherwise the most recently started one."""
    journey = get_open_journey(db, user_id)
    if journey is not None:
        return journey
    return (
        db.query(Journey)
        .filter(Journey.user_id == user_id)
        .order_by(Journey.start.desc(), Journey.id.desc())
        .first()
    )


def list_journeys(db: Session, user_id: int) -> list[Journey]:
    return db.query(Journey).filter(Journey.user_id == user_id).order_by(Journey.id).all()


# ---------------------------------------------------------------------------
# MUTATIONS
# ---------------------------------------------------------------------------

def start_journey(
    db: Session, user_id: int, declared_days: int, now: datetime | None = None
) -> Journey:
    """Open a new journey that began *declared_days* ago."""
    if declared_days < 0:
        raise ValidationError("The streak length cannot be negative.", reason="INVALID_STREAK")

    if has_open_journey(db, user_id):
        raise ConflictError("A journey is already running.", reason="JOURNEY_ALREADY_RUNNING")

    now = now or clock.now()
    try:
        start = now - timedelta(days=declared_days)
    except OverflowError:
        raise ValidationError("That streak is longer than the calendar allows.", reason="INVALID_STREAK")

    journey = Journey(
        user_id=user_id,
        start=start,
        end=None,
        note="",
        created_at=now,
    )
    db.add(journey)
    db.commit()
    db.refresh(journey)
    logger.info("[JOURNEY] started user=%s journey=%s declared_days=%s", user_id, journey.id, declared_days)
    return journey


def assign_rank_system(db: Session, user_id: int, rank_system: str) -> Journey:
    journey = get_open_journey(db, user_id)
    if journey is None:
        raise NotFoundError("No running journey.", reason="NO_JOURNEY")

    journey.rank_system = rank_system.strip().lower()
    db.commit()
    db.refresh(journey)
    logger.info("[JOURNEY] rank system user=%s journey=%s system=%s", user_id, journey.id, journey.rank_system)
    return journey


def close_journey(db: Session, user_id: int, note: str, now: datetime | None = None) -> Journey:
    """Relapse: end the open journey now and keep the user's note."""
    journey = get_open_journey(db, user_id)
    if journey is None:
        raise NotFoundError("No running journey.", reason="NO_JOURNEY")

    journey.end = now or clock.now()
    journey.note = note or ""
    db.commit()
    db.refresh(journey)
    logger.info(
        "[JOURNEY] closed user=%s journey=%s days=%s",
        user_id, journey.id, clock.days_between(journey.start, journey.end),
    )
    return journey
