"""Shared fixtures: in-memory SQLite, a pinned clock and a small catalog."""
import os

# Must be set before streakkeeper.db.base is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402

from streakkeeper.db.base import Base, SessionLocal, engine  # noqa: E402
from streakkeeper.entries.models import Entry  # noqa: E402
from streakkeeper.journey.models import Journey  # noqa: E402
from streakkeeper.ranks.models import RankLevel, RankSystem  # noqa: E402, F401
from streakkeeper.ranks.table import RankTable  # noqa: E402
from streakkeeper.tasks.models import Task, TaskDefinition  # noqa: E402
from streakkeeper.users.models import User  # noqa: E402, F401

USER = 1001
OTHER_USER = 2002


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def now():
    """Noon on a Sunday; every time-dependent call in the suite pins to this."""
    return datetime(2026, 2, 15, 12, 0, 0)


@pytest.fixture
def rank_table():
    return RankTable.from_mapping({
        "Quarterly": {
            "display_name": "Quarterly",
            "levels": {30: "month", 7: "week", 90: "quarter"},
        },
        "duo": {1: "rookie", 3: "regular"},
    })


@pytest.fixture
def catalog(db):
    defs = [
        TaskDefinition(prompt_key="task-a", points=3),
        TaskDefinition(prompt_key="task-b", points=5),
    ]
    db.add_all(defs)
    db.commit()
    return defs


# ── row builders (bypass the services to set exact timestamps) ──────────

@pytest.fixture
def add_journey(db):
    def _add(start, end=None, user_id=USER, rank_system="quarterly", note=""):
        journey = Journey(
            user_id=user_id, start=start, end=end,
            rank_system=rank_system, note=note, created_at=start,
        )
        db.add(journey)
        db.commit()
        return journey
    return _add


@pytest.fixture
def add_entry(db):
    def _add(created_at, user_id=USER, note=5, text="fine", is_public=False):
        entry = Entry(
            user_id=user_id, note=note, text=text, is_public=is_public,
            privacy_pending=False, created_at=created_at,
        )
        db.add(entry)
        db.commit()
        return entry
    return _add


@pytest.fixture
def add_task(db):
    def _add(definition, created_at, updated_at=None, user_id=USER, is_done=True):
        task = Task(
            user_id=user_id, task_ref=definition.id, is_done=is_done,
            created_at=created_at, updated_at=updated_at or created_at,
        )
        db.add(task)
        db.commit()
        return task
    return _add


def days_ago(now, days, hours=0):
    return now - timedelta(days=days, hours=hours)
