"""
History views over a user's journeys, entries and tasks.

- list_entries: fixed-size pages of entries, oldest first
- build_activity_stream: one chronological stream of everything
- export_user_data: the stream plus the raw rows, for download
"""
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from streakkeeper.core.config import ENTRIES_PAGE_SIZE
from streakkeeper.core.errors import ValidationError
from streakkeeper.entries.models import Entry
from streakkeeper.journey.models import Journey
from streakkeeper.tasks.models import Task

ENTRY_SCOPES = ("all", "public", "private")


# ======================================================
# SERIALIZERS
# ======================================================

def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def journey_to_dict(journey: Journey) -> dict:
    return {
        "id": journey.id,
        "rank_system": journey.rank_system,
        "start": _iso(journey.start),
        "end": _iso(journey.end),
        "note": journey.note,
        "created_at": _iso(journey.created_at),
    }


def entry_to_dict(entry: Entry) -> dict:
    return {
        "id": entry.id,
        "is_public": entry.is_public,
        "privacy_pending": entry.privacy_pending,
        "note": entry.note,
        "text": entry.text,
        "created_at": _iso(entry.created_at),
    }


def task_to_dict(task: Task) -> dict:
    definition = task.definition
    return {
        "id": task.id,
        "task_ref": task.task_ref,
        "prompt_key": definition.prompt_key if definition else None,
        "points": definition.points if definition else 0,
        "message_ref": task.message_ref,
        "is_done": task.is_done,
        "created_at": _iso(task.created_at),
        "updated_at": _iso(task.updated_at),
    }


# ======================================================
# ENTRY PAGINATION
# ======================================================

@dataclass
class EntryPage:
    items: list[Entry]
    total: int
    page: int
    page_size: int
    has_next: bool
    has_previous: bool

    @property
    def max_page(self) -> int:
        return max(1, -(-self.total // self.page_size))

    def to_dict(self) -> dict:
        return {
            "items": [entry_to_dict(e) for e in self.items],
            "total": self.total,
            "page": self.page,
            "page_size": self.page_size,
            "max_page": self.max_page,
            "has_next": self.has_next,
            "has_previous": self.has_previous,
        }


def list_entries(
    db: Session,
    user_id: int,
    scope: str = "all",
    page: int = 1,
    page_size: int = ENTRIES_PAGE_SIZE,
) -> EntryPage:
    if scope not in ENTRY_SCOPES:
        raise ValidationError(f"Unknown entry scope {scope!r}.", reason="INVALID_SCOPE")
    if page < 1 or page_size < 1:
        raise ValidationError("Pages start at 1.", reason="INVALID_PAGE")

    filters = [Entry.user_id == user_id]
    if scope == "public":
        filters.append(Entry.is_public.is_(True))
    elif scope == "private":
        filters.append(Entry.is_public.is_(False))

    total = db.query(func.count(Entry.id)).filter(*filters).scalar() or 0
    items = (
        db.query(Entry)
        .filter(*filters)
        .order_by(Entry.created_at, Entry.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return EntryPage(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        has_next=page * page_size < total,
        has_previous=page > 1,
    )


# ======================================================
# ACTIVITY STREAM
# ======================================================

@dataclass
class Activity:
    created_at: datetime
    kind: str  # journey | entry | task
    payload: dict

    def to_dict(self) -> dict:
        return {"created_at": _iso(self.created_at), "kind": self.kind, "payload": self.payload}


def _user_rows(db: Session, user_id: int):
    journeys = db.query(Journey).filter(Journey.user_id == user_id).order_by(Journey.id).all()
    entries = db.query(Entry).filter(Entry.user_id == user_id).order_by(Entry.id).all()
    tasks = db.query(Task).filter(Task.user_id == user_id).order_by(Task.id).all()
    return journeys, entries, tasks


def _merge(journeys, entries, tasks) -> list[Activity]:
    activities = [Activity(j.created_at, "journey", journey_to_dict(j)) for j in journeys]
    activities += [Activity(e.created_at, "entry", entry_to_dict(e)) for e in entries]
    activities += [Activity(t.created_at, "task", task_to_dict(t)) for t in tasks]
    # sorted() is stable: ties keep journey, entry, task order
    return sorted(activities, key=lambda a: a.created_at)


def build_activity_stream(db: Session, user_id: int) -> list[Activity]:
    return _merge(*_user_rows(db, user_id))


def export_user_data(db: Session, user_id: int) -> dict:
    journeys, entries, tasks = _user_rows(db, user_id)
    return {
        "activity": [a.to_dict() for a in _merge(journeys, entries, tasks)],
        "journeys": [journey_to_dict(j) for j in journeys],
        "entries": [entry_to_dict(e) for e in entries],
        "tasks": [task_to_dict(t) for t in tasks],
    }
