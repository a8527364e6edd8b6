import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from streakkeeper.core import clock
from streakkeeper.core.config import NOTE_MAX, NOTE_MIN
from streakkeeper.core.errors import ConflictError, NotFoundError, ValidationError
from streakkeeper.entries.models import Entry

logger = logging.getLogger(__name__)


def validate_note(note) -> int:
    """Coerce a 1-10 rating (int or numeric string)."""
    try:
        value = int(str(note).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"The note must be a number from {NOTE_MIN} to {NOTE_MAX}.", reason="INVALID_NOTE")
    if not NOTE_MIN <= value <= NOTE_MAX:
        raise ValidationError(f"The note must be a number from {NOTE_MIN} to {NOTE_MAX}.", reason="INVALID_NOTE")
    return value


def create_entry(
    db: Session,
    user_id: int,
    note: int,
    text: str,
    is_public: bool = False,
    now: datetime | None = None,
) -> Entry:
    """Persist a check-in entry; privacy stays pending until finalize_privacy()."""
    entry = Entry(
        user_id=user_id,
        is_public=is_public,
        privacy_pending=True,
        note=validate_note(note),
        text=text or "",
        created_at=now or clock.now(),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("[ENTRY] created user=%s entry=%s note=%s", user_id, entry.id, entry.note)
    return entry


def finalize_privacy(db: Session, user_id: int, entry_id: int, is_public: bool) -> Entry:
    """Settle the public/private choice of a fresh entry. Allowed once."""
    entry = (
        db.query(Entry)
        .filter(Entry.id == entry_id, Entry.user_id == user_id)
        .first()
    )
    if entry is None:
        raise NotFoundError("Entry not found.", reason="NO_ENTRY")
    if not entry.privacy_pending:
        raise ConflictError("Privacy was already chosen for this entry.", reason="PRIVACY_ALREADY_SET")

    entry.is_public = bool(is_public)
    entry.privacy_pending = False
    db.commit()
    db.refresh(entry)
    logger.info("[ENTRY] privacy user=%s entry=%s public=%s", user_id, entry.id, entry.is_public)
    return entry


def count_entries_since(db: Session, user_id: int, since: datetime) -> int:
    return (
        db.query(func.count(Entry.id))
        .filter(Entry.user_id == user_id, Entry.created_at >= since)
        .scalar()
    ) or 0
