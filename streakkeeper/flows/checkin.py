"""
Daily check-in conversation.

  relapsed/survived?
    relapsed -> ask what happened (text) -> close journey
    survived -> note 1..10 (choice) -> entry text (text)
             -> entry created, provisionally private
             -> public/private (choice) -> privacy finalized

Guards: an open journey, and fewer than DAILY_CHECKIN_CAP entries since local
midnight. If the conversation dies between the entry text and the privacy
choice, the entry stays private with privacy_pending set.
"""
from sqlalchemy.orm import Session

from streakkeeper.core import clock
from streakkeeper.core.config import NOTE_MAX, NOTE_MIN
from streakkeeper.core.errors import NotFoundError, QuotaExceededError
from streakkeeper.entries.service import count_entries_since, create_entry, finalize_privacy, validate_note
from streakkeeper.flows.state import CHOICE, TEXT, Advance, Conversation, Finish, Prompt, Step
from streakkeeper.journey.lifecycle import close_journey, has_open_journey

RELAPSED = "relapsed"
SURVIVED = "survived"
PUBLIC = "public"
PRIVATE = "private"
NOTE_CHOICES = tuple(str(n) for n in range(NOTE_MIN, NOTE_MAX + 1))


def start(db: Session, user_id: int, ctx) -> Advance:
    if not has_open_journey(db, user_id):
        raise NotFoundError("Start a journey first.", reason="NO_JOURNEY")

    today = count_entries_since(db, user_id, clock.local_midnight(ctx.now))
    if today >= ctx.daily_checkin_cap:
        raise QuotaExceededError("You already checked in enough today.", reason="ALREADY_CHECKED_IN")

    return Advance(Step.AWAITING_RELAPSE_ANSWER, Prompt(CHOICE, "check-ask-relapsed", (RELAPSED, SURVIVED)))


def on_relapse_answer(db: Session, conv: Conversation, value: str, ctx) -> Advance:
    if value == RELAPSED:
        return Advance(Step.AWAITING_RELAPSE_NOTE, Prompt(TEXT, "relapsed"))
    return Advance(Step.AWAITING_NOTE, Prompt(CHOICE, "survived-ask-note", NOTE_CHOICES))


def on_relapse_note(db: Session, conv: Conversation, value: str, ctx) -> Finish:
    journey = close_journey(db, conv.user_id, value.strip(), now=ctx.now)
    return Finish(
        "RELAPSE_SAVED",
        "Relapse saved, you can start a new journey.",
        {"journey_id": journey.id, "days": clock.days_between(journey.start, journey.end)},
    )


def on_note(db: Session, conv: Conversation, value: str, ctx) -> Advance:
    conv.note = validate_note(value)
    return Advance(Step.AWAITING_ENTRY_TEXT, Prompt(TEXT, "survived-ask-entry"), {"note": conv.note})


def on_entry_text(db: Session, conv: Conversation, value: str, ctx) -> Advance:
    entry = create_entry(db, conv.user_id, conv.note, value.strip(), is_public=False, now=ctx.now)
    conv.entry_id = entry.id
    return Advance(
        Step.AWAITING_PRIVACY_CHOICE,
        Prompt(CHOICE, "survived-ask-public", (PUBLIC, PRIVATE)),
        {"entry_id": entry.id},
    )


def on_privacy(db: Session, conv: Conversation, value: str, ctx) -> Finish:
    entry = finalize_privacy(db, conv.user_id, conv.entry_id, value == PUBLIC)
    return Finish(
        "ENTRY_SAVED",
        "Check-in saved.",
        {
            "entry_id": entry.id,
            "note": entry.note,
            "text": entry.text,
            "is_public": entry.is_public,
            # where the user can read it back
            "command": "/profile" if entry.is_public else "/account",
        },
    )


HANDLERS = {
    Step.AWAITING_RELAPSE_ANSWER: on_relapse_answer,
    Step.AWAITING_RELAPSE_NOTE: on_relapse_note,
    Step.AWAITING_NOTE: on_note,
    Step.AWAITING_ENTRY_TEXT: on_entry_text,
    Step.AWAITING_PRIVACY_CHOICE: on_privacy,
}
