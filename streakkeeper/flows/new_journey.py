"""
New journey conversation:
  ask streak days (text) -> create journey -> ask rank system (choice) -> save.
"""
from sqlalchemy.orm import Session

from streakkeeper.core import clock
from streakkeeper.core.errors import ConflictError, ValidationError
from streakkeeper.flows.state import CHOICE, TEXT, Advance, Conversation, Finish, Prompt, Step
from streakkeeper.journey.lifecycle import assign_rank_system, has_open_journey, start_journey
from streakkeeper.ranks.resolver import CURRENT, resolve_rank


def start(db: Session, user_id: int, ctx) -> Advance:
    if has_open_journey(db, user_id):
        raise ConflictError("A journey is already running.", reason="JOURNEY_ALREADY_RUNNING")
    return Advance(Step.AWAITING_STREAK_DAYS, Prompt(TEXT, "new-ask-streak"))


def on_streak_days(db: Session, conv: Conversation, value: str, ctx) -> Advance | Finish:
    try:
        days = int(value.strip())
    except ValueError:
        raise ValidationError("Please answer with a number of days.", reason="NOT_A_NUMBER")

    journey = start_journey(db, conv.user_id, days, now=ctx.now)
    data = {"journey_id": journey.id, "start": journey.start.isoformat()}

    names = ctx.rank_table.names()
    if not names:
        return Finish("JOURNEY_SAVED", "Journey saved.", data)
    return Advance(Step.AWAITING_RANK_SYSTEM, Prompt(CHOICE, "new-ask-rank", tuple(names)), data)


def on_rank_system(db: Session, conv: Conversation, value: str, ctx) -> Finish:
    journey = assign_rank_system(db, conv.user_id, value)
    rank = resolve_rank(ctx.rank_table, journey.start, journey.rank_system, CURRENT, now=ctx.now)
    return Finish(
        "JOURNEY_SAVED",
        "Journey saved.",
        {
            "journey_id": journey.id,
            "rank": rank.label,
            "rank_system": journey.rank_system,
            "start": journey.start.isoformat(),
            "days": clock.days_between(journey.start, ctx.now),
        },
    )


HANDLERS = {
    Step.AWAITING_STREAK_DAYS: on_streak_days,
    Step.AWAITING_RANK_SYSTEM: on_rank_system,
}
