"""
Conversation manager.

Holds at most one in-flight conversation per user and drives it one answer at a
time. Rules:
  - steps run strictly in order; an answer tagged with another step, or a
    choice that was not offered, is ignored without advancing
  - every wait expires after ``timeout_seconds``; a late answer aborts the flow
  - conflict / not-found / validation / quota errors end the flow with a
    rejected reply; anything committed by earlier steps stays committed
  - persistence errors are not caught here
"""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from streakkeeper.core import clock
from streakkeeper.core.config import DAILY_CHECKIN_CAP, FLOW_TIMEOUT_SECONDS
from streakkeeper.core.errors import FlowAborted, FlowCanceledError, FlowTimeoutError, StreakError
from streakkeeper.flows import checkin, new_journey
from streakkeeper.flows.state import (
    ABORTED,
    DONE,
    IGNORED,
    REJECTED,
    WAITING,
    Advance,
    Conversation,
    FlowKind,
    FlowReply,
)
from streakkeeper.ranks.table import RankTable

logger = logging.getLogger(__name__)

STARTERS = {
    FlowKind.NEW_JOURNEY: new_journey.start,
    FlowKind.CHECKIN: checkin.start,
}

HANDLERS = {**new_journey.HANDLERS, **checkin.HANDLERS}


@dataclass
class FlowContext:
    rank_table: RankTable
    now: datetime
    daily_checkin_cap: int


class ConversationManager:
    def __init__(
        self,
        rank_table: RankTable,
        timeout_seconds: int = FLOW_TIMEOUT_SECONDS,
        daily_checkin_cap: int = DAILY_CHECKIN_CAP,
    ):
        self.rank_table = rank_table
        self.timeout = timedelta(seconds=timeout_seconds)
        self.daily_checkin_cap = daily_checkin_cap
        self._conversations: dict[int, Conversation] = {}
        # user id -> [lock, number of callers holding or waiting on it]
        self._user_locks: dict[int, list] = {}
        self._guard = threading.Lock()

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _lock_for(self, user_id: int):
        """Serialise work for one user; the lock is dropped once nobody uses it."""
        with self._guard:
            entry = self._user_locks.setdefault(user_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._user_locks[user_id]

    def _context(self, now: datetime | None) -> FlowContext:
        return FlowContext(self.rank_table, now or clock.now(), self.daily_checkin_cap)

    def _drop(self, user_id: int) -> Conversation | None:
        with self._guard:
            return self._conversations.pop(user_id, None)

    def _waiting(self, conv: Conversation, result: Advance, now: datetime) -> FlowReply:
        conv.step = result.step
        conv.prompt = result.prompt
        conv.expires_at = now + self.timeout
        return FlowReply(
            status=WAITING,
            flow=conv.flow.value,
            step=conv.step.value,
            prompt=conv.prompt,
            data=result.data,
        )

    def _failed(self, user_id: int, flow: FlowKind, exc: StreakError) -> FlowReply:
        self._drop(user_id)
        status = ABORTED if isinstance(exc, FlowAborted) else REJECTED
        logger.info("[FLOW] %s user=%s flow=%s reason=%s", status, user_id, flow.value, exc.reason)
        return FlowReply(status=status, flow=flow.value, reason=exc.reason, message=exc.message)

    def current(self, user_id: int) -> Conversation | None:
        with self._guard:
            return self._conversations.get(user_id)

    # ------------------------------------------------------------------
    # public surface
    # ------------------------------------------------------------------

    def start(self, db: Session, user_id: int, flow: FlowKind, now: datetime | None = None) -> FlowReply:
        """Begin *flow* for the user, replacing any conversation in progress."""
        flow = FlowKind(flow)
        ctx = self._context(now)

        with self._lock_for(user_id):
            previous = self._drop(user_id)
            if previous is not None:
                logger.info("[FLOW] replaced user=%s flow=%s step=%s", user_id, previous.flow.value, previous.step.value)

            try:
                result = STARTERS[flow](db, user_id, ctx)
            except StreakError as exc:
                return self._failed(user_id, flow, exc)

            conv = Conversation(
                user_id=user_id,
                flow=flow,
                step=result.step,
                prompt=result.prompt,
                expires_at=ctx.now + self.timeout,
            )
            with self._guard:
                self._conversations[user_id] = conv
            logger.info("[FLOW] started user=%s flow=%s", user_id, flow.value)
            return self._waiting(conv, result, ctx.now)

    def answer(
        self,
        db: Session,
        user_id: int,
        value: str,
        step: str,
        now: datetime | None = None,
    ) -> FlowReply:
        """
        Feed one answer (button value or text) to the user's conversation.

        *step* names the question being answered; a retried press for a step
        already passed is ignored instead of landing on the next question.
        """
        ctx = self._context(now)
        value = "" if value is None else str(value)

        with self._lock_for(user_id):
            conv = self.current(user_id)
            if conv is None:
                return FlowReply(status=IGNORED, reason="NO_ACTIVE_FLOW", message="Nothing is waiting for an answer.")

            if step != conv.step.value:
                logger.info("[FLOW] stale answer user=%s step=%s expected=%s", user_id, step, conv.step.value)
                return FlowReply(
                    status=IGNORED,
                    flow=conv.flow.value,
                    step=conv.step.value,
                    prompt=conv.prompt,
                    reason="STALE_ANSWER",
                    message="That answer belongs to an earlier question.",
                )

            try:
                if ctx.now >= conv.expires_at:
                    raise FlowTimeoutError()

                if not conv.prompt.accepts(value):
                    return FlowReply(
                        status=IGNORED,
                        flow=conv.flow.value,
                        step=conv.step.value,
                        prompt=conv.prompt,
                        reason="INVALID_CHOICE",
                        message="Please pick one of the offered options.",
                    )

                result = HANDLERS[conv.step](db, conv, value, ctx)
            except StreakError as exc:
                return self._failed(user_id, conv.flow, exc)

            if isinstance(result, Advance):
                return self._waiting(conv, result, ctx.now)

            self._drop(user_id)
            logger.info("[FLOW] finished user=%s flow=%s reason=%s", user_id, conv.flow.value, result.reason)
            return FlowReply(
                status=DONE,
                flow=conv.flow.value,
                reason=result.reason,
                message=result.message,
                data=result.data,
            )

    def cancel(self, user_id: int) -> FlowReply:
        with self._lock_for(user_id):
            conv = self.current(user_id)
            if conv is None:
                return FlowReply(status=IGNORED, reason="NO_ACTIVE_FLOW", message="Nothing to cancel.")
            return self._failed(user_id, conv.flow, FlowCanceledError())

    def sweep_expired(self, now: datetime | None = None) -> list[int]:
        """Drop conversations past their deadline; returns the affected user ids."""
        now = now or clock.now()
        with self._guard:
            expired = [uid for uid, conv in self._conversations.items() if now >= conv.expires_at]
            for uid in expired:
                del self._conversations[uid]
        for uid in expired:
            logger.info("[FLOW] expired user=%s", uid)
        return expired
