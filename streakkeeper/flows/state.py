"""
Conversation state.

A conversation is a small record keyed by user id: which flow, which step it
waits on, what was offered, and when it expires. Incoming answers are checked
against it instead of registering a callback per button.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class FlowKind(str, Enum):
    NEW_JOURNEY = "new_journey"
    CHECKIN = "checkin"


class Step(str, Enum):
    # new journey
    AWAITING_STREAK_DAYS = "awaiting_streak_days"
    AWAITING_RANK_SYSTEM = "awaiting_rank_system"
    # check-in
    AWAITING_RELAPSE_ANSWER = "awaiting_relapse_answer"
    AWAITING_RELAPSE_NOTE = "awaiting_relapse_note"
    AWAITING_NOTE = "awaiting_note"
    AWAITING_ENTRY_TEXT = "awaiting_entry_text"
    AWAITING_PRIVACY_CHOICE = "awaiting_privacy_choice"


CHOICE = "choice"
TEXT = "text"


@dataclass(frozen=True)
class Prompt:
    kind: str  # choice | text
    key: str   # message key the gateway renders
    options: tuple[str, ...] = ()

    def accepts(self, value: str) -> bool:
        return self.kind == TEXT or value in self.options

    def to_dict(self) -> dict:
        return {"kind": self.kind, "key": self.key, "options": list(self.options)}


@dataclass
class Conversation:
    user_id: int
    flow: FlowKind
    step: Step
    prompt: Prompt
    expires_at: datetime
    # check-in: rating picked at AWAITING_NOTE, entry created at AWAITING_ENTRY_TEXT
    note: int | None = None
    entry_id: int | None = None


@dataclass
class Advance:
    """Handler result: wait for the next answer."""
    step: Step
    prompt: Prompt
    data: dict = field(default_factory=dict)


@dataclass
class Finish:
    """Handler result: the flow reached a terminal state."""
    reason: str
    message: str
    data: dict = field(default_factory=dict)


# Reply statuses
WAITING = "waiting"
DONE = "done"
REJECTED = "rejected"
ABORTED = "aborted"
IGNORED = "ignored"


@dataclass
class FlowReply:
    status: str
    flow: str | None = None
    step: str | None = None
    prompt: Prompt | None = None
    reason: str | None = None
    message: str | None = None
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "flow": self.flow,
            "step": self.step,
            "prompt": self.prompt.to_dict() if self.prompt else None,
            "reason": self.reason,
            "message": self.message,
            "data": self.data,
        }
