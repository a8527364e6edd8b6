"""
Domain error taxonomy.

Every error carries a ``reason`` code and a default English ``message`` so the
chat gateway can pick its own localized text; ``status_code`` is used when the
error reaches the HTTP layer.
"""


class StreakError(Exception):
    status_code = 400
    reason = "ERROR"
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None, reason: str | None = None):
        self.message = message or self.default_message
        if reason:
            self.reason = reason
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"reason": self.reason, "message": self.message}


class ConflictError(StreakError):
    status_code = 409
    reason = "CONFLICT"
    default_message = "This conflicts with the current state."


class NotFoundError(StreakError):
    status_code = 404
    reason = "NOT_FOUND"
    default_message = "Nothing was found."


class ValidationError(StreakError):
    status_code = 422
    reason = "INVALID_INPUT"
    default_message = "That answer is not valid."


class QuotaExceededError(StreakError):
    status_code = 429
    reason = "QUOTA_EXCEEDED"
    default_message = "Daily limit reached, come back tomorrow."


# ---------------------------------------------------------------------------
# Conversation aborts
# ---------------------------------------------------------------------------

class FlowAborted(StreakError):
    status_code = 409
    reason = "FLOW_ABORTED"


class FlowTimeoutError(FlowAborted):
    status_code = 408
    reason = "NO_ANSWER_RECEIVED"
    default_message = "No answer received, the command was dropped."


class FlowCanceledError(FlowAborted):
    reason = "COMMAND_CANCELED"
    default_message = "Command canceled."
