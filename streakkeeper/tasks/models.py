from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from streakkeeper.db.base import Base


class TaskDefinition(Base):
    """Catalog of assignable micro-tasks. Read-only to the engine."""

    __tablename__ = "task_definitions"

    id = Column(Integer, primary_key=True, index=True)
    points = Column(Integer, nullable=False, default=0)

    # Localization key of the task text, rendered by the gateway
    prompt_key = Column(String(128), nullable=False, unique=True)


class Task(Base):
    """
    A task handed to a user.

    Created undone; flipped to done exactly once. ``updated_at`` is the
    completion time once done and drives the current-journey scoring window.
    """

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(BigInteger, nullable=False, index=True)

    task_ref = Column(Integer, ForeignKey("task_definitions.id"), nullable=False)

    # Gateway message carrying the task, used to point the user back at it
    message_ref = Column(BigInteger, nullable=True)

    is_done = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, index=True)

    definition = relationship("TaskDefinition")
