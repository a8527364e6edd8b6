"""
Task assignment.
Core rules:
  - Max DAILY_TASK_CAP tasks touched (updated_at) since local midnight
  - At most one undone task per user: an open one is handed back, not doubled
  - New tasks are drawn uniformly from the catalog
  - Completing flips is_done once and stamps updated_at; points are counted
    by the scoring engine, never stored as a running total
"""
import logging
import random
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from streakkeeper.core import clock
from streakkeeper.core.config import DAILY_TASK_CAP
from streakkeeper.core.errors import NotFoundError, QuotaExceededError
from streakkeeper.tasks.models import Task, TaskDefinition

logger = logging.getLogger(__name__)


@dataclass
class TaskAssignment:
    task: Task
    definition: TaskDefinition
    # False when an unfinished task was handed back instead of a new one
    created: bool


@dataclass
class CompletionResult:
    task: Task
    definition: TaskDefinition
    points: int


def get_undone_task(db: Session, user_id: int) -> Task | None:
    return (
        db.query(Task)
        .filter(Task.user_id == user_id, Task.is_done.is_(False))
        .order_by(Task.id)
        .first()
    )


def count_tasks_today(db: Session, user_id: int, now: datetime | None = None) -> int:
    now = now or clock.now()
    return (
        db.query(func.count(Task.id))
        .filter(
            Task.user_id == user_id,
            Task.updated_at >= clock.local_midnight(now),
            Task.updated_at < now,
        )
        .scalar()
    ) or 0


def request_task(
    db: Session,
    user_id: int,
    message_ref: int | None = None,
    now: datetime | None = None,
    rng: random.Random | None = None,
    daily_cap: int = DAILY_TASK_CAP,
) -> TaskAssignment:
    now = now or clock.now()

    done_today = count_tasks_today(db, user_id, now)
    if done_today >= daily_cap:
        logger.info("[TASK] quota user=%s today=%s cap=%s", user_id, done_today, daily_cap)
        raise QuotaExceededError("You already did enough tasks today.", reason="TASK_TOO_MUCH")

    pending = get_undone_task(db, user_id)
    if pending is not None:
        logger.info("[TASK] unfinished user=%s task=%s", user_id, pending.id)
        return TaskAssignment(task=pending, definition=pending.definition, created=False)

    definitions = db.query(TaskDefinition).order_by(TaskDefinition.id).all()
    if not definitions:
        raise NotFoundError("No tasks are configured.", reason="NO_TASKS")

    definition = (rng or random).choice(definitions)
    task = Task(
        user_id=user_id,
        task_ref=definition.id,
        message_ref=message_ref,
        is_done=False,
        created_at=now,
        updated_at=now,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("[TASK] assigned user=%s task=%s definition=%s", user_id, task.id, definition.prompt_key)
    return TaskAssignment(task=task, definition=definition, created=True)


def link_task_message(db: Session, user_id: int, task_id: int, message_ref: int) -> Task:
    """Remember which gateway message carries the task."""
    task = db.query(Task).filter(Task.id == task_id, Task.user_id == user_id).first()
    if task is None:
        raise NotFoundError("Task not found.", reason="NO_TASK")
    task.message_ref = message_ref
    db.commit()
    db.refresh(task)
    return task


def complete_task(db: Session, user_id: int, now: datetime | None = None) -> CompletionResult:
    task = get_undone_task(db, user_id)
    if task is None:
        raise NotFoundError("You have no unfinished task.", reason="NO_TASK")

    task.is_done = True
    task.updated_at = now or clock.now()
    db.commit()
    db.refresh(task)

    definition = task.definition
    logger.info("[TASK] done user=%s task=%s points=%s", user_id, task.id, definition.points)
    return CompletionResult(task=task, definition=definition, points=definition.points)
