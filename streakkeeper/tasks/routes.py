from fastapi import APIRouter, Depends, Form
from sqlalchemy.orm import Session

from streakkeeper.core.deps import get_gateway
from streakkeeper.db.session import get_db
from streakkeeper.history.aggregator import task_to_dict
from streakkeeper.tasks.assignment import complete_task, link_task_message, request_task

router = APIRouter(prefix="/tasks", tags=["tasks"], dependencies=[Depends(get_gateway)])


@router.post("/{user_id}/request")
def request_new_task(
    user_id: int,
    message_ref: int | None = Form(None),
    db: Session = Depends(get_db),
):
    """
    New random task, or the unfinished one when it exists (created=false):
    the gateway then points the user at task.message_ref instead.
    """
    assignment = request_task(db, user_id, message_ref=message_ref)
    return {"created": assignment.created, "task": task_to_dict(assignment.task)}


@router.post("/{user_id}/complete")
def complete(user_id: int, db: Session = Depends(get_db)):
    result = complete_task(db, user_id)
    return {"points": result.points, "task": task_to_dict(result.task)}


@router.post("/{user_id}/{task_id}/message")
def link_message(
    user_id: int,
    task_id: int,
    message_ref: int = Form(...),
    db: Session = Depends(get_db),
):
    return task_to_dict(link_task_message(db, user_id, task_id, message_ref))
