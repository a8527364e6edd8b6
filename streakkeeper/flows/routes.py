from fastapi import APIRouter, Depends, Form
from sqlalchemy.orm import Session

from streakkeeper.core.deps import get_conversations, get_gateway
from streakkeeper.db.session import get_db
from streakkeeper.flows.manager import ConversationManager
from streakkeeper.flows.state import FlowKind

router = APIRouter(prefix="/flows", tags=["flows"], dependencies=[Depends(get_gateway)])


# Flow replies always come back as 200: rejections and aborts are part of the
# conversation, described by "status" and "reason".

@router.post("/sweep")
def sweep(conversations: ConversationManager = Depends(get_conversations)):
    """Drop expired conversations; the gateway tells these users no answer arrived."""
    return {"expired": conversations.sweep_expired()}


@router.post("/{user_id}/new")
def new_journey(
    user_id: int,
    db: Session = Depends(get_db),
    conversations: ConversationManager = Depends(get_conversations),
):
    return conversations.start(db, user_id, FlowKind.NEW_JOURNEY).to_dict()


@router.post("/{user_id}/check")
def check_in(
    user_id: int,
    db: Session = Depends(get_db),
    conversations: ConversationManager = Depends(get_conversations),
):
    return conversations.start(db, user_id, FlowKind.CHECKIN).to_dict()


@router.post("/{user_id}/answer")
def answer(
    user_id: int,
    value: str = Form(...),
    step: str = Form(...),
    db: Session = Depends(get_db),
    conversations: ConversationManager = Depends(get_conversations),
):
    return conversations.answer(db, user_id, value, step=step).to_dict()


@router.post("/{user_id}/cancel")
def cancel(user_id: int, conversations: ConversationManager = Depends(get_conversations)):
    return conversations.cancel(user_id).to_dict()
