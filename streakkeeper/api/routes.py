"""
Community-wide numbers for the /help message.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from streakkeeper.core.deps import get_gateway
from streakkeeper.db.session import get_db
from streakkeeper.history.profile import count_tracked_users

router = APIRouter(prefix="/api", tags=["api"], dependencies=[Depends(get_gateway)])


@router.get("/stats")
def stats(request: Request, db: Session = Depends(get_db)):
    return {
        "tracked_users": count_tracked_users(db),
        "rank_systems": len(request.app.state.rank_table),
        "started_at": request.app.state.started_at.isoformat(),
    }
