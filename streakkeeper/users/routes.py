from fastapi import APIRouter, Depends, Form, Query
from sqlalchemy.orm import Session

from streakkeeper.core.config import ENTRIES_PAGE_SIZE
from streakkeeper.core.deps import get_gateway, get_rank_table
from streakkeeper.db.session import get_db
from streakkeeper.history.aggregator import build_activity_stream, export_user_data, list_entries
from streakkeeper.history.profile import build_account, build_profile
from streakkeeper.ranks.table import RankTable
from streakkeeper.users.service import find_user_by_username, get_user, register_user

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(get_gateway)])


# ======================================================
# REGISTRATION (/start, /fix)
# ======================================================
@router.post("")
def register(
    user_id: int = Form(...),
    username: str = Form(""),
    db: Session = Depends(get_db),
):
    user = register_user(db, user_id, username)
    return {"id": user.id, "username": user.username}


# ======================================================
# PROFILE (public) / ACCOUNT (private)
# ======================================================
@router.get("/{user_id}/profile")
def profile(
    user_id: int,
    db: Session = Depends(get_db),
    table: RankTable = Depends(get_rank_table),
):
    return build_profile(db, table, get_user(db, user_id))


@router.get("/by-username/{username}/profile")
def profile_by_username(
    username: str,
    db: Session = Depends(get_db),
    table: RankTable = Depends(get_rank_table),
):
    return build_profile(db, table, find_user_by_username(db, username))


@router.get("/{user_id}/account")
def account(
    user_id: int,
    db: Session = Depends(get_db),
    table: RankTable = Depends(get_rank_table),
):
    return build_account(db, table, user_id)


# ======================================================
# HISTORY
# ======================================================
@router.get("/{user_id}/entries")
def entries(
    user_id: int,
    scope: str = Query("all"),
    page: int = Query(1),
    page_size: int = Query(ENTRIES_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return list_entries(db, user_id, scope=scope, page=page, page_size=page_size).to_dict()


@router.get("/{user_id}/activity")
def activity(user_id: int, db: Session = Depends(get_db)):
    return {"activity": [a.to_dict() for a in build_activity_stream(db, user_id)]}


@router.get("/{user_id}/export")
def export(user_id: int, db: Session = Depends(get_db)):
    """Everything the user ever logged, for the download button."""
    return export_user_data(db, user_id)
