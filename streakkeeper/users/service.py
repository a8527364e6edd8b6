import logging

from sqlalchemy.orm import Session

from streakkeeper.core.errors import NotFoundError
from streakkeeper.users.models import User

logger = logging.getLogger(__name__)


def register_user(db: Session, user_id: int, username: str | None) -> User:
    """Create the user or refresh the stored username."""
    username = (username or "").strip().lstrip("@")
    user = db.get(User, user_id)
    if user is None:
        user = User(id=user_id, username=username)
        db.add(user)
        logger.info("[USER] registered user=%s username=%s", user_id, username)
    elif user.username != username:
        user.username = username
        logger.info("[USER] renamed user=%s username=%s", user_id, username)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("This account does not exist.", reason="NO_ACCOUNT")
    return user


def find_user_by_username(db: Session, username: str) -> User:
    """Latest user registered under *username* (a leading @ is ignored)."""
    name = (username or "").strip().lstrip("@")
    user = (
        db.query(User)
        .filter(User.username == name)
        .order_by(User.created_at.desc())
        .first()
    )
    if not name or user is None:
        raise NotFoundError("This account does not exist.", reason="NO_ACCOUNT")
    return user
