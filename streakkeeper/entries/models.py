from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, String, true

from streakkeeper.db.base import Base


class Entry(Base):
    """Daily check-in note with a 1-10 self rating."""

    __tablename__ = "entries"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(BigInteger, nullable=False, index=True)

    # Provisionally private until the user picks public/private
    is_public = Column(Boolean, nullable=False, default=False)
    privacy_pending = Column(Boolean, nullable=False, default=True, server_default=true())

    note = Column(Integer, nullable=False)
    text = Column(String(4096), nullable=False, default="")

    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
