from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, Integer, String, Text

from streakkeeper.db.base import Base


class Journey(Base):
    """
    One streak attempt.

    - open while ``end`` is NULL; at most one open journey per user
    - ``rank_system`` is chosen right after creation and may be NULL until then
    - closed on relapse (``end`` + ``note`` set), never deleted
    """

    __tablename__ = "journeys"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(BigInteger, nullable=False, index=True)

    # Key into the rank table (lowercase system name)
    rank_system = Column(String(64), nullable=True)

    start = Column(DateTime, nullable=False)
    end = Column(DateTime, nullable=True, index=True)

    # What the user wrote when reporting the relapse
    note = Column(Text, nullable=False, default="")

    created_at = Column(DateTime, nullable=False, default=datetime.now)

    @property
    def is_open(self) -> bool:
        return self.end is None
