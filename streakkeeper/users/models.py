from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, String

from streakkeeper.db.base import Base


class User(Base):
    __tablename__ = "users"

    # Chat platform id, assigned by the gateway (not autoincrement)
    id = Column(BigInteger, primary_key=True, autoincrement=False)

    username = Column(String(255), nullable=False, default="", index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
