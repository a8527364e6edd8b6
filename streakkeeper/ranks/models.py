from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from streakkeeper.db.base import Base


class RankSystem(Base):
    """A named ladder of milestones (e.g. "classic", "military")."""

    __tablename__ = "rank_systems"

    id = Column(Integer, primary_key=True, index=True)

    # Lookup key, stored lowercase
    name = Column(String(64), nullable=False, unique=True)
    display_name = Column(String(128), nullable=False)

    levels = relationship(
        "RankLevel",
        back_populates="rank_system",
        order_by="RankLevel.days",
        cascade="all, delete-orphan",
    )


class RankLevel(Base):
    """One tier: reached while elapsed days <= ``days``."""

    __tablename__ = "rank_levels"

    id = Column(Integer, primary_key=True, index=True)

    rank_system_id = Column(Integer, ForeignKey("rank_systems.id"), nullable=False, index=True)
    days = Column(Integer, nullable=False)
    label = Column(String(128), nullable=False)

    rank_system = relationship("RankSystem", back_populates="levels")

    __table_args__ = (
        UniqueConstraint("rank_system_id", "days", name="uq_rank_level_days"),
    )
