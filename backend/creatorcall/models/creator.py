# backend/creatorcall/models/creator.py
"""
Creator model.

A Creator is a user's bookable offering. One creator per user; creators are
soft-deactivated through ``is_active`` and never hard-deleted.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, String

from ..database import Base


class Creator(Base):
    __tablename__ = "creators"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    title = Column(String(255), nullable=False)
    rate = Column(Integer, nullable=False, comment="Price per session in minor currency units")
    duration = Column(Integer, nullable=False, comment="Session length in minutes")
    category = Column(String(100), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    timezone = Column(String(64), nullable=False, default="UTC")

    __table_args__ = (
        CheckConstraint("rate >= 0", name="check_creator_rate_non_negative"),
        CheckConstraint("duration > 0", name="check_creator_duration_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"<Creator {self.id}: user={self.user_id}, rate={self.rate}, "
            f"duration={self.duration}, active={self.is_active}>"
        )
