# backend/creatorcall/models/time_slot.py
"""
TimeSlot model.

A fixed interval a creator publishes for booking. ``is_available`` flips to
False when a booking claims the slot and back to True when that booking is
cancelled.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer

from ..database import Base


class TimeSlot(Base):
    __tablename__ = "time_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    creator_id = Column(Integer, ForeignKey("creators.id"), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="check_slot_time_order"),
        Index("ix_time_slots_creator_start", "creator_id", "start_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<TimeSlot {self.id}: creator={self.creator_id}, "
            f"{self.start_time}-{self.end_time}, available={self.is_available}>"
        )
