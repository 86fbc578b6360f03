# backend/creatorcall/models/user.py
"""
User model.

Users are created on first sign-in (keyed by their external social id when
one is present), may attach a wallet address later, and are never deleted.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True)
    fid = Column(Integer, nullable=True, unique=True, comment="External social id")
    display_name = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    profile_image = Column(Text, nullable=True)
    wallet_address = Column(String(128), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.username}>"
