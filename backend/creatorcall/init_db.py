# backend/creatorcall/init_db.py
"""
Create tables and optionally seed demo data.

Usage:
    python -m creatorcall.init_db            # create tables
    python -m creatorcall.init_db --seed     # create tables and seed demo creators
"""

import argparse
from datetime import datetime, timedelta
import logging
from typing import Optional

from sqlalchemy.engine import Engine

from .core.timezone_utils import localize_for_creator, utc_now
from .database import Base, SessionLocal, engine as default_engine
from .models import Creator  # noqa: F401  (registers every table)
from .repositories import RecordStore, SqlAlchemyRecordStore

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {
        "username": "dwr.eth",
        "fid": 3,
        "display_name": "Dan Romero",
        "bio": (
            "Co-founder of Farcaster. Product strategy, protocol design, "
            "and building consumer crypto products."
        ),
        "profile_image": (
            "https://images.unsplash.com/photo-1560250097-0b93528c311a"
            "?ixlib=rb-4.0.3&auto=format&fit=crop&w=80&h=80"
        ),
    },
    {
        "username": "sarahc.eth",
        "fid": 1234,
        "display_name": "Sarah Chen",
        "bio": "Founder of CryptoUX. Product design and UX for web3 applications.",
        "profile_image": (
            "https://images.unsplash.com/photo-1573496359142-b8d87734a5a2"
            "?ixlib=rb-4.0.3&auto=format&fit=crop&w=80&h=80"
        ),
    },
    {
        "username": "alexdev.eth",
        "fid": 5678,
        "display_name": "Alex Thompson",
        "bio": "Senior Engineer at Base. Smart contract development and DeFi protocols.",
        "profile_image": (
            "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d"
            "?ixlib=rb-4.0.3&auto=format&fit=crop&w=80&h=80"
        ),
    },
]

DEMO_CREATORS = [
    {
        "title": "Co-founder, Farcaster",
        "rate": 20000,
        "duration": 30,
        "category": "founders",
        "timezone": "America/Los_Angeles",
    },
    {
        "title": "Founder, CryptoUX",
        "rate": 15000,
        "duration": 45,
        "category": "designers",
        "timezone": "America/New_York",
    },
    {
        "title": "Senior Engineer, Base",
        "rate": 18000,
        "duration": 60,
        "category": "developers",
        "timezone": "America/New_York",
    },
]

# (creator index, days from today, local hour)
DEMO_SLOTS = [(0, 1, 9), (0, 1, 14), (1, 2, 10), (1, 2, 15)]


def create_tables(bind: Optional[Engine] = None) -> None:
    Base.metadata.create_all(bind=bind or default_engine)
    logger.info("Database tables created")


def seed_demo_data(store: RecordStore, today: Optional[datetime] = None) -> int:
    """
    Insert demo users, creators and upcoming slots.

    Skips seeding when the first demo user already exists.

    Returns:
        Number of creators created
    """
    if store.get_user_by_fid(DEMO_USERS[0]["fid"]) is not None:
        logger.info("Demo data already present, skipping seed")
        return 0

    base_day = (today or utc_now()).replace(hour=0, minute=0, second=0, microsecond=0)
    creators = []
    with store.transaction():
        for user_fields, creator_fields in zip(DEMO_USERS, DEMO_CREATORS):
            user = store.create_user(**user_fields)
            creators.append(store.create_creator(user_id=user.id, is_active=True, **creator_fields))

        for creator_index, days, hour in DEMO_SLOTS:
            creator = creators[creator_index]
            local_start = (base_day + timedelta(days=days, hours=hour)).replace(tzinfo=None)
            start = localize_for_creator(local_start, creator)
            store.create_time_slot(
                creator_id=creator.id,
                start_time=start,
                end_time=start + timedelta(minutes=creator.duration),
                is_available=True,
            )

    logger.info(f"Seeded {len(creators)} demo creators and {len(DEMO_SLOTS)} slots")
    return len(creators)


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialize the creatorcall database")
    parser.add_argument("--seed", action="store_true", help="Seed demo creators and slots")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    create_tables()
    if args.seed:
        db = SessionLocal()
        try:
            seed_demo_data(SqlAlchemyRecordStore(db))
        finally:
            db.close()


if __name__ == "__main__":
    main()
