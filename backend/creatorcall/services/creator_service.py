# backend/creatorcall/services/creator_service.py
"""
Creator Service

Creator profiles: listing, lookup with the owning user, opt-in creation and
updates. Creators are deactivated, never deleted.
"""

from dataclasses import dataclass
import logging
from typing import Any, List, Optional

from ..core.exceptions import NotFoundException, ValidationException
from ..core.timezone_utils import DEFAULT_TIMEZONE, is_valid_timezone
from ..models.creator import Creator
from ..models.user import User
from ..repositories.record_store import RecordStore
from .base import BaseService

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"title", "rate", "duration", "category", "is_active", "timezone"})


@dataclass
class CreatorWithUser:
    creator: Creator
    user: Optional[User]


class CreatorService(BaseService):
    """Service layer for creator profiles."""

    def __init__(self, store: RecordStore):
        super().__init__(store)

    @BaseService.measure_operation("list_creators")
    def list_creators(self, category: Optional[str] = None) -> List[CreatorWithUser]:
        """Active creators, optionally filtered by category, each with its user."""
        return [
            CreatorWithUser(creator=c, user=self.store.get_user(c.user_id))
            for c in self.store.list_creators(category)
        ]

    def get_creator(self, creator_id: int) -> CreatorWithUser:
        creator = self.store.get_creator(creator_id)
        if creator is None:
            raise NotFoundException(f"Creator {creator_id} not found")
        return CreatorWithUser(creator=creator, user=self.store.get_user(creator.user_id))

    @BaseService.measure_operation("create_creator")
    def create_creator(
        self,
        user_id: int,
        title: str,
        rate: int,
        duration: int,
        category: str,
        timezone: Optional[str] = None,
    ) -> Creator:
        """
        Opt a user in as a creator.

        Args:
            rate: Session price in minor currency units

        Raises:
            NotFoundException: User does not exist
            ValidationException: User already has a creator profile, or bad fields
        """
        if self.store.get_user(user_id) is None:
            raise NotFoundException(f"User {user_id} not found")
        if self.store.get_creator_by_user_id(user_id) is not None:
            raise ValidationException(
                "User already has a creator profile",
                code="CREATOR_EXISTS",
                details={"user_id": user_id},
            )

        fields = {
            "title": title,
            "rate": rate,
            "duration": duration,
            "category": category,
            "timezone": timezone or DEFAULT_TIMEZONE,
        }
        self._validate(fields)

        with self.transaction():
            creator = self.store.create_creator(user_id=user_id, is_active=True, **fields)

        self.log_operation("create_creator", creator_id=creator.id, user_id=user_id)
        return creator

    @BaseService.measure_operation("update_creator")
    def update_creator(self, creator_id: int, **fields: Any) -> Creator:
        """Update rate, active flag and other profile fields."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}",
                details={"fields": sorted(unknown)},
            )
        updates = {k: v for k, v in fields.items() if v is not None}
        self._validate(updates)

        with self.transaction():
            creator = self.store.update_creator(creator_id, **updates)
        if creator is None:
            raise NotFoundException(f"Creator {creator_id} not found")

        if updates.get("is_active") is False:
            logger.info(f"Creator {creator_id} deactivated")
        return creator

    @staticmethod
    def _validate(fields: dict) -> None:
        if "rate" in fields and fields["rate"] < 0:
            raise ValidationException("Rate must not be negative", details={"field": "rate"})
        if "duration" in fields and fields["duration"] <= 0:
            raise ValidationException(
                "Duration must be a positive number of minutes", details={"field": "duration"}
            )
        if "timezone" in fields and not is_valid_timezone(fields["timezone"]):
            raise ValidationException(
                f"Unknown timezone: {fields['timezone']}", details={"field": "timezone"}
            )
