# backend/creatorcall/services/user_service.py
"""
User Service

Sign-in get-or-create keyed by external social id, wallet address updates,
and lookups.
"""

import logging
from typing import Optional

from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..models.user import User
from ..repositories.record_store import RecordStore
from .base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    def __init__(self, store: RecordStore):
        super().__init__(store)

    def get_user(self, user_id: int) -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFoundException(f"User {user_id} not found")
        return user

    @BaseService.measure_operation("get_or_create_user")
    def get_or_create_user(
        self,
        username: str,
        fid: Optional[int] = None,
        display_name: Optional[str] = None,
        bio: Optional[str] = None,
        profile_image: Optional[str] = None,
    ) -> User:
        """
        Return the user linked to ``fid``, creating it on first sign-in.

        Without a fid the username is the identity.

        Raises:
            ConflictException: username already belongs to another account
        """
        existing = (
            self.store.get_user_by_fid(fid)
            if fid is not None
            else self.store.get_user_by_username(username)
        )
        if existing is not None:
            return existing

        if self.store.get_user_by_username(username) is not None:
            raise ConflictException(
                f"Username {username} is already taken",
                code="USERNAME_TAKEN",
                details={"username": username},
            )

        with self.transaction():
            user = self.store.create_user(
                username=username,
                fid=fid,
                display_name=display_name,
                bio=bio,
                profile_image=profile_image,
            )

        self.log_operation("create_user", user_id=user.id, fid=fid)
        return user

    @BaseService.measure_operation("update_wallet_address")
    def update_wallet_address(self, user_id: int, wallet_address: str) -> User:
        # Any chain's address format is accepted
        if not wallet_address or not wallet_address.strip():
            raise ValidationException(
                "walletAddress is required",
                details={"field": "walletAddress"},
            )

        with self.transaction():
            user = self.store.update_user(user_id, wallet_address=wallet_address)
        if user is None:
            raise NotFoundException(f"User {user_id} not found")

        logger.info(f"Wallet address updated for user {user_id}")
        return user
