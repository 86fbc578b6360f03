# backend/creatorcall/routes/users.py
"""User API Routes (sign-in get-or-create, wallet address)."""

import asyncio

from fastapi import APIRouter, Depends

from ..core.exceptions import DomainException
from ..schemas.user import UserCreate, UserResponse, WalletAddressUpdate
from ..services.dependencies import get_user_service
from ..services.user_service import UserService
from ._errors import handle_domain_exception

router = APIRouter(tags=["users"])


@router.post("", response_model=UserResponse)
async def get_or_create_user(
    payload: UserCreate,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Return the user for this fid, creating it on first sign-in."""
    try:
        user = await asyncio.to_thread(
            user_service.get_or_create_user,
            username=payload.username,
            fid=payload.fid,
            display_name=payload.display_name,
            bio=payload.bio,
            profile_image=payload.profile_image,
        )
        return UserResponse.model_validate(user)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    try:
        user = await asyncio.to_thread(user_service.get_user, user_id)
        return UserResponse.model_validate(user)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{user_id}/wallet", response_model=UserResponse)
async def update_wallet_address(
    user_id: int,
    payload: WalletAddressUpdate,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    try:
        user = await asyncio.to_thread(
            user_service.update_wallet_address, user_id, payload.wallet_address
        )
        return UserResponse.model_validate(user)
    except DomainException as e:
        handle_domain_exception(e)
