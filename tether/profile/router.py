"""
Profile domain: router.

Routes:
  GET     /api/v1/user/find/get-all-users      Public summary of every user
  GET     /api/v1/user/get-user/{user_id}      One user (bearer)
  PUT     /api/v1/user/update-user/{user_id}   Update own profile (bearer, self only)
  DELETE  /api/v1/user/delete-user/{user_id}   Delete own account (bearer, self only)
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tether.auth.dependencies import get_current_user
from tether.database import get_db
from tether.profile import controller as ctrl
from tether.profile.schemas import UpdateUserRequest, UserEnvelope, UserSummaryListResponse
from tether_shared.models import Envelope
from tether_shared.models.user import CurrentUser

router = APIRouter(prefix="/user", tags=["profile"])


@router.get(
    "/find/get-all-users",
    response_model=UserSummaryListResponse,
    summary="List all users (public summary)",
    description="Unauthenticated. Returns id, username, email and created_at only.",
)
async def get_all_users(
    session: AsyncSession = Depends(get_db, scope="function"),
) -> UserSummaryListResponse:
    return await ctrl.get_all_users(session)


@router.get(
    "/get-user/{user_id}",
    response_model=UserEnvelope,
    summary="Get a user by id",
)
async def get_user(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),  # noqa: ARG001  auth gate only
    session: AsyncSession = Depends(get_db, scope="function"),
) -> UserEnvelope:
    return await ctrl.get_user(session, user_id)


@router.put(
    "/update-user/{user_id}",
    response_model=UserEnvelope,
    summary="Update own profile",
    description="Only username, email, bio, profile_image and password may be changed.",
)
async def update_user(
    user_id: str,
    body: UpdateUserRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db, scope="function"),
) -> UserEnvelope:
    return await ctrl.update_user(session, current_user, user_id, body)


@router.delete(
    "/delete-user/{user_id}",
    response_model=Envelope,
    summary="Delete own account",
)
async def delete_user(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db, scope="function"),
) -> Envelope:
    return await ctrl.delete_user(session, current_user, user_id)
