"""
Social graph domain: user-facing routes.

All routes prefixed /api/v1/user (same prefix as the profile router, with different
sub-paths; no conflict because path patterns don't overlap).

Routes:
  GET    /find/non-followed            Up to 5 users I don't follow
  GET    /find/friends                 Users I follow, resolved
  PUT    /toggle-follow/{other_user_id}  Follow ↔ unfollow
  PUT    /bookmark/{post_id}           Bookmark ↔ unbookmark
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tether.auth.dependencies import get_current_user
from tether.database import get_db
from tether.social_graph import controller as ctrl
from tether.social_graph.schemas import (
    BookmarkToggleResponse,
    FollowToggleResponse,
    FriendListResponse,
    NonFollowedListResponse,
)
from tether_shared.models.user import CurrentUser

router = APIRouter(prefix="/user", tags=["social-graph"])


# ── Discovery ─────────────────────────────────────────────────────────────────

@router.get(
    "/find/non-followed",
    response_model=NonFollowedListResponse,
    summary="Suggest users to follow",
    description="Up to 5 users the caller does not follow yet (excludes self).",
)
async def non_followed(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db, scope="function"),
) -> NonFollowedListResponse:
    return await ctrl.list_non_followed(session, current_user.id)


@router.get(
    "/find/friends",
    response_model=FriendListResponse,
    summary="List the users I follow",
)
async def friends(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db, scope="function"),
) -> FriendListResponse:
    return await ctrl.list_friends(session, current_user.id)


# ── Toggles ───────────────────────────────────────────────────────────────────

@router.put(
    "/toggle-follow/{other_user_id}",
    response_model=FollowToggleResponse,
    status_code=status.HTTP_200_OK,
    summary="Follow or unfollow a user",
    description="Follows the user if not followed yet, otherwise unfollows.",
)
async def toggle_follow(
    other_user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db, scope="function"),
) -> FollowToggleResponse:
    return await ctrl.toggle_follow(session, current_user.id, other_user_id)


@router.put(
    "/bookmark/{post_id}",
    response_model=BookmarkToggleResponse,
    status_code=status.HTTP_200_OK,
    summary="Bookmark or unbookmark a post",
)
async def toggle_bookmark(
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db, scope="function"),
) -> BookmarkToggleResponse:
    return await ctrl.toggle_bookmark(session, current_user.id, post_id)
