"""
Social graph domain: request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from tether.auth.models import User
from tether.auth.schemas import UserResponse
from tether.identifiers import parse_post_id, parse_user_id
from tether.social_graph import service as svc
from tether.social_graph.schemas import (
    BookmarkToggleResponse,
    FollowToggleResponse,
    FriendListResponse,
    NonFollowedListResponse,
)


async def user_views(session: AsyncSession, users: list[User]) -> list[UserResponse]:
    """Attach relationship lists to a batch of users, preserving order."""
    graphs = await svc.get_graphs(session, [u.id for u in users])
    return [UserResponse.from_user(u, graphs[u.id]) for u in users]


async def toggle_follow(
    session: AsyncSession,
    current_user_id: uuid.UUID,
    other_user_id: str,
) -> FollowToggleResponse:
    target_id = parse_user_id(other_user_id)
    result = await svc.toggle_follow(session, current_user_id, target_id)
    name = result.target.username
    if result.following:
        message = (
            f"You have successfully followed {name}. "
            f"{name} now has {result.follower_count} follower(s)."
        )
    else:
        message = (
            f"You have successfully unfollowed {name}. "
            f"{name} now has {result.follower_count} follower(s)."
        )
    return FollowToggleResponse(
        message=message,
        following=result.following,
        user_id=result.target.id,
        username=name,
        follower_count=result.follower_count,
    )


async def list_friends(session: AsyncSession, current_user_id: uuid.UUID) -> FriendListResponse:
    friends = await svc.get_friends(session, current_user_id)
    items = await user_views(session, friends)
    return FriendListResponse(
        message="Friends fetched successfully",
        count=len(items),
        friends=items,
    )


async def list_non_followed(
    session: AsyncSession,
    current_user_id: uuid.UUID,
) -> NonFollowedListResponse:
    users = await svc.get_non_followed_users(session, current_user_id)
    items = await user_views(session, users)
    return NonFollowedListResponse(
        message="Non-followed users fetched successfully",
        count=len(items),
        data=items,
    )


async def toggle_bookmark(
    session: AsyncSession,
    current_user_id: uuid.UUID,
    post_id: str,
) -> BookmarkToggleResponse:
    parsed = parse_post_id(post_id)
    result = await svc.toggle_bookmark(session, current_user_id, parsed)
    verb = "bookmarked" if result.bookmarked else "unbookmarked"
    return BookmarkToggleResponse(
        message=f"Post {parsed} {verb} by {result.user.username}.",
        bookmarked=result.bookmarked,
        post_id=parsed,
    )
