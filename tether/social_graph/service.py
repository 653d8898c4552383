"""
Social graph domain: pure business logic (zero FastAPI imports).

State rules:
  follow:    cannot follow self; both users must exist; strict toggle
  bookmark:  post and caller must exist; strict toggle; only the caller's
             bookmark rows are written
  friends:   resolved in following order; ids that no longer resolve are
             skipped and logged
  discovery: everyone except self and current followees, capped

Concurrency: toggles lock the involved user rows (SELECT ... FOR UPDATE, in
sorted id order) inside the request transaction.  The unique constraints on
follows/bookmarks catch anything that slips past the locks; that surfaces as
ConcurrentGraphUpdate and is never retried here.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tether.auth.models import User
from tether.exceptions import (
    CannotFollowSelf,
    ConcurrentGraphUpdate,
    CurrentUserNotFound,
    FollowTargetsNotFound,
)
from tether.posts import service as post_svc
from tether.social_graph.constants import SUGGESTION_LIMIT
from tether.social_graph.models import Bookmark, Follow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserGraph:
    """Relationship lists of one user, each in insertion order."""

    followings: list[uuid.UUID] = field(default_factory=list)
    followers: list[uuid.UUID] = field(default_factory=list)
    bookmarked_posts: list[uuid.UUID] = field(default_factory=list)


@dataclass(frozen=True)
class FollowResult:
    following: bool
    target: User
    follower_count: int


@dataclass(frozen=True)
class BookmarkResult:
    bookmarked: bool
    user: User
    post_id: uuid.UUID


# ── Internal helpers ───────────────────────────────────────────────────────────

async def _lock_users(session: AsyncSession, *user_ids: uuid.UUID) -> dict[uuid.UUID, User]:
    """Load and row-lock the given users, always in ascending id order."""
    ordered = sorted(set(user_ids))
    result = await session.execute(
        sa.select(User).where(User.id.in_(ordered)).order_by(User.id).with_for_update()
    )
    return {user.id: user for user in result.scalars().all()}


async def _require_user(session: AsyncSession, user_id: uuid.UUID) -> User:
    result = await session.execute(sa.select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise CurrentUserNotFound()
    return user


async def _follow_exists(
    session: AsyncSession, follower_id: uuid.UUID, following_id: uuid.UUID
) -> bool:
    result = await session.execute(
        sa.select(sa.exists().where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        ))
    )
    return result.scalar_one()


async def _bookmark_exists(
    session: AsyncSession, user_id: uuid.UUID, post_id: uuid.UUID
) -> bool:
    result = await session.execute(
        sa.select(sa.exists().where(
            Bookmark.user_id == user_id,
            Bookmark.post_id == post_id,
        ))
    )
    return result.scalar_one()


async def count_followers(session: AsyncSession, user_id: uuid.UUID) -> int:
    result = await session.execute(
        sa.select(sa.func.count()).select_from(Follow).where(Follow.following_id == user_id)
    )
    return result.scalar_one()


async def following_ids(session: AsyncSession, user_id: uuid.UUID) -> list[uuid.UUID]:
    result = await session.execute(
        sa.select(Follow.following_id)
        .where(Follow.follower_id == user_id)
        .order_by(Follow.created_at.asc(), Follow.follow_id)
    )
    return list(result.scalars().all())


# ── Relationship lists ────────────────────────────────────────────────────────

async def get_graphs(
    session: AsyncSession,
    user_ids: Sequence[uuid.UUID],
) -> dict[uuid.UUID, UserGraph]:
    """Batch-load followings, followers and bookmarks for many users (3 queries)."""
    if not user_ids:
        return {}
    ids = list(set(user_ids))
    followings: dict[uuid.UUID, list[uuid.UUID]] = {uid: [] for uid in ids}
    followers: dict[uuid.UUID, list[uuid.UUID]] = {uid: [] for uid in ids}
    bookmarks: dict[uuid.UUID, list[uuid.UUID]] = {uid: [] for uid in ids}

    rows = await session.execute(
        sa.select(Follow.follower_id, Follow.following_id)
        .where(Follow.follower_id.in_(ids))
        .order_by(Follow.created_at.asc(), Follow.follow_id)
    )
    for follower_id, following_id in rows.all():
        followings[follower_id].append(following_id)

    rows = await session.execute(
        sa.select(Follow.following_id, Follow.follower_id)
        .where(Follow.following_id.in_(ids))
        .order_by(Follow.created_at.asc(), Follow.follow_id)
    )
    for following_id, follower_id in rows.all():
        followers[following_id].append(follower_id)

    rows = await session.execute(
        sa.select(Bookmark.user_id, Bookmark.post_id)
        .where(Bookmark.user_id.in_(ids))
        .order_by(Bookmark.created_at.asc(), Bookmark.bookmark_id)
    )
    for user_id, post_id in rows.all():
        bookmarks[user_id].append(post_id)

    return {
        uid: UserGraph(
            followings=followings[uid],
            followers=followers[uid],
            bookmarked_posts=bookmarks[uid],
        )
        for uid in ids
    }


async def get_graph(session: AsyncSession, user_id: uuid.UUID) -> UserGraph:
    graphs = await get_graphs(session, [user_id])
    return graphs[user_id]


# ── Follow toggle ─────────────────────────────────────────────────────────────

async def toggle_follow(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> FollowResult:
    if follower_id == following_id:
        raise CannotFollowSelf()
    users = await _lock_users(session, follower_id, following_id)
    if follower_id not in users or following_id not in users:
        raise FollowTargetsNotFound()
    target = users[following_id]

    if not await _follow_exists(session, follower_id, following_id):
        session.add(Follow(follower_id=follower_id, following_id=following_id))
        try:
            await session.flush()
        except IntegrityError as exc:
            raise ConcurrentGraphUpdate() from exc
        following = True
        logger.info("User %s followed user %s", follower_id, following_id)
    else:
        result = await session.execute(
            sa.delete(Follow).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            )
        )
        if result.rowcount == 0:
            raise ConcurrentGraphUpdate()
        following = False
        logger.info("User %s unfollowed user %s", follower_id, following_id)

    follower_count = await count_followers(session, following_id)
    return FollowResult(following=following, target=target, follower_count=follower_count)


# ── Friends / discovery ───────────────────────────────────────────────────────

async def get_friends(session: AsyncSession, user_id: uuid.UUID) -> list[User]:
    """Resolve the caller's followings to user rows, in following order."""
    await _require_user(session, user_id)
    ids = await following_ids(session, user_id)
    if not ids:
        return []
    result = await session.execute(sa.select(User).where(User.id.in_(ids)))
    by_id = {user.id: user for user in result.scalars().all()}

    friends: list[User] = []
    for friend_id in ids:
        friend = by_id.get(friend_id)
        if friend is None:
            logger.warning("Friend not found: %s (followed by %s)", friend_id, user_id)
            continue
        friends.append(friend)
    return friends


async def get_non_followed_users(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    limit: int = SUGGESTION_LIMIT,
) -> list[User]:
    """
    Return up to `limit` users the caller does NOT follow, excluding the caller.
    Best effort: newest accounts first, no ranking.
    """
    await _require_user(session, user_id)
    followed = sa.select(Follow.following_id).where(Follow.follower_id == user_id)
    result = await session.execute(
        sa.select(User)
        .where(User.id != user_id, User.id.notin_(followed))
        .order_by(User.created_at.desc(), User.id)
        .limit(limit)
    )
    return list(result.scalars().all())


# ── Bookmark toggle ───────────────────────────────────────────────────────────

async def toggle_bookmark(
    session: AsyncSession,
    user_id: uuid.UUID,
    post_id: uuid.UUID,
) -> BookmarkResult:
    await post_svc.get_post(session, post_id)
    users = await _lock_users(session, user_id)
    user = users.get(user_id)
    if user is None:
        raise CurrentUserNotFound()

    if await _bookmark_exists(session, user_id, post_id):
        result = await session.execute(
            sa.delete(Bookmark).where(
                Bookmark.user_id == user_id,
                Bookmark.post_id == post_id,
            )
        )
        if result.rowcount == 0:
            raise ConcurrentGraphUpdate()
        bookmarked = False
        logger.info("Post %s unbookmarked by user %s", post_id, user_id)
    else:
        session.add(Bookmark(user_id=user_id, post_id=post_id))
        try:
            await session.flush()
        except IntegrityError as exc:
            raise ConcurrentGraphUpdate() from exc
        bookmarked = True
        logger.info("Post %s bookmarked by user %s", post_id, user_id)

    return BookmarkResult(bookmarked=bookmarked, user=user, post_id=post_id)


# ── Account deletion cleanup ──────────────────────────────────────────────────

async def remove_user_edges(session: AsyncSession, user_id: uuid.UUID) -> None:
    """
    Delete every follow edge touching the user, the user's bookmarks, and other
    users' bookmarks on the user's posts.  Called before the user row is removed.
    """
    await session.execute(
        sa.delete(Follow).where(
            sa.or_(Follow.follower_id == user_id, Follow.following_id == user_id)
        )
    )
    await session.execute(
        sa.delete(Bookmark).where(
            sa.or_(
                Bookmark.user_id == user_id,
                Bookmark.post_id.in_(post_svc.owned_post_ids(user_id)),
            )
        )
    )
