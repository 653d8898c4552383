"""
Posts domain: pure business logic (zero FastAPI imports).
"""
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from tether.auth.models import User
from tether.exceptions import CurrentUserNotFound, PostNotFound
from tether.posts.models import Post


async def create_post(
    session: AsyncSession,
    owner_id: uuid.UUID,
    *,
    content: str,
    image: str | None = None,
) -> Post:
    owner = await session.get(User, owner_id)
    if owner is None:
        raise CurrentUserNotFound()
    post = Post(owner=owner, content=content, image=image or "")
    session.add(post)
    await session.flush()
    return post


async def get_post(session: AsyncSession, post_id: uuid.UUID) -> Post:
    """Load a post with its owner expanded; raise 404 if not found."""
    result = await session.execute(
        sa.select(Post).options(joinedload(Post.owner)).where(Post.id == post_id)
    )
    post = result.scalar_one_or_none()
    if post is None:
        raise PostNotFound()
    return post


def owned_post_ids(owner_id: uuid.UUID) -> sa.Select:
    """Sub-select of every post id owned by ``owner_id``."""
    return sa.select(Post.id).where(Post.owner_id == owner_id)


async def delete_posts_by_owner(session: AsyncSession, owner_id: uuid.UUID) -> int:
    result = await session.execute(sa.delete(Post).where(Post.owner_id == owner_id))
    return result.rowcount or 0
