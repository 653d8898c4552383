"""
Profile domain: pure business logic (zero FastAPI imports).
"""
from __future__ import annotations

import logging
import uuid

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from tether.auth.models import User
from tether.auth.service import get_user_by_email, get_user_by_username, normalize_email
from tether.auth.utils import hash_password
from tether.exceptions import (
    FieldsNotUpdatable,
    NoUsersFound,
    UserAlreadyExists,
    UsernameTaken,
    UserNotFound,
)
from tether.posts import service as post_svc
from tether.social_graph import service as social_svc

logger = logging.getLogger(__name__)

# Columns a user may change on their own record; everything else is rejected
# at the schema layer, and again here with a 400.
UPDATABLE_FIELDS = frozenset({"username", "email", "bio", "profile_image", "password"})


async def get_profile(session: AsyncSession, user_id: uuid.UUID) -> User:
    """Load a user by PK; raise 404 if not found."""
    result = await session.execute(sa.select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise UserNotFound()
    return user


async def list_users(session: AsyncSession) -> list[User]:
    result = await session.execute(sa.select(User).order_by(User.created_at.asc(), User.id))
    users = list(result.scalars().all())
    if not users:
        logger.warning("No users found in the store")
        raise NoUsersFound()
    return users


async def update_profile(
    session: AsyncSession,
    user_id: uuid.UUID,
    fields: dict,
) -> User:
    """Patch the allow-listed fields onto the user row and persist."""
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise FieldsNotUpdatable(sorted(unknown))
    fields = dict(fields)
    user = await get_profile(session, user_id)

    if fields.get("email") is not None:
        fields["email"] = normalize_email(fields["email"])
        if fields["email"] != user.email:
            other = await get_user_by_email(session, fields["email"])
            if other is not None and other.id != user.id:
                raise UserAlreadyExists()
    username = fields.get("username")
    if username is not None and username != user.username:
        other = await get_user_by_username(session, username)
        if other is not None and other.id != user.id:
            raise UsernameTaken()

    for key, value in fields.items():
        if key == "password":
            user.password_hash = hash_password(value)
        else:
            setattr(user, key, value)
    # flush: writes changes within the open transaction; get_db commits before the response is sent.
    await session.flush()
    return user


async def delete_profile(session: AsyncSession, user_id: uuid.UUID) -> None:
    """
    Delete the user and everything that points at it: follow edges in both
    directions, its bookmarks, bookmarks on its posts, and its posts.
    """
    user = await get_profile(session, user_id)
    await social_svc.remove_user_edges(session, user_id)
    await post_svc.delete_posts_by_owner(session, user_id)
    await session.delete(user)
    await session.flush()
    logger.info("User deleted: %s", user_id)
