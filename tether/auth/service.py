"""
Tether service: pure business logic for authentication.

Rules:
  - Zero FastAPI imports (domain exceptions aside).
  - Zero direct DB driver calls: only SQLAlchemy async session.
  - All I/O functions are async def.
  - No side effects beyond the session passed in (no global state mutated).
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from jose import jwt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tether.auth.models import User
from tether.auth.utils import hash_password, verify_password
from tether.exceptions import InvalidCredentials, UserAlreadyExists, UsernameTaken


# ── User queries ──────────────────────────────────────────────────────────────

def normalize_email(email: str) -> str:
    """Emails are stored lowercased; uq_users_email_lower enforces it in the store."""
    return email.strip().lower()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    # Case-insensitive so "Alice@X.com" and "alice@x.com" are the same account
    result = await session.execute(
        select(User).where(func.lower(User.email) == email.lower())
    )
    return result.scalar_one_or_none()


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


# ── Registration ─────────────────────────────────────────────────────────────

async def register_user(
    session: AsyncSession,
    *,
    username: str,
    email: str,
    password: str,
    bio: str | None = None,
    profile_image: str | None = None,
) -> User:
    """
    Create a new user account.

    Guard clauses (uniqueness checks) run first: the happy path is last.
    Uses flush() so the caller can use user.id without committing.
    """
    email = normalize_email(email)
    if await get_user_by_email(session, email) is not None:
        raise UserAlreadyExists()
    if await get_user_by_username(session, username) is not None:
        raise UsernameTaken()

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        bio=bio or "",
        profile_image=profile_image or "",
    )
    session.add(user)
    await session.flush()
    return user


# ── Authentication ────────────────────────────────────────────────────────────

async def authenticate_user(
    session: AsyncSession,
    email: str,
    password: str,
) -> User:
    """
    Verify credentials and return the User.

    Deliberately generic error on bad credentials to prevent email enumeration.
    """
    user = await get_user_by_email(session, email)
    if user is None:
        raise InvalidCredentials()
    if not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return user


# ── JWT access token ──────────────────────────────────────────────────────────

def create_access_token(
    user_id: uuid.UUID,
    email: str,
    secret: str,
    algorithm: str,
    issuer: str,
    audience: str,
    expire_seconds: int,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + timedelta(seconds=expire_seconds),
        "iss": issuer,
        "aud": audience,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)
