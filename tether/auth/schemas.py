"""
Tether service: Pydantic V2 request/response schemas for the auth domain.

Separation of concerns:
  - *Request  models:  input from the client (strict extra="forbid")
  - *Response models:  output to the client (no write-only fields exposed)
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tether.auth.constants import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH, USERNAME_MAX_LENGTH
from tether_shared.models import Envelope

if TYPE_CHECKING:
    from tether.auth.models import User
    from tether.social_graph.service import UserGraph


# ── Shared base ───────────────────────────────────────────────────────────────

class _Base(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
    )


# ── Requests ──────────────────────────────────────────────────────────────────

class RegisterRequest(_Base):
    """Body for POST /auth/register."""

    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    bio: str | None = None
    profile_image: str | None = Field(default=None, max_length=500)


class LoginRequest(_Base):
    """Body for POST /auth/login."""

    email: EmailStr
    password: str = Field(min_length=1)


# ── Responses ─────────────────────────────────────────────────────────────────

class UserResponse(BaseModel):
    """A user record as exposed to clients. Has no credential field."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
    bio: str
    profile_image: str
    followings: list[uuid.UUID]
    followers: list[uuid.UUID]
    bookmarked_posts: list[uuid.UUID]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User, graph: UserGraph) -> UserResponse:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            bio=user.bio,
            profile_image=user.profile_image,
            followings=graph.followings,
            followers=graph.followers,
            bookmarked_posts=graph.bookmarked_posts,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(Envelope):
    """Returned by register (201) and login (200)."""

    user: UserResponse
    token: str
