"""
Profile domain: Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tether.auth.constants import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH, USERNAME_MAX_LENGTH
from tether.auth.schemas import UserResponse
from tether_shared.models import Envelope


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ── Request ───────────────────────────────────────────────────────────────────

class UpdateUserRequest(_Base):
    """PUT /user/update-user/{user_id}: only these fields; anything else is a 400."""

    username: str | None = Field(None, min_length=1, max_length=USERNAME_MAX_LENGTH)
    email: EmailStr | None = None
    bio: str | None = None
    profile_image: str | None = Field(None, max_length=500)
    password: str | None = Field(None, min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


# ── Response ──────────────────────────────────────────────────────────────────

class UserEnvelope(Envelope):
    user: UserResponse


class UserSummary(BaseModel):
    """Public listing entry: no credentials, no relationship lists."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
    created_at: datetime


class UserSummaryListResponse(Envelope):
    count: int
    users: list[UserSummary]
