"""
Social graph domain: Pydantic V2 response schemas.
"""
from __future__ import annotations

import uuid

from tether.auth.schemas import UserResponse
from tether_shared.models import Envelope


# ── Follow ─────────────────────────────────────────────────────────────────────

class FollowToggleResponse(Envelope):
    following: bool          # relationship state after the toggle
    user_id: uuid.UUID       # the target
    username: str
    follower_count: int      # the target's follower count after the toggle


# ── Friends / discovery ───────────────────────────────────────────────────────

class FriendListResponse(Envelope):
    count: int
    friends: list[UserResponse]


class NonFollowedListResponse(Envelope):
    count: int
    data: list[UserResponse]


# ── Bookmark ───────────────────────────────────────────────────────────────────

class BookmarkToggleResponse(Envelope):
    bookmarked: bool
    post_id: uuid.UUID
