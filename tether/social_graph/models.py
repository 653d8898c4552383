"""
Social graph domain: SQLAlchemy ORM models.

Tables:
  follows     directed follow edges (follower → following)
  bookmarks   user → post bookmarks

A follow edge is a single row: followings(a) and followers(b) are two views of
the same rows, so both sides change in one atomic insert/delete.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from tether_shared.database import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


# SQLite only autoincrements an INTEGER primary key
_EdgeId = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


class Follow(Base):
    __tablename__ = "follows"

    # Monotonic: breaks created_at ties so lists keep insertion order
    follow_id: Mapped[int] = mapped_column(_EdgeId, primary_key=True, autoincrement=True)
    follower_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    following_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Drives list order: followings/followers are returned in insertion order
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )

    __table_args__ = (
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        sa.CheckConstraint("follower_id != following_id", name="ck_follows_no_self"),
        sa.Index("idx_follows_follower_id", "follower_id"),
        sa.Index("idx_follows_following_id", "following_id"),
    )


class Bookmark(Base):
    __tablename__ = "bookmarks"

    bookmark_id: Mapped[int] = mapped_column(_EdgeId, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(),
        sa.ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )

    __table_args__ = (
        sa.UniqueConstraint("user_id", "post_id", name="uq_bookmarks_user_post"),
        sa.Index("idx_bookmarks_user_id", "user_id"),
        sa.Index("idx_bookmarks_post_id", "post_id"),
    )
