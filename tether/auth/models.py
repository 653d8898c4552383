"""
Tether service: SQLAlchemy ORM model for user accounts.

Tables owned by this module:
  - users   Accounts, credentials and display profile

Relationship lists (followings / followers / bookmarked posts) are not columns
here; they are edge rows in social_graph.models.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from tether_shared.database import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    # ── Primary key ──────────────────────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Authentication identifiers ────────────────────────────────────────────
    username: Mapped[str] = mapped_column(
        sa.String(50), unique=True, nullable=False, index=True
    )
    email: Mapped[str] = mapped_column(
        sa.String(255), unique=True, nullable=False, index=True
    )
    # Never serialized: response schemas have no field for it
    password_hash: Mapped[str] = mapped_column(sa.String(255), nullable=False)

    # ── Profile fields ────────────────────────────────────────────────────────
    profile_image: Mapped[str] = mapped_column(
        sa.String(500), nullable=False, default="", server_default=""
    )
    bio: Mapped[str] = mapped_column(
        sa.Text(), nullable=False, default="", server_default=""
    )

    # ── Audit timestamps ──────────────────────────────────────────────────────
    # Python-side defaults so the values are loaded after flush without a refresh
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=_now,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=_now,
        onupdate=_now,
    )


# Email identity is case-insensitive; the plain unique constraint is not
sa.Index("uq_users_email_lower", sa.func.lower(User.email), unique=True)
