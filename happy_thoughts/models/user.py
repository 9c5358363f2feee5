"""
Happy Thoughts API — User SQLAlchemy Model
============================================

What:  ORM model for the `users` table.
Who:   Written by UserService (register), read by login and by the bearer
       token check on every authenticated request.

Table Design Rationale:
    - user_name: stored lowercase; unique index makes "Bob" and "bob" collide
    - password_hash: bcrypt output (60 chars incl. salt); never serialized
    - access_token: 128 random bytes hex-encoded (256 chars); unique index
      because every authenticated request looks a user up by it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from happy_thoughts.database import Base


class User(Base):
    """A registered account. Owns its credential fields exclusively."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_name: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Lowercased login name",
    )

    password_hash: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        comment="bcrypt hash including salt",
    )

    # Static bearer credential; not rotated or expired
    access_token: Mapped[str] = mapped_column(
        String(256),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("uq_users_user_name", "user_name", unique=True),
        Index("uq_users_access_token", "access_token", unique=True),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, user_name='{self.user_name}')>"
