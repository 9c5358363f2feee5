"""
Happy Thoughts API — Thought SQLAlchemy Models
================================================

What:  ORM models for the `thoughts` table and its `thought_tags` child table.
Who:   Used by SqlThoughtRepository for every thought operation and by Alembic.

Table Design Rationale:
    - message: 5..140 characters, checked by the request schemas before any
      write; the column only caps the length
    - hearts: like counter; CHECK (hearts >= 0); incremented with a single
      `UPDATE ... SET hearts = hearts + 1` so concurrent likes never lose updates
    - created_at: set once in Python at insert, never updated
    - author_id: nullable; thoughts created before ownership tracking have none
    - tags live in `thought_tags (thought_id, tag)` so "has tag X" is an
      EXISTS filter that works the same on PostgreSQL and SQLite

Indexes:
    created_at and hearts back the recent / popular listings (B-tree indexes
    are scanned backwards for DESC);
    thought_tags.tag backs the tag filter.
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from happy_thoughts.database import Base


class Tag(str, enum.Enum):
    """The fixed set of categories a thought can be filed under."""

    TRAVEL = "travel"
    FOOD = "food"
    FAMILY = "family"
    FRIENDS = "friends"
    HUMOR = "humor"
    NATURE = "nature"
    WELLNESS = "wellness"
    HOME = "home"
    ENTERTAINMENT = "entertainment"
    WORK = "work"
    OTHER = "other"


TAG_VALUES: List[str] = [tag.value for tag in Tag]
DEFAULT_TAG = Tag.OTHER.value

MESSAGE_MIN_LENGTH = 5
MESSAGE_MAX_LENGTH = 140


class Thought(Base):
    """
    A short user-authored message with tags and a like counter.

    Lifecycle:
        1. Created by an authenticated user (hearts = 0)
        2. Liked any number of times (hearts += 1, atomically)
        3. Message edited and/or deleted by its author
    """

    __tablename__ = "thoughts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    message: Mapped[str] = mapped_column(
        String(MESSAGE_MAX_LENGTH),
        nullable=False,
    )

    hearts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    author_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # selectin: tags are loaded in one extra query per result set, which is
    # also the only loading strategy that works without lazy IO under asyncio
    tag_links: Mapped[List["ThoughtTag"]] = relationship(
        back_populates="thought",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ThoughtTag.tag",
    )

    __table_args__ = (
        CheckConstraint("hearts >= 0", name="ck_thoughts_hearts_non_negative"),
        Index("idx_thoughts_created_at", "created_at"),
        Index("idx_thoughts_hearts", "hearts"),
    )

    @property
    def tags(self) -> List[str]:
        return [link.tag for link in self.tag_links]

    def __repr__(self) -> str:
        return f"<Thought(id={self.id}, hearts={self.hearts}, tags={self.tags})>"


class ThoughtTag(Base):
    """One tag attached to one thought."""

    __tablename__ = "thought_tags"

    thought_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("thoughts.id", ondelete="CASCADE"),
        primary_key=True,
    )

    tag: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        index=True,
    )

    thought: Mapped["Thought"] = relationship(back_populates="tag_links")
