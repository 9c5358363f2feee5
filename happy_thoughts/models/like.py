"""
Happy Thoughts API — Like SQLAlchemy Model
============================================

What:  Join table recording which user liked which thought.
When:  Written only when `settings.unique_likes` is enabled; the unique index
       on (user_id, thought_id) is what enforces one like per user per thought.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from happy_thoughts.database import Base


class Like(Base):
    __tablename__ = "likes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    thought_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("thoughts.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("uq_likes_user_thought", "user_id", "thought_id", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Like(user_id={self.user_id}, thought_id={self.thought_id})>"
