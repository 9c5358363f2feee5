"""Create users, thoughts, thought_tags and likes tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the initial schema for accounts, thoughts, their tags and
       per-user likes.
How:   Portable column types (sa.Uuid, timezone-aware DateTime) so the same
       migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops all four tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "user_name",
            sa.String(64),
            nullable=False,
            comment="Lowercased login name",
        ),
        sa.Column(
            "password_hash",
            sa.String(128),
            nullable=False,
            comment="bcrypt hash including salt",
        ),
        sa.Column("access_token", sa.String(256), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("uq_users_user_name", "users", ["user_name"], unique=True)
    op.create_index("uq_users_access_token", "users", ["access_token"], unique=True)

    op.create_table(
        "thoughts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("message", sa.String(140), nullable=False),
        sa.Column(
            "hearts",
            sa.Integer(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("author_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="SET NULL"),
        sa.CheckConstraint("hearts >= 0", name="ck_thoughts_hearts_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Recent and popular listings sort on these
    op.create_index("idx_thoughts_created_at", "thoughts", ["created_at"])
    op.create_index("idx_thoughts_hearts", "thoughts", ["hearts"])
    op.create_index("ix_thoughts_author_id", "thoughts", ["author_id"])

    op.create_table(
        "thought_tags",
        sa.Column("thought_id", sa.Uuid(), nullable=False),
        sa.Column("tag", sa.String(32), nullable=False),
        sa.ForeignKeyConstraint(["thought_id"], ["thoughts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("thought_id", "tag"),
    )
    op.create_index("ix_thought_tags_tag", "thought_tags", ["tag"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("thought_id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["thought_id"], ["thoughts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    # One like per user per thought (enforced only when unique likes are on,
    # since rows are written only then)
    op.create_index(
        "uq_likes_user_thought", "likes", ["user_id", "thought_id"], unique=True
    )


def downgrade() -> None:
    """Drop every table, children first. Destructive."""
    op.drop_index("uq_likes_user_thought", table_name="likes")
    op.drop_table("likes")
    op.drop_index("ix_thought_tags_tag", table_name="thought_tags")
    op.drop_table("thought_tags")
    op.drop_index("ix_thoughts_author_id", table_name="thoughts")
    op.drop_index("idx_thoughts_hearts", table_name="thoughts")
    op.drop_index("idx_thoughts_created_at", table_name="thoughts")
    op.drop_table("thoughts")
    op.drop_index("uq_users_access_token", table_name="users")
    op.drop_index("uq_users_user_name", table_name="users")
    op.drop_table("users")
