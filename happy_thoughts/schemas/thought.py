"""
Happy Thoughts API — Thought Request/Response Schemas
=======================================================

What:  Pydantic models for thought request bodies and response payloads.
Why:   Field-level constraints (message length, tag enumeration) are enforced
       here, before any store access; violations become 400 responses via the
       RequestValidationError handler in main.py.

Wire format:
    Fields are camelCase on the wire (createdAt, totalCount, currentPage) to
    stay compatible with existing clients; Python code uses snake_case.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from happy_thoughts.models.thought import (
    DEFAULT_TAG,
    MESSAGE_MAX_LENGTH,
    MESSAGE_MIN_LENGTH,
    Tag,
)

MESSAGE_LENGTH_ERROR = (
    f"Message must be between {MESSAGE_MIN_LENGTH} and {MESSAGE_MAX_LENGTH} characters."
)


def _check_message_length(value: str) -> str:
    if not MESSAGE_MIN_LENGTH <= len(value) <= MESSAGE_MAX_LENGTH:
        raise ValueError(MESSAGE_LENGTH_ERROR)
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ThoughtCreate(CamelModel):
    """
    Body of POST /thoughts.

    tags:
        Optional. A single string is accepted as a one-element list. Values
        are lowercased, then checked against the Tag enumeration. Duplicates
        collapse; an empty or missing list becomes ["other"].
    """
    message: str
    tags: Optional[List[Tag]] = None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        return _check_message_length(v)

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = [v]
        if isinstance(v, list):
            return [item.strip().lower() if isinstance(item, str) else item for item in v]
        return v

    def tag_values(self) -> List[str]:
        """Deduplicated tag values in request order, defaulting to 'other'."""
        if not self.tags:
            return [DEFAULT_TAG]
        return list(dict.fromkeys(tag.value for tag in self.tags))


class ThoughtUpdate(CamelModel):
    """Body of PATCH /thoughts/{id}. Only the message is editable."""

    message: str

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        return _check_message_length(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ThoughtOut(CamelModel):
    """
    Public representation of a thought.

    `author` is the author's user id (null for unowned thoughts). Built from
    the ORM object's `author_id` attribute.
    """
    id: uuid.UUID
    message: str
    tags: List[str]
    hearts: int
    created_at: datetime
    # FastAPI re-validates the dumped model, so the wire name must also be accepted
    author: Optional[uuid.UUID] = Field(
        default=None, validation_alias=AliasChoices("author_id", "author")
    )

    @field_validator("created_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive values; every stored timestamp is UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class ThoughtPage(CamelModel):
    """`response` payload of every listing endpoint."""

    data: List[ThoughtOut]
    total_count: int
    current_page: int
    limit: int
