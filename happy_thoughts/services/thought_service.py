"""
Happy Thoughts API — Thought Service (Business Logic)
=======================================================

What:  Listing, lookup, creation, editing, deletion and liking of thoughts.
Why:   Keeps query construction, ownership rules and error translation out of
       the route handlers, and independent of the store (it only sees a
       ThoughtRepository).
Who:   Called by routes/thoughts.py; unit-tested against an in-memory
       repository double.

Listing algorithm (all list endpoints):
    1. Build a ThoughtFilter from the provided filters (AND semantics)
    2. Count all matches, independent of pagination
    3. Fetch one page: sort, skip (page - 1) * limit, take limit
    4. Empty page → NoThoughtsFoundError (404 with response: [])

Ownership:
    With settings.enforce_ownership, edit and delete are scoped to
    (id, author = caller). A thought owned by someone else is reported exactly
    like a missing one, so existence of other users' thoughts never leaks.

Error Handling Strategy:
    SQLAlchemyError → DatabaseError (500) with a per-operation message.
    Our own exceptions propagate untouched.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from happy_thoughts.config import settings
from happy_thoughts.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NoThoughtsFoundError,
    NotFoundError,
    ValidationError,
)
from happy_thoughts.models.user import User
from happy_thoughts.repositories.thought_repository import (
    MOST_HEARTS_FIRST,
    NEWEST_FIRST,
    SortField,
    ThoughtFilter,
    ThoughtRepository,
)
from happy_thoughts.schemas.thought import ThoughtOut, ThoughtPage

logger = logging.getLogger(__name__)

THOUGHT_NOT_FOUND = "Thought not found!"
THOUGHT_NOT_FOUND_OR_NOT_OWNED = "Thought not found or not owned by you."


def parse_id(raw: str, field: str = "id") -> uuid.UUID:
    """
    Validate a path identifier before any store access.

    Raises:
        ValidationError: `raw` is not a UUID ("Invalid ID format.")
    """
    try:
        return uuid.UUID(raw)
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(message="Invalid ID format.", field=field)


class ThoughtService:
    """
    Business logic for thoughts.

    Stateless apart from the repository it wraps; a new instance is built for
    every request by the `get_thought_service` dependency.
    """

    def __init__(self, repository: ThoughtRepository):
        self.repository = repository

    # ── Listing ───────────────────────────────────────────────────────────

    async def list_thoughts(
        self,
        page: int = 1,
        limit: int = 10,
        tag: Optional[str] = None,
        min_hearts: Optional[int] = None,
        author_id: Optional[uuid.UUID] = None,
        sort: Sequence[SortField] = NEWEST_FIRST,
    ) -> ThoughtPage:
        """
        Return one page of thoughts matching every provided filter.

        Args:
            page:       1-based page number
            limit:      page size
            tag:        exact membership in the thought's tag set
            min_hearts: hearts >= min_hearts
            author_id:  only thoughts by this user
            sort:       sort keys, applied in order

        Raises:
            NoThoughtsFoundError: the requested page is empty
            DatabaseError:        the query failed
        """
        thought_filter = ThoughtFilter(tag=tag, min_hearts=min_hearts, author_id=author_id)

        try:
            total_count = await self.repository.count_matching(thought_filter)
            thoughts = await self.repository.find(
                thought_filter,
                sort=sort,
                skip=(page - 1) * limit,
                limit=limit,
            )
        except SQLAlchemyError as e:
            logger.error("Database error listing thoughts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch thoughts.",
                context={"error_type": type(e).__name__},
            )

        if not thoughts:
            raise NoThoughtsFoundError(context={"filter": repr(thought_filter), "page": page})

        return ThoughtPage(
            data=[ThoughtOut.model_validate(thought) for thought in thoughts],
            total_count=total_count,
            current_page=page,
            limit=limit,
        )

    async def list_popular(self, page: int = 1, limit: int = 10, tag: Optional[str] = None) -> ThoughtPage:
        return await self.list_thoughts(page=page, limit=limit, tag=tag, sort=MOST_HEARTS_FIRST)

    async def list_recent(self, page: int = 1, limit: int = 10, tag: Optional[str] = None) -> ThoughtPage:
        return await self.list_thoughts(page=page, limit=limit, tag=tag, sort=NEWEST_FIRST)

    async def list_by_author(
        self,
        author_id: uuid.UUID,
        page: int = 1,
        limit: int = 10,
        tag: Optional[str] = None,
    ) -> ThoughtPage:
        return await self.list_thoughts(
            page=page, limit=limit, tag=tag, author_id=author_id, sort=NEWEST_FIRST
        )

    # ── Single thought ────────────────────────────────────────────────────

    async def get_thought(self, thought_id: uuid.UUID) -> ThoughtOut:
        try:
            thought = await self.repository.find_by_id(thought_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching thought %s: %s", thought_id, str(e))
            raise DatabaseError(
                message="Failed to fetch thought.",
                context={"thought_id": str(thought_id)},
            )

        if thought is None:
            raise NotFoundError(
                message=THOUGHT_NOT_FOUND, resource="thought", resource_id=str(thought_id)
            )
        return ThoughtOut.model_validate(thought)

    async def create_thought(self, message: str, tags: List[str], author: User) -> ThoughtOut:
        """
        Persist a new thought authored by `author`.

        `message` and `tags` arrive validated and normalized by ThoughtCreate.
        """
        try:
            thought = await self.repository.insert(
                message=message,
                tags=tags,
                author_id=author.id,
                created_at=datetime.now(timezone.utc),
            )
        except SQLAlchemyError as e:
            logger.error("Database error creating thought: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create thought.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Thought %s created by %s (tags=%s)", thought.id, author.id, tags)
        return ThoughtOut.model_validate(thought)

    def _owner_scope(self, caller: User) -> Optional[uuid.UUID]:
        return caller.id if settings.enforce_ownership else None

    def _not_found(self, thought_id: uuid.UUID) -> NotFoundError:
        message = (
            THOUGHT_NOT_FOUND_OR_NOT_OWNED if settings.enforce_ownership else THOUGHT_NOT_FOUND
        )
        return NotFoundError(message=message, resource="thought", resource_id=str(thought_id))

    async def edit_thought(self, thought_id: uuid.UUID, message: str, caller: User) -> ThoughtOut:
        try:
            thought = await self.repository.update_by_id(
                thought_id,
                {"message": message},
                author_id=self._owner_scope(caller),
            )
        except SQLAlchemyError as e:
            logger.error("Database error editing thought %s: %s", thought_id, str(e))
            raise DatabaseError(
                message="Failed to edit thought.",
                context={"thought_id": str(thought_id)},
            )

        if thought is None:
            raise self._not_found(thought_id)

        logger.info("Thought %s edited by %s", thought_id, caller.id)
        return ThoughtOut.model_validate(thought)

    async def delete_thought(self, thought_id: uuid.UUID, caller: User) -> ThoughtOut:
        try:
            thought = await self.repository.delete_by_id(
                thought_id, author_id=self._owner_scope(caller)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting thought %s: %s", thought_id, str(e))
            raise DatabaseError(
                message="Failed to delete thought.",
                context={"thought_id": str(thought_id)},
            )

        if thought is None:
            raise self._not_found(thought_id)

        logger.info("Thought %s deleted by %s", thought_id, caller.id)
        return ThoughtOut.model_validate(thought)

    async def like_thought(self, thought_id: uuid.UUID, caller: Optional[User] = None) -> ThoughtOut:
        """
        Add one heart to a thought.

        Modes (settings.unique_likes):
            False: anonymous and unlimited; `caller` is ignored
            True:  a caller is required and may like each thought once; the
                   Like row and the increment share one transaction, so a
                   rejected duplicate leaves hearts unchanged

        Raises:
            AuthenticationError: unique likes enabled and no caller
            NotFoundError:       no thought with this id
            ConflictError:       the caller already liked this thought
        """
        if settings.unique_likes and caller is None:
            raise AuthenticationError()
        caller_id = caller.id if caller is not None else None

        try:
            thought = await self.repository.increment_hearts(thought_id)
            if thought is None:
                raise NotFoundError(
                    message=THOUGHT_NOT_FOUND, resource="thought", resource_id=str(thought_id)
                )
            if settings.unique_likes:
                await self.repository.add_like(user_id=caller_id, thought_id=thought_id)
        except IntegrityError:
            raise ConflictError(
                message="You have already liked this thought.",
                context={"thought_id": str(thought_id), "user_id": str(caller_id)},
            )
        except SQLAlchemyError as e:
            logger.error("Database error liking thought %s: %s", thought_id, str(e))
            raise DatabaseError(
                message="Failed to like thought.",
                context={"thought_id": str(thought_id)},
            )

        logger.info("Like recorded on thought %s (hearts=%d)", thought_id, thought.hearts)
        return ThoughtOut.model_validate(thought)
