"""
Happy Thoughts API — Thought Repository
=========================================

What:  The storage interface for thoughts and its SQLAlchemy implementation.
Why:   ThoughtService only speaks in ThoughtFilter / SortField terms; any store
       that can answer those (PostgreSQL, SQLite, the in-memory double used by
       the unit tests) can back the API.
How:   ThoughtRepository is an abstract base class; SqlThoughtRepository
       implements it with SQL on the request's AsyncSession.

Query vocabulary:
    ThoughtFilter  AND of optional predicates (tag, min_hearts, author_id)
    SortField      one sort key; lists of them are applied in order, with the
                   primary key as a final tie-breaker so pages are stable
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import Select, asc, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.exceptions import ValidationError
from happy_thoughts.models.like import Like
from happy_thoughts.models.thought import Thought, ThoughtTag


@dataclass(frozen=True)
class ThoughtFilter:
    tag: Optional[str] = None
    min_hearts: Optional[int] = None
    author_id: Optional[uuid.UUID] = None


@dataclass(frozen=True)
class SortField:
    name: str
    descending: bool = False


# Wire names accepted in `sort_by` → Thought attribute names
SORTABLE_FIELDS: Dict[str, str] = {
    "createdAt": "created_at",
    "created_at": "created_at",
    "hearts": "hearts",
    "message": "message",
}

NEWEST_FIRST: List[SortField] = [SortField("created_at", descending=True)]
MOST_HEARTS_FIRST: List[SortField] = [SortField("hearts", descending=True)]


def parse_sort(sort_by: Optional[str]) -> List[SortField]:
    """
    Parse a sort string such as "-hearts createdAt" into SortFields.

    Keys are separated by spaces or commas; a leading "-" sorts descending,
    a leading "+" (or nothing) ascending. Empty input means newest first.

    Raises:
        ValidationError: a key is not one of SORTABLE_FIELDS
    """
    if not sort_by or not sort_by.strip():
        return list(NEWEST_FIRST)

    fields: List[SortField] = []
    for token in sort_by.replace(",", " ").split():
        descending = token.startswith("-")
        name = token.lstrip("+-")
        if name not in SORTABLE_FIELDS:
            raise ValidationError(
                message=f"Cannot sort by '{name}'. Sortable fields: createdAt, hearts, message",
                field="sort_by",
            )
        fields.append(SortField(SORTABLE_FIELDS[name], descending=descending))
    return fields


class ThoughtRepository(ABC):
    """
    Storage contract for thoughts.

    Contract:
        - author_id on update/delete scopes the match to that author; a thought
          owned by someone else behaves exactly like a missing one (None)
        - increment_hearts is atomic with respect to concurrent callers
        - add_like raises the store's integrity error on a duplicate pair
    """

    @abstractmethod
    async def find(
        self,
        thought_filter: ThoughtFilter,
        sort: Sequence[SortField],
        skip: int,
        limit: int,
    ) -> List[Thought]:
        ...

    @abstractmethod
    async def count_matching(self, thought_filter: ThoughtFilter) -> int:
        ...

    @abstractmethod
    async def find_by_id(self, thought_id: uuid.UUID) -> Optional[Thought]:
        ...

    @abstractmethod
    async def insert(
        self,
        message: str,
        tags: List[str],
        author_id: Optional[uuid.UUID],
        created_at: datetime,
    ) -> Thought:
        ...

    @abstractmethod
    async def update_by_id(
        self,
        thought_id: uuid.UUID,
        values: Dict[str, Any],
        author_id: Optional[uuid.UUID] = None,
    ) -> Optional[Thought]:
        ...

    @abstractmethod
    async def delete_by_id(
        self,
        thought_id: uuid.UUID,
        author_id: Optional[uuid.UUID] = None,
    ) -> Optional[Thought]:
        ...

    @abstractmethod
    async def increment_hearts(self, thought_id: uuid.UUID) -> Optional[Thought]:
        ...

    @abstractmethod
    async def add_like(self, user_id: uuid.UUID, thought_id: uuid.UUID) -> None:
        ...


class SqlThoughtRepository(ThoughtRepository):
    """ThoughtRepository over an async SQLAlchemy session (one per request)."""

    _SORT_COLUMNS = {
        "created_at": Thought.created_at,
        "hearts": Thought.hearts,
        "message": Thought.message,
    }

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _apply_filter(stmt: Select, thought_filter: ThoughtFilter) -> Select:
        if thought_filter.tag is not None:
            stmt = stmt.where(Thought.tag_links.any(ThoughtTag.tag == thought_filter.tag))
        if thought_filter.min_hearts is not None:
            stmt = stmt.where(Thought.hearts >= thought_filter.min_hearts)
        if thought_filter.author_id is not None:
            stmt = stmt.where(Thought.author_id == thought_filter.author_id)
        return stmt

    async def find(
        self,
        thought_filter: ThoughtFilter,
        sort: Sequence[SortField],
        skip: int,
        limit: int,
    ) -> List[Thought]:
        stmt = self._apply_filter(select(Thought), thought_filter)
        for field in sort:
            column = self._SORT_COLUMNS[field.name]
            stmt = stmt.order_by(desc(column) if field.descending else asc(column))
        stmt = stmt.order_by(asc(Thought.id)).offset(skip).limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_matching(self, thought_filter: ThoughtFilter) -> int:
        stmt = self._apply_filter(select(func.count()).select_from(Thought), thought_filter)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def find_by_id(self, thought_id: uuid.UUID) -> Optional[Thought]:
        return await self.session.get(Thought, thought_id)

    async def insert(
        self,
        message: str,
        tags: List[str],
        author_id: Optional[uuid.UUID],
        created_at: datetime,
    ) -> Thought:
        thought = Thought(
            message=message,
            hearts=0,
            author_id=author_id,
            created_at=created_at,
        )
        thought.tag_links = [ThoughtTag(tag=tag) for tag in tags]
        self.session.add(thought)
        # Flush assigns the row now so integrity errors surface inside the service
        await self.session.flush()
        return thought

    async def _find_scoped(
        self, thought_id: uuid.UUID, author_id: Optional[uuid.UUID]
    ) -> Optional[Thought]:
        stmt = select(Thought).where(Thought.id == thought_id)
        if author_id is not None:
            stmt = stmt.where(Thought.author_id == author_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_by_id(
        self,
        thought_id: uuid.UUID,
        values: Dict[str, Any],
        author_id: Optional[uuid.UUID] = None,
    ) -> Optional[Thought]:
        thought = await self._find_scoped(thought_id, author_id)
        if thought is None:
            return None
        for key, value in values.items():
            setattr(thought, key, value)
        await self.session.flush()
        return thought

    async def delete_by_id(
        self,
        thought_id: uuid.UUID,
        author_id: Optional[uuid.UUID] = None,
    ) -> Optional[Thought]:
        thought = await self._find_scoped(thought_id, author_id)
        if thought is None:
            return None
        await self.session.delete(thought)
        await self.session.flush()
        return thought

    async def increment_hearts(self, thought_id: uuid.UUID) -> Optional[Thought]:
        # Single UPDATE; the database serializes concurrent increments
        stmt = (
            update(Thought)
            .where(Thought.id == thought_id)
            .values(hearts=Thought.hearts + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.session.get(Thought, thought_id, populate_existing=True)

    async def add_like(self, user_id: uuid.UUID, thought_id: uuid.UUID) -> None:
        self.session.add(Like(user_id=user_id, thought_id=thought_id))
        await self.session.flush()
