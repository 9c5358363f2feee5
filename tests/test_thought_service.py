"""
Happy Thoughts API — Thought Service Unit Tests
=================================================

What:  Tests for ThoughtService business logic against the in-memory
       repository double (no database, no HTTP).

What we test:
    ✅ Listing: filters combine with AND, counts ignore pagination, empty page → 404
    ✅ Popular / recent / by-author orderings
    ✅ Ownership scoping of edit and delete
    ✅ Like counting in both like modes
    ✅ Store failures become DatabaseError
"""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from happy_thoughts.config import settings
from happy_thoughts.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NoThoughtsFoundError,
    NotFoundError,
)
from happy_thoughts.repositories.thought_repository import SortField
from happy_thoughts.services.thought_service import (
    THOUGHT_NOT_FOUND,
    THOUGHT_NOT_FOUND_OR_NOT_OWNED,
    ThoughtService,
)

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_user():
    return SimpleNamespace(id=uuid.uuid4(), user_name="someone")


async def seed(repository, count, author_id=None, tags=("other",), hearts=0):
    """Inserts `count` thoughts one minute apart; returns them oldest first."""
    thoughts = []
    for i in range(count):
        thought = await repository.insert(
            message=f"Thought number {i}",
            tags=list(tags),
            author_id=author_id,
            created_at=BASE_TIME + timedelta(minutes=len(repository.thoughts)),
            hearts=hearts,
        )
        thoughts.append(thought)
    return thoughts


class TestListThoughts:
    """Tests for list_thoughts and the fixed-order listings."""

    @pytest.mark.asyncio
    async def test_default_order_is_newest_first(self, memory_repository):
        thoughts = await seed(memory_repository, 3)
        service = ThoughtService(memory_repository)

        page = await service.list_thoughts()

        assert [t.id for t in page.data] == [t.id for t in reversed(thoughts)]
        assert page.total_count == 3
        assert page.current_page == 1
        assert page.limit == 10

    @pytest.mark.asyncio
    async def test_total_count_is_independent_of_pagination(self, memory_repository):
        await seed(memory_repository, 15)
        service = ThoughtService(memory_repository)

        page = await service.list_thoughts(page=2, limit=10)

        assert len(page.data) == 5
        assert page.total_count == 15
        assert page.current_page == 2

    @pytest.mark.asyncio
    async def test_page_past_the_end_raises_no_thoughts_found(self, memory_repository):
        await seed(memory_repository, 3)
        service = ThoughtService(memory_repository)

        with pytest.raises(NoThoughtsFoundError) as exc_info:
            await service.list_thoughts(page=2, limit=10)

        assert exc_info.value.message == "No thoughts found on that query. Try another one."

    @pytest.mark.asyncio
    async def test_filters_combine_with_and(self, memory_repository):
        author = make_user()
        await seed(memory_repository, 2, tags=("travel",), hearts=5)
        await seed(memory_repository, 2, tags=("food",), hearts=5)
        await seed(memory_repository, 2, tags=("travel",), hearts=1)
        match = (await seed(memory_repository, 1, author_id=author.id, tags=("travel",), hearts=7))[0]
        service = ThoughtService(memory_repository)

        page = await service.list_thoughts(tag="travel", min_hearts=5)
        assert page.total_count == 3
        assert all("travel" in t.tags and t.hearts >= 5 for t in page.data)

        page = await service.list_thoughts(tag="travel", min_hearts=5, author_id=author.id)
        assert [t.id for t in page.data] == [match.id]

    @pytest.mark.asyncio
    async def test_sort_keys_apply_in_order(self, memory_repository):
        low_old, low_new = await seed(memory_repository, 2, hearts=1)
        high = (await seed(memory_repository, 1, hearts=9))[0]
        service = ThoughtService(memory_repository)

        page = await service.list_thoughts(
            sort=[SortField("hearts", descending=True), SortField("created_at")]
        )

        assert [t.id for t in page.data] == [high.id, low_old.id, low_new.id]

    @pytest.mark.asyncio
    async def test_list_popular_orders_by_hearts(self, memory_repository):
        for hearts in (3, 10, 0):
            await seed(memory_repository, 1, hearts=hearts)
        service = ThoughtService(memory_repository)

        page = await service.list_popular()

        assert [t.hearts for t in page.data] == [10, 3, 0]

    @pytest.mark.asyncio
    async def test_list_by_author_only_returns_that_author(self, memory_repository):
        alice, bob = make_user(), make_user()
        await seed(memory_repository, 2, author_id=alice.id)
        await seed(memory_repository, 3, author_id=bob.id)
        service = ThoughtService(memory_repository)

        page = await service.list_by_author(alice.id)

        assert page.total_count == 2
        assert {t.author for t in page.data} == {alice.id}

    @pytest.mark.asyncio
    async def test_store_failure_becomes_database_error(self, memory_repository):
        memory_repository.count_matching = AsyncMock(
            side_effect=OperationalError("SELECT count(*)", {}, Exception("connection lost"))
        )
        service = ThoughtService(memory_repository)

        with pytest.raises(DatabaseError) as exc_info:
            await service.list_thoughts()

        assert exc_info.value.message == "Failed to fetch thoughts."
        assert exc_info.value.context["error_type"] == "OperationalError"


class TestSingleThought:
    """Tests for get, create, edit and delete."""

    @pytest.mark.asyncio
    async def test_create_sets_author_hearts_and_timestamp(self, memory_repository):
        author = make_user()
        service = ThoughtService(memory_repository)

        before = datetime.now(timezone.utc)
        thought = await service.create_thought("Hello there", ["food", "home"], author)

        assert thought.author == author.id
        assert thought.hearts == 0
        assert thought.tags == ["food", "home"]
        assert thought.created_at >= before

    @pytest.mark.asyncio
    async def test_get_missing_thought_raises_not_found(self, memory_repository):
        service = ThoughtService(memory_repository)

        with pytest.raises(NotFoundError, match=THOUGHT_NOT_FOUND):
            await service.get_thought(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_edit_by_author_changes_only_the_message(self, memory_repository):
        author = make_user()
        original = (await seed(memory_repository, 1, author_id=author.id, hearts=4))[0]
        service = ThoughtService(memory_repository)

        edited = await service.edit_thought(original.id, "A better message", author)

        assert edited.message == "A better message"
        assert edited.hearts == 4
        assert edited.created_at == original.created_at

    @pytest.mark.asyncio
    async def test_edit_by_other_user_looks_like_missing(self, memory_repository):
        owner, other = make_user(), make_user()
        thought = (await seed(memory_repository, 1, author_id=owner.id))[0]
        service = ThoughtService(memory_repository)

        with pytest.raises(NotFoundError, match=THOUGHT_NOT_FOUND_OR_NOT_OWNED):
            await service.edit_thought(thought.id, "Not my thought", other)

        assert memory_repository.thoughts[thought.id].message == "Thought number 0"

    @pytest.mark.asyncio
    async def test_delete_by_other_user_is_allowed_without_ownership(
        self, memory_repository, monkeypatch
    ):
        monkeypatch.setattr(settings, "enforce_ownership", False)
        owner, other = make_user(), make_user()
        thought = (await seed(memory_repository, 1, author_id=owner.id))[0]
        service = ThoughtService(memory_repository)

        deleted = await service.delete_thought(thought.id, other)

        assert deleted.id == thought.id
        assert thought.id not in memory_repository.thoughts

    @pytest.mark.asyncio
    async def test_delete_returns_the_deleted_thought(self, memory_repository):
        author = make_user()
        thought = (await seed(memory_repository, 1, author_id=author.id))[0]
        service = ThoughtService(memory_repository)

        deleted = await service.delete_thought(thought.id, author)

        assert deleted.id == thought.id
        with pytest.raises(NotFoundError):
            await service.get_thought(thought.id)


class TestLikeThought:
    """Tests for like_thought in both like modes."""

    @pytest.mark.asyncio
    async def test_anonymous_likes_are_unlimited(self, memory_repository):
        thought = (await seed(memory_repository, 1))[0]
        service = ThoughtService(memory_repository)

        for _ in range(3):
            result = await service.like_thought(thought.id)

        assert result.hearts == 3

    @pytest.mark.asyncio
    async def test_like_missing_thought_raises_not_found(self, memory_repository):
        service = ThoughtService(memory_repository)

        with pytest.raises(NotFoundError, match=THOUGHT_NOT_FOUND):
            await service.like_thought(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_unique_likes_require_a_caller(self, memory_repository, unique_likes):
        thought = (await seed(memory_repository, 1))[0]
        service = ThoughtService(memory_repository)

        with pytest.raises(AuthenticationError):
            await service.like_thought(thought.id, caller=None)

        assert thought.hearts == 0

    @pytest.mark.asyncio
    async def test_unique_likes_reject_second_like(self, memory_repository, unique_likes):
        thought = (await seed(memory_repository, 1))[0]
        caller = make_user()
        service = ThoughtService(memory_repository)

        result = await service.like_thought(thought.id, caller=caller)
        assert result.hearts == 1

        with pytest.raises(ConflictError, match="already liked"):
            await service.like_thought(thought.id, caller=caller)

        assert (caller.id, thought.id) in memory_repository.likes
