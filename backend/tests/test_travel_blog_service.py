"""
Travel Journal Backend — Travel Blog Service Tests
====================================================

What:  Owner-scoped entry operations against an in-memory SQLite database.

Test Strategy:
    ✅ Create / update validation and the placeholder image on update
    ✅ Entries of another user behave exactly like missing entries
    ✅ list, search and filter put every favourite before every non-favourite
    ✅ Search is a case-insensitive literal substring over title, story,
       and locations
    ✅ Date filter bounds are inclusive
    ✅ Delete removes the row even when the image cannot be removed
    ✅ Delete commits before removing the image; a failed commit keeps both
"""

import logging
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import Text
from sqlalchemy.exc import OperationalError

from app.config import settings
from app.exceptions import DatabaseError, NotFoundError, ServerError, ValidationError
from app.models.travel_blog import TravelBlog
from app.services.asset_service import AssetDeletion, AssetService
from app.services.travel_blog_service import TravelBlogService, from_epoch_ms

# 2023-11-14T22:13:20Z
VISITED_MS = 1_700_000_000_000


async def make_user(credential_service, email="ada@example.com"):
    profile = await credential_service.register("Ada", email, "s3cret!")
    return profile.id


async def make_blog(service, owner_id, **overrides):
    fields = {
        "title": "Great Wall",
        "story": "Walked for hours along the ramparts.",
        "visited_location": ["Beijing", "Mutianyu"],
        "image_url": "http://test/uploads/wall.png",
        "visited_date": VISITED_MS,
    }
    fields.update(overrides)
    return await service.create(owner_id, **fields)


# The three collection reads; each must order favourites first
READ_OPERATIONS = {
    "list": lambda service, owner: service.list(owner),
    "search": lambda service, owner: service.search(owner, "road trip"),
    "filter": lambda service, owner: service.filter_by_date_range(owner, VISITED_MS, VISITED_MS),
}


class TestEpochConversion:

    def test_from_epoch_ms(self):
        assert from_epoch_ms(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert from_epoch_ms("1500") == datetime(1970, 1, 1, 0, 0, 1, 500_000, tzinfo=timezone.utc)

    def test_from_epoch_ms_rejects_text(self):
        with pytest.raises(ValueError):
            from_epoch_ms("yesterday")


class TestCreate:

    @pytest.mark.asyncio
    async def test_create(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        blog = await make_blog(blog_service, owner)

        assert blog.title == "Great Wall"
        assert blog.user_id == owner
        assert blog.visited_location == ["Beijing", "Mutianyu"]
        assert blog.is_favourite is False
        assert blog.visited_date.replace(tzinfo=None) == datetime(2023, 11, 14, 22, 13, 20)

    @pytest.mark.asyncio
    async def test_create_accepts_string_millis(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        blog = await make_blog(blog_service, owner, visited_date=str(VISITED_MS))
        assert blog.visited_date.replace(tzinfo=None) == from_epoch_ms(VISITED_MS).replace(tzinfo=None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "missing",
        ["title", "story", "visited_location", "image_url", "visited_date"],
    )
    async def test_create_missing_field(self, blog_service, credential_service, missing):
        owner = await make_user(credential_service)
        with pytest.raises(ValidationError, match="All fields are required"):
            await make_blog(blog_service, owner, **{missing: None})

    @pytest.mark.parametrize("column", ["title", "story", "image_url"])
    def test_text_columns_have_no_length_limit(self, column):
        # PostgreSQL rejects over-long VARCHAR values; SQLite would not notice
        column_type = TravelBlog.__table__.c[column].type
        assert isinstance(column_type, Text)
        assert getattr(column_type, "length", None) is None

    @pytest.mark.asyncio
    async def test_create_long_title(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        blog = await make_blog(blog_service, owner, title="Patagonia " * 100)
        assert len(blog.title) == 1000

    @pytest.mark.asyncio
    async def test_create_bad_date(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        with pytest.raises(ValidationError, match="visitedDate"):
            await make_blog(blog_service, owner, visited_date="last summer")


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_fields(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        blog = await make_blog(blog_service, owner)

        updated = await blog_service.update(
            owner,
            str(blog.id),
            title="Forbidden City",
            story="Crowded but worth it.",
            visited_location=["Beijing"],
            image_url="http://test/uploads/city.png",
            visited_date=VISITED_MS + 86_400_000,
        )

        assert updated.id == blog.id
        assert updated.title == "Forbidden City"
        assert updated.visited_location == ["Beijing"]
        assert updated.image_url == "http://test/uploads/city.png"

    @pytest.mark.asyncio
    async def test_update_without_image_uses_placeholder(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        blog = await make_blog(blog_service, owner)

        updated = await blog_service.update(
            owner,
            blog.id,
            title=blog.title,
            story=blog.story,
            visited_location=blog.visited_location,
            image_url="",
            visited_date=VISITED_MS,
        )

        assert updated.image_url == settings.placeholder_image_url
        assert updated.image_url.endswith("/assets/placeholder.png")

    @pytest.mark.asyncio
    async def test_update_missing_title(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        blog = await make_blog(blog_service, owner)
        with pytest.raises(ValidationError):
            await blog_service.update(
                owner, blog.id, title="", story="x", visited_location=[],
                image_url="", visited_date=VISITED_MS,
            )


class TestOwnership:

    @pytest.mark.asyncio
    async def test_other_user_cannot_touch_entry(self, blog_service, credential_service):
        owner = await make_user(credential_service, "owner@example.com")
        intruder = await make_user(credential_service, "intruder@example.com")
        blog = await make_blog(blog_service, owner)

        with pytest.raises(NotFoundError, match="Travel story not found"):
            await blog_service.set_favourite(intruder, blog.id, True)
        with pytest.raises(NotFoundError):
            await blog_service.delete(intruder, blog.id)
        with pytest.raises(NotFoundError):
            await blog_service.update(
                intruder, blog.id, title="Mine now", story="x",
                visited_location=[], image_url="", visited_date=VISITED_MS,
            )

        assert await blog_service.list(intruder) == []
        [still_there] = await blog_service.list(owner)
        assert still_there.title == "Great Wall"
        assert still_there.is_favourite is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("entry_id", ["not-a-uuid", str(uuid.uuid4())])
    async def test_unknown_entry(self, blog_service, credential_service, entry_id):
        owner = await make_user(credential_service)
        with pytest.raises(NotFoundError):
            await blog_service.set_favourite(owner, entry_id, True)


class TestListAndFavourites:

    @pytest.mark.asyncio
    async def test_favourites_first(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        first = await make_blog(blog_service, owner, title="Lisbon")
        second = await make_blog(blog_service, owner, title="Porto")
        third = await make_blog(blog_service, owner, title="Faro")

        await blog_service.set_favourite(owner, third.id, True)
        blogs = await blog_service.list(owner)

        assert blogs[0].id == third.id
        assert blogs[0].is_favourite is True
        assert {b.id for b in blogs[1:]} == {first.id, second.id}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", sorted(READ_OPERATIONS))
    @pytest.mark.parametrize(
        "favourite_positions",
        [(), (1, 3), (0, 4), (2, 3, 4), (0, 1, 2, 3, 4)],
    )
    async def test_every_read_puts_favourites_first(
        self, blog_service, credential_service, operation, favourite_positions
    ):
        owner = await make_user(credential_service)
        created = [
            await make_blog(blog_service, owner, title=f"Road trip {i}")
            for i in range(5)
        ]
        for position in favourite_positions:
            await blog_service.set_favourite(owner, created[position].id, True)

        results = await READ_OPERATIONS[operation](blog_service, owner)

        assert {b.id for b in results} == {b.id for b in created}
        flags = [b.is_favourite for b in results]
        assert flags == sorted(flags, reverse=True)
        assert {b.id for b in results if b.is_favourite} == {
            created[p].id for p in favourite_positions
        }

    @pytest.mark.asyncio
    async def test_unfavourite(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        blog = await make_blog(blog_service, owner)
        await blog_service.set_favourite(owner, blog.id, True)
        result = await blog_service.set_favourite(owner, blog.id, False)
        assert result.is_favourite is False

    @pytest.mark.asyncio
    async def test_set_favourite_requires_value(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        blog = await make_blog(blog_service, owner)
        with pytest.raises(ValidationError, match="isFavourite is required"):
            await blog_service.set_favourite(owner, blog.id, None)


class TestSearch:

    @pytest.mark.asyncio
    async def test_search_title_story_and_location(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        by_title = await make_blog(blog_service, owner, title="Great Wall", story="Long walk.", visited_location=["Beijing"])
        by_location = await make_blog(blog_service, owner, title="New York", story="Busy.", visited_location=["Wall Street"])
        by_story = await make_blog(blog_service, owner, title="Berlin", story="Saw what is left of the wall.", visited_location=[])
        await make_blog(blog_service, owner, title="Kyoto", story="Temples.", visited_location=["Gion"])

        found = await blog_service.search(owner, "WALL")

        assert {b.id for b in found} == {by_title.id, by_location.id, by_story.id}

    @pytest.mark.asyncio
    async def test_search_is_literal(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        await make_blog(blog_service, owner, title="Great Wall")
        assert await blog_service.search(owner, ".*") == []

    @pytest.mark.asyncio
    async def test_search_only_own_entries(self, blog_service, credential_service):
        owner = await make_user(credential_service, "owner@example.com")
        other = await make_user(credential_service, "other@example.com")
        await make_blog(blog_service, other, title="Great Wall")
        assert await blog_service.search(owner, "wall") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", None])
    async def test_search_requires_query(self, blog_service, credential_service, query):
        owner = await make_user(credential_service)
        with pytest.raises(ValidationError, match="query is required"):
            await blog_service.search(owner, query)

    @pytest.mark.asyncio
    async def test_whitespace_query_is_searched_literally(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        spaced = await make_blog(blog_service, owner, title="Gap", story="Then   silence.")
        await make_blog(blog_service, owner, title="Kyoto", story="Temples.", visited_location=["Gion"])

        found = await blog_service.search(owner, "   ")

        assert [b.id for b in found] == [spaced.id]


class TestDateFilter:

    @pytest.mark.asyncio
    async def test_bounds_are_inclusive(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        blog = await make_blog(blog_service, owner)

        exact = await blog_service.filter_by_date_range(owner, VISITED_MS, VISITED_MS)
        assert [b.id for b in exact] == [blog.id]

        as_strings = await blog_service.filter_by_date_range(owner, str(VISITED_MS - 1), str(VISITED_MS))
        assert [b.id for b in as_strings] == [blog.id]

    @pytest.mark.asyncio
    async def test_outside_range_excluded(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        await make_blog(blog_service, owner)

        assert await blog_service.filter_by_date_range(owner, VISITED_MS + 1, VISITED_MS + 10_000) == []
        assert await blog_service.filter_by_date_range(owner, VISITED_MS - 10_000, VISITED_MS - 1) == []

    @pytest.mark.asyncio
    async def test_missing_bound(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        with pytest.raises(ValidationError):
            await blog_service.filter_by_date_range(owner, VISITED_MS, None)

    @pytest.mark.asyncio
    async def test_unparseable_bound(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        with pytest.raises(ServerError):
            await blog_service.filter_by_date_range(owner, "abc", VISITED_MS)


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_entry_and_image(
        self, blog_service, credential_service, asset_service, uploads_dir, sample_image_bytes
    ):
        owner = await make_user(credential_service)
        stored = await asset_service.store(sample_image_bytes, "wall.png")
        blog = await make_blog(blog_service, owner, image_url=stored.url)

        deletion = await blog_service.delete(owner, blog.id)

        assert deletion.deleted
        assert not (uploads_dir / stored.filename).exists()
        assert await blog_service.list(owner) == []

    @pytest.mark.asyncio
    async def test_delete_is_durable_before_image_removed(
        self, blog_service, credential_service, asset_service, db_session, uploads_dir, sample_image_bytes
    ):
        owner = await make_user(credential_service)
        stored = await asset_service.store(sample_image_bytes, "wall.png")
        blog = await make_blog(blog_service, owner, image_url=stored.url)
        await db_session.commit()

        await blog_service.delete(owner, blog.id)
        await db_session.rollback()

        # Entry and file are gone together; a later rollback cannot revive the row
        assert await blog_service.list(owner) == []
        assert not (uploads_dir / stored.filename).exists()

    @pytest.mark.asyncio
    async def test_failed_commit_keeps_entry_and_image(
        self, blog_service, credential_service, asset_service, db_session, uploads_dir, sample_image_bytes
    ):
        owner = await make_user(credential_service)
        stored = await asset_service.store(sample_image_bytes, "wall.png")
        blog = await make_blog(blog_service, owner, image_url=stored.url)
        await db_session.commit()

        with patch.object(
            db_session, "commit", AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk full")))
        ):
            with pytest.raises(DatabaseError):
                await blog_service.delete(owner, blog.id)

        assert (uploads_dir / stored.filename).exists()
        [survivor] = await blog_service.list(owner)
        assert survivor.id == blog.id
        assert survivor.image_url == stored.url

    @pytest.mark.asyncio
    async def test_delete_with_missing_image(self, blog_service, credential_service):
        owner = await make_user(credential_service)
        blog = await make_blog(blog_service, owner, image_url="http://test/uploads/gone.png")

        deletion = await blog_service.delete(owner, blog.id)

        assert not deletion.deleted
        assert deletion.ok
        assert await blog_service.list(owner) == []

    @pytest.mark.asyncio
    async def test_delete_logs_image_failure(self, db_session, credential_service, caplog):
        assets = MagicMock(spec=AssetService)
        assets.delete = AsyncMock(
            return_value=AssetDeletion(filename="wall.png", deleted=False, error="Permission denied")
        )
        service = TravelBlogService(db_session, assets)
        owner = await make_user(credential_service)
        blog = await make_blog(service, owner)

        with caplog.at_level(logging.WARNING, logger="app.services.travel_blog_service"):
            deletion = await service.delete(owner, blog.id)

        assert not deletion.ok
        assert "could not be removed" in caplog.text
        assert await service.list(owner) == []
        assets.delete.assert_awaited_once_with("http://test/uploads/wall.png")
