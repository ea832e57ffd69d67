"""
Travel Journal Backend — Travel Blog Service (Entry Repository)
=================================================================

What:  Create, list, edit, favourite, delete, search and date-filter journal
       entries for one owner at a time.
Why:   Ownership is the only access rule in the system. Putting every query
       behind owner-scoped helpers here means routes cannot forget it.
How:   Queries run on an AsyncSession handed in by the caller; deletion also
       asks the AssetService to remove the entry's uploaded image.
Who:   Constructed per request by app.dependencies.get_travel_blog_service.

Ownership:
    Every lookup filters on (id, user_id). An entry owned by someone else is
    indistinguishable from one that does not exist: both raise NotFoundError.

Ordering:
    Every collection result is ORDER BY is_favourite DESC, created_on ASC.
    Only "favourites first" is part of the contract; tie order is not.

Dates:
    Clients send visitedDate and filter bounds as epoch milliseconds. They are
    converted with integer timedelta arithmetic, so a bound equal to a stored
    visited_date compares equal.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Union

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import DatabaseError, NotFoundError, ServerError, ValidationError
from app.models.travel_blog import TravelBlog
from app.schemas.travel_blog import TravelBlogResponse
from app.services.asset_service import AssetDeletion, AssetService

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

EpochMillis = Union[int, str]


def from_epoch_ms(value: EpochMillis) -> datetime:
    """
    UTC datetime for an epoch-millisecond timestamp.

    Raises:
        ValueError, TypeError, OverflowError for anything that is not an
        integer number of milliseconds in datetime's range.
    """
    return EPOCH + timedelta(milliseconds=int(value))


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class TravelBlogService:
    """
    Entry repository scoped by owner.

    Responsibilities:
        - create() / update() / set_favourite(): validated writes
        - list() / search() / filter_by_date_range(): favourites-first reads
        - delete(): row removal plus best-effort image cleanup
    """

    def __init__(self, session: AsyncSession, assets: AssetService):
        self.session = session
        self.assets = assets

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(
        self,
        owner_id: uuid.UUID,
        title: Optional[str],
        story: Optional[str],
        visited_location: Optional[List[str]],
        image_url: Optional[str],
        visited_date: Optional[EpochMillis],
    ) -> TravelBlogResponse:
        """
        Raises:
            ValidationError: a required field is missing, or visited_date is
                             not epoch milliseconds
        """
        if (
            _is_blank(title)
            or _is_blank(story)
            or visited_location is None
            or _is_blank(image_url)
            or _is_blank(visited_date)
        ):
            raise ValidationError("All fields are required")

        blog = TravelBlog(
            user_id=owner_id,
            title=title,
            story=story,
            visited_location=list(visited_location),
            image_url=image_url,
            visited_date=self._parse_visited_date(visited_date),
        )

        try:
            self.session.add(blog)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating travel blog: %s", e, exc_info=True)
            raise DatabaseError(
                message="Could not save the travel story. Please try again.",
                context={"owner_id": str(owner_id)},
            ) from e

        logger.info("Travel blog %s created for user %s", blog.id, owner_id)
        return TravelBlogResponse.model_validate(blog)

    async def update(
        self,
        owner_id: uuid.UUID,
        entry_id: Union[str, uuid.UUID],
        title: Optional[str],
        story: Optional[str],
        visited_location: Optional[List[str]],
        image_url: Optional[str],
        visited_date: Optional[EpochMillis],
    ) -> TravelBlogResponse:
        """
        Replace an entry's editable fields.

        An empty image_url stores the placeholder image URL instead.

        Raises:
            ValidationError: title/story/visited_location/visited_date missing
            NotFoundError: no such entry for this owner
        """
        if (
            _is_blank(title)
            or _is_blank(story)
            or visited_location is None
            or _is_blank(visited_date)
        ):
            raise ValidationError("All fields are required")

        parsed_date = self._parse_visited_date(visited_date)
        blog = await self._get_owned(owner_id, entry_id)

        blog.title = title
        blog.story = story
        blog.visited_location = list(visited_location)
        blog.image_url = image_url or settings.placeholder_image_url
        blog.visited_date = parsed_date

        await self._flush("updating", blog.id)
        logger.info("Travel blog %s updated", blog.id)
        return TravelBlogResponse.model_validate(blog)

    async def set_favourite(
        self,
        owner_id: uuid.UUID,
        entry_id: Union[str, uuid.UUID],
        is_favourite: Optional[bool],
    ) -> TravelBlogResponse:
        if is_favourite is None:
            raise ValidationError("isFavourite is required", field="isFavourite")

        blog = await self._get_owned(owner_id, entry_id)
        blog.is_favourite = is_favourite
        await self._flush("favouriting", blog.id)
        return TravelBlogResponse.model_validate(blog)

    async def delete(
        self,
        owner_id: uuid.UUID,
        entry_id: Union[str, uuid.UUID],
    ) -> AssetDeletion:
        """
        Delete an entry, then try to delete the image it referenced.

        The row deletion is committed before the file is touched, so a
        failed or rolled-back delete never leaves an entry pointing at a
        removed image. A failed file removal is logged here and reported in
        the returned AssetDeletion; it is never raised.

        Raises:
            NotFoundError: no such entry for this owner
            DatabaseError: the delete could not be committed (file untouched)
        """
        blog = await self._get_owned(owner_id, entry_id)
        blog_id, image_url = blog.id, blog.image_url

        try:
            await self.session.delete(blog)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Database error deleting travel blog %s: %s", blog_id, e, exc_info=True)
            raise DatabaseError(
                message="Could not delete the travel story. Please try again.",
                context={"blog_id": str(blog_id)},
            ) from e

        deletion = await self.assets.delete(image_url)
        if not deletion.ok:
            logger.warning(
                "Travel blog %s deleted but image %r could not be removed: %s",
                blog_id,
                deletion.filename,
                deletion.error,
            )
        logger.info("Travel blog %s deleted", blog_id)
        return deletion

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list(self, owner_id: uuid.UUID) -> List[TravelBlogResponse]:
        blogs = await self._fetch(self._owned_query(owner_id), "listing")
        return [TravelBlogResponse.model_validate(b) for b in blogs]

    async def search(self, owner_id: uuid.UUID, query: Optional[str]) -> List[TravelBlogResponse]:
        """
        Entries whose title, story, or any visited location contains `query`,
        ignoring case. The query is a literal substring, not a pattern.

        Whitespace is part of the query like any other character, so "   "
        is a valid (if unusual) search.

        Raises:
            ValidationError: missing or empty query
        """
        if not query:
            raise ValidationError("query is required", field="query")

        needle = query.casefold()
        blogs = await self._fetch(self._owned_query(owner_id), "searching")
        return [
            TravelBlogResponse.model_validate(b)
            for b in blogs
            if self._matches(b, needle)
        ]

    async def filter_by_date_range(
        self,
        owner_id: uuid.UUID,
        start: Optional[EpochMillis],
        end: Optional[EpochMillis],
    ) -> List[TravelBlogResponse]:
        """
        Entries with start <= visited_date <= end (epoch milliseconds).

        Raises:
            ValidationError: a bound is missing
            ServerError: a bound is not an integer timestamp
        """
        if _is_blank(start) or _is_blank(end):
            raise ValidationError("startDate and endDate are required")

        try:
            start_dt, end_dt = from_epoch_ms(start), from_epoch_ms(end)
        except (TypeError, ValueError, OverflowError) as e:
            logger.error("Unusable date filter bounds start=%r end=%r: %s", start, end, e)
            raise ServerError(
                message="Could not filter travel stories by date.",
                context={"start": str(start), "end": str(end)},
            ) from e

        stmt = self._owned_query(owner_id).where(
            TravelBlog.visited_date >= start_dt,
            TravelBlog.visited_date <= end_dt,
        )
        blogs = await self._fetch(stmt, "filtering")
        return [TravelBlogResponse.model_validate(b) for b in blogs]

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _owned_query(owner_id: uuid.UUID) -> Select:
        return (
            select(TravelBlog)
            .where(TravelBlog.user_id == owner_id)
            .order_by(TravelBlog.is_favourite.desc(), TravelBlog.created_on.asc())
        )

    @staticmethod
    def _matches(blog: TravelBlog, needle: str) -> bool:
        haystacks = [blog.title, blog.story, *(blog.visited_location or [])]
        return any(needle in (text or "").casefold() for text in haystacks)

    @staticmethod
    def _parse_visited_date(value: EpochMillis) -> datetime:
        try:
            return from_epoch_ms(value)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError(
                "visitedDate must be a timestamp in milliseconds",
                field="visitedDate",
                context={"value": str(value)},
            )

    async def _get_owned(
        self,
        owner_id: uuid.UUID,
        entry_id: Union[str, uuid.UUID],
    ) -> TravelBlog:
        try:
            blog_id = entry_id if isinstance(entry_id, uuid.UUID) else uuid.UUID(str(entry_id))
        except ValueError:
            raise NotFoundError(resource="travel blog", message="Travel story not found")

        try:
            result = await self.session.execute(
                select(TravelBlog).where(
                    TravelBlog.id == blog_id,
                    TravelBlog.user_id == owner_id,
                )
            )
            blog = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching travel blog %s: %s", blog_id, e)
            raise DatabaseError(context={"blog_id": str(blog_id)}) from e

        if blog is None:
            raise NotFoundError(
                resource="travel blog",
                message="Travel story not found",
                context={"blog_id": str(blog_id)},
            )
        return blog

    async def _fetch(self, stmt: Select, action: str) -> Sequence[TravelBlog]:
        try:
            result = await self.session.execute(stmt)
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error %s travel blogs: %s", action, e, exc_info=True)
            raise DatabaseError(
                message="Could not retrieve travel stories. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def _flush(self, action: str, blog_id: uuid.UUID) -> None:
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Database error %s travel blog %s: %s", action, blog_id, e, exc_info=True)
            raise DatabaseError(
                message="Could not save the travel story. Please try again.",
                context={"blog_id": str(blog_id)},
            ) from e
