"""
Travel Journal Backend — Travel Blog Route Handlers
=====================================================

What:  Entry CRUD, favourite toggle, search, and date-range filter.
Who:   Called by the frontend home page, entry editor, and search bar.

Every route here declares CurrentUserId first, so the token is validated
before a database session is opened; the resolved id is the only owner id
passed to TravelBlogService.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query

from app.dependencies import CurrentUserId, TravelBlogServiceDep
from app.schemas.common import Envelope, ErrorResponse
from app.schemas.travel_blog import (
    BlogListResponse,
    FavouriteRequest,
    StoryListResponse,
    StoryResponse,
    TravelBlogRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Travel Blogs"])

_AUTH = {401: {"description": "Not authenticated", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Entry not found for this user", "model": ErrorResponse}}
_BAD_REQUEST = {400: {"description": "Missing or malformed fields", "model": ErrorResponse}}


@router.post(
    "/add-travel-blog",
    status_code=201,
    response_model=StoryResponse,
    responses={**_AUTH, **_BAD_REQUEST},
    summary="Create a travel blog entry",
)
async def add_travel_blog(
    owner_id: CurrentUserId,
    body: TravelBlogRequest,
    blogs: TravelBlogServiceDep,
) -> StoryResponse:
    story = await blogs.create(
        owner_id,
        title=body.title,
        story=body.story,
        visited_location=body.visited_location,
        image_url=body.image_url,
        visited_date=body.visited_date,
    )
    return StoryResponse(message="Added Successfully", story=story)


@router.get(
    "/get-all-blogs",
    response_model=BlogListResponse,
    responses=_AUTH,
    summary="List the caller's entries, favourites first",
)
async def get_all_blogs(
    owner_id: CurrentUserId,
    blogs: TravelBlogServiceDep,
) -> BlogListResponse:
    return BlogListResponse(blogs=await blogs.list(owner_id))


@router.put(
    "/edit-blog/{blog_id}",
    response_model=StoryResponse,
    responses={**_AUTH, **_BAD_REQUEST, **_NOT_FOUND},
    summary="Update an entry",
)
async def edit_blog(
    blog_id: str,
    owner_id: CurrentUserId,
    body: TravelBlogRequest,
    blogs: TravelBlogServiceDep,
) -> StoryResponse:
    story = await blogs.update(
        owner_id,
        blog_id,
        title=body.title,
        story=body.story,
        visited_location=body.visited_location,
        image_url=body.image_url,
        visited_date=body.visited_date,
    )
    return StoryResponse(message="Update Successful", story=story)


@router.delete(
    "/delete-blog/{blog_id}",
    response_model=Envelope,
    responses={**_AUTH, **_NOT_FOUND},
    summary="Delete an entry and its uploaded image",
)
async def delete_blog(
    blog_id: str,
    owner_id: CurrentUserId,
    blogs: TravelBlogServiceDep,
) -> Envelope:
    # Image cleanup outcome is logged by the service, not reported here
    await blogs.delete(owner_id, blog_id)
    return Envelope(message="Travel Blog deleted successfully")


@router.put(
    "/update-is-favourite/{blog_id}",
    response_model=StoryResponse,
    responses={**_AUTH, **_BAD_REQUEST, **_NOT_FOUND},
    summary="Set or clear the favourite flag",
)
async def update_is_favourite(
    blog_id: str,
    owner_id: CurrentUserId,
    body: FavouriteRequest,
    blogs: TravelBlogServiceDep,
) -> StoryResponse:
    story = await blogs.set_favourite(owner_id, blog_id, body.is_favourite)
    return StoryResponse(message="Update Successful", story=story)


@router.get(
    "/search",
    response_model=StoryListResponse,
    responses={**_AUTH, **_BAD_REQUEST},
    summary="Case-insensitive search over title, story, and locations",
)
async def search_blogs(
    owner_id: CurrentUserId,
    blogs: TravelBlogServiceDep,
    query: Optional[str] = Query(default=None, description="Substring to look for"),
) -> StoryListResponse:
    return StoryListResponse(stories=await blogs.search(owner_id, query))


@router.get(
    "/travel-blogs/filter",
    response_model=StoryListResponse,
    responses={**_AUTH, **_BAD_REQUEST},
    summary="Entries visited within an inclusive date range",
)
async def filter_blogs(
    owner_id: CurrentUserId,
    blogs: TravelBlogServiceDep,
    start_date: Optional[str] = Query(
        default=None, alias="startDate", description="Range start, epoch milliseconds"
    ),
    end_date: Optional[str] = Query(
        default=None, alias="endDate", description="Range end, epoch milliseconds"
    ),
) -> StoryListResponse:
    stories = await blogs.filter_by_date_range(owner_id, start_date, end_date)
    return StoryListResponse(stories=stories)
