"""
Travel Journal Backend — Travel Blog Schemas
==============================================

What:  Request bodies and response views for journal entries and images.
Who:   Used by routes/travel_blogs.py and routes/images.py.

Wire shape of an entry:
    {
        "id": "5b0c...",
        "title": "A Day at the Great Wall",
        "story": "...",
        "visitedLocation": ["Beijing", "Mutianyu"],
        "isFavourite": false,
        "userId": "9e1d...",
        "imageUrl": "http://localhost:8000/uploads/1c9e....jpg",
        "visitedDate": "2024-05-01T00:00:00Z",
        "createdOn": "2024-05-03T18:22:10.511Z"
    }
"""

import uuid
from datetime import datetime
from typing import List, Optional, Union

from pydantic import Field

from app.schemas.common import CamelModel, Envelope


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class TravelBlogRequest(CamelModel):
    """
    Body of POST /add-travel-blog and PUT /edit-blog/{id}.

    Required-ness differs between create (image required) and edit (image
    falls back to the placeholder), so TravelBlogService checks it.
    visited_date is epoch milliseconds, as a number or a numeric string.
    """

    title: Optional[str] = None
    story: Optional[str] = None
    visited_location: Optional[List[str]] = None
    image_url: Optional[str] = None
    visited_date: Optional[Union[int, str]] = None


class FavouriteRequest(CamelModel):
    is_favourite: Optional[bool] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class TravelBlogResponse(CamelModel):
    id: uuid.UUID
    title: str
    story: str
    visited_location: List[str]
    is_favourite: bool
    user_id: uuid.UUID
    image_url: str
    visited_date: datetime
    created_on: datetime


class StoryResponse(Envelope):
    """A single entry after create, edit, or favourite toggle."""

    story: TravelBlogResponse


class BlogListResponse(Envelope):
    blogs: List[TravelBlogResponse] = Field(description="Favourites first")


class StoryListResponse(Envelope):
    """Search and date-filter results."""

    stories: List[TravelBlogResponse] = Field(description="Favourites first")


class ImageUploadResponse(Envelope):
    image_url: str = Field(description="Public URL of the stored image")
