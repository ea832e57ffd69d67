"""
Travel Journal Backend — TravelBlog SQLAlchemy Model
======================================================

What:  ORM model for the `travel_blogs` table (one journal entry per row).
Who:   Owned by TravelBlogService; every query against it filters on user_id.

Table Design Rationale:
    - user_id: FK to users; the ownership key every query is scoped by
    - visited_location: JSON array of place names, order preserved
    - image_url: absolute URL into /uploads (or the /assets placeholder)
    - visited_date: UTC timestamp converted from the client's epoch millis
    - is_favourite: drives result ordering (favourites first)

    Composite index (user_id, is_favourite, created_on) matches the
    list/search/filter access path: WHERE user_id = ? ORDER BY is_favourite
    DESC, created_on.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Text, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class TravelBlog(Base):
    """
    A single travel-journal entry owned by exactly one user.

    Lifecycle:
        1. Created by its owner (is_favourite = False)
        2. Edited or (un)favourited by its owner only
        3. Deleted by its owner; the referenced upload is removed best-effort
    """

    __tablename__ = "travel_blogs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    story: Mapped[str] = mapped_column(Text, nullable=False)

    visited_location: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    image_url: Mapped[str] = mapped_column(Text, nullable=False)

    visited_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    is_favourite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_travel_blogs_owner_order", "user_id", "is_favourite", "created_on"),
    )

    def __repr__(self) -> str:
        return (
            f"<TravelBlog(id={self.id}, user_id={self.user_id}, "
            f"title='{self.title}', is_favourite={self.is_favourite})>"
        )
