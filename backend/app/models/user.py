"""
Travel Journal Backend — User SQLAlchemy Model
================================================

What:  ORM model for the `users` table.
Who:   Written by CredentialService at registration; read at login and by
       the profile endpoint.

Table Design Rationale:
    - UUID primary key: non-sequential, embedded in session tokens as `sub`
    - email: unique index; compared exactly as stored (case-sensitive)
    - password_hash: passlib hash string (algorithm, salt and digest in one
      column); never leaves the service layer
    - created_on: UTC with timezone
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """
    A registered account.

    Lifecycle:
        Created by registration, read by login and profile lookup. This
        service never updates or deletes users.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    full_name: Mapped[str] = mapped_column(Text, nullable=False)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        # password_hash deliberately left out
        return f"<User(id={self.id}, email='{self.email}')>"
