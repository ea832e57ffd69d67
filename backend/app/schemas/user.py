"""
Travel Journal Backend — Account & Session Schemas
====================================================

What:  Request bodies for registration/login and the user views returned.
Why:   The password hash never has a field here, so no response model can
       leak it even if handed a full ORM User.

Request fields are Optional on purpose: a missing field is reported by the
credential service as a 400 "All fields are required", not as a schema error.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel, Envelope


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateAccountRequest(CamelModel):
    full_name: Optional[str] = Field(default=None, description="Display name")
    email: Optional[str] = Field(default=None, description="Login email (unique)")
    password: Optional[str] = Field(default=None, description="Plaintext password")


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserPublic(CamelModel):
    """Name and email, as returned alongside a freshly issued token."""

    full_name: str
    email: str


class UserProfile(UserPublic):
    """Caller's profile for GET /get-user."""

    id: uuid.UUID
    created_on: datetime


class AuthResponse(Envelope):
    """Returned by /create-account and /login."""

    user: UserPublic
    access_token: str = Field(description="Bearer token, valid for 72 hours")


class UserResponse(Envelope):
    user: UserProfile
