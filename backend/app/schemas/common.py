"""
Travel Journal Backend — Shared Pydantic Schemas
==================================================

What:  Base model and the response envelope every endpoint returns.
Why:   The frontend reads camelCase JSON and checks one boolean `error` flag
       on every response, success or failure.

Envelope:
    Success:  {"error": false, "message": "...", <payload fields>}
    Failure:  {"error": true,  "message": "...", "request_id": "..."}
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for wire models: snake_case in Python, camelCase on the wire.

    populate_by_name lets tests and services construct models with the
    Python field names while clients keep sending camelCase.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class Envelope(CamelModel):
    """Fields shared by every successful response body."""

    error: bool = Field(default=False, description="True only when nothing was done, e.g. image not found")
    message: str = Field(default="", description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    Body of every error response (documented in OpenAPI, built in main.py).

    Example:
        {
            "error": true,
            "message": "All fields are required",
            "request_id": "1f3a9c2e"
        }
    """

    error: bool = Field(default=True, description="Always true on failure")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check report returned by GET /health."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
