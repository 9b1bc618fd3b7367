"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Field names are snake_case in Python and camelCase on the wire, matching
what the frontend sends and reads (originalUrl, shortCode, lastClicked...).
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic.alias_generators import to_camel

from shortlinks.core.url_builder import build_short_url
from shortlinks.db.models import Link


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(CamelModel):
    """Request model for URL shortening endpoint."""
    original_url: StrictStr = Field(
        ..., min_length=1, description="The URL to shorten, scheme optional"
    )
    title: Optional[StrictStr] = Field(
        default=None, description="Display title; defaults to the URL's hostname"
    )


class LinkResponse(CamelModel):
    """A stored link plus its public short URL."""
    id: int
    title: str
    original_url: str = Field(..., description="The normalized target URL")
    short_code: str = Field(..., description="The 6-character short code")
    clicks: int = Field(0, description="Number of redirects served")
    created_at: datetime
    updated_at: datetime
    last_clicked: Optional[datetime] = None
    short_url: str = Field(..., description="The complete short URL")

    @field_validator("created_at", "updated_at", "last_clicked")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands timestamps back without tzinfo; they are stored as UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_link(cls, link: Link, base_url: str) -> "LinkResponse":
        return cls(
            id=link.id,
            title=link.title,
            original_url=link.original_url,
            short_code=link.short_code,
            clicks=link.clicks,
            created_at=link.created_at,
            updated_at=link.updated_at,
            last_clicked=link.last_clicked,
            short_url=build_short_url(link.short_code, base_url),
        )


class HealthResponse(BaseModel):
    status: str
