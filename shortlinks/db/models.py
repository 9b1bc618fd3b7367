"""
Database Models for the shortlinks service

This module defines the SQLModel schema for Link, the single stored entity:
the mapping between a short code and the normalized original URL, together
with its click counters.

Design Decisions:
- Unique index on short_code for the redirect lookup (most critical path)
- Unique index on url_hash (SHA-256 of original_url): a concurrent shorten of
  the same URL hits the constraint and reuses the winner's record. Hashing
  keeps the index entry fixed-size however long the URL is
- Index on created_at for the newest-first listings
- clicks and last_clicked live on the row so a redirect is a single UPDATE
"""

import hashlib
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlmodel import Column, Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def url_digest(url: str) -> str:
    """Hex SHA-256 of a normalized URL, the dedup key for links."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


class Link(SQLModel, table=True):
    """
    Stored short link.

    Fields:
    - id: Auto-incrementing primary key, assigned by the store
    - title: Display name (caller supplied or derived from the hostname)
    - original_url: Normalized target URL
    - url_hash: SHA-256 of original_url, unique
    - short_code: Unique 6-character base62 code
    - clicks: Number of successful redirects
    - created_at: Creation time, never changes
    - updated_at: Refreshed on every redirect
    - last_clicked: Time of the latest redirect, None until the first one
    """
    __tablename__ = "links"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(
        default="Untitled",
        sa_column=Column(String(255), nullable=False, default="Untitled")
    )
    original_url: str = Field(
        sa_column=Column(Text, nullable=False)
    )
    url_hash: str = Field(
        sa_column=Column(String(64), nullable=False, unique=True, index=True)
    )
    short_code: str = Field(
        sa_column=Column(String(20), nullable=False, unique=True, index=True),
        max_length=20
    )
    clicks: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    last_clicked: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
