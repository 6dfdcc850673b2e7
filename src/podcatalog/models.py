"""Response models for the podcast catalog.

These are the shapes the HTTP layer serializes. They are built from
query results by explicit field mapping in the storage layer.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """A catalog user. Only podcast authors exist in practice."""

    id: int
    username: str
    email: str
    created_at: datetime


class Episode(BaseModel):
    """A single podcast episode."""

    id: int
    podcast_id: int
    title: str
    description: str
    audio_url: str
    duration: int = Field(gt=0, description="Length in seconds")
    published_at: datetime


class Podcast(BaseModel):
    """A podcast with its author's username joined in."""

    id: int
    title: str
    description: str
    cover_image_url: str | None = None
    author_id: int
    created_at: datetime
    author_name: str


class PodcastDetail(Podcast):
    """A podcast together with its episodes, newest first."""

    episodes: list[Episode] = Field(default_factory=list)
