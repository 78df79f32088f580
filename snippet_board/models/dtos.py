"""
Pydantic models for the Snippet Board service.

Stored entities (cards, comments) use camelCase aliases so the JSON document on
disk and the API payloads keep the field names the client page expects.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision.

    Example: ``2021-12-13T22:16:28.278Z``
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class StoredModel(BaseModel):
    """Base for entities persisted in the store document."""

    # Unknown fields written by other tools survive a rewrite of the document.
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_json(self) -> Dict[str, Any]:
        """JSON-compatible dict using the on-disk field names."""
        return self.model_dump(by_alias=True, mode="json")


class RedditData(StoredModel):
    """
    Cached subset of a Reddit comment's metadata.

    Refreshed whenever the owning card is read; never used for ordering or counts.
    """
    score: int = 0
    author: str = ""
    num_sub_comments: int = Field(default=0, alias="numSubComments")


class Card(StoredModel):
    """A shared code snippet linked to a Reddit comment thread."""
    id: int = Field(..., ge=0)
    title: str
    language: str
    code: str
    reddit_url: str = Field(..., alias="redditUrl")
    likes: int = Field(default=0, ge=0)
    time: datetime
    comments: List[int] = Field(default_factory=list)
    reddit_data: Optional[RedditData] = Field(default=None, alias="redditData")

    @field_validator("time")
    @classmethod
    def _normalize_time(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_serializer("time")
    def _serialize_time(self, value: datetime) -> str:
        return format_timestamp(value)


class Comment(StoredModel):
    """A user comment attached to exactly one card through ``parent``."""
    id: int = Field(..., ge=0)
    content: str
    parent: int
    time: datetime
    last_edited: Optional[datetime] = Field(default=None, alias="lastEdited")

    @field_validator("time", "last_edited")
    @classmethod
    def _normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    @field_serializer("time", "last_edited")
    def _serialize_timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return format_timestamp(value) if value is not None else None


class StoreDocument(BaseModel):
    """The whole JSON document: both collections in insertion order."""
    cards: List[Card]
    comments: List[Comment]

    model_config = ConfigDict(extra="allow")

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# Request bodies


class CardCreateRequest(BaseModel):
    """Body of ``POST /cards``."""
    title: str
    language: str
    code: str
    reddit_url: str = Field(..., alias="redditUrl")

    model_config = ConfigDict(populate_by_name=True)


class CommentCreateRequest(BaseModel):
    """
    Body of ``POST /comments``.

    ``parent`` is kept loose here: whether it converts to an integer is a
    separate check with its own error kind.
    """
    content: str
    parent: Any


class CommentUpdateRequest(BaseModel):
    """Body of ``PUT /comments/{id}``."""
    content: str


# Responses


class CardCreatedResponse(BaseModel):
    message: str
    id: int


class CommentCreatedResponse(BaseModel):
    message: str
    new_total_comments: int = Field(..., alias="newTotalComments")
    id: int

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Shape of every error body returned by the API."""
    error: str
    message: str
