"""
Models package for the Snippet Board service.

This package contains the Pydantic models for stored entities and API payloads.
"""

from .dtos import (
    Card,
    CardCreateRequest,
    CardCreatedResponse,
    Comment,
    CommentCreateRequest,
    CommentCreatedResponse,
    CommentUpdateRequest,
    ErrorResponse,
    RedditData,
    StoreDocument,
    format_timestamp,
    utc_now,
)

__all__ = [
    "Card",
    "CardCreateRequest",
    "CardCreatedResponse",
    "Comment",
    "CommentCreateRequest",
    "CommentCreatedResponse",
    "CommentUpdateRequest",
    "ErrorResponse",
    "RedditData",
    "StoreDocument",
    "format_timestamp",
    "utc_now",
]
