"""
Error taxonomy for the Snippet Board API.

Every error response has the body ``{"error": <kind>, "message": <text>}``.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from snippet_board.core.store import StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """An error that maps directly to an HTTP response."""

    status_code: int = 500
    error: str = "internal-error"

    def __init__(self, message: str, error: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class RequestBodyFieldError(ApiError):
    status_code = 400
    error = "request-body-field-error"

    def __init__(self, fields: List[str]):
        self.fields = fields
        super().__init__(f"Request body is missing or has invalid field(s): {', '.join(fields)}.")


class NoCommentToPutError(ApiError):
    status_code = 400
    error = "no-comment-to-put"

    def __init__(self):
        super().__init__("No comment id was given to update.")


class NotFoundError(ApiError):
    status_code = 404


class CardNotFoundError(NotFoundError):
    error = "card(s)-not-found"

    def __init__(self):
        super().__init__("No card found with the given id.")


class CommentNotFoundError(NotFoundError):
    error = "comment(s)-not-found"

    def __init__(self):
        super().__init__("No comment found with the given id.")


class ParentCardNotFoundError(NotFoundError):
    error = "parent-card-not-found"

    def __init__(self, parent: int):
        self.parent = parent
        super().__init__(f"Parent card {parent} does not exist.")


class RedditLinkFailedError(ApiError):
    status_code = 422
    error = "reddit-link-failed"

    def __init__(self, message: str = "The Reddit link is invalid or could not be resolved."):
        super().__init__(message)


class InvalidParentTypeError(ApiError):
    status_code = 422
    error = "invalid-type-of-parent"

    def __init__(self):
        super().__init__("Field 'parent' must be an integer card id.")


class RedditFetchFailedError(ApiError):
    status_code = 502
    error = "reddit-fetch-failed"

    def __init__(self):
        super().__init__("Could not fetch data from Reddit for this card.")


class DatabaseReadError(ApiError):
    status_code = 500
    error = "database-read-error"

    def __init__(self):
        super().__init__("Failed to read from the database.")


class DatabaseWriteError(ApiError):
    status_code = 500
    error = "database-write-error"

    def __init__(self):
        super().__init__("Failed to write to the database.")


@contextmanager
def translate_store_errors() -> Iterator[None]:
    """Turn store failures raised inside the block into 500 API errors."""
    try:
        yield
    except StoreReadError as e:
        logger.error(f"Store read failed: {e.message}")
        raise DatabaseReadError() from e
    except StoreWriteError as e:
        logger.error(f"Store write failed: {e.message}")
        raise DatabaseWriteError() from e


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError as its JSON error body."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render any other exception as a generic 500 error body."""
    logger.exception(f"{request.method} {request.url.path} -> unhandled {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": ApiError.error, "message": "An unexpected error occurred."},
    )
