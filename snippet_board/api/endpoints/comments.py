"""
Comment API endpoints.

Comments belong to exactly one card. Creating a comment records its id on the
parent card in the same store write.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, Query, Response

from snippet_board.api.dependencies import get_json_body, get_store
from snippet_board.api.errors import (
    CommentNotFoundError,
    InvalidParentTypeError,
    NoCommentToPutError,
    ParentCardNotFoundError,
    RequestBodyFieldError,
    translate_store_errors,
)
from snippet_board.core.resolution import parse_path_id, resolve
from snippet_board.core.store import JsonStore, find_one, next_id
from snippet_board.models.dtos import (
    Comment,
    CommentCreateRequest,
    CommentCreatedResponse,
    CommentUpdateRequest,
    ErrorResponse,
    utc_now,
)
from snippet_board.utils.validation import check_body, coerce_int

router = APIRouter()
logger = logging.getLogger(__name__)

STORE_ERRORS = {500: {"model": ErrorResponse, "description": "Store read or write failed"}}


async def read_comments(
    store: JsonStore,
    comment_id: Optional[str] = None,
    ids: Optional[str] = None,
) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Resolve comments for one of the three addressing modes.

    Raises:
        CommentNotFoundError: If a single path id was requested and does not exist
    """
    with translate_store_errors():
        document = await store.aload()

    resolution = resolve(document.comments, comment_id, ids)
    if resolution.single:
        if not resolution.items:
            raise CommentNotFoundError()
        return resolution.items[0].to_json()
    return [comment.to_json() for comment in resolution.items]


@router.get("", summary="List comments", responses=STORE_ERRORS)
async def get_comments(
    ids: Optional[str] = Query(None, description="Comma-separated comment ids, e.g. '1,2,3'"),
    store: JsonStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    """Retrieve all comments, or the comments named in ``ids``."""
    return await read_comments(store, ids=ids)


@router.get(
    "/{comment_id}",
    summary="Get a comment",
    responses={404: {"model": ErrorResponse}, **STORE_ERRORS},
)
async def get_comment(comment_id: str, store: JsonStore = Depends(get_store)) -> Dict[str, Any]:
    """Retrieve a single comment by id."""
    return await read_comments(store, comment_id=comment_id)


@router.post(
    "",
    status_code=201,
    response_model=CommentCreatedResponse,
    response_model_by_alias=True,
    summary="Add a comment to a card",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        **STORE_ERRORS,
    },
)
async def create_comment(
    payload: Any = Depends(get_json_body),
    store: JsonStore = Depends(get_store),
) -> CommentCreatedResponse:
    """
    Create a comment from ``content`` and ``parent`` (a card id).

    Raises:
        RequestBodyFieldError: If a required field is missing
        InvalidParentTypeError: If ``parent`` is not an integer
        ParentCardNotFoundError: If no card has id ``parent``
    """
    check = check_body(CommentCreateRequest, payload)
    if not check.ok:
        raise RequestBodyFieldError(check.fields)
    body = check.value

    parent_id = coerce_int(body.parent)
    if parent_id is None:
        raise InvalidParentTypeError()

    with translate_store_errors():
        async with store.transaction() as document:
            parent_card = find_one(document.cards, parent_id)
            if parent_card is None:
                raise ParentCardNotFoundError(parent_id)

            comment = Comment(
                id=next_id(document.comments),
                content=body.content,
                parent=parent_id,
                time=utc_now(),
                last_edited=None,
            )
            parent_card.comments.append(comment.id)
            document.comments.append(comment)
            await store.asave(document)

    logger.info(f"Added comment {comment.id} to card {parent_id}")
    return CommentCreatedResponse(
        message="Added new comment successfully.",
        new_total_comments=len(parent_card.comments),
        id=comment.id,
    )


@router.put(
    "",
    status_code=400,
    summary="Update a comment (missing id)",
    responses={400: {"model": ErrorResponse}},
    include_in_schema=False,
)
async def update_comment_without_id() -> None:
    """Reject updates that do not name a comment."""
    raise NoCommentToPutError()


@router.put(
    "/{comment_id}",
    status_code=204,
    response_class=Response,
    summary="Update a comment",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, **STORE_ERRORS},
)
async def update_comment(
    comment_id: str,
    payload: Any = Depends(get_json_body),
    store: JsonStore = Depends(get_store),
) -> Response:
    """
    Replace a comment's ``content`` and stamp ``lastEdited``.

    ``id``, ``parent`` and ``time`` are left unchanged.
    """
    check = check_body(CommentUpdateRequest, payload)
    if not check.ok:
        raise RequestBodyFieldError(check.fields)
    body = check.value

    entity_id = parse_path_id(comment_id)

    with translate_store_errors():
        async with store.transaction() as document:
            comment = find_one(document.comments, entity_id) if entity_id is not None else None
            if comment is None:
                raise CommentNotFoundError()

            comment.content = body.content
            comment.last_edited = utc_now()
            await store.asave(document)

    logger.info(f"Updated comment {comment.id}")
    return Response(status_code=204)
