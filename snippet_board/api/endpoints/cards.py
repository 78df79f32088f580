"""
Card API endpoints.

Cards are code snippets linked to a Reddit comment. Every read refreshes the
cached Reddit metadata of the cards it returns and persists the refreshed cache.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, Query

from snippet_board.api.dependencies import get_json_body, get_reddit_client, get_store
from snippet_board.api.errors import (
    CardNotFoundError,
    RedditFetchFailedError,
    RedditLinkFailedError,
    RequestBodyFieldError,
    translate_store_errors,
)
from snippet_board.core.resolution import parse_path_id, resolve
from snippet_board.core.store import JsonStore, find_one, next_id
from snippet_board.integrations.reddit import RedditClient, summarize_comment
from snippet_board.models.dtos import (
    Card,
    CardCreateRequest,
    CardCreatedResponse,
    ErrorResponse,
    utc_now,
)
from snippet_board.utils.validation import check_body

router = APIRouter()
logger = logging.getLogger(__name__)

STORE_ERRORS = {500: {"model": ErrorResponse, "description": "Store read or write failed"}}


async def fetch_reddit_updates(cards: List[Card], reddit: RedditClient) -> Dict[int, Dict[str, Any]]:
    """
    Fetch the current Reddit comment of each card, keyed by card id.

    Cards whose link no longer resolves are left out, so they keep the last
    known data.
    """
    updates = {}
    for card in cards:
        data = await reddit.fetch_comment(card.reddit_url)
        if data is None:
            logger.warning(f"Reddit link of card {card.id} did not resolve; keeping cached redditData")
            continue
        updates[card.id] = data
    return updates


def merge_reddit_data(card: Card, data: Dict[str, Any]) -> None:
    """Merge score, author and reply count into ``card.reddit_data``."""
    summary = summarize_comment(data)
    if card.reddit_data is None:
        card.reddit_data = summary
        return
    card.reddit_data = card.reddit_data.model_copy(
        update={
            "score": summary.score,
            "author": summary.author,
            "num_sub_comments": summary.num_sub_comments,
        }
    )


async def read_cards(
    store: JsonStore,
    reddit: RedditClient,
    card_id: Optional[str] = None,
    ids: Optional[str] = None,
) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Resolve, enrich and return cards for one of the three addressing modes.

    Reddit is queried without the store lock held; the results are merged
    into a freshly loaded document inside a transaction.

    Raises:
        CardNotFoundError: If a single path id was requested and does not exist
    """
    with translate_store_errors():
        snapshot = await store.aload()
    resolution = resolve(snapshot.cards, card_id, ids)

    updates = await fetch_reddit_updates(resolution.items, reddit)

    if updates:
        with translate_store_errors():
            async with store.transaction() as document:
                for card in document.cards:
                    if card.id in updates:
                        merge_reddit_data(card, updates[card.id])
                await store.asave(document)
        resolution = resolve(document.cards, card_id, ids)

    logger.info(f"Resolved {len(resolution.items)} card(s), refreshed {len(updates)}")

    if resolution.single:
        if not resolution.items:
            raise CardNotFoundError()
        return resolution.items[0].to_json()
    return [card.to_json() for card in resolution.items]


@router.get(
    "",
    summary="List cards",
    responses=STORE_ERRORS,
)
async def get_cards(
    ids: Optional[str] = Query(None, description="Comma-separated card ids, e.g. '1,2,3'"),
    store: JsonStore = Depends(get_store),
    reddit: RedditClient = Depends(get_reddit_client),
) -> List[Dict[str, Any]]:
    """
    Retrieve all cards, or the cards named in ``ids``.

    Unknown ids are skipped, so the result may be an empty list.
    """
    return await read_cards(store, reddit, ids=ids)


@router.get(
    "/{card_id}",
    summary="Get a card",
    responses={404: {"model": ErrorResponse}, **STORE_ERRORS},
)
async def get_card(
    card_id: str,
    store: JsonStore = Depends(get_store),
    reddit: RedditClient = Depends(get_reddit_client),
) -> Dict[str, Any]:
    """Retrieve a single card by id."""
    return await read_cards(store, reddit, card_id=card_id)


@router.post(
    "",
    status_code=201,
    response_model=CardCreatedResponse,
    summary="Create a card",
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, **STORE_ERRORS},
)
async def create_card(
    payload: Any = Depends(get_json_body),
    store: JsonStore = Depends(get_store),
    reddit: RedditClient = Depends(get_reddit_client),
) -> CardCreatedResponse:
    """
    Create a card from ``title``, ``language``, ``code`` and ``redditUrl``.

    The link must point at an r/adventofcode comment and must resolve on
    Reddit; tracking parameters after the comment id are dropped.

    Raises:
        RequestBodyFieldError: If a required field is missing
        RedditLinkFailedError: If the link is invalid or does not resolve
    """
    check = check_body(CardCreateRequest, payload)
    if not check.ok:
        raise RequestBodyFieldError(check.fields)
    body = check.value

    reddit_url = reddit.match_url(body.reddit_url)
    if reddit_url is None:
        logger.info(f"Rejected card with invalid Reddit link: {body.reddit_url}")
        raise RedditLinkFailedError("The Reddit link does not point at an r/adventofcode comment.")

    reddit_comment = await reddit.fetch_comment(reddit_url)
    if reddit_comment is None:
        raise RedditLinkFailedError("The Reddit link could not be resolved.")

    with translate_store_errors():
        async with store.transaction() as document:
            card = Card(
                id=next_id(document.cards),
                title=body.title,
                language=body.language,
                code=body.code,
                reddit_url=reddit_url,
                likes=0,
                time=utc_now(),
                comments=[],
                reddit_data=summarize_comment(reddit_comment),
            )
            document.cards.append(card)
            await store.asave(document)

    logger.info(f"Added card {card.id}: {card.title!r}")
    return CardCreatedResponse(message="Added new card successfully.", id=card.id)


@router.get(
    "/{card_id}/reddit",
    summary="Get live Reddit data for a card",
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}, **STORE_ERRORS},
)
async def get_card_reddit_data(
    card_id: str,
    store: JsonStore = Depends(get_store),
    reddit: RedditClient = Depends(get_reddit_client),
) -> Dict[str, Any]:
    """
    Fetch the raw Reddit comment object for a card.

    This is Reddit's own data (score, author, full reply tree), not the
    cached ``redditData`` summary, and it is not written to the store.
    """
    with translate_store_errors():
        document = await store.aload()

    entity_id = parse_path_id(card_id)
    card = find_one(document.cards, entity_id) if entity_id is not None else None
    if card is None:
        raise CardNotFoundError()

    reddit_comment = await reddit.fetch_comment(card.reddit_url)
    if reddit_comment is None:
        raise RedditFetchFailedError()
    return reddit_comment
