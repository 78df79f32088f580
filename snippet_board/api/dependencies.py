"""FastAPI dependency providers for the Snippet Board API."""

from typing import Any

from fastapi import Request

from snippet_board.core.store import JsonStore
from snippet_board.integrations.reddit import RedditClient


def get_store(request: Request) -> JsonStore:
    """Get the application's store."""
    return request.app.state.store


def get_reddit_client(request: Request) -> RedditClient:
    """Get the application's Reddit client (created in the lifespan)."""
    client = request.app.state.reddit_client
    if client is None:
        raise RuntimeError("Reddit client not initialized")
    return client


async def get_json_body(request: Request) -> Any:
    """
    Parse the request body as JSON.

    Returns None for an empty or malformed body so that validation reports
    every field as missing instead of failing with a decode error.
    """
    try:
        return await request.json()
    except ValueError:
        return None
