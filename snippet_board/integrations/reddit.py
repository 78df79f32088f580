"""
Reddit integration client for card metadata.

Each card links to a Reddit comment. The comment's JSON representation is
fetched from ``<url>.json`` to read its score, author and replies.
"""

import logging
import re
from typing import Any, Dict, Optional

import httpx

from snippet_board.models.dtos import RedditData

logger = logging.getLogger(__name__)

DEFAULT_URL_PATTERN = r"https://www\.reddit\.com/r/adventofcode/comments/[^/]+/comment/[^/?#]+"


def summarize_comment(data: Dict[str, Any]) -> RedditData:
    """
    Reduce a Reddit comment object to the cached ``redditData`` shape.

    ``replies`` is an empty string when the comment has no replies, otherwise
    a listing whose ``data.children`` holds the direct replies.
    """
    replies = data.get("replies")
    if isinstance(replies, dict):
        num_sub_comments = len((replies.get("data") or {}).get("children") or [])
    else:
        num_sub_comments = 0

    return RedditData(
        score=data.get("score") or 0,
        author=data.get("author") or "",
        num_sub_comments=num_sub_comments,
    )


class RedditClient:
    """
    Async client for Reddit's public comment JSON.

    A fetch that fails for any reason (network error, timeout, error payload,
    unexpected shape) returns None; callers decide whether that is an error.
    """

    def __init__(
        self,
        user_agent: str = "snippet_board/0.1",
        timeout: float = 10.0,
        url_pattern: str = DEFAULT_URL_PATTERN,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Reddit client.

        Args:
            user_agent: User-Agent header sent with every request
            timeout: Request timeout in seconds
            url_pattern: Regular expression a card link must start with
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.url_pattern = re.compile(url_pattern)
        self.client = httpx.AsyncClient(
            headers={"User-Agent": user_agent},
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=transport,
        )

    def match_url(self, url: str) -> Optional[str]:
        """
        Match ``url`` against the card link pattern.

        Returns:
            Optional[str]: The matched prefix, with any trailing query or
                tracking parameters cut off, or None if the link is invalid.
        """
        match = self.url_pattern.match(url)
        return match.group(0) if match else None

    async def _fetch_json(self, url: str) -> Optional[Any]:
        json_url = f"{url}.json"
        try:
            response = await self.client.get(json_url)
        except httpx.HTTPError as e:
            logger.warning(f"Reddit request to {json_url} failed: {e!r}")
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.warning(f"Reddit returned non-JSON content for {json_url} (HTTP {response.status_code})")
            return None

        if isinstance(payload, dict) and payload.get("error") is not None:
            logger.warning(f"Reddit returned error {payload.get('error')} for {json_url}")
            return None
        if response.is_error:
            logger.warning(f"Reddit returned HTTP {response.status_code} for {json_url}")
            return None
        return payload

    async def fetch_comment(self, url: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the raw Reddit comment object a card links to.

        Args:
            url: Reddit comment permalink (without ``.json``)

        Returns:
            Optional[Dict[str, Any]]: ``[1].data.children[0].data`` of the
                thread listing, or None if the link does not resolve.
        """
        payload = await self._fetch_json(url)
        if payload is None:
            return None

        try:
            data = payload[1]["data"]["children"][0]["data"]
        except (IndexError, KeyError, TypeError):
            logger.warning(f"Unexpected Reddit response shape for {url}")
            return None

        if not isinstance(data, dict):
            return None
        return data

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
        logger.info("Reddit client closed")
