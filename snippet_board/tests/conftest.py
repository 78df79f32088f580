"""Shared fixtures for the Snippet Board test-suite."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from snippet_board.api.main import create_app
from snippet_board.config.settings import Settings
from snippet_board.core.store import JsonStore
from snippet_board.integrations.reddit import RedditClient

REDDIT_THREAD = "https://www.reddit.com/r/adventofcode/comments/kjtg7y/comment"


def comment_url(comment_id: str) -> str:
    return f"{REDDIT_THREAD}/{comment_id}"


def make_card(card_id: int, reddit_comment: str, comments: Optional[List[int]] = None) -> Dict[str, Any]:
    return {
        "id": card_id,
        "title": f"Day {card_id + 1} solution",
        "language": "python",
        "code": f"print({card_id})",
        "redditUrl": comment_url(reddit_comment),
        "likes": card_id,
        "time": f"2021-12-0{card_id + 1}T10:00:00.000Z",
        "comments": comments if comments is not None else [],
        "redditData": {"score": 1, "author": "old_author", "numSubComments": 0},
    }


def make_comment(comment_id: int, parent: int) -> Dict[str, Any]:
    return {
        "id": comment_id,
        "content": f"Comment {comment_id}",
        "parent": parent,
        "time": f"2021-12-1{comment_id}T12:30:00.500Z",
        "lastEdited": None,
    }


class RedditStub:
    """In-memory stand-in for reddit.com, served through an httpx MockTransport."""

    def __init__(self):
        self.responses: Dict[str, Any] = {}
        self.requested: List[str] = []

    def add_comment(self, url: str, score: int, author: str, replies: Any = "") -> Dict[str, Any]:
        comment = {"id": url.rsplit("/", 1)[-1], "score": score, "author": author, "replies": replies, "body": "..."}
        listing = [
            {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": {"title": "Day 1 Solutions"}}]}},
            {"kind": "Listing", "data": {"children": [{"kind": "t1", "data": comment}]}},
        ]
        self.responses[f"{url}.json"] = listing
        return comment

    def remove(self, url: str) -> None:
        self.responses.pop(f"{url}.json", None)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        if url in self.responses:
            return httpx.Response(200, json=self.responses[url])
        return httpx.Response(404, json={"message": "Not Found", "error": 404})


def replies_listing(count: int) -> Dict[str, Any]:
    return {"kind": "Listing", "data": {"children": [{"kind": "t1", "data": {}} for _ in range(count)]}}


@pytest.fixture
def store_document() -> Dict[str, Any]:
    """Three cards and three comments; card 1 owns comments 1 and 2."""
    return {
        "cards": [
            make_card(0, "aaa000", comments=[0]),
            make_card(1, "bbb111", comments=[1, 2]),
            make_card(2, "ccc222"),
        ],
        "comments": [
            make_comment(0, parent=0),
            make_comment(1, parent=1),
            make_comment(2, parent=1),
        ],
    }


@pytest.fixture
def store_path(tmp_path: Path, store_document: Dict[str, Any]) -> Path:
    path = tmp_path / "serverdb.json"
    path.write_text(json.dumps(store_document, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def store(store_path: Path) -> JsonStore:
    return JsonStore(store_path)


@pytest.fixture
def read_store(store_path: Path):
    """Return a function that reads the store file as plain JSON."""
    def _read() -> Dict[str, Any]:
        return json.loads(store_path.read_text(encoding="utf-8"))
    return _read


@pytest.fixture
def reddit_stub() -> RedditStub:
    stub = RedditStub()
    stub.add_comment(comment_url("aaa000"), score=10, author="alice")
    stub.add_comment(comment_url("bbb111"), score=25, author="bob", replies=replies_listing(2))
    stub.add_comment(comment_url("ccc222"), score=3, author="carol")
    return stub


@pytest.fixture
def reddit_client(reddit_stub: RedditStub) -> RedditClient:
    return RedditClient(user_agent="snippet_board-tests", transport=httpx.MockTransport(reddit_stub.handler))


@pytest.fixture
def client(store: JsonStore, reddit_client: RedditClient):
    app = create_app(settings=Settings(STORE_PATH=str(store.path)), store=store, reddit_client=reddit_client)
    with TestClient(app) as test_client:
        yield test_client
