"""Unit tests for the Reddit integration client."""

import httpx
import pytest

from snippet_board.integrations.reddit import RedditClient, summarize_comment

COMMENT_URL = "https://www.reddit.com/r/adventofcode/comments/kjtg7y/comment/ggyvnnj"


def listing(comment):
    return [
        {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": {}}]}},
        {"kind": "Listing", "data": {"children": [{"kind": "t1", "data": comment}]}},
    ]


def client_for(handler) -> RedditClient:
    return RedditClient(transport=httpx.MockTransport(handler))


class TestMatchUrl:
    def setup_method(self):
        self.client = RedditClient()

    def test_exact_link(self):
        assert self.client.match_url(COMMENT_URL) == COMMENT_URL

    def test_tracking_parameters_are_dropped(self):
        url = f"{COMMENT_URL}/?utm_source=share&utm_medium=web2x&context=3"

        assert self.client.match_url(url) == COMMENT_URL

    def test_query_without_slash_is_dropped(self):
        assert self.client.match_url(f"{COMMENT_URL}?context=3") == COMMENT_URL

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.reddit.com/r/adventofcode/comments/kjtg7y/comment/",
            "https://www.reddit.com/r/python/comments/kjtg7y/comment/ggyvnnj",
            "http://www.reddit.com/r/adventofcode/comments/kjtg7y/comment/ggyvnnj",
            f"see {COMMENT_URL}",
            "",
        ],
    )
    def test_invalid_links(self, url):
        assert self.client.match_url(url) is None

    def test_custom_pattern(self):
        client = RedditClient(url_pattern=r"https://example\.com/\w+")

        assert client.match_url("https://example.com/abc/def") == "https://example.com/abc"


class TestSummarizeComment:
    def test_no_replies(self):
        data = summarize_comment({"score": 5, "author": "alice", "replies": ""})

        assert data.model_dump(by_alias=True) == {"score": 5, "author": "alice", "numSubComments": 0}

    def test_counts_direct_replies(self):
        replies = {"kind": "Listing", "data": {"children": [{}, {}, {}]}}

        assert summarize_comment({"score": 1, "author": "bob", "replies": replies}).num_sub_comments == 3

    def test_missing_fields_default(self):
        data = summarize_comment({})

        assert (data.score, data.author, data.num_sub_comments) == (0, "", 0)

    @pytest.mark.parametrize(
        "replies",
        [
            {"kind": "Listing", "data": None},
            {"kind": "Listing", "data": {"children": None}},
            {"kind": "Listing"},
        ],
    )
    def test_empty_reply_listing_counts_zero(self, replies):
        assert summarize_comment({"score": 2, "author": "eve", "replies": replies}).num_sub_comments == 0


class TestFetchComment:
    @pytest.mark.asyncio
    async def test_returns_comment_data(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=listing({"score": 9, "author": "eve", "replies": ""}))

        client = client_for(handler)
        data = await client.fetch_comment(COMMENT_URL)
        await client.close()

        assert data == {"score": 9, "author": "eve", "replies": ""}
        assert str(seen[0].url) == f"{COMMENT_URL}.json"
        assert seen[0].headers["user-agent"] == "snippet_board/0.1"

    @pytest.mark.asyncio
    async def test_error_payload_returns_none(self):
        client = client_for(lambda request: httpx.Response(404, json={"message": "Not Found", "error": 404}))

        assert await client.fetch_comment(COMMENT_URL) is None

    @pytest.mark.asyncio
    async def test_empty_children_returns_none(self):
        payload = [{"data": {"children": []}}, {"data": {"children": []}}]
        client = client_for(lambda request: httpx.Response(200, json=payload))

        assert await client.fetch_comment(COMMENT_URL) is None

    @pytest.mark.asyncio
    async def test_non_json_returns_none(self):
        client = client_for(lambda request: httpx.Response(200, text="<html>blocked</html>"))

        assert await client.fetch_comment(COMMENT_URL) is None

    @pytest.mark.asyncio
    async def test_http_error_status_returns_none(self):
        client = client_for(lambda request: httpx.Response(503, json=[]))

        assert await client.fetch_comment(COMMENT_URL) is None

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = client_for(handler)

        assert await client.fetch_comment(COMMENT_URL) is None

    @pytest.mark.asyncio
    async def test_connection_error_returns_none(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        client = client_for(handler)

        assert await client.fetch_comment(COMMENT_URL) is None

    @pytest.mark.asyncio
    async def test_follows_redirects(self):
        def handler(request):
            if request.url.host == "www.reddit.com":
                return httpx.Response(301, headers={"location": "https://old.reddit.com/final.json"})
            return httpx.Response(200, json=listing({"score": 2, "author": "zed", "replies": ""}))

        client = client_for(handler)

        assert (await client.fetch_comment(COMMENT_URL))["author"] == "zed"
