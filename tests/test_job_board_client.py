from __future__ import annotations

import asyncio

import httpx
import pytest

from career_errors import ConfigurationError
from job_board_client import AdzunaJobBoardClient

PAGES = {
    "1": [
        {"id": 1, "title": "Data Engineer", "description": "Python and SQL"},
        {"id": 2, "title": "Senior Data Engineer", "description": None},
    ],
    "2": [
        {"id": 2, "title": "Senior Data Engineer", "description": "duplicate"},
        {"id": 3, "title": "Analytics Engineer", "description": "dbt"},
    ],
    "3": [],
}


def make_transport(requests: list[httpx.Request]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        page = request.url.path.rsplit("/", 1)[-1]
        return httpx.Response(200, json={"results": PAGES.get(page, [])})

    return httpx.MockTransport(handler)


def test_missing_credentials_is_a_configuration_error(monkeypatch) -> None:
    monkeypatch.delenv("ADZUNA_APP_ID", raising=False)
    monkeypatch.delenv("ADZUNA_APP_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        AdzunaJobBoardClient()


def test_search_paginates_and_skips_duplicates() -> None:
    requests: list[httpx.Request] = []
    client = AdzunaJobBoardClient("id", "key", country="gb", max_pages=5, transport=make_transport(requests))

    postings = asyncio.run(client.search("Data Engineer", {"industries": ["Fintech", " ", "Retail"], "where": "London"}))

    assert [p.title for p in postings] == ["Data Engineer", "Senior Data Engineer", "Analytics Engineer"]
    assert postings[1].description == ""
    # the empty third page stops pagination
    assert len(requests) == 3
    first = requests[0]
    assert first.url.path == "/v1/api/jobs/gb/search/1"
    assert first.url.params["what"] == "Data Engineer"
    assert first.url.params["what_or"] == "Fintech Retail"
    assert first.url.params["where"] == "London"
    assert first.url.params["app_id"] == "id"


def test_search_without_industries_is_unrestricted() -> None:
    requests: list[httpx.Request] = []
    client = AdzunaJobBoardClient("id", "key", max_pages=1, transport=make_transport(requests))

    postings = asyncio.run(client.search("Data Engineer", {"industries": []}))

    assert len(postings) == 2
    assert "what_or" not in requests[0].url.params


def test_search_raises_on_http_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(429, json={"error": "rate limited"}))
    client = AdzunaJobBoardClient("id", "key", transport=transport)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.search("Data Engineer", {}))


def test_zero_max_pages_makes_no_requests() -> None:
    requests: list[httpx.Request] = []
    client = AdzunaJobBoardClient("id", "key", max_pages=0, transport=make_transport(requests))

    assert asyncio.run(client.search("Data Engineer", {})) == []
    assert requests == []
