"""Tests for the DuckDuckGo search tool."""

from __future__ import annotations

from typing import Any

import pytest
from ddgs.exceptions import DDGSException, RatelimitException

from pitools_mcp.search import duckduckgo
from pitools_mcp.search.duckduckgo import SearchTools
from tests.helpers import make_settings


class FakeDDGS:
    """Stands in for ddgs.DDGS and records the arguments of each call."""

    calls: list[dict[str, Any]] = []
    results: list[dict[str, str]] = []
    error: Exception | None = None

    def text(self, query: str, **kwargs: Any) -> list[dict[str, str]]:
        FakeDDGS.calls.append({"query": query, **kwargs})
        if FakeDDGS.error is not None:
            raise FakeDDGS.error
        return list(FakeDDGS.results)


@pytest.fixture(autouse=True)
def fake_ddgs(monkeypatch: pytest.MonkeyPatch) -> type[FakeDDGS]:
    FakeDDGS.calls = []
    FakeDDGS.results = [
        {"title": f"Result title {i}", "href": f"https://example.com/{i}", "body": f"Snippet {i}"}
        for i in range(1, 4)
    ]
    FakeDDGS.error = None
    monkeypatch.setattr(duckduckgo, "DDGS", FakeDDGS)
    return FakeDDGS


@pytest.fixture
def tools() -> SearchTools:
    return SearchTools(make_settings())


async def test_formats_results(tools: SearchTools) -> None:
    response = await tools.search({"query": "python"})

    assert response.is_error is None
    assert response.text.split("\n\n")[0] == (
        "Result 1:\nTitle: Result title 1\nURL: https://example.com/1\nSnippet: Snippet 1"
    )
    assert response.text.count("\nTitle: ") == 3


async def test_defaults(tools: SearchTools, fake_ddgs: type[FakeDDGS]) -> None:
    await tools.search({"query": "python"})

    assert fake_ddgs.calls == [{
        "query": "python",
        "region": "us-en",
        "safesearch": "moderate",
        "timelimit": None,
        "max_results": 10,
    }]


async def test_options_are_mapped(tools: SearchTools, fake_ddgs: type[FakeDDGS]) -> None:
    await tools.search({
        "query": "news",
        "safeSearch": "STRICT",
        "region": "de-de",
        "maxResults": 2,
        "time": "WEEK",
    })

    call = fake_ddgs.calls[0]
    assert call["safesearch"] == "on"
    assert call["region"] == "de-de"
    assert call["timelimit"] == "w"
    assert call["max_results"] == 2


async def test_max_results_truncates(tools: SearchTools) -> None:
    response = await tools.search({"query": "python", "maxResults": 1})

    assert "Result 2:" not in response.text


async def test_no_results(tools: SearchTools, fake_ddgs: type[FakeDDGS]) -> None:
    fake_ddgs.error = DDGSException("No results found.")

    response = await tools.search({"query": "zzzz"})

    assert response.is_error is None
    assert response.text == "No results found for your query."


async def test_backend_error(tools: SearchTools, fake_ddgs: type[FakeDDGS]) -> None:
    fake_ddgs.error = RuntimeError("Ratelimit")

    response = await tools.search({"query": "python"})

    assert response.is_error is True
    assert response.text == "Error performing search: Ratelimit"


async def test_empty_result_list(tools: SearchTools, fake_ddgs: type[FakeDDGS]) -> None:
    fake_ddgs.results = []

    response = await tools.search({"query": "zzzz"})

    assert response.is_error is None
    assert response.text == "No results found for your query."


async def test_rate_limit_is_an_error(tools: SearchTools, fake_ddgs: type[FakeDDGS]) -> None:
    fake_ddgs.error = RatelimitException("No results found. Ratelimit hit.")

    response = await tools.search({"query": "python"})

    assert response.is_error is True
    assert "Ratelimit" in response.text


async def test_invalid_input(tools: SearchTools, fake_ddgs: type[FakeDDGS]) -> None:
    response = await tools.search({"query": "python", "time": "DECADE"})

    assert response.is_error is True
    assert "time" in response.text
    assert fake_ddgs.calls == []
