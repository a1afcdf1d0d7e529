"""DuckDuckGo web search tool."""
import asyncio
import logging
from enum import Enum
from typing import Any, Annotated, List, Optional

from ddgs import DDGS
from ddgs.exceptions import DDGSException, RatelimitException, TimeoutException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..config.settings import Settings
from ..exceptions import PiToolsError
from ..responses import ToolResponse, error_response, failure_response, text_response
from ..validation import NonEmptyStr, validate_arguments

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10


class SafeSearch(str, Enum):
    STRICT = "STRICT"
    MODERATE = "MODERATE"
    OFF = "OFF"


class TimeRange(str, Enum):
    DAY = "DAY"
    WEEK = "WEEK"
    MONTH = "MONTH"
    YEAR = "YEAR"


# ddgs parameter values
SAFESEARCH_VALUES = {
    SafeSearch.STRICT: "on",
    SafeSearch.MODERATE: "moderate",
    SafeSearch.OFF: "off",
}
TIMELIMIT_VALUES = {
    TimeRange.DAY: "d",
    TimeRange.WEEK: "w",
    TimeRange.MONTH: "m",
    TimeRange.YEAR: "y",
}


class SearchRequest(BaseModel):
    """Search input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    query: NonEmptyStr
    safe_search: SafeSearch = SafeSearch.MODERATE
    region: Optional[str] = None
    max_results: Optional[Annotated[int, Field(gt=0)]] = None
    time: Optional[TimeRange] = None


def format_results(results: List[dict]) -> str:
    """Render results as numbered Title/URL/Snippet blocks."""
    return "\n\n".join(
        f"Result {index}:\n"
        f"Title: {result.get('title', '')}\n"
        f"URL: {result.get('href') or result.get('url', '')}\n"
        f"Snippet: {result.get('body') or result.get('description', '')}"
        for index, result in enumerate(results, start=1)
    )


class SearchTools:
    """Web search tools bound to one configuration."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _search_sync(self, request: SearchRequest) -> List[dict]:
        # Coerce to a list so the scrape actually runs inside the worker thread
        try:
            return list(DDGS().text(
                request.query,
                region=request.region or self.settings.SEARCH_DEFAULT_REGION,
                safesearch=SAFESEARCH_VALUES[request.safe_search],
                timelimit=TIMELIMIT_VALUES[request.time] if request.time else None,
                max_results=request.max_results or DEFAULT_MAX_RESULTS,
            ))
        except (RatelimitException, TimeoutException):
            raise
        except DDGSException as e:
            # ddgs reports an empty result set as an exception
            if "no results" in str(e).lower():
                return []
            raise

    async def search(self, arguments: Any) -> ToolResponse:
        try:
            request = validate_arguments(SearchRequest, arguments)
        except PiToolsError as e:
            return failure_response(e)

        logger.info(
            f"Performing DuckDuckGo search for: {request.query} "
            f"(safeSearch={request.safe_search.value}, region={request.region or self.settings.SEARCH_DEFAULT_REGION})"
        )
        try:
            results = await asyncio.to_thread(self._search_sync, request)
        except Exception as e:
            logger.error(f"Error performing DuckDuckGo search: {e}")
            return error_response(f"Error performing search: {e}")

        if not results:
            return text_response("No results found for your query.")

        if request.max_results:
            results = results[:request.max_results]
        return text_response(format_results(results))
