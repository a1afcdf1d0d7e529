"""
PiTools MCP Server
A collection of tools for MCP clients: DuckDuckGo web search, LinkedIn
posting and Instagram image publishing.
Credentials come from environment variables (or .env); each tool fails with
a configuration error when its provider is not configured.
"""
import logging
import sys
from typing import List, Literal, Optional

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent

from .config.settings import settings
from .instagram.media import InstagramTools
from .linkedin.tools import LinkedInTools
from .responses import ToolResponse
from .search.duckduckgo import SearchTools
from .utils.logging import configure_logging

# Configure logging
configure_logging(log_level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Tool collections, rebound by tests
search_tools = SearchTools(settings)
linkedin = LinkedInTools(settings)
instagram = InstagramTools(settings)

mcp = FastMCP(
    "PiTools",
    instructions="A collection of tools including web search, LinkedIn posting and Instagram publishing."
)


def _to_result(response: ToolResponse) -> ToolResult:
    """Hand a tool envelope to FastMCP.

    Error envelopes become MCP error results via ToolError; successful ones
    carry the text plus ``postId`` as structured content when present.
    """
    if response.is_error:
        raise ToolError(response.text)
    structured = {"postId": response.post_id} if response.post_id else None
    return ToolResult(
        content=[TextContent(type="text", text=item.text) for item in response.content],
        structured_content=structured
    )


@mcp.tool(name="duckduckgo_search")
async def duckduckgo_search(
    query: str,
    safe_search: Optional[Literal["STRICT", "MODERATE", "OFF"]] = None,
    region: Optional[str] = None,
    max_results: Optional[int] = None,
    time: Optional[Literal["DAY", "WEEK", "MONTH", "YEAR"]] = None,
    ctx: Context = None
) -> ToolResult:
    """Performs a web search using DuckDuckGo and returns the top results.

    Args:
        query: The search query
        safe_search: Safe search level (default: MODERATE)
        region: Region for search, e.g. "us-en"
        max_results: Maximum number of results to return
        time: Time range for search results

    Returns:
        Numbered results with title, URL and snippet
    """
    arguments = {"query": query, "region": region, "maxResults": max_results}
    if safe_search:
        arguments["safeSearch"] = safe_search
    if time:
        arguments["time"] = time
    return _to_result(await search_tools.search(arguments))


@mcp.tool(name="linkedin_post_text")
async def linkedin_post_text(commentary: str, ctx: Context = None) -> ToolResult:
    """Create a public text post on LinkedIn.

    Args:
        commentary: The text of the post

    Returns:
        Success message with post ID
    """
    return _to_result(await linkedin.post_text({"commentary": commentary}))


@mcp.tool(name="linkedin_post_article")
async def linkedin_post_article(
    commentary: str,
    url: str,
    title: str,
    thumbnail_path: Optional[str] = None,
    thumbnail_alt_text: Optional[str] = None,
    ctx: Context = None
) -> ToolResult:
    """Share an article link on LinkedIn with commentary.

    Args:
        commentary: The text of the post
        url: Absolute URL of the article
        title: Article title shown on the link card
        thumbnail_path: Accepted but not used yet
        thumbnail_alt_text: Accepted but not used yet

    Returns:
        Success message with post ID
    """
    return _to_result(await linkedin.post_article({
        "commentary": commentary,
        "url": url,
        "title": title,
        "thumbnailPath": thumbnail_path,
        "thumbnailAltText": thumbnail_alt_text,
    }))


@mcp.tool(name="linkedin_post_image")
async def linkedin_post_image(commentary: str, file_path: str, ctx: Context = None) -> ToolResult:
    """Upload a local image and post it on LinkedIn.

    Args:
        commentary: The text of the post
        file_path: Path of the image file on the server's filesystem

    Returns:
        Success message with post ID
    """
    return _to_result(await linkedin.post_image({"commentary": commentary, "filePath": file_path}))


@mcp.tool(name="linkedin_post_video")
async def linkedin_post_video(commentary: str, file_path: str, ctx: Context = None) -> ToolResult:
    """Upload a local video and post it on LinkedIn.

    Args:
        commentary: The text of the post
        file_path: Path of the video file on the server's filesystem

    Returns:
        Success message with post ID
    """
    return _to_result(await linkedin.post_video({"commentary": commentary, "filePath": file_path}))


@mcp.tool(name="linkedin_post_poll")
async def linkedin_post_poll(
    poll_question: str,
    poll_options: List[str],
    commentary: Optional[str] = None,
    ctx: Context = None
) -> ToolResult:
    """Create a LinkedIn poll that runs for three days.

    Args:
        poll_question: The poll question
        poll_options: Between 2 and 4 answer options
        commentary: Optional text shown above the poll

    Returns:
        Success message with post ID
    """
    return _to_result(await linkedin.post_poll({
        "pollQuestion": poll_question,
        "pollOptions": poll_options,
        "commentary": commentary,
    }))


@mcp.tool(name="instagram_post_image")
async def instagram_post_image(image_url: str, caption: Optional[str] = None, ctx: Context = None) -> ToolResult:
    """Publish an image to Instagram from a publicly accessible URL.

    Args:
        image_url: Public URL Instagram can download the image from
        caption: Optional caption for the post

    Returns:
        Success message with post ID
    """
    return _to_result(await instagram.post_image({"imageUrl": image_url, "caption": caption}))


def _warn_missing_credentials() -> None:
    if not settings.LINKEDIN_ACCESS_TOKEN:
        logger.warning("⚠️  LINKEDIN_ACCESS_TOKEN not set - LinkedIn tools will fail")
    if not settings.INSTAGRAM_ACCESS_TOKEN or not settings.INSTAGRAM_USER_ID_FOR_POSTING:
        logger.warning("⚠️  INSTAGRAM_ACCESS_TOKEN or INSTAGRAM_USER_ID_FOR_POSTING not set - Instagram tools will fail")


def main():
    """Main function for running the PiTools MCP server."""
    transport = settings.MCP_TRANSPORT.lower()

    # stdout belongs to the stdio transport
    print("=" * 60, file=sys.stderr)
    print(" PiTools MCP Server", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"   Transport: {transport}", file=sys.stderr)
    if transport == "http":
        print(f"   MCP endpoint: http://{settings.HOST}:{settings.PORT}/mcp", file=sys.stderr)
    print("-" * 60, file=sys.stderr)

    _warn_missing_credentials()

    try:
        if transport == "http":
            logger.info(f"🚀 Starting HTTP server on port {settings.PORT}...")
            mcp.run(transport="http", host=settings.HOST, port=settings.PORT)
        else:
            logger.info("PiTools MCP Server running on stdio")
            mcp.run()
    except KeyboardInterrupt:
        print("\n👋 Shutting down...", file=sys.stderr)
    except Exception as e:
        logger.exception(f"Failed to start server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
