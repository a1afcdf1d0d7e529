"""LinkedIn tool handlers.

Each handler takes the raw tool arguments, validates them, resolves
credentials and runs the publish workflow. Every failure is returned as an
error envelope; nothing is raised to the dispatcher.
"""
import logging
from typing import Any, Optional, Type

import httpx
from pydantic import BaseModel

from ..config.settings import Settings
from ..exceptions import PiToolsError
from ..responses import (
    PublishResult,
    ToolResponse,
    failure_response,
    normalize_single,
    normalize_staged,
    to_tool_response,
)
from ..validation import validate_arguments
from ..workflow import run_single_post, run_staged_upload
from .auth import get_access_token, resolve_credentials
from .client import LinkedInClient, LinkedInMediaUpload
from .post import (
    ArticlePostRequest,
    ImagePostRequest,
    PollPostRequest,
    PostKind,
    TextPostRequest,
    VideoPostRequest,
    build_request_body,
    check_poll_options,
)

logger = logging.getLogger(__name__)

POST_LABELS = {
    PostKind.TEXT: "text",
    PostKind.ARTICLE: "article",
    PostKind.IMAGE: "image",
    PostKind.VIDEO: "video",
    PostKind.POLL: "poll",
}


class LinkedInTools:
    """LinkedIn posting tools bound to one configuration.

    Args:
        settings: Configuration supplying the access token and endpoints
        transport: Optional httpx transport, used by tests to fake LinkedIn
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.settings.HTTP_TIMEOUT, transport=self.transport)

    async def publish(self, request) -> PublishResult:
        """Publish an already validated post request."""
        label = POST_LABELS[request.kind]

        # Polls can reach here without input validation
        if isinstance(request, PollPostRequest):
            check_poll_options(request.poll_options)

        async with self._http_client() as http:
            credentials = await resolve_credentials(http, self.settings)
            client = LinkedInClient(http, self.settings, credentials)
            logger.info(f"Creating LinkedIn {label} post for: {credentials.author_urn}")

            if isinstance(request, (ImagePostRequest, VideoPostRequest)):
                outcome = await run_staged_upload(LinkedInMediaUpload(client, request))
                return normalize_staged(outcome, label)

            body = build_request_body(credentials.author_urn, request)
            outcome = await run_single_post(lambda: client.create_post(body))
            return normalize_single(outcome, label)

    async def _handle(self, model: Type[BaseModel], arguments: Any) -> ToolResponse:
        try:
            request = validate_arguments(model, arguments)
            # Fail on missing configuration before opening any connection
            get_access_token(self.settings)
            result = await self.publish(request)
        except PiToolsError as e:
            logger.error(f"LinkedIn {model.__name__} failed: {e}")
            return failure_response(e)
        except Exception as e:
            # Unexpected faults still end as an error envelope
            return failure_response(e)
        return to_tool_response(result)

    async def post_text(self, arguments: Any) -> ToolResponse:
        return await self._handle(TextPostRequest, arguments)

    async def post_article(self, arguments: Any) -> ToolResponse:
        return await self._handle(ArticlePostRequest, arguments)

    async def post_image(self, arguments: Any) -> ToolResponse:
        return await self._handle(ImagePostRequest, arguments)

    async def post_video(self, arguments: Any) -> ToolResponse:
        return await self._handle(VideoPostRequest, arguments)

    async def post_poll(self, arguments: Any) -> ToolResponse:
        return await self._handle(PollPostRequest, arguments)
