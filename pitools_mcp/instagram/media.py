"""Instagram image publishing through the Graph API.

Publishing is a container exchange: create a media container pointing at a
public image URL, give Instagram time to fetch the image, then publish the
container. It runs on the same staged-upload machine as LinkedIn media; the
byte transfer is done by Instagram itself, so that phase only waits.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..config.settings import Settings
from ..exceptions import ConfigurationError, PiToolsError, UpstreamError
from ..responses import ToolResponse, failure_response, normalize_staged, to_tool_response
from ..validation import UrlStr, validate_arguments
from ..workflow import UploadSession, run_staged_upload

logger = logging.getLogger(__name__)


class InstagramPublishError(UpstreamError):
    """Raised when a Graph API call fails."""
    pass


class InstagramImageRequest(BaseModel):
    """Image post; ``imageUrl`` must be publicly reachable by Instagram."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    image_url: UrlStr
    caption: Optional[str] = None


@dataclass(frozen=True)
class InstagramAccount:
    access_token: str
    user_id: str


def get_account(settings: Settings) -> InstagramAccount:
    """Read the Instagram token and posting account, or raise ConfigurationError."""
    token = settings.INSTAGRAM_ACCESS_TOKEN
    if token is None or not token.get_secret_value():
        raise ConfigurationError("Error: INSTAGRAM_ACCESS_TOKEN is not set in environment variables.")
    if not settings.INSTAGRAM_USER_ID_FOR_POSTING:
        raise ConfigurationError("Error: INSTAGRAM_USER_ID_FOR_POSTING is not set in environment variables.")
    return InstagramAccount(access_token=token.get_secret_value(), user_id=settings.INSTAGRAM_USER_ID_FOR_POSTING)


async def _post_form(http: httpx.AsyncClient, url: str, data: dict, step: str) -> dict:
    """POST a form to the Graph API and return the parsed JSON body."""
    response = await http.post(url, data=data)

    try:
        payload = response.json()
    except ValueError:
        error_msg = (
            f"Failed to parse JSON from {step} response. "
            f"Status: {response.status_code}. Response: {response.text}"
        )
        logger.error(error_msg)
        raise InstagramPublishError(error_msg, status_code=response.status_code, body=response.text)

    if not response.is_success:
        error = payload.get("error") if isinstance(payload, dict) else None
        message = error.get("message") if isinstance(error, dict) else None
        error_msg = f"Failed to {step} ({response.status_code}): {message or response.reason_phrase or 'Unknown error'}"
        logger.error(error_msg)
        raise InstagramPublishError(error_msg, status_code=response.status_code, body=response.text)

    if not isinstance(payload, dict):
        raise InstagramPublishError(f"Unexpected {step} response: {response.text}", status_code=response.status_code, body=response.text)
    return payload


class InstagramContainerUpload:
    """Staged upload for one image container."""

    def __init__(self, http: httpx.AsyncClient, settings: Settings, account: InstagramAccount,
                 request: InstagramImageRequest):
        self.http = http
        self.settings = settings
        self.account = account
        self.request = request

    @property
    def account_url(self) -> str:
        return f"{self.settings.instagram_graph_base}/{self.account.user_id}"

    async def initialize_upload(self) -> UploadSession:
        data = {"image_url": self.request.image_url, "access_token": self.account.access_token}
        if self.request.caption:
            data["caption"] = self.request.caption

        logger.info(f"Attempting to create media container for image: {self.request.image_url}")
        payload = await _post_form(self.http, f"{self.account_url}/media", data, "create media container")
        creation_id = payload.get("id")
        if not creation_id:
            raise InstagramPublishError("Failed to get creation ID from media container response.")
        logger.info(f"Media container created successfully. Creation ID: {creation_id}")
        return UploadSession(upload_target=self.request.image_url, media_handle=str(creation_id))

    async def transfer_bytes(self, session: UploadSession) -> None:
        # Instagram pulls the image from upload_target itself
        delay = self.settings.INSTAGRAM_PUBLISH_DELAY_SECONDS
        logger.info(f"Waiting {delay:g} seconds for Instagram to ingest {session.upload_target}")
        await asyncio.sleep(delay)

    async def create_post(self, session: UploadSession) -> Optional[str]:
        data = {"creation_id": session.media_handle, "access_token": self.account.access_token}
        logger.info(f"Attempting to publish media container with ID: {session.media_handle}")
        payload = await _post_form(self.http, f"{self.account_url}/media_publish", data, "publish media container")
        post_id = payload.get("id")
        logger.info(f"Media published successfully. Post ID: {post_id}")
        return str(post_id) if post_id else None


class InstagramTools:
    """Instagram publishing tools bound to one configuration."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    async def post_image(self, arguments: Any) -> ToolResponse:
        try:
            request = validate_arguments(InstagramImageRequest, arguments)
            account = get_account(self.settings)
            async with httpx.AsyncClient(timeout=self.settings.HTTP_TIMEOUT, transport=self.transport) as http:
                outcome = await run_staged_upload(InstagramContainerUpload(http, self.settings, account, request))
        except PiToolsError as e:
            logger.error(f"Instagram image post failed: {e}")
            return failure_response(e)
        except Exception as e:
            return failure_response(e)

        return to_tool_response(normalize_staged(outcome, "image to Instagram"))
