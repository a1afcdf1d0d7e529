"""HTTP calls against the versioned LinkedIn REST API."""
import logging
import mimetypes
import os
from pathlib import Path
from typing import Optional

import httpx

from ..config.settings import Settings
from ..workflow import UploadSession
from .auth import Credentials
from .post import (
    MediaPostRequest,
    MediaUploadError,
    PostCreationError,
    VideoPostRequest,
    build_request_body,
)

logger = logging.getLogger(__name__)

# Exactly these; any other status from the upload target, 202 included, is a failure
UPLOAD_SUCCESS_STATUSES = frozenset({200, 201})
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def get_linkedin_headers(access_token: str, settings: Settings) -> dict:
    """Get headers for LinkedIn API requests."""
    return {
        "Authorization": f"Bearer {access_token}",
        "X-Restli-Protocol-Version": settings.RESTLI_PROTOCOL_VERSION,
        "LinkedIn-Version": settings.LINKEDIN_VERSION,
        "Content-Type": "application/json"
    }


def guess_content_type(file_path: str) -> str:
    content_type, _ = mimetypes.guess_type(file_path)
    return content_type or DEFAULT_CONTENT_TYPE


class LinkedInClient:
    """Thin wrapper binding an httpx client to one set of credentials."""

    def __init__(self, http: httpx.AsyncClient, settings: Settings, credentials: Credentials):
        self.http = http
        self.settings = settings
        self.credentials = credentials

    @property
    def headers(self) -> dict:
        return get_linkedin_headers(self.credentials.access_token, self.settings)

    @property
    def posts_url(self) -> str:
        return f"{self.settings.linkedin_api_base}/posts"

    async def create_post(self, body: dict) -> Optional[str]:
        """Create a post and return the id from the ``x-restli-id`` header, if any."""
        response = await self.http.post(self.posts_url, headers=self.headers, json=body)
        if not response.is_success:
            error_msg = f"Create post failed {response.status_code}: {response.text}"
            logger.error(f"LinkedIn API {error_msg}")
            raise PostCreationError(error_msg, status_code=response.status_code, body=response.text)

        # httpx headers are case-insensitive
        post_id = response.headers.get("x-restli-id")
        logger.info(f"LinkedIn post created. Post ID: {post_id or 'N/A'}")
        return post_id

    async def initialize_upload(self, kind: str, body: dict) -> dict:
        """POST ``/rest/{kind}?action=initializeUpload`` and return the ``value`` object."""
        url = f"{self.settings.linkedin_api_base}/{kind}"
        response = await self.http.post(
            url,
            params={"action": "initializeUpload"},
            headers=self.headers,
            json={"initializeUploadRequest": body}
        )
        if not response.is_success:
            error_msg = f"Initialize Upload failed {response.status_code}: {response.text}"
            logger.error(f"LinkedIn API {error_msg}")
            raise MediaUploadError(error_msg, status_code=response.status_code, body=response.text)

        try:
            value = response.json()["value"]
        except (ValueError, KeyError, TypeError) as e:
            raise MediaUploadError(
                f"Unexpected initialize upload response: {response.text}",
                status_code=response.status_code,
                body=response.text
            ) from e
        if not isinstance(value, dict):
            raise MediaUploadError(f"Unexpected initialize upload response: {response.text}")
        return value

    async def upload_bytes(self, upload_url: str, data: bytes, content_type: str) -> None:
        """PUT raw media bytes to an upload URL handed out by LinkedIn."""
        response = await self.http.put(upload_url, content=data, headers={"Content-Type": content_type})
        if response.status_code not in UPLOAD_SUCCESS_STATUSES:
            error_msg = f"Media Upload failed {response.status_code}: {response.text}"
            logger.error(f"LinkedIn API {error_msg}")
            raise MediaUploadError(error_msg, status_code=response.status_code, body=response.text)
        logger.info(f"Uploaded {len(data)} bytes ({content_type})")


class LinkedInMediaUpload:
    """Staged upload of one image or video followed by the post referencing it."""

    def __init__(self, client: LinkedInClient, request: MediaPostRequest):
        self.client = client
        self.request = request

    @property
    def is_video(self) -> bool:
        return isinstance(self.request, VideoPostRequest)

    async def initialize_upload(self) -> UploadSession:
        owner = self.client.credentials.author_urn
        if self.is_video:
            file_size = os.stat(self.request.file_path).st_size
            value = await self.client.initialize_upload("videos", {"owner": owner, "fileSizeBytes": file_size})
            instructions = value.get("uploadInstructions") or []
            first = instructions[0] if isinstance(instructions, list) and instructions else {}
            upload_url = first.get("uploadUrl") if isinstance(first, dict) else None
            media_handle = value.get("video")
            if not upload_url:
                raise MediaUploadError("Could not extract uploadUrl from initialize video response.")
        else:
            value = await self.client.initialize_upload("images", {"owner": owner})
            upload_url = value.get("uploadUrl")
            media_handle = value.get("image")
            if not upload_url:
                raise MediaUploadError("Could not extract uploadUrl from initialize image response.")

        if not media_handle:
            raise MediaUploadError("Could not extract media URN from initialize upload response.")
        logger.info(f"Upload session created for {media_handle}")
        return UploadSession(upload_target=upload_url, media_handle=media_handle)

    async def transfer_bytes(self, session: UploadSession) -> None:
        file_path = self.request.file_path
        data = Path(file_path).read_bytes()
        await self.client.upload_bytes(session.upload_target, data, guess_content_type(file_path))

    async def create_post(self, session: UploadSession) -> Optional[str]:
        body = build_request_body(self.client.credentials.author_urn, self.request, session.media_handle)
        return await self.client.create_post(body)
