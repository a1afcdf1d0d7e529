"""LinkedIn credential resolution.

The access token comes from configuration; the author URN is derived from it
with one call to the OpenID ``userinfo`` endpoint.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config.settings import Settings
from ..exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class AuthError(UpstreamError):
    """Raised when the user info lookup fails."""
    pass


@dataclass(frozen=True)
class Credentials:
    """Token plus the actor it posts as."""
    access_token: str
    author_urn: str
    user_name: Optional[str] = None


def get_access_token(settings: Settings) -> str:
    """Return the configured LinkedIn token or raise ConfigurationError."""
    token = settings.LINKEDIN_ACCESS_TOKEN
    if token is None or not token.get_secret_value():
        logger.error("Missing environment variable: LINKEDIN_ACCESS_TOKEN")
        raise ConfigurationError("LinkedIn Access Token not configured in environment variables (LINKEDIN_ACCESS_TOKEN).")
    return token.get_secret_value()


async def fetch_user_info(client: httpx.AsyncClient, settings: Settings, access_token: str) -> dict:
    """Call the userinfo endpoint and return its JSON body."""
    userinfo_url = str(settings.LINKEDIN_USERINFO_URL)
    try:
        response = await client.get(
            userinfo_url,
            headers={"Authorization": f"Bearer {access_token}"}
        )
    except httpx.HTTPError as e:
        raise AuthError(f"User info fetch failed ({userinfo_url}): {e}") from e

    content_type = response.headers.get("content-type", "")
    if not response.is_success or "application/json" not in content_type:
        error_msg = (
            f"User info fetch failed ({userinfo_url}) - Status: {response.status_code}. "
            f"Content-Type: {content_type or 'N/A'}. Body: {response.text}"
        )
        logger.error(error_msg)
        raise AuthError(error_msg, status_code=response.status_code, body=response.text)

    try:
        user_info = response.json()
    except ValueError as e:
        raise AuthError(
            f"User info response is not valid JSON: {response.text}",
            status_code=response.status_code,
            body=response.text
        ) from e
    if not isinstance(user_info, dict):
        raise AuthError(f"Unexpected user info payload: {response.text}", status_code=response.status_code, body=response.text)
    return user_info


async def resolve_credentials(client: httpx.AsyncClient, settings: Settings) -> Credentials:
    """Resolve the access token and the author URN it posts as.

    Raises:
        ConfigurationError: If no token is configured (no request is made)
        AuthError: If the lookup fails or lacks the ``sub`` claim
    """
    access_token = get_access_token(settings)
    user_info = await fetch_user_info(client, settings, access_token)

    user_id = user_info.get("sub")
    if not user_id:
        error_msg = (
            "User URN ('sub' field) not found in /v2/userinfo response. "
            f"Received keys: {', '.join(user_info.keys())}"
        )
        logger.error(error_msg)
        raise AuthError(error_msg)

    user_name = user_info.get("name") or " ".join(
        part for part in (user_info.get("given_name"), user_info.get("family_name")) if part
    ) or None
    logger.info(f"Resolved LinkedIn author for: {user_name or user_id}")

    return Credentials(
        access_token=access_token,
        author_urn=f"urn:li:person:{user_id}",
        user_name=user_name
    )
