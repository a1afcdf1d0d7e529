"""Settings and fake HTTP provider shared by the test modules."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx

from pitools_mcp.config.settings import Settings

LINKEDIN_TOKEN = "test-linkedin-token"
INSTAGRAM_TOKEN = "test-instagram-token"
INSTAGRAM_ACCOUNT = "17841400000000000"

USERINFO_URL = "https://api.linkedin.com/v2/userinfo"
POSTS_URL = "https://api.linkedin.com/rest/posts"
IMAGE_INIT_URL = "https://api.linkedin.com/rest/images"
VIDEO_INIT_URL = "https://api.linkedin.com/rest/videos"
UPLOAD_URL = "https://www.linkedin.com/dms-uploads/test-upload"


def make_settings(**overrides: Any) -> Settings:
    """Build settings without reading .env; credentials default to test values."""
    values: dict[str, Any] = {
        "LINKEDIN_ACCESS_TOKEN": LINKEDIN_TOKEN,
        "INSTAGRAM_ACCESS_TOKEN": INSTAGRAM_TOKEN,
        "INSTAGRAM_USER_ID_FOR_POSTING": INSTAGRAM_ACCOUNT,
        "INSTAGRAM_PUBLISH_DELAY_SECONDS": 0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def route_url(url: httpx.URL) -> str:
    return f"{url.scheme}://{url.host}{url.path}"


Handler = Callable[[httpx.Request], httpx.Response]


class FakeProvider:
    """Routes requests by (method, url without query) and records them all."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, url: str, status_code: int = 200, **kwargs: Any) -> None:
        """Answer every matching request with a fresh response built from ``kwargs``."""
        self.routes[(method, url)] = lambda request: httpx.Response(status_code, **kwargs)

    def route(self, method: str, url: str, handler: Handler) -> None:
        self.routes[(method, url)] = handler

    def _dispatch(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, route_url(request.url))
        handler = self.routes.get(key)
        if handler is None:
            return httpx.Response(404, text=f"no route for {key}")
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._dispatch)

    def calls(self, method: str, url: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and route_url(r.url) == url
        ]

    @staticmethod
    def json_body(request: httpx.Request) -> Any:
        return json.loads(request.content)

