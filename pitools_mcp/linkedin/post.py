"""LinkedIn post-related models, exceptions and request bodies."""
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..exceptions import UpstreamError, ValidationError
from ..validation import NonEmptyStr, UrlStr

MIN_POLL_OPTIONS = 2
MAX_POLL_OPTIONS = 4
POLL_DURATION = "THREE_DAYS"


class PostCreationError(UpstreamError):
    """Raised when post creation fails."""
    pass


class MediaUploadError(UpstreamError):
    """Raised when media upload fails."""
    pass


class PostKind(str, Enum):
    """Valid post kinds."""
    TEXT = "TEXT"
    ARTICLE = "ARTICLE"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    POLL = "POLL"


class PostVisibility(str, Enum):
    """Valid post visibility values."""
    PUBLIC = "PUBLIC"
    CONNECTIONS = "CONNECTIONS"


class _PostRequestBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TextPostRequest(_PostRequestBase):
    """Plain text post."""
    kind: Literal[PostKind.TEXT] = PostKind.TEXT
    commentary: NonEmptyStr


class ArticlePostRequest(_PostRequestBase):
    """Post sharing an article link.

    The thumbnail fields are accepted but not sent; LinkedIn needs a separate
    image upload for article thumbnails, which is not wired in.
    """
    kind: Literal[PostKind.ARTICLE] = PostKind.ARTICLE
    commentary: NonEmptyStr
    url: UrlStr
    title: NonEmptyStr
    thumbnail_path: Optional[str] = None
    thumbnail_alt_text: Optional[str] = None


class ImagePostRequest(_PostRequestBase):
    """Post with a single local image."""
    kind: Literal[PostKind.IMAGE] = PostKind.IMAGE
    commentary: NonEmptyStr
    file_path: NonEmptyStr


class VideoPostRequest(_PostRequestBase):
    """Post with a single local video."""
    kind: Literal[PostKind.VIDEO] = PostKind.VIDEO
    commentary: NonEmptyStr
    file_path: NonEmptyStr


class PollPostRequest(_PostRequestBase):
    """Poll with 2-4 options; commentary is optional."""
    kind: Literal[PostKind.POLL] = PostKind.POLL
    commentary: Optional[str] = None
    poll_question: NonEmptyStr
    poll_options: Annotated[
        List[NonEmptyStr],
        Field(min_length=MIN_POLL_OPTIONS, max_length=MAX_POLL_OPTIONS)
    ]


PostRequest = Annotated[
    Union[TextPostRequest, ArticlePostRequest, ImagePostRequest, VideoPostRequest, PollPostRequest],
    Field(discriminator="kind")
]

MediaPostRequest = Union[ImagePostRequest, VideoPostRequest]


def check_poll_options(options: List[str]) -> None:
    """Re-check the option count for callers that skipped input validation."""
    if not MIN_POLL_OPTIONS <= len(options) <= MAX_POLL_OPTIONS:
        raise ValidationError([(
            "pollOptions",
            f"Polls must have between {MIN_POLL_OPTIONS} and {MAX_POLL_OPTIONS} options."
        )])


def build_post_body(author_urn: str, commentary: str, content: Optional[dict] = None) -> dict:
    """Build the body for ``POST /rest/posts``.

    Visibility, distribution and lifecycle are fixed: every post is a
    published, public, main-feed post that can be reshared.
    """
    body = {
        "author": author_urn,
        "commentary": commentary,
        "visibility": PostVisibility.PUBLIC.value,
        "distribution": {"feedDistribution": "MAIN_FEED"},
        "lifecycleState": "PUBLISHED",
        "isReshareDisabledByAuthor": False,
    }
    if content is not None:
        body["content"] = content
    return body


def build_content(request, media_handle: Optional[str] = None) -> Optional[dict]:
    """Return the ``content`` block for ``request``, or None for text posts."""
    if isinstance(request, TextPostRequest):
        return None
    if isinstance(request, ArticlePostRequest):
        return {"article": {"source": request.url, "title": request.title}}
    if isinstance(request, (ImagePostRequest, VideoPostRequest)):
        if not media_handle:
            raise ValueError("Media posts need the handle returned by the upload")
        return {"media": {"id": media_handle}}
    if isinstance(request, PollPostRequest):
        check_poll_options(request.poll_options)
        return {
            "poll": {
                "question": request.poll_question,
                "options": [{"text": option} for option in request.poll_options],
                "settings": {"duration": POLL_DURATION},
            }
        }
    raise TypeError(f"Unsupported post request: {type(request).__name__}")


def build_request_body(author_urn: str, request, media_handle: Optional[str] = None) -> dict:
    """Full create-post body for any post kind."""
    return build_post_body(
        author_urn,
        request.commentary or "",
        build_content(request, media_handle)
    )
