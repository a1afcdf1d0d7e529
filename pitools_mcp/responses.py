"""Uniform results returned by every tool."""
import logging
from dataclasses import dataclass
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import PiToolsError, UpstreamError
from .workflow import PHASE_ACTIVITY, PublishOutcome, PublishPhase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishResult:
    """Normalized outcome of a publish call."""
    success: bool
    message: str
    content_id: Optional[str] = None


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """Envelope handed back to the MCP dispatcher."""
    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent]
    is_error: Optional[bool] = Field(default=None, alias="isError")
    post_id: Optional[str] = Field(default=None, alias="postId")

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)

    def to_envelope(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def text_response(text: str, post_id: Optional[str] = None) -> ToolResponse:
    return ToolResponse(content=[TextContent(text=text)], post_id=post_id)


def error_response(text: str) -> ToolResponse:
    return ToolResponse(content=[TextContent(text=text)], is_error=True)


def _success_message(label: str, content_id: Optional[str]) -> str:
    if content_id:
        return f"Successfully posted {label}! Post ID: {content_id}"
    return f"Successfully posted {label}!"


def normalize_staged(outcome: PublishOutcome, label: str) -> PublishResult:
    """Convert a staged-upload outcome into a ``PublishResult``.

    Failure messages name the phase that failed. A failure while creating
    the post also says that the already uploaded media is orphaned.
    """
    if outcome.succeeded:
        return PublishResult(True, _success_message(label, outcome.content_id), outcome.content_id)

    activity = PHASE_ACTIVITY.get(outcome.last_phase, "publishing")
    message = f"Error posting {label} during {activity}: {outcome.error}"
    if outcome.last_phase is PublishPhase.BYTES_UPLOADED:
        message += " (the media was uploaded but is not attached to any post)"
    return PublishResult(False, message)


def normalize_single(outcome: PublishOutcome, label: str) -> PublishResult:
    """Convert a single create-post outcome into a ``PublishResult``."""
    if outcome.succeeded:
        return PublishResult(True, _success_message(label, outcome.content_id), outcome.content_id)

    error = outcome.error
    if isinstance(error, UpstreamError) and error.status_code is not None:
        return PublishResult(False, f"Failed to post {label} ({error.status_code}): {error.body}")
    return PublishResult(False, f"Error posting {label}: {error}")


def to_tool_response(result: PublishResult) -> ToolResponse:
    if result.success:
        return text_response(result.message, post_id=result.content_id)
    return error_response(result.message)


def failure_response(error: Exception) -> ToolResponse:
    """Envelope for an error caught at a tool boundary."""
    if isinstance(error, PiToolsError):
        return error_response(str(error))
    logger.exception(f"Unexpected error: {error}")
    return error_response(f"An error occurred: {error}")
