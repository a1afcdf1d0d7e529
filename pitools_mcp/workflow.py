"""Staged media publishing.

Posting binary media is a three step exchange with the provider:

1. initialize an upload session (upload target + media handle)
2. transfer the raw bytes to the upload target
3. create the visible post referencing the media handle

Each step is a separate network call with its own failure mode. The runner
below walks an explicit phase machine so a failure always reports the last
phase reached; a failure after ``BYTES_UPLOADED`` means the provider holds
media that no post references.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol

import httpx

from .exceptions import LocalResourceError, PiToolsError, UpstreamError

logger = logging.getLogger(__name__)


class PublishPhase(str, Enum):
    """Phases of one publish invocation."""
    INIT = "INIT"
    UPLOAD_SESSION_CREATED = "UPLOAD_SESSION_CREATED"
    BYTES_UPLOADED = "BYTES_UPLOADED"
    POST_CREATED = "POST_CREATED"
    FAILED = "FAILED"


_STAGED_TRANSITIONS = {
    PublishPhase.INIT: PublishPhase.UPLOAD_SESSION_CREATED,
    PublishPhase.UPLOAD_SESSION_CREATED: PublishPhase.BYTES_UPLOADED,
    PublishPhase.BYTES_UPLOADED: PublishPhase.POST_CREATED,
}

# What the runner is doing while leaving a phase
PHASE_ACTIVITY = {
    PublishPhase.INIT: "upload initialization",
    PublishPhase.UPLOAD_SESSION_CREATED: "media upload",
    PublishPhase.BYTES_UPLOADED: "post creation",
}


def next_phase(phase: PublishPhase) -> PublishPhase:
    """Return the phase following ``phase`` on success."""
    try:
        return _STAGED_TRANSITIONS[phase]
    except KeyError:
        raise ValueError(f"{phase.value} is terminal") from None


@dataclass(frozen=True)
class UploadSession:
    """Provider-issued upload session, valid for one invocation."""
    upload_target: str
    media_handle: str


@dataclass(frozen=True)
class PublishOutcome:
    """Terminal state of one run."""
    phase: PublishPhase
    last_phase: PublishPhase
    content_id: Optional[str] = None
    error: Optional[PiToolsError] = None

    @property
    def succeeded(self) -> bool:
        return self.phase is PublishPhase.POST_CREATED


class StagedUpload(Protocol):
    """Provider-specific implementation of the three steps."""

    async def initialize_upload(self) -> UploadSession:
        ...

    async def transfer_bytes(self, session: UploadSession) -> None:
        ...

    async def create_post(self, session: UploadSession) -> Optional[str]:
        ...


def _as_tool_error(error: Exception) -> PiToolsError:
    if isinstance(error, PiToolsError):
        return error
    if isinstance(error, httpx.HTTPError):
        return UpstreamError(f"HTTP request failed: {error}")
    if isinstance(error, OSError):
        return LocalResourceError(str(error))
    logger.exception(f"Unexpected error while publishing: {error}")
    return PiToolsError(f"Unexpected error: {error}")


async def run_staged_upload(upload: StagedUpload) -> PublishOutcome:
    """Drive ``upload`` from INIT to POST_CREATED, stopping at the first failure."""
    phase = PublishPhase.INIT
    session: Optional[UploadSession] = None
    content_id: Optional[str] = None

    while phase is not PublishPhase.POST_CREATED:
        logger.info(f"Staged upload: {PHASE_ACTIVITY[phase]} (from {phase.value})")
        try:
            if phase is PublishPhase.INIT:
                session = await upload.initialize_upload()
            elif phase is PublishPhase.UPLOAD_SESSION_CREATED:
                await upload.transfer_bytes(session)
            else:
                content_id = await upload.create_post(session)
        except Exception as e:
            error = _as_tool_error(e)
            logger.error(f"Staged upload failed during {PHASE_ACTIVITY[phase]}: {error}")
            return PublishOutcome(PublishPhase.FAILED, last_phase=phase, error=error)
        phase = next_phase(phase)

    logger.info(f"Staged upload complete. Content ID: {content_id or 'N/A'}")
    return PublishOutcome(PublishPhase.POST_CREATED, last_phase=phase, content_id=content_id)


async def run_single_post(create_post: Callable[[], Awaitable[Optional[str]]]) -> PublishOutcome:
    """Collapsed machine for posts without media: INIT -> POST_CREATED."""
    try:
        content_id = await create_post()
    except Exception as e:
        error = _as_tool_error(e)
        logger.error(f"Post creation failed: {error}")
        return PublishOutcome(PublishPhase.FAILED, last_phase=PublishPhase.INIT, error=error)
    return PublishOutcome(PublishPhase.POST_CREATED, last_phase=PublishPhase.POST_CREATED, content_id=content_id)
