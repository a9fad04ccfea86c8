"""Transcription relay: validates uploads and forwards them to the provider."""

import itertools
import logging
from typing import Optional

from ..models.transcription import TranscriptionRequest, TranscriptionResult, RequestContext
from ..transcription.base import AbstractTranscriptionProvider, ProviderError

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 25 * 1024 * 1024  # Groq's current limit
TOO_LARGE_MESSAGE = "Audio file too large. Please keep recordings under 30 seconds."

# Content-Type (without parameters) -> upload filename
UPLOAD_FILENAMES = {
    "audio/webm": "audio.webm",
    "audio/wav": "audio.wav",
    "audio/x-wav": "audio.wav",
    "audio/ogg": "audio.ogg",
    "audio/mp4": "audio.m4a",
}
DEFAULT_MIME_TYPE = "audio/webm"


class PayloadTooLargeError(Exception):
    """Raised when an upload reaches the size ceiling."""

    def __init__(self, size: int, limit: int):
        super().__init__(TOO_LARGE_MESSAGE)
        self.size = size
        self.limit = limit


def resolve_upload_type(content_type: Optional[str]) -> tuple:
    """Map a request Content-Type to the (mime_type, filename) of the uploaded part."""
    mime_type = (content_type or "").split(";")[0].strip().lower()
    if mime_type in UPLOAD_FILENAMES:
        return mime_type, UPLOAD_FILENAMES[mime_type]
    return DEFAULT_MIME_TYPE, UPLOAD_FILENAMES[DEFAULT_MIME_TYPE]


class TranscriptionRelay:
    """Stateless relay between an uploaded audio buffer and the transcription provider."""

    def __init__(self, provider: AbstractTranscriptionProvider,
                 max_upload_bytes: int = MAX_UPLOAD_BYTES):
        """Initialize relay.

        Args:
            provider: Provider that performs the actual transcription
            max_upload_bytes: Size ceiling; uploads at or over it are rejected
        """
        self.provider = provider
        self.max_upload_bytes = max_upload_bytes
        self._request_ids = itertools.count(1)
        logger.info(f"TranscriptionRelay ready (limit {max_upload_bytes} bytes)")

    def new_context(self, payload_size: int) -> RequestContext:
        """Create the logging context for one request."""
        return RequestContext(request_id=f"req_{next(self._request_ids)}",
                              payload_size=payload_size)

    def check_size(self, context: RequestContext) -> None:
        """Reject payloads at or over the ceiling before any provider call."""
        if context.payload_size >= self.max_upload_bytes:
            logger.error(f"[{context.request_id}] File too large: {context.payload_size} bytes")
            raise PayloadTooLargeError(context.payload_size, self.max_upload_bytes)

    async def transcribe(self, audio: bytes, content_type: Optional[str] = None,
                         context: Optional[RequestContext] = None) -> TranscriptionResult:
        """Validate the upload, forward it and return the provider's text.

        Args:
            audio: Raw encoded audio bytes
            content_type: Request Content-Type, selects the uploaded file part type
            context: Logging context; created here when not supplied

        Returns:
            TranscriptionResult carrying the provider text verbatim

        Raises:
            PayloadTooLargeError: If the payload reaches the size ceiling
            ProviderError: If the provider call fails
        """
        if context is None:
            context = self.new_context(len(audio))
        self.check_size(context)

        mime_type, filename = resolve_upload_type(content_type)
        request = TranscriptionRequest(audio=audio, mime_type=mime_type, filename=filename)

        logger.info(f"[{context.request_id}] Processing {context.payload_kb:.2f}KB of audio")
        try:
            text = await self.provider.transcribe(request)
        except ProviderError as e:
            logger.error(f"[{context.request_id}] Provider failed after "
                         f"{context.elapsed():.2f}s: {e}")
            raise

        logger.info(f"[{context.request_id}] Transcription completed in {context.elapsed():.2f}s")
        return TranscriptionResult(text=text)
