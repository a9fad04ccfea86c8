"""HTTP client for the relay's /transcribe endpoint."""

import logging
from typing import Optional

import aiohttp

from ..models.capture import AudioBlob
from ..models.transcription import TranscriptionResult
from .ports import AbstractTranscriptionClient

logger = logging.getLogger(__name__)


class RelayClient(AbstractTranscriptionClient):
    """Posts recordings to a running relay server."""

    def __init__(self, base_url: str = "http://localhost:3000",
                 session: Optional[aiohttp.ClientSession] = None):
        """Initialize relay client.

        Args:
            base_url: Relay server root URL
            session: Shared client session; a new one is opened per call when None
        """
        self.url = base_url.rstrip("/") + "/transcribe"
        self.session = session

    async def transcribe(self, blob: AudioBlob) -> TranscriptionResult:
        """Upload the blob and parse the relay's {text} or {error} payload.

        The payload is parsed whatever the HTTP status, since 413 and 500
        responses carry the error message in the body.
        """
        if self.session is not None:
            return await self._post(self.session, blob)

        async with aiohttp.ClientSession() as session:
            return await self._post(session, blob)

    async def _post(self, session: aiohttp.ClientSession, blob: AudioBlob) -> TranscriptionResult:
        headers = {"Content-Type": blob.mime_type}
        async with session.post(self.url, data=blob.data, headers=headers) as response:
            payload = await response.json(content_type=None)
            logger.debug(f"Relay answered {response.status}: {payload}")
            if not isinstance(payload, dict):
                return TranscriptionResult(error=f"Unexpected response from relay ({response.status})")
            return TranscriptionResult.from_dict(payload)
