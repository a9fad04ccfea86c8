"""Groq Whisper provider using the OpenAI-compatible transcription endpoint."""

import logging
import aiohttp
from typing import Optional

from ..models.transcription import TranscriptionRequest
from .base import AbstractTranscriptionProvider, ProviderError

logger = logging.getLogger(__name__)

GROQ_TRANSCRIPTION_URL = "https://api.groq.com/openai/v1/audio/transcriptions"


class GroqTranscriptionProvider(AbstractTranscriptionProvider):
    """Forwards audio to Groq as multipart form data and returns the text field."""

    def __init__(self,
                 api_key: str,
                 endpoint: str = GROQ_TRANSCRIPTION_URL,
                 model: str = "whisper-large-v3",
                 language: str = "en",
                 prompt: str = "coding",
                 response_format: str = "json",
                 session: Optional[aiohttp.ClientSession] = None):
        """Initialize Groq provider.

        Args:
            api_key: Groq API key, sent as a bearer token
            endpoint: Transcription endpoint URL
            model: Speech-to-text model name
            language: Target language code
            prompt: Hint that biases recognition toward a vocabulary
            response_format: Provider response format
            session: Shared client session; a new one is opened per call when None
        """
        super().__init__(language=language)
        self.api_key = api_key
        self.endpoint = endpoint
        self.model = model
        self.prompt = prompt
        self.response_format = response_format
        self.session = session

        logger.info(f"GroqTranscriptionProvider initialized with model: {model}")

    def build_form(self, request: TranscriptionRequest) -> aiohttp.FormData:
        """Wrap the audio and the fixed provider fields as multipart form data."""
        form = aiohttp.FormData()
        form.add_field('file', request.audio,
                       filename=request.filename,
                       content_type=request.mime_type)
        form.add_field('model', self.model)
        form.add_field('response_format', self.response_format)
        form.add_field('language', self.language)
        form.add_field('prompt', self.prompt)
        return form

    async def transcribe(self, request: TranscriptionRequest) -> str:
        headers = {"Authorization": f"Bearer {self.api_key}"}

        if self.session is not None:
            return await self._post(self.session, request, headers)

        async with aiohttp.ClientSession() as session:
            return await self._post(session, request, headers)

    async def _post(self, session: aiohttp.ClientSession,
                    request: TranscriptionRequest, headers: dict) -> str:
        async with session.post(self.endpoint, headers=headers,
                                data=self.build_form(request)) as response:
            if response.status < 200 or response.status >= 300:
                error_text = await response.text()
                logger.debug(f"Groq error body: {error_text}")
                raise ProviderError(
                    f"Groq API error: {response.status} {response.reason}",
                    status=response.status,
                )

            result = await response.json(content_type=None)
            if not isinstance(result, dict) or "text" not in result:
                raise ProviderError("Groq API response did not contain a text field")
            return result["text"]
