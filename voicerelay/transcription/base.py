"""Abstract base classes for transcription providers."""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from ..models.transcription import TranscriptionRequest

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Raised when the transcription provider fails or answers with a non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class AbstractTranscriptionProvider(ABC):
    """Abstract base class for speech-to-text providers."""

    def __init__(self, language: str = "en"):
        """Initialize provider with language preference."""
        self.language = language

    @abstractmethod
    async def transcribe(self, request: TranscriptionRequest) -> str:
        """Send the audio to the provider and return the transcribed text.

        Args:
            request: The audio upload and its MIME metadata

        Returns:
            Transcribed text, verbatim

        Raises:
            ProviderError: If the provider call fails
        """
        pass
