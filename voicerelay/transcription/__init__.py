"""Transcription providers for VoiceRelay."""

from .base import AbstractTranscriptionProvider, ProviderError
from .groq_provider import GroqTranscriptionProvider, GROQ_TRANSCRIPTION_URL

__all__ = [
    "AbstractTranscriptionProvider",
    "ProviderError",
    "GroqTranscriptionProvider",
    "GROQ_TRANSCRIPTION_URL",
]
