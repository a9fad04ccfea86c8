"""Data models for the VoiceRelay application."""

from .transcription import TranscriptionRequest, TranscriptionResult, RequestContext
from .capture import CaptureState, CaptureConstraints, RecordingSession, AudioBlob
from .events import KeyEvent

__all__ = [
    "TranscriptionRequest",
    "TranscriptionResult",
    "RequestContext",
    "CaptureState",
    "CaptureConstraints",
    "RecordingSession",
    "AudioBlob",
    "KeyEvent",
]
