"""Services layer for VoiceRelay."""

from .relay_service import TranscriptionRelay, PayloadTooLargeError, MAX_UPLOAD_BYTES, TOO_LARGE_MESSAGE

__all__ = [
    "TranscriptionRelay",
    "PayloadTooLargeError",
    "MAX_UPLOAD_BYTES",
    "TOO_LARGE_MESSAGE",
]
