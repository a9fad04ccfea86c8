"""Transcription-related data models."""

import time
from dataclasses import dataclass, field
from typing import Optional, Dict, Any


@dataclass
class TranscriptionRequest:
    """One upload to forward to the provider."""
    audio: bytes
    mime_type: str = "audio/webm"
    filename: str = "audio.webm"

    @property
    def size(self) -> int:
        return len(self.audio)


@dataclass
class TranscriptionResult:
    """Either transcribed text or an error message, never both."""
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_error:
            return {"error": self.error}
        return {"text": self.text}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "TranscriptionResult":
        """Build a result from a relay JSON payload; an `error` key wins over `text`."""
        if payload.get("error"):
            return cls(error=str(payload["error"]))
        if "text" in payload:
            return cls(text=payload["text"])
        return cls(error="Malformed response from transcription server")


@dataclass
class RequestContext:
    """Per-request logging context for the relay."""
    request_id: str
    payload_size: int
    started_at: float = field(default_factory=time.monotonic)

    @property
    def payload_kb(self) -> float:
        return self.payload_size / 1024

    def elapsed(self) -> float:
        """Seconds since the request started."""
        return time.monotonic() - self.started_at
