"""Capture-side data models."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class CaptureState(Enum):
    """States of the push-to-talk capture controller."""
    UNINITIALIZED = "uninitialized"
    IDLE = "idle"
    RECORDING = "recording"
    PROCESSING = "processing"
    AWAITING_MANUAL_COPY = "awaiting_manual_copy"
    UNAVAILABLE = "unavailable"


@dataclass
class CaptureConstraints:
    """Microphone constraints requested when opening the recorder."""
    channels: int = 1
    sample_rate: int = 16000
    mime_type: Optional[str] = None  # None means the recorder's default container


@dataclass
class AudioBlob:
    """Assembled recording ready for upload."""
    data: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class RecordingSession:
    """Audio fragments collected between key-down and key-up."""
    session_id: int
    fragments: List[bytes] = field(default_factory=list)
    active: bool = True
    started_at: float = field(default_factory=time.monotonic)

    def add_fragment(self, fragment: bytes) -> None:
        """Append a fragment as the recorder makes it available."""
        if fragment:
            self.fragments.append(fragment)

    @property
    def byte_count(self) -> int:
        return sum(len(f) for f in self.fragments)

    def clear(self) -> None:
        self.fragments = []
        self.active = False
