"""Interfaces the capture controller drives: microphone, relay, clipboard, display."""

from abc import ABC, abstractmethod
from typing import Callable, List

from ..models.capture import AudioBlob, CaptureConstraints
from ..models.transcription import TranscriptionResult


class CaptureUnavailableError(Exception):
    """Raised when no microphone is available or access is denied."""


class ClipboardError(Exception):
    """Raised when writing to the clipboard fails."""


class AbstractAudioRecorder(ABC):
    """Microphone recorder producing encoded audio fragments."""

    @abstractmethod
    def is_type_supported(self, mime_type: str) -> bool:
        """Whether the recorder can encode to the given MIME type."""
        pass

    @abstractmethod
    async def open(self, constraints: CaptureConstraints) -> None:
        """Acquire the microphone.

        Raises:
            CaptureUnavailableError: If the device is missing or access is denied
        """
        pass

    @abstractmethod
    def start(self, on_fragment: Callable[[bytes], None]) -> None:
        """Begin capturing; fragments are passed to on_fragment as they become available."""
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Stop capturing and wait until the last fragment has been delivered."""
        pass

    @abstractmethod
    def assemble(self, fragments: List[bytes]) -> AudioBlob:
        """Join fragments into one uploadable blob."""
        pass

    def close(self) -> None:
        """Release the microphone."""
        pass


class AbstractTranscriptionClient(ABC):
    """Sends a recording to the relay."""

    @abstractmethod
    async def transcribe(self, blob: AudioBlob) -> TranscriptionResult:
        pass


class AbstractClipboard(ABC):

    @abstractmethod
    async def write_text(self, text: str) -> None:
        """Copy text to the clipboard.

        Raises:
            ClipboardError: If the write fails
        """
        pass


class AbstractHaptics(ABC):

    @abstractmethod
    def vibrate(self, duration_ms: int) -> None:
        pass


class AbstractStatusDisplay(ABC):
    """Status line plus transcription area."""

    @abstractmethod
    def show_status(self, message: str) -> None:
        pass

    @abstractmethod
    def show_transcription(self, text: str) -> None:
        pass

