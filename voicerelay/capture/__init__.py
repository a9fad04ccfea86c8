"""Push-to-talk capture: controller, key dispatch and device adapters."""

from .controller import CaptureController
from .event_loop import CaptureEventLoop, KeyPublisher, KEY_TOPIC
from .ports import (
    AbstractAudioRecorder,
    AbstractTranscriptionClient,
    AbstractClipboard,
    AbstractHaptics,
    AbstractStatusDisplay,
    CaptureUnavailableError,
    ClipboardError,
)
from .client import RelayClient

__all__ = [
    "CaptureController",
    "CaptureEventLoop",
    "KeyPublisher",
    "KEY_TOPIC",
    "AbstractAudioRecorder",
    "AbstractTranscriptionClient",
    "AbstractClipboard",
    "AbstractHaptics",
    "AbstractStatusDisplay",
    "CaptureUnavailableError",
    "ClipboardError",
    "RelayClient",
]
