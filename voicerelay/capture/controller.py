"""Push-to-talk capture controller.

Owns the single capture state field. Key events come in one at a time through
``handle``; the slow part of a session (finalizing the recorder, uploading,
copying) runs as one background task while the state is PROCESSING, so key
presses that arrive meanwhile are dropped instead of queued.
"""

import asyncio
import itertools
import logging
from typing import Optional

from ..models.capture import CaptureConstraints, CaptureState, RecordingSession
from ..models.events import KeyEvent, SPACE
from ..models.transcription import TranscriptionResult
from .ports import (
    AbstractAudioRecorder,
    AbstractClipboard,
    AbstractHaptics,
    AbstractStatusDisplay,
    AbstractTranscriptionClient,
    CaptureUnavailableError,
)

logger = logging.getLogger(__name__)

PREFERRED_MIME_TYPE = "audio/webm;codecs=opus"
HAPTIC_PULSE_MS = 50

MSG_READY = "Press and hold spacebar to record"
MSG_MIC_ERROR = "Error: Could not access microphone."
MSG_RECORDING = "Recording..."
MSG_RELEASE = "Release spacebar when done recording"
MSG_PROCESSING = "Processing..."
MSG_NO_AUDIO = "No audio captured. Press and hold spacebar to record"
MSG_COPIED = "Copied! Press and hold spacebar to record again"
MSG_MANUAL_COPY = "Press spacebar to copy to clipboard"
MSG_COPY_FAILED = "Copy failed. Press and hold spacebar to record again"
MSG_PROCESSING_ERROR = "An error occurred while processing the recording"


class CaptureController:
    """State machine driving microphone capture, upload and clipboard copy."""

    def __init__(self,
                 recorder: AbstractAudioRecorder,
                 client: AbstractTranscriptionClient,
                 clipboard: AbstractClipboard,
                 display: AbstractStatusDisplay,
                 haptics: Optional[AbstractHaptics] = None,
                 trigger_key: str = SPACE,
                 sample_rate: int = 16000,
                 channels: int = 1):
        self.recorder = recorder
        self.client = client
        self.clipboard = clipboard
        self.display = display
        self.haptics = haptics
        self.trigger_key = trigger_key
        self.sample_rate = sample_rate
        self.channels = channels

        self.state = CaptureState.UNINITIALIZED
        self.session: Optional[RecordingSession] = None
        self.pending_text: Optional[str] = None
        self._session_ids = itertools.count(1)
        self._processing: Optional[asyncio.Task] = None

    async def initialize(self) -> bool:
        """Acquire the microphone. Returns False when capture is unavailable."""
        if self.state is not CaptureState.UNINITIALIZED:
            return self.state is not CaptureState.UNAVAILABLE

        mime_type = None
        if self.recorder.is_type_supported(PREFERRED_MIME_TYPE):
            mime_type = PREFERRED_MIME_TYPE
        constraints = CaptureConstraints(channels=self.channels,
                                         sample_rate=self.sample_rate,
                                         mime_type=mime_type)
        try:
            await self.recorder.open(constraints)
        except Exception as e:
            logger.error(f"Failed to initialize recording: {e}")
            self.display.show_status(MSG_MIC_ERROR)
            self.state = CaptureState.UNAVAILABLE
            return False

        logger.info(f"Recorder ready ({mime_type or 'default container'})")
        self.state = CaptureState.IDLE
        self.display.show_status(MSG_READY)
        return True

    async def handle(self, event: KeyEvent) -> None:
        """Apply one key event to the state machine."""
        if event.key != self.trigger_key:
            return

        transitions = {
            (CaptureState.IDLE, True): self._start_recording,
            (CaptureState.RECORDING, False): self._stop_recording,
            (CaptureState.AWAITING_MANUAL_COPY, True): self._manual_copy,
        }
        transition = transitions.get((self.state, event.pressed))
        if transition is None:
            logger.debug(f"Ignoring {'key-down' if event.pressed else 'key-up'} in {self.state.name}")
            return
        await transition()

    async def wait_until_settled(self) -> None:
        """Wait for the in-flight upload, if any, to finish."""
        task = self._processing
        if task is not None:
            await task

    async def shutdown(self) -> None:
        if self.state is CaptureState.RECORDING:
            await self.recorder.stop()
            self.state = CaptureState.IDLE
        await self.wait_until_settled()
        self.recorder.close()
        logger.info("Capture controller shut down")

    async def _start_recording(self) -> None:
        session = RecordingSession(session_id=next(self._session_ids))
        try:
            self.recorder.start(session.add_fragment)
        except CaptureUnavailableError as e:
            logger.error(f"Could not start recorder: {e}")
            self.display.show_status(MSG_MIC_ERROR)
            self.state = CaptureState.UNAVAILABLE
            return
        except Exception as e:
            logger.error(f"Could not start recorder: {e}")
            self.display.show_status(MSG_MIC_ERROR)
            return

        self.session = session
        self.state = CaptureState.RECORDING
        logger.info(f"Recording session {session.session_id} started")
        self.display.show_transcription(MSG_RECORDING)
        self.display.show_status(MSG_RELEASE)

    async def _stop_recording(self) -> None:
        session = self.session
        self.state = CaptureState.PROCESSING
        self.display.show_status(MSG_PROCESSING)
        self._processing = asyncio.create_task(self._finish_session(session))

    async def _finish_session(self, session: RecordingSession) -> None:
        try:
            await self.recorder.stop()
            session.active = False

            if not session.fragments:
                logger.warning(f"Session {session.session_id} produced no audio")
                self.display.show_status(MSG_NO_AUDIO)
                self.state = CaptureState.IDLE
                return

            blob = self.recorder.assemble(session.fragments)
            logger.info(f"Session {session.session_id}: uploading {blob.size} bytes")
            session.clear()

            result = await self.client.transcribe(blob)
            await self._apply_result(result)
        except CaptureUnavailableError as e:
            logger.error(f"Microphone failed during recording: {e}")
            self.display.show_status(MSG_MIC_ERROR)
            self.state = CaptureState.UNAVAILABLE
        except Exception as e:
            logger.error(f"Error in stop handler: {e}", exc_info=True)
            self.display.show_status(MSG_PROCESSING_ERROR)
            self.state = CaptureState.IDLE
        finally:
            self.session = None
            self._processing = None

    async def _apply_result(self, result: TranscriptionResult) -> None:
        if result.is_error:
            logger.warning(f"Transcription failed: {result.error}")
            self.display.show_transcription(f"Error: {result.error}")
            self.display.show_status(MSG_READY)
            self.state = CaptureState.IDLE
            return

        self.display.show_transcription(result.text)
        try:
            await self.clipboard.write_text(result.text)
        except Exception as e:
            logger.error(f"Failed to auto-copy: {e}")
            self.pending_text = result.text
            self.display.show_status(MSG_MANUAL_COPY)
            self.state = CaptureState.AWAITING_MANUAL_COPY
            return

        self._copied()

    async def _manual_copy(self) -> None:
        text = self.pending_text
        self.pending_text = None
        self.state = CaptureState.PROCESSING
        try:
            await self.clipboard.write_text(text)
        except Exception as e:
            logger.error(f"Manual copy failed: {e}")
            self.display.show_status(MSG_COPY_FAILED)
            self.state = CaptureState.IDLE
            return

        self._copied()

    def _copied(self) -> None:
        self.display.show_status(MSG_COPIED)
        self.state = CaptureState.IDLE
        if self.haptics is None:
            return
        try:
            self.haptics.vibrate(HAPTIC_PULSE_MS)
        except Exception as e:
            logger.warning(f"Haptic feedback failed: {e}")
