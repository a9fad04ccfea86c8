"""Microphone recorder built on PyAudio."""

import io
import wave
import asyncio
import logging
from threading import Thread, Event
from typing import Callable, List, Optional

import numpy as np
import pyaudio

from ..models.capture import AudioBlob, CaptureConstraints
from .ports import AbstractAudioRecorder, CaptureUnavailableError

logger = logging.getLogger(__name__)

WAV_MIME_TYPE = "audio/wav"


class PyAudioRecorder(AbstractAudioRecorder):
    """Reads 16-bit PCM chunks on a background thread and packs them as WAV."""

    def __init__(self, chunk_size: int = 1024, format: int = pyaudio.paInt16):
        """Initialize recorder.

        Args:
            chunk_size: Size of each audio chunk in samples
            format: Audio format (16-bit signed int)
        """
        self.chunk_size = chunk_size
        self.format = format
        self.sample_rate = 16000
        self.channels = 1

        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self.recording_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.is_recording = False
        self.total_chunks = 0
        self.peak_level = 0.0
        self.stream_error: Optional[BaseException] = None

    def is_type_supported(self, mime_type: str) -> bool:
        # No compressed encoder; raw PCM is wrapped as WAV.
        return mime_type.split(";")[0].strip() == WAV_MIME_TYPE

    async def open(self, constraints: CaptureConstraints) -> None:
        self.sample_rate = constraints.sample_rate
        self.channels = constraints.channels
        await asyncio.to_thread(self._open_device)

    def _open_device(self) -> None:
        """Check the device by opening a stream with the requested constraints."""
        try:
            self.pyaudio_instance = pyaudio.PyAudio()
            device = self.pyaudio_instance.get_default_input_device_info()
            stream = self._open_stream()
            stream.stop_stream()
            stream.close()
        except (IOError, OSError, ValueError) as e:
            if self.pyaudio_instance is not None:
                self.pyaudio_instance.terminate()
                self.pyaudio_instance = None
            raise CaptureUnavailableError(f"Microphone unavailable: {e}") from e
        logger.info(f"Using input device: {device.get('name')}")

    def start(self, on_fragment: Callable[[bytes], None]) -> None:
        """Start recording in a background thread."""
        if self.pyaudio_instance is None:
            raise CaptureUnavailableError("Recorder is not open")
        if self.is_recording:
            logger.warning("Recording already in progress")
            return

        logger.info("Starting audio recording")
        self.stop_event.clear()
        self.total_chunks = 0
        self.peak_level = 0.0
        self.stream_error = None

        self.recording_thread = Thread(target=self._record_continuously,
                                       args=(on_fragment,), daemon=True)
        self.recording_thread.name = "AudioCaptureThread"
        self.recording_thread.start()
        self.is_recording = True

    async def stop(self) -> None:
        if not self.is_recording:
            logger.warning("No recording in progress")
            return

        logger.info("Stopping audio recording")
        self.stop_event.set()
        await asyncio.to_thread(self._join_thread)
        self.is_recording = False
        logger.info(f"Recording stopped. Total chunks: {self.total_chunks}, "
                    f"peak level: {self.peak_level:.2f}")

        if self.stream_error is not None:
            raise CaptureUnavailableError(f"Recording failed: {self.stream_error}") from self.stream_error

    def _join_thread(self) -> None:
        if self.recording_thread and self.recording_thread.is_alive():
            self.recording_thread.join(timeout=2.0)
            if self.recording_thread.is_alive():
                logger.warning("Recording thread did not stop cleanly")

    def _open_stream(self) -> pyaudio.Stream:
        stream = self.pyaudio_instance.open(
            format=self.format,
            channels=self.channels,
            rate=self.sample_rate,
            input=True,
            frames_per_buffer=self.chunk_size,
            stream_callback=None
        )
        logger.info(f"Audio stream opened: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk")
        return stream

    def _record_continuously(self, on_fragment: Callable[[bytes], None]) -> None:
        stream = None
        try:
            stream = self._open_stream()
            while not self.stop_event.is_set():
                chunk = stream.read(self.chunk_size, exception_on_overflow=False)
                self.total_chunks += 1
                self._track_peak(chunk)
                on_fragment(chunk)
        except Exception as e:
            logger.error(f"Recording loop failed: {e}", exc_info=True)
            self.stream_error = e
        finally:
            if stream:
                stream.stop_stream()
                stream.close()

    def _track_peak(self, chunk: bytes) -> None:
        samples = np.frombuffer(chunk, dtype=np.int16)
        if samples.size:
            level = float(np.abs(samples.astype(np.int32)).max()) / 32768.0
            self.peak_level = max(self.peak_level, level)

    def assemble(self, fragments: List[bytes]) -> AudioBlob:
        """Wrap the PCM fragments in a WAV container."""
        buffer = io.BytesIO()
        with wave.open(buffer, 'wb') as wf:
            wf.setnchannels(self.channels)
            wf.setsampwidth(pyaudio.get_sample_size(self.format))
            wf.setframerate(self.sample_rate)
            wf.writeframes(b"".join(fragments))
        return AudioBlob(data=buffer.getvalue(), mime_type=WAV_MIME_TYPE)

    def close(self) -> None:
        if self.pyaudio_instance is not None:
            self.pyaudio_instance.terminate()
            self.pyaudio_instance = None
