"""Unit tests for PyAudioRecorder without audio hardware."""

import io
import time
import wave
import pytest
from unittest.mock import Mock, patch

pyaudio = pytest.importorskip("pyaudio")

from voicerelay.capture.recorder import PyAudioRecorder, WAV_MIME_TYPE
from voicerelay.capture.ports import CaptureUnavailableError
from voicerelay.models.capture import CaptureConstraints


@pytest.fixture
def mock_pyaudio(sample_audio_chunk):
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        def read_chunk(*args, **kwargs):
            time.sleep(0.005)
            return sample_audio_chunk

        mock_stream.read.side_effect = read_chunk
        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.get_default_input_device_info.return_value = {"name": "Test Mic"}
        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }


@pytest.mark.unit
class TestPyAudioRecorder:

    def test_only_wav_is_supported(self):
        recorder = PyAudioRecorder()

        assert recorder.is_type_supported("audio/wav")
        assert not recorder.is_type_supported("audio/webm;codecs=opus")

    async def test_open_applies_constraints(self, mock_pyaudio):
        recorder = PyAudioRecorder()

        await recorder.open(CaptureConstraints(channels=1, sample_rate=16000))

        assert recorder.sample_rate == 16000
        assert recorder.channels == 1
        assert recorder.pyaudio_instance is mock_pyaudio['instance']

    async def test_open_without_input_device_raises(self, mock_pyaudio):
        mock_pyaudio['instance'].get_default_input_device_info.side_effect = IOError("No Default Input Device")
        recorder = PyAudioRecorder()

        with pytest.raises(CaptureUnavailableError):
            await recorder.open(CaptureConstraints())

        mock_pyaudio['instance'].terminate.assert_called_once()
        assert recorder.pyaudio_instance is None

    async def test_open_rejected_by_device_raises(self, mock_pyaudio):
        mock_pyaudio['instance'].open.side_effect = OSError("Invalid sample rate")
        recorder = PyAudioRecorder()

        with pytest.raises(CaptureUnavailableError):
            await recorder.open(CaptureConstraints(channels=1, sample_rate=16000))

        mock_pyaudio['instance'].terminate.assert_called_once()
        assert recorder.pyaudio_instance is None

    async def test_stream_failure_in_thread_surfaces_on_stop(self, mock_pyaudio):
        mock_pyaudio['instance'].open.side_effect = [mock_pyaudio['stream'], OSError("Device unavailable")]
        recorder = PyAudioRecorder()
        await recorder.open(CaptureConstraints())
        fragments = []

        recorder.start(fragments.append)
        time.sleep(0.02)

        with pytest.raises(CaptureUnavailableError):
            await recorder.stop()

        assert fragments == []
        assert recorder.is_recording is False

    def test_start_before_open_raises(self):
        with pytest.raises(CaptureUnavailableError):
            PyAudioRecorder().start(lambda fragment: None)

    async def test_records_fragments_until_stopped(self, mock_pyaudio, sample_audio_chunk):
        recorder = PyAudioRecorder()
        await recorder.open(CaptureConstraints())
        fragments = []

        recorder.start(fragments.append)
        time.sleep(0.05)
        await recorder.stop()

        assert recorder.is_recording is False
        assert len(fragments) == recorder.total_chunks
        assert fragments and all(f == sample_audio_chunk for f in fragments)
        assert recorder.peak_level > 0.9
        # Once for the device check in open(), once when recording ends
        assert mock_pyaudio['stream'].close.call_count == 2

    def test_assemble_builds_wav(self, sample_audio_chunk):
        recorder = PyAudioRecorder()

        blob = recorder.assemble([sample_audio_chunk, sample_audio_chunk])

        assert blob.mime_type == WAV_MIME_TYPE
        with wave.open(io.BytesIO(blob.data), 'rb') as wf:
            assert wf.getnchannels() == 1
            assert wf.getframerate() == 16000
            assert wf.getsampwidth() == 2
            assert wf.getnframes() == 2048

    async def test_close_terminates_pyaudio(self, mock_pyaudio):
        recorder = PyAudioRecorder()
        await recorder.open(CaptureConstraints())

        recorder.close()

        mock_pyaudio['instance'].terminate.assert_called_once()
        assert recorder.pyaudio_instance is None
