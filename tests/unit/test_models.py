"""Unit tests for data models."""

import pytest

from voicerelay.models import (
    TranscriptionRequest,
    TranscriptionResult,
    RequestContext,
    RecordingSession,
    CaptureConstraints,
)


@pytest.mark.unit
class TestTranscriptionResult:

    def test_text_result(self):
        result = TranscriptionResult(text="hello")

        assert not result.is_error
        assert result.to_dict() == {"text": "hello"}

    def test_error_result(self):
        result = TranscriptionResult(error="boom")

        assert result.is_error
        assert result.to_dict() == {"error": "boom"}

    def test_from_dict_prefers_error(self):
        result = TranscriptionResult.from_dict({"text": "x", "error": "failed"})

        assert result.error == "failed"
        assert result.text is None

    def test_from_dict_empty_text_is_not_an_error(self):
        result = TranscriptionResult.from_dict({"text": ""})

        assert not result.is_error
        assert result.text == ""

    def test_from_dict_malformed(self):
        assert TranscriptionResult.from_dict({}).is_error


@pytest.mark.unit
class TestRecordingSession:

    def test_fragments_accumulate_in_order(self):
        session = RecordingSession(session_id=1)
        session.add_fragment(b"ab")
        session.add_fragment(b"")
        session.add_fragment(b"cde")

        assert session.fragments == [b"ab", b"cde"]
        assert session.byte_count == 5
        assert session.active

    def test_clear(self):
        session = RecordingSession(session_id=1, fragments=[b"x"])
        session.clear()

        assert session.fragments == []
        assert not session.active


@pytest.mark.unit
def test_request_size_and_context():
    request = TranscriptionRequest(audio=b"\x00" * 2048)
    context = RequestContext(request_id="req_1", payload_size=request.size)

    assert request.filename == "audio.webm"
    assert request.mime_type == "audio/webm"
    assert context.payload_kb == 2.0
    assert context.elapsed() >= 0.0


@pytest.mark.unit
def test_default_constraints_are_mono_16k():
    constraints = CaptureConstraints()

    assert constraints.channels == 1
    assert constraints.sample_rate == 16000
    assert constraints.mime_type is None
