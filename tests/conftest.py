"""Pytest configuration and fixtures for VoiceRelay tests."""

import pytest
import tempfile
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import yaml
from aiohttp import web

from voicerelay.config import VoiceRelayConfig
from voicerelay.transcription.base import AbstractTranscriptionProvider, ProviderError


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

STUB_PATH = "/openai/v1/audio/transcriptions"


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # 1024 samples of 16-bit audio (440 Hz sine)
    sample_rate = 16000
    duration = 1024 / sample_rate

    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * 440 * t)

    audio_data = (wave_data * 32767).astype(np.int16)
    return audio_data.tobytes()


@pytest.fixture
def write_config(temp_data_dir):
    """Write a YAML config into the temp dir and load it."""
    def _write(overrides: Dict[str, Any]) -> VoiceRelayConfig:
        settings = {"logging": {"file_path": "logs/voicerelay.log", "console_output": False}}
        for section, values in overrides.items():
            settings.setdefault(section, {}).update(values)
        path = Path(temp_data_dir) / "voicerelay.yaml"
        path.write_text(yaml.safe_dump(settings), encoding="utf-8")
        return VoiceRelayConfig(str(path))
    return _write


@pytest.fixture
def test_config(write_config):
    """Default configuration with logging kept inside the temp dir."""
    return write_config({})


class FakeProvider(AbstractTranscriptionProvider):
    """Records every request and answers with fixed text or raises."""

    def __init__(self, text: str = "hello world", error: Exception = None):
        super().__init__(language="en")
        self.text = text
        self.error = error
        self.calls = []

    async def transcribe(self, request):
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def failing_provider():
    return FakeProvider(error=ProviderError("Groq API error: 401 Unauthorized", status=401))


@dataclass
class StubProvider:
    """A running stub of the provider's HTTP endpoint."""
    url: str
    calls: List[Dict[str, Any]] = field(default_factory=list)


@pytest.fixture
def stub_provider(aiohttp_server):
    """Factory starting an aiohttp server that imitates the provider endpoint."""
    async def _start(status: int = 200, payload: Any = None) -> StubProvider:
        if payload is None:
            payload = {"text": "hello world"}
        stub = StubProvider(url="")

        async def handler(request: web.Request) -> web.Response:
            form = await request.post()
            upload = form["file"]
            stub.calls.append({
                "authorization": request.headers.get("Authorization"),
                "file": upload.file.read(),
                "filename": upload.filename,
                "file_content_type": upload.content_type,
                "fields": {k: v for k, v in form.items() if k != "file"},
            })
            return web.json_response(payload, status=status)

        app = web.Application(client_max_size=64 * 1024 * 1024)
        app.router.add_post(STUB_PATH, handler)
        server = await aiohttp_server(app)
        stub.url = str(server.make_url(STUB_PATH))
        return stub

    return _start
