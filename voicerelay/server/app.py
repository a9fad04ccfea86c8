"""aiohttp application serving the browser client and the /transcribe relay."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import aiohttp
from aiohttp import web

from ..config import VoiceRelayConfig
from ..services.relay_service import TranscriptionRelay, PayloadTooLargeError
from ..transcription.base import AbstractTranscriptionProvider
from ..transcription.groq_provider import GroqTranscriptionProvider

logger = logging.getLogger(__name__)

PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"
READ_CHUNK_BYTES = 64 * 1024

RELAY_KEY = web.AppKey("relay", TranscriptionRelay)


async def read_limited_body(request: web.Request, limit: int) -> Tuple[bytes, int]:
    """Read the request body, keeping at most `limit` bytes.

    The rest of an oversized body is drained so the client still gets a response.

    Returns:
        (kept bytes, total body size)
    """
    kept = bytearray()
    total = 0
    async for chunk in request.content.iter_chunked(READ_CHUNK_BYTES):
        total += len(chunk)
        if len(kept) < limit:
            kept.extend(chunk[:limit - len(kept)])
    return bytes(kept), total


async def serve_index(request: web.Request) -> web.Response:
    logger.info("Serving index.html")
    return web.Response(text=(PUBLIC_DIR / "index.html").read_text(encoding="utf-8"),
                        content_type="text/html")


async def serve_script(request: web.Request) -> web.Response:
    logger.info("Serving script.js")
    return web.Response(text=(PUBLIC_DIR / "script.js").read_text(encoding="utf-8"),
                        content_type="application/javascript")


async def not_found(request: web.Request) -> web.Response:
    return web.Response(text="Not found", status=404)


async def transcribe(request: web.Request) -> web.Response:
    """Relay the raw audio body to the provider and answer with {text} or {error}."""
    relay = request.app[RELAY_KEY]
    # Started before the body is read so the logged duration covers the upload.
    context = relay.new_context(payload_size=0)
    request_id = context.request_id
    try:
        audio, context.payload_size = await read_limited_body(request, relay.max_upload_bytes)
        result = await relay.transcribe(audio, request.content_type, context)
        return web.json_response(result.to_dict())
    except PayloadTooLargeError as e:
        return web.json_response({"error": str(e)}, status=413)
    except Exception as e:
        logger.error(f"[{request_id}] Transcription error: {e}", exc_info=True)
        return web.json_response({"error": str(e)}, status=500)


def _groq_session_ctx(config: VoiceRelayConfig, api_key: str):
    """Cleanup context owning the outbound client session for the Groq provider."""

    async def groq_session(app: web.Application):
        session = aiohttp.ClientSession()
        app[RELAY_KEY].provider = GroqTranscriptionProvider(
            api_key=api_key,
            endpoint=config.get('provider.endpoint'),
            model=config.get('provider.model'),
            language=config.get('provider.language'),
            prompt=config.get('provider.prompt'),
            response_format=config.get('provider.response_format'),
            session=session,
        )
        yield
        await session.close()
        logger.info("Provider session closed")

    return groq_session


def create_app(config: VoiceRelayConfig,
               provider: Optional[AbstractTranscriptionProvider] = None) -> web.Application:
    """Build the web application.

    Args:
        config: Application configuration
        provider: Transcription provider; when None a Groq provider is created on
                  startup, which requires the API key environment variable

    Raises:
        ValueError: If no provider is given and the API key is not set
    """
    app = web.Application()
    relay = TranscriptionRelay(provider, max_upload_bytes=config.get_max_upload_bytes())
    app[RELAY_KEY] = relay

    if provider is None:
        api_key = config.get_api_key()
        app.cleanup_ctx.append(_groq_session_ctx(config, api_key))

    app.router.add_get("/", serve_index)
    app.router.add_get("/index.html", serve_index)
    app.router.add_get("/script.js", serve_script)
    app.router.add_post("/transcribe", transcribe)
    app.router.add_route("*", "/{tail:.*}", not_found)
    return app


def run_server(config: VoiceRelayConfig, host: Optional[str] = None,
               port: Optional[int] = None) -> None:
    """Create the application and serve it until interrupted."""
    app = create_app(config)
    host = host or config.get('server.host', '0.0.0.0')
    port = port or config.get('server.port', 3000)
    logger.info(f"Server running at http://{host}:{port}")
    web.run_app(app, host=host, port=port, print=None)
