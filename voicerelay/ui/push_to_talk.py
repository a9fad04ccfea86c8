"""Terminal push-to-talk client wiring keyboard, recorder, relay and clipboard."""

import asyncio
import logging

import aiohttp

from ..capture.clipboard import PyperclipClipboard, TerminalBell
from ..capture.client import RelayClient
from ..capture.controller import CaptureController
from ..capture.event_loop import CaptureEventLoop, KeyPublisher
from ..capture.recorder import PyAudioRecorder
from ..config import VoiceRelayConfig
from .keyboard_input import KeyboardInputHandler, PushToTalkKeyMapper
from .status_screen import ConsoleStatusDisplay

logger = logging.getLogger(__name__)


async def run_push_to_talk(config: VoiceRelayConfig, relay_url: str) -> int:
    """Run the terminal client until the user quits. Returns an exit status."""
    display = ConsoleStatusDisplay()
    display.show_banner(relay_url)

    async with aiohttp.ClientSession() as session:
        controller = CaptureController(
            recorder=PyAudioRecorder(chunk_size=config.get('client.chunk_size', 1024)),
            client=RelayClient(relay_url, session=session),
            clipboard=PyperclipClipboard(),
            display=display,
            haptics=TerminalBell(display.console),
            sample_rate=config.get('client.sample_rate', 16000),
            channels=config.get('client.channels', 1),
        )
        if not await controller.initialize():
            return 1

        event_loop = CaptureEventLoop(controller)
        publisher = KeyPublisher(event_loop.topic)
        mapper = PushToTalkKeyMapper(
            publish=publisher.publish_key_event,
            on_quit=event_loop.request_stop,
        )
        keyboard = KeyboardInputHandler(mapper)

        event_loop.start()
        keyboard.start()
        try:
            await event_loop.run()
        finally:
            keyboard.stop()
            await controller.shutdown()
    return 0


def main_push_to_talk(config: VoiceRelayConfig, relay_url: str) -> int:
    return asyncio.run(run_push_to_talk(config, relay_url))
