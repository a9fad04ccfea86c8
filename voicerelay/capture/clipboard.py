"""System clipboard and feedback adapters."""

import asyncio
import logging

import pyperclip

from .ports import AbstractClipboard, AbstractHaptics, ClipboardError

logger = logging.getLogger(__name__)


class PyperclipClipboard(AbstractClipboard):
    """Clipboard backed by pyperclip; the copy runs off the event loop thread."""

    async def write_text(self, text: str) -> None:
        try:
            await asyncio.to_thread(pyperclip.copy, text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(str(e)) from e
        logger.debug(f"Copied {len(text)} characters to clipboard")


class TerminalBell(AbstractHaptics):
    """Rings the terminal bell in place of a vibration pulse."""

    def __init__(self, console):
        self.console = console

    def vibrate(self, duration_ms: int) -> None:
        self.console.bell()
