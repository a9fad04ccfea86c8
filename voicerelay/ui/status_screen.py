"""Rich console rendering of capture status and transcription text."""

import logging
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..capture.ports import AbstractStatusDisplay

logger = logging.getLogger(__name__)


class ConsoleStatusDisplay(AbstractStatusDisplay):
    """Prints status changes and transcriptions to the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.status = ""
        self.transcription = ""

    def show_status(self, message: str) -> None:
        self.status = message
        style = "bold red" if message.startswith("Error") else "cyan"
        self.console.print(Text(message, style=style))

    def show_transcription(self, text: str) -> None:
        self.transcription = text
        self.console.print(Panel(Text(text), title="Transcription", border_style="green"))

    def show_banner(self, relay_url: str) -> None:
        self.console.print("🎙️  VoiceRelay - push to talk", style="bold blue")
        self.console.print(f"Relay: {relay_url}")
        self.console.print("Space starts recording, space again stops it, q quits")
        self.console.print("=" * 50)
