"""Cross-platform keyboard input handling for the terminal client."""

import sys
import threading
import time
from typing import Optional, Callable
import logging

from ..models.events import KeyEvent, SPACE

logger = logging.getLogger(__name__)

QUIT_KEY = "q"


class KeyboardInputHandler:
    """Read single keypresses on a background thread and pass them to a callback."""

    def __init__(self, callback: Callable[[str], bool]):
        """Initialize keyboard handler.

        Args:
            callback: Function that takes a key and returns True to continue, False to quit
        """
        self.callback = callback
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the keyboard input handler."""
        if self.running:
            return

        self.running = True
        self.thread = threading.Thread(target=self._input_loop, daemon=True)
        self.thread.start()
        logger.info("Keyboard input handler started")

    def stop(self) -> None:
        """Stop the keyboard input handler."""
        self.running = False
        if self.thread and self.thread is not threading.current_thread():
            self.thread.join(timeout=1.0)
        logger.info("Keyboard input handler stopped")

    def _input_loop(self) -> None:
        logger.info("Starting keyboard input loop")
        while self.running:
            key = self._get_key()
            if key:
                logger.debug(f"Key detected: {key!r}")
                if not self.callback(key):
                    logger.info("Callback returned False, breaking input loop")
                    break
            time.sleep(0.05)
        self.running = False
        logger.info("Keyboard input loop ended")

    def _get_key(self) -> Optional[str]:
        """Get a single keypress in a cross-platform way."""
        try:
            if sys.platform == "win32":
                return self._get_key_windows()
            return self._get_key_unix()
        except Exception as e:
            logger.error(f"Error getting key: {e}")
            return None

    def _get_key_windows(self) -> Optional[str]:
        import msvcrt
        if msvcrt.kbhit():
            return msvcrt.getch().decode('utf-8', errors='ignore').lower()
        return None

    def _get_key_unix(self) -> Optional[str]:
        import select
        import tty
        import termios

        if select.select([sys.stdin], [], [], 0.1)[0]:
            old_settings = termios.tcgetattr(sys.stdin)
            try:
                tty.setraw(sys.stdin.fileno())
                return sys.stdin.read(1).lower()
            finally:
                termios.tcsetattr(sys.stdin, termios.TCSADRAIN, old_settings)
        return None


class PushToTalkKeyMapper:
    """Turn terminal keypresses into key-down/key-up events.

    Terminals report presses only, never releases, so a space press is sent
    as a toggle: the event loop makes it a key-up if the controller is
    recording when the event is applied, and a key-down otherwise.
    """

    def __init__(self,
                 publish: Callable[[KeyEvent], None],
                 on_quit: Optional[Callable[[], None]] = None):
        self.publish = publish
        self.on_quit = on_quit

    def __call__(self, key: str) -> bool:
        if key == QUIT_KEY:
            if self.on_quit is not None:
                self.on_quit()
            return False
        if key == " ":
            self.publish(KeyEvent(key=SPACE, pressed=True, toggle=True))
        return True
