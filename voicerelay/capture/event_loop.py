"""Pub/sub key dispatch into the capture controller."""

import asyncio
import logging
from typing import Optional

from pubsub import pub

from ..models.capture import CaptureState
from ..models.events import KeyEvent
from .controller import CaptureController

logger = logging.getLogger(__name__)

KEY_TOPIC = "capture.key"


class KeyPublisher:
    """Publishes key events using pubsub.pub; safe to call from any thread."""

    def __init__(self, topic: str = KEY_TOPIC):
        self.topic = topic
        logger.info(f"KeyPublisher initialized with topic: {topic}")

    def publish_key_event(self, event: KeyEvent) -> None:
        pub.sendMessage(self.topic, event=event)


class CaptureEventLoop:
    """Feeds published key events to the controller one at a time.

    Listeners run on the publishing thread, so events are hopped onto the
    asyncio loop before they are queued.
    """

    def __init__(self, controller: CaptureController, topic: str = KEY_TOPIC):
        self.controller = controller
        self.topic = topic
        self.queue: "asyncio.Queue[Optional[KeyEvent]]" = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._subscribed = False

    def on_key_event(self, event: KeyEvent) -> None:
        """pubsub listener."""
        if self._loop is None:
            logger.warning("Key event received before the event loop started")
            return
        self._loop.call_soon_threadsafe(self.queue.put_nowait, event)

    def start(self) -> None:
        """Subscribe to the key topic; must be called from the running loop."""
        self._loop = asyncio.get_running_loop()
        if not self._subscribed:
            pub.subscribe(self.on_key_event, self.topic)
            self._subscribed = True
            logger.info(f"CaptureEventLoop subscribed to: {self.topic}")

    def request_stop(self) -> None:
        """Ask run() to exit after the events already queued; thread-safe."""
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self.queue.put_nowait, None)

    async def run(self) -> None:
        """Dispatch events until request_stop() is called."""
        self.start()
        try:
            while True:
                event = await self.queue.get()
                if event is None:
                    break
                try:
                    await self.controller.handle(self._resolve(event))
                except Exception as e:
                    logger.error(f"Unhandled error dispatching {event}: {e}", exc_info=True)
        finally:
            self.close()

    def _resolve(self, event: KeyEvent) -> KeyEvent:
        """Give a toggle press its direction from the state it is applied to."""
        if not event.toggle:
            return event
        pressed = self.controller.state is not CaptureState.RECORDING
        return KeyEvent(key=event.key, pressed=pressed, timestamp=event.timestamp)

    def close(self) -> None:
        if self._subscribed:
            pub.unsubscribe(self.on_key_event, self.topic)
            self._subscribed = False
            logger.info(f"CaptureEventLoop unsubscribed from: {self.topic}")
