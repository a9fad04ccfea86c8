"""Event models for pub/sub key dispatch."""

import time
from dataclasses import dataclass, field

SPACE = "space"


@dataclass
class KeyEvent:
    """A key transition delivered to the capture controller."""
    key: str
    pressed: bool  # True for key-down, False for key-up
    timestamp: float = field(default_factory=time.time)
    # Press from a source without releases; direction is decided at dispatch.
    toggle: bool = False
