"""The touch screen: remembers the last touch and reports it."""

from __future__ import annotations

import logging

from kaffeepause.events import Signal

log = logging.getLogger(__name__)


class TouchScreen:
    """Holds the last touched coordinates and emits ``touch_event`` on a touch."""

    def __init__(self) -> None:
        self.x = 0
        self.y = 0
        self.touch_event = Signal()

    @property
    def position(self) -> tuple[int, int]:
        """The last touched point as (x, y)."""
        return self.x, self.y

    def reset(self) -> None:
        """Forget the last touch."""
        self.x = 0
        self.y = 0

    def touch(self, x: int, y: int) -> None:
        """Record a touch at (x, y) and notify listeners."""
        log.debug("touch at x=%d y=%d", x, y)
        self.x = x
        self.y = y
        self.touch_event.emit()