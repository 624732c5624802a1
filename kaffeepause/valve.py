"""A valve that is either open or closed."""

from __future__ import annotations

import logging

from kaffeepause.enums import ValveState, ValveType
from kaffeepause.events import Signal

log = logging.getLogger(__name__)


class Valve:
    """A valve of a given type; changing its state emits ``state_changed``."""

    def __init__(self, valve_type: ValveType) -> None:
        self.type = valve_type
        self._state = ValveState.CLOSED
        self.state_changed = Signal()

    @property
    def state(self) -> ValveState:
        return self._state

    @state.setter
    def state(self, new_state: ValveState) -> None:
        log.debug("valve %s set to %s", self.type.name, new_state.name)
        self._state = new_state
        self.state_changed.emit(self.type, new_state)

    @property
    def is_open(self) -> bool:
        return self._state is ValveState.OPEN

    def reset(self) -> None:
        """Close the valve without notifying listeners."""
        log.debug("valve %s reset", self.type.name)
        self._state = ValveState.CLOSED