"""Maps touches on the screen to buttons and buttons to machine actions."""

from __future__ import annotations

import logging
from typing import Any

from kaffeepause.enums import ButtonArea, ButtonName, Coffee, Event, Intensity, State
from kaffeepause.events import Signal

log = logging.getLogger(__name__)

KNOWN_BUTTONS: dict[State, tuple[ButtonArea, ...]] = {
    State.PREPARATION_START: (
        ButtonArea(350, 450, 250, 350, ButtonName.START),
    ),
    State.READY_SELECT_COFFEE: (
        ButtonArea(137, 238, 100, 500, ButtonName.CREMA),
        ButtonArea(262, 363, 100, 500, ButtonName.ESPRESSO),
        ButtonArea(387, 488, 100, 500, ButtonName.CAPPUCCINO),
        ButtonArea(512, 613, 300, 500, ButtonName.MAINTENANCE),
    ),
    State.CONFIRM_INTENSITY: (
        ButtonArea(137, 238, 100, 500, ButtonName.LIGHT),
        ButtonArea(262, 363, 100, 500, ButtonName.MEDIUM),
        ButtonArea(387, 488, 100, 500, ButtonName.STRONG),
        ButtonArea(512, 613, 300, 500, ButtonName.ABORT),
    ),
    State.MAKE_COFFEE: (
        ButtonArea(512, 613, 300, 500, ButtonName.ABORT),
    ),
    State.BREW_COFFEE: (
        ButtonArea(512, 613, 300, 500, ButtonName.ABORT),
    ),
    State.MAINTENANCE: (
        ButtonArea(200, 300, 100, 500, ButtonName.DECALCIFICATION),
        ButtonArea(325, 425, 100, 500, ButtonName.SHUTDOWN),
        ButtonArea(450, 550, 300, 500, ButtonName.ABORT),
    ),
}

_COFFEE_BUTTONS = {
    ButtonName.CREMA: Coffee.CREMA,
    ButtonName.ESPRESSO: Coffee.ESPRESSO,
    ButtonName.CAPPUCCINO: Coffee.CAPPUCCINO,
}

_INTENSITY_BUTTONS = {
    ButtonName.LIGHT: Intensity.LIGHT,
    ButtonName.MEDIUM: Intensity.MEDIUM,
    ButtonName.STRONG: Intensity.STRONG,
}

_EVENT_BUTTONS = {
    ButtonName.MAINTENANCE: Event.MAINTENANCE_REQUESTED,
    ButtonName.DECALCIFICATION: Event.DECALCIFICATION_REQUESTED,
}


class TouchHandler:
    """Turns touch events into button presses for the current machine state.

    ``state_machine`` needs a ``current_state`` attribute and a
    ``trigger(event)`` method.
    """

    def __init__(self, state_machine: Any, touch_screen: Any) -> None:
        self.state_machine = state_machine
        self.touch_screen = touch_screen
        self.current_state: State = state_machine.current_state
        self.pressed_button = ButtonName.UNDEFINED

        self.button_pressed = Signal()
        self.start_up = Signal()
        self.coffee_selected = Signal()
        self.intensity_confirmed = Signal()
        self.shutdown_requested = Signal()

        touch_screen.touch_event.connect(self.on_touch_event)
        self.button_pressed.connect(self.on_button_pressed)

    def reset(self) -> None:
        """Forget the last pressed button and re-read the machine state."""
        log.debug("touch handler reset")
        self.current_state = self.state_machine.current_state
        self.pressed_button = ButtonName.UNDEFINED

    def check_touch_event(self, x: int, y: int, button: ButtonArea) -> bool:
        """Whether (x, y) hits ``button``; a hit makes it the pressed button."""
        if button.contains(x, y):
            log.debug("touch hit button %s", button.name.name)
            self.pressed_button = button.name
            return True
        return False

    def on_touch_event(self) -> None:
        """Find the button under the last touch and emit ``button_pressed``."""
        self.current_state = self.state_machine.current_state
        x, y = self.touch_screen.position
        log.debug("touch event at %d,%d in state %s", x, y, self.current_state.name)
        for button in KNOWN_BUTTONS.get(self.current_state, ()):
            if self.check_touch_event(x, y, button):
                self.button_pressed.emit()

    def known_buttons(self) -> tuple[ButtonArea, ...]:
        """The buttons shown in the machine's current state (empty if none)."""
        return KNOWN_BUTTONS.get(self.state_machine.current_state, ())

    def on_button_pressed(self) -> None:
        """Carry out the action of the pressed button."""
        button = self.pressed_button
        log.debug("button pressed: %s", button.name)
        if button is ButtonName.START:
            self.start_up.emit()
        elif button in _EVENT_BUTTONS:
            self.state_machine.trigger(_EVENT_BUTTONS[button])
        elif button in _COFFEE_BUTTONS:
            self.coffee_selected.emit(_COFFEE_BUTTONS[button])
        elif button in _INTENSITY_BUTTONS:
            self.intensity_confirmed.emit(_INTENSITY_BUTTONS[button])
        elif button is ButtonName.SHUTDOWN:
            self.state_machine.trigger(Event.SHUTDOWN_REQUESTED)
            self.shutdown_requested.emit()