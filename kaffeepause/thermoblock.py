"""The thermoblock heats water for brewing and steam for milk."""

from __future__ import annotations

import logging
from typing import Any

from kaffeepause.enums import Mode
from kaffeepause.events import Signal, Timer

log = logging.getLogger(__name__)

TARGET_TEMPERATURES: dict[Mode, int] = {
    Mode.BREWING: 90,
    Mode.STEAMING: 120,
    Mode.MAINTENANCE: 100,
}
STANDBY_TEMPERATURE = 60
MIN_WATER_FOR_HEATING_ML = 100
HEATING_STEP_CELSIUS = 5
CONTROL_INTERVAL_MS = 1000


class Thermoblock:
    """Heats the simulated water towards the target of the current mode.

    A timer on the simulation's clock runs :meth:`control_heating` every second.
    """

    def __init__(self, simulation: Any) -> None:
        self.simulation = simulation
        self.water_temperature_ok = Signal()
        self.steaming_ok = Signal()
        self.temperature_changed = Signal()
        self._mode = Mode.STANDBY
        self._target_temperature = STANDBY_TEMPERATURE
        self.mode = Mode.STANDBY
        self._timer = Timer(simulation.scheduler, self.control_heating)
        self._timer.start(CONTROL_INTERVAL_MS)

    @property
    def mode(self) -> Mode:
        return self._mode

    @mode.setter
    def mode(self, new_mode: Mode) -> None:
        self._mode = new_mode
        self._target_temperature = TARGET_TEMPERATURES.get(new_mode, STANDBY_TEMPERATURE)

    @property
    def target_temperature(self) -> int:
        return self._target_temperature

    def start(self) -> None:
        """Enter standby."""
        log.debug("thermoblock start")
        self.mode = Mode.STANDBY

    def reset(self) -> None:
        """Return to standby."""
        log.debug("thermoblock reset")
        self.mode = Mode.STANDBY

    def is_at_target_temperature(self) -> bool:
        """Whether the water has reached the current target temperature."""
        return self._target_temperature <= self.simulation.current_temperature

    def control_heating(self) -> None:
        """One control step: heat further, or report that the target is reached."""
        if self.simulation.current_water_amount < MIN_WATER_FOR_HEATING_ML:
            return

        if self.is_at_target_temperature():
            if self._mode is Mode.BREWING:
                log.debug("brewing temperature reached, switching to standby")
                self.mode = Mode.STANDBY
                self.water_temperature_ok.emit()
            elif self._mode is Mode.STEAMING:
                log.debug("steaming temperature reached, switching to standby")
                self.mode = Mode.STANDBY
                self.steaming_ok.emit()
            return

        new_temperature = self.simulation.current_temperature + HEATING_STEP_CELSIUS
        log.debug("heating water to %d", new_temperature)
        self.simulation.current_temperature = new_temperature
        self.temperature_changed.emit(new_temperature)