"""Brings the machine up and resets it between orders."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from kaffeepause.enums import Event, SensorName
from kaffeepause.events import Timer

log = logging.getLogger(__name__)

RESET_POLL_INTERVAL_MS = 500


class StartUpManager:
    """Starts all components, resets them and waits for a clean maintenance check.

    Once a reset has been confirmed by the maintenance check, the state machine
    receives ``Event.START_UP``; if the check found issues it receives
    ``Event.ABORT_REQUESTED`` instead. Taking out a cup resets everything.
    """

    def __init__(
        self,
        *,
        brewing_unit: Any,
        coffee_selection: Any,
        state_machine: Any,
        coffee_waiter: Any,
        coin_checker: Any,
        grinder: Any,
        light_sensors: Sequence[Any],
        maintenance: Any,
        milk_unit: Any,
        payment: Any,
        pump: Any,
        pump_control: Any,
        simulation: Any,
        thermoblock: Any,
        touch_handler: Any,
        touch_screen: Any,
        valves: Sequence[Any],
    ) -> None:
        if len(valves) != 4:
            raise ValueError("expected water, steam, milk and fresh water valves")
        self.brewing_unit = brewing_unit
        self.coffee_selection = coffee_selection
        self.state_machine = state_machine
        self.coffee_waiter = coffee_waiter
        self.coin_checker = coin_checker
        self.grinder = grinder
        self.light_sensors = list(light_sensors)
        self.maintenance = maintenance
        self.milk_unit = milk_unit
        self.payment = payment
        self.pump = pump
        self.pump_control = pump_control
        self.simulation = simulation
        self.thermoblock = thermoblock
        self.touch_handler = touch_handler
        self.touch_screen = touch_screen
        (
            self.water_valve,
            self.steam_valve,
            self.milk_valve,
            self.fresh_water_valve,
        ) = valves

        self.reset_done = False
        self._waiting_for_reset = Timer(simulation.scheduler, self._check_reset_complete)

        for sensor in self.light_sensors:
            if sensor.sensor_name is SensorName.CUP_INSERTED:
                sensor.cup_taken.connect(self.reset_all)
        touch_handler.start_up.connect(self.start_up)
        maintenance.maintenance_check_complete.connect(self.on_maintenance)

    def _check_reset_complete(self) -> None:
        if self.reset_done:
            self.reset_done = False
            self._waiting_for_reset.stop()
            self.state_machine.trigger(Event.START_UP)

    def start_up(self) -> None:
        """Start every component, reset them and wait for the reset to finish."""
        log.debug("start up in state %s", self.state_machine.current_state)
        self.simulation.start()
        self.coin_checker.start()
        for sensor in self.light_sensors:
            sensor.start()
        self.pump_control.start()
        self.thermoblock.start()

        self.reset_all()

        self._waiting_for_reset.start(RESET_POLL_INTERVAL_MS)

    def reset_all(self) -> None:
        """Reset everything that a new order starts from, then run maintenance checks."""
        log.debug("reset all in state %s", self.state_machine.current_state)
        self.reset_done = False
        for component in (
            self.brewing_unit,
            self.coffee_waiter,
            self.coffee_selection,
            self.grinder,
            self.milk_unit,
            self.payment,
            self.pump,
            self.pump_control,
            self.simulation,
            self.thermoblock,
            self.touch_handler,
        ):
            component.reset()
        for sensor in self.light_sensors:
            sensor.reset()

        self.maintenance.full_maintenance_schedule()

    def on_maintenance(self) -> None:
        """Mark the reset done if maintenance found nothing, otherwise abort."""
        if not self.maintenance.open_issues:
            log.debug("maintenance check found no issues")
            self.reset_done = True
        else:
            self.state_machine.trigger(Event.ABORT_REQUESTED)