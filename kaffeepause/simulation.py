"""The simulated environment: coins, beans, water, milk, pressure and sensors."""

from __future__ import annotations

import logging
import random
from typing import Any, Optional

from kaffeepause.enums import (
    Beans,
    BlockerStatus,
    ButtonName,
    CoinData,
    CoinDestination,
    CoinType,
    Detection,
    SensorName,
)
from kaffeepause.events import Scheduler, Signal, Timer

log = logging.getLogger(__name__)

COIN_CHARACTERISTICS: dict[CoinType, CoinData] = {
    CoinType.EUR005: CoinData(2125, 167, 392, 0),
    CoinType.EUR01: CoinData(1975, 193, 410, 1),
    CoinType.EUR02: CoinData(2225, 214, 574, 2),
    CoinType.EUR05: CoinData(2425, 238, 780, 3),
    CoinType.EUR1: CoinData(2325, 167, 750, 4),
    CoinType.EUR2: CoinData(2575, 167, 850, 5),
    CoinType.INVALID: CoinData(2125, 167, 250, 6),
}

INITIAL_COINS_PER_TUBE = 50
MAX_COINS_PER_TUBE = 350
MAX_BEANS_GRAM = 2000
PRESSURE_STEP_MBAR = 1000
FRESH_WATER_STEP_ML = 50

_INITIAL_COIN_COUNTS = {
    CoinType.EUR005: INITIAL_COINS_PER_TUBE,
    CoinType.EUR01: INITIAL_COINS_PER_TUBE,
    CoinType.EUR02: INITIAL_COINS_PER_TUBE,
    CoinType.EUR05: 0,
    CoinType.EUR1: 0,
    CoinType.EUR2: INITIAL_COINS_PER_TUBE,
}

_INITIAL_DETECTIONS = {
    SensorName.HOPPER: Detection.LIGHT_RECEIVED,
    SensorName.COIN_SUPPLY: Detection.LIGHT_RECEIVED,
    SensorName.ESPRESSO_BEAN_LEVEL: Detection.LIGHT_BLOCKED,
    SensorName.CREMA_BEAN_LEVEL: Detection.LIGHT_BLOCKED,
    SensorName.WASTE_DISPOSAL: Detection.LIGHT_RECEIVED,
    SensorName.CUP_INSERTED: Detection.LIGHT_RECEIVED,
    SensorName.MILK_LEVEL: Detection.LIGHT_BLOCKED,
    SensorName.DIRTY_WATER: Detection.LIGHT_BLOCKED,
    SensorName.FRESH_WATER_LEVEL: Detection.LIGHT_BLOCKED,
}


class SimulationError(RuntimeError):
    """Raised when the simulated machine is driven into an impossible state."""


def _empty_coin_return() -> dict[CoinType, int]:
    return {coin: 0 for coin in COIN_CHARACTERISTICS}


class Simulation:
    """Models the physical side of the coffee machine on a simulated clock.

    ``pump`` needs an ``is_running`` attribute, ``fresh_water_valve`` an
    ``is_open`` attribute. A pump control (``target_pressure``) and a touch
    handler (``known_buttons()``) are attached later.
    """

    def __init__(
        self,
        touch_screen: Any,
        pump: Any,
        fresh_water_valve: Any,
        scheduler: Optional[Scheduler] = None,
        *,
        rng: Optional[random.Random] = None,
        water_amount: int = 500,
        max_water_amount: int = 2000,
        milk_amount: int = 1000,
    ) -> None:
        self.touch_screen = touch_screen
        self.pump = pump
        self.fresh_water_valve = fresh_water_valve
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self._rng = rng if rng is not None else random.Random()
        self.pump_control: Any = None
        self.touch_handler: Any = None

        self.milk_temperature_changed = Signal()
        self.coin_inserted = Signal()
        self.grinded_beans = Signal()
        self.grinding_progress = Signal()
        self.not_enough_beans = Signal()
        self.not_enough_water = Signal()
        self.water_dispensed = Signal()
        self.water_dispensing = Signal()
        self.pressure_updated = Signal()
        self.pressure_too_high = Signal()
        self.milk_dispensed = Signal()
        self.milk_dispensing = Signal()
        self.not_enough_milk = Signal()

        self._coin_levels = {
            coin: COIN_CHARACTERISTICS[coin].width_micrometer * count
            for coin, count in _INITIAL_COIN_COUNTS.items()
        }
        self._coin_returns = _empty_coin_return()
        self._detections = dict(_INITIAL_DETECTIONS)
        self._beans_levels = {Beans.CREMA: MAX_BEANS_GRAM, Beans.ESPRESSO: MAX_BEANS_GRAM}
        self.coin_light_sensors: dict[SensorName, Any] = {name: None for name in SensorName}
        self._blockers = {
            CoinDestination.CASH_REGISTER: BlockerStatus.CLOSED,
            CoinDestination.HOPPER: BlockerStatus.CLOSED,
        }
        self.enough_change = False

        self.max_water_amount = max_water_amount
        self.current_water_amount = water_amount
        self.current_milk_amount = milk_amount
        self._milk_temperature = 14

        self.selected_beans = Beans.ESPRESSO
        self.required_amount_beans = 0
        self.grind_rate = 0
        self.beans_grinded = 0
        self.current_temperature = 60
        self.flow_rate = 0
        self.water_dispensed_ml = 0
        self.water_needed = 0
        self.milk_dispensed_ml = 0
        self.milk_needed = 0
        self.flow_rate_water = 0
        self.flow_rate_milk = 0
        self.current_pressure = 0
        self.waste_water = 0
        self.grinded_waste = 0

        self._pressure_timer = Timer(self.scheduler, self.update_pressure)
        self._pump_water_timer = Timer(self.scheduler, self.reduce_water)
        self._grinder_timer = Timer(self.scheduler, self.reduce_beans)
        self._pump_milk_timer = Timer(self.scheduler, self.reduce_milk)
        self._light_sensor_timer = Timer(self.scheduler, self.update_light_sensors)
        self._milk_heating_timer = Timer(self.scheduler, self.heat_milk)
        self._fresh_water_timer = Timer(self.scheduler, self.fill_fresh_water)

    # lifecycle

    def start(self) -> None:
        """Start the periodic environment timers."""
        log.debug("simulation starting timers")
        self._pressure_timer.start(1000)
        self._fresh_water_timer.start(1000)
        self._milk_heating_timer.start(20000)
        self._light_sensor_timer.start(3000)

    def shutdown(self) -> None:
        """Stop the periodic environment timers."""
        log.debug("simulation stopping timers")
        self._pressure_timer.stop()
        self._fresh_water_timer.stop()
        self._milk_heating_timer.stop()
        self._light_sensor_timer.stop()

    def reset(self) -> None:
        """Return the per-order state to its starting values."""
        log.debug("simulation reset")
        self._coin_returns = _empty_coin_return()
        for sensor in (SensorName.HOPPER, SensorName.COIN_SUPPLY, SensorName.CUP_INSERTED):
            self._detections[sensor] = Detection.LIGHT_RECEIVED

        self._pump_water_timer.stop()
        self._grinder_timer.stop()
        self._pump_milk_timer.stop()

        self.selected_beans = Beans.ESPRESSO
        self.required_amount_beans = 0
        self.grind_rate = 0
        self.beans_grinded = 0

        self.current_temperature = 60
        self.flow_rate = 0
        self.water_dispensed_ml = 0
        self.water_needed = 0

        self.milk_dispensed_ml = 0
        self.milk_needed = 0
        self.flow_rate_water = 0
        self.flow_rate_milk = 0

        self.current_pressure = 0

        self.waste_water = 0
        self.grinded_waste = 0
        self._milk_temperature = 14

    # milk temperature

    @property
    def milk_temperature(self) -> int:
        return self._milk_temperature

    @milk_temperature.setter
    def milk_temperature(self, value: int) -> None:
        self._milk_temperature = value
        self.milk_temperature_changed.emit(value)

    def heat_milk(self) -> None:
        """The environment warms the milk by one degree."""
        self.milk_temperature = self._milk_temperature + 1
        log.debug("milk temperature now %d", self._milk_temperature)

    # wiring

    def set_pump_control(self, pump_control: Any) -> None:
        self.pump_control = pump_control

    def set_touch_handler(self, touch_handler: Any) -> None:
        self.touch_handler = touch_handler

    # user input

    def on_eur_button_clicked(self, coin: CoinType) -> None:
        """Insert a coin of the given type; emits ``coin_inserted`` with its data."""
        data = COIN_CHARACTERISTICS.get(coin)
        if data is None:
            return
        log.debug("coin button %s: %s", coin.name, data)
        self.coin_inserted.emit(data)

    def on_button_touched(self, button: ButtonName) -> None:
        """Touch the screen at a random point inside the button's area."""
        if self.touch_handler is None:
            raise SimulationError("no touch handler attached")
        x = y = 0
        for area in self.touch_handler.known_buttons():
            if area.name == button:
                x = self._rng.randrange(area.begin_x + 1, area.end_x)
                y = self._rng.randrange(area.begin_y + 1, area.end_y)
        self.touch_screen.touch(x, y)

    def cup_inserted(self, status: bool) -> None:
        """Place (True) or remove (False) a cup."""
        self.set_detection(
            SensorName.CUP_INSERTED,
            Detection.LIGHT_BLOCKED if status else Detection.LIGHT_RECEIVED,
        )

    # coins

    def set_coin_flap(self, destination: CoinDestination) -> None:
        """Toggle the blocker in front of the given destination."""
        self._blockers[destination] = self._blockers[destination].toggled()

    def add_coin(self, coin: CoinType, width: int) -> None:
        self._coin_levels[coin] += width

    def remove_coin(self, coin: CoinType, width: int) -> None:
        self._coin_levels[coin] -= width

    def blocker_status(self, destination: CoinDestination) -> BlockerStatus:
        return self._blockers[destination]

    def close_all_coin_supply_blockers(self) -> None:
        for destination in self._blockers:
            self._blockers[destination] = BlockerStatus.CLOSED

    def set_coin_level(self, coin: CoinType, level: int) -> None:
        """Set a coin tube's level in micrometres, refusing impossible changes."""
        current = self._coin_levels[coin]
        width = COIN_CHARACTERISTICS[coin].width_micrometer
        if current < level:
            if current < MAX_COINS_PER_TUBE * width:
                raise SimulationError(
                    f"maximum amount of {coin.name} coins reached, adding {level}"
                )
        elif current > level:
            if current == 0:
                raise SimulationError(f"no {coin.name} coins to pay out")
        else:
            log.debug("coin level of %s set to its current value", coin.name)
        self._coin_levels[coin] = level

    def coin_level(self, coin: CoinType) -> int:
        return self._coin_levels[coin]

    def add_coin_return(self, coin: CoinType) -> None:
        """Put one coin of the given type into the return tray."""
        self._coin_returns[coin] += 1

    def coin_return(self, coin: CoinType) -> int:
        return self._coin_returns[coin]

    @property
    def coin_level_map(self) -> dict[CoinType, int]:
        return dict(self._coin_levels)

    @property
    def coin_return_map(self) -> dict[CoinType, int]:
        return dict(self._coin_returns)

    # light sensors

    def register_coin_light_sensor(self, name: SensorName, sensor: Any) -> None:
        """Keep a coin light sensor and answer its ``waiting_for_detected_coin``."""
        self.coin_light_sensors[name] = sensor
        sensor.waiting_for_detected_coin.connect(self.on_waiting_for_detected_coin)

    def on_waiting_for_detected_coin(self, sensor: SensorName) -> None:
        """Let a coin pass the sensor: blocked after 500 ms, clear after 1000 ms."""
        self.scheduler.call_later(500, lambda: self.toggle_detection(sensor))
        self.scheduler.call_later(1000, lambda: self.toggle_detection(sensor))

    def detection(self, sensor: SensorName) -> Detection:
        return self._detections[sensor]

    def set_detection(self, sensor: SensorName, value: Detection) -> None:
        log.debug("detection of %s set to %s", sensor.name, value.name)
        self._detections[sensor] = value

    def toggle_detection(self, sensor: SensorName) -> None:
        self.set_detection(sensor, self._detections[sensor].toggled())

    def update_light_sensors(self) -> None:
        """Derive sensor readings from the levels of beans, milk, waste and water."""
        if self._beans_levels[Beans.CREMA] < 15:
            self._detections[SensorName.CREMA_BEAN_LEVEL] = Detection.LIGHT_RECEIVED
        if self._beans_levels[Beans.ESPRESSO] < 20:
            self._detections[SensorName.ESPRESSO_BEAN_LEVEL] = Detection.LIGHT_RECEIVED
        if self.current_milk_amount < 60:
            self._detections[SensorName.MILK_LEVEL] = Detection.LIGHT_RECEIVED
        if self.grinded_waste > 2500:
            self._detections[SensorName.WASTE_DISPOSAL] = Detection.LIGHT_BLOCKED
        if self.waste_water >= 1500:
            self._detections[SensorName.DIRTY_WATER] = Detection.LIGHT_BLOCKED
        if self.current_water_amount >= self.max_water_amount:
            self._detections[SensorName.FRESH_WATER_LEVEL] = Detection.LIGHT_BLOCKED

    # beans

    def grind_beans(self, grind_rate: int, selected_beans: Beans, required_amount: int) -> None:
        """Grind ``required_amount`` grams, ``grind_rate`` grams per second."""
        self.required_amount_beans = required_amount
        self.selected_beans = selected_beans
        self.grind_rate = grind_rate
        self._grinder_timer.start(1000)

    def reduce_beans(self) -> None:
        """One grinder step."""
        if self.required_amount_beans <= self.beans_grinded:
            self._grinder_timer.stop()
            self.grinded_beans.emit()
            self.grinded_waste += self.required_amount_beans
            return
        if self._beans_levels[self.selected_beans] >= self.grind_rate:
            self._beans_levels[self.selected_beans] -= self.grind_rate
            self.beans_grinded += self.grind_rate
            self.grinding_progress.emit(self.beans_grinded, self.required_amount_beans)
        else:
            self._grinder_timer.stop()
            self.not_enough_beans.emit()
            self.grinded_waste += self.beans_grinded

    def reset_beans_level(self, beans: Beans) -> None:
        """Refill a bean container."""
        self._beans_levels[beans] = MAX_BEANS_GRAM

    def beans_level(self, beans: Beans) -> int:
        return self._beans_levels[beans]

    # water

    def pump_water(self, water_needed: int, flow_rate: int) -> None:
        """Dispense ``water_needed`` ml, ``flow_rate`` ml every half second."""
        self.water_needed = water_needed
        self.flow_rate = flow_rate
        self.water_dispensed_ml = 0
        log.debug("pump water: needed %d, flow rate %d", water_needed, flow_rate)
        if water_needed + 10 >= self.current_water_amount:
            self.not_enough_water.emit()
            return
        self._pump_water_timer.start(500)

    def reduce_water(self) -> None:
        """One water pump step."""
        if self.water_needed <= self.water_dispensed_ml:
            self._pump_water_timer.stop()
            self.water_dispensed.emit()
            return
        if self.current_water_amount >= self.flow_rate:
            self.current_water_amount -= self.flow_rate
            self.water_dispensed_ml += self.flow_rate
            self.water_dispensing.emit(self.water_dispensed_ml, self.water_needed)
        else:
            self._pump_water_timer.stop()
            self.not_enough_water.emit()

    def fill_fresh_water(self) -> None:
        """Top up the tank while the fresh water valve is open."""
        if self.fresh_water_valve.is_open and self.current_water_amount < self.max_water_amount:
            if self.current_water_amount <= self.max_water_amount - FRESH_WATER_STEP_ML:
                self.current_water_amount += FRESH_WATER_STEP_ML
            else:
                self.current_water_amount = self.max_water_amount

    # pressure

    def update_pressure(self) -> None:
        """Build pressure while the pump runs, release it while it is off."""
        if self.pump.is_running:
            if self.pump_control is None:
                raise SimulationError("no pump control attached")
            target = self.pump_control.target_pressure
            if self.current_pressure < target:
                self.current_pressure += PRESSURE_STEP_MBAR
                self.pressure_updated.emit(self.current_pressure)
            elif self.current_pressure > target:
                log.debug("pressure too high: %d", self.current_pressure)
                self.pressure_too_high.emit()
                self.pressure_updated.emit(self.current_pressure)
        elif self.current_pressure > 0:
            self.current_pressure -= PRESSURE_STEP_MBAR
            self.pressure_updated.emit(self.current_pressure)

    # milk

    def pump_milk(self, milk_needed: int, flow_rate_milk: int, flow_rate_water: int) -> None:
        """Dispense ``milk_needed`` ml of milk, using steam water as it goes."""
        self.milk_needed = milk_needed
        self.flow_rate_water = flow_rate_water
        self.flow_rate_milk = flow_rate_milk
        self.milk_dispensed_ml = 0
        self._pump_milk_timer.start(500)

    def reduce_milk(self) -> None:
        """One milk pump step."""
        if self.milk_needed <= self.milk_dispensed_ml:
            self._pump_milk_timer.stop()
            self.milk_dispensed.emit()
            return
        if self.current_milk_amount >= self.flow_rate_milk:
            self.current_milk_amount -= self.flow_rate_milk
            self.current_water_amount -= self.flow_rate_water
            self.milk_dispensed_ml += self.flow_rate_milk
            self.milk_dispensing.emit(self.milk_dispensed_ml, self.milk_needed)
        else:
            self._pump_milk_timer.stop()
            self.not_enough_milk.emit()