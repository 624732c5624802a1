from types import SimpleNamespace

import pytest

from kaffeepause.enums import (
    ButtonName,
    Event,
    Mode,
    SensorName,
    State,
    ValveType,
)
from kaffeepause.events import Signal
from kaffeepause.simulation import Simulation
from kaffeepause.startup import StartUpManager
from kaffeepause.thermoblock import Thermoblock
from kaffeepause.touchhandler import KNOWN_BUTTONS, TouchHandler
from kaffeepause.touchscreen import TouchScreen
from kaffeepause.valve import Valve


class FakeStateMachine:
    def __init__(self):
        self.current_state = State.PREPARATION_START
        self.events = []

    def trigger(self, event):
        self.events.append(event)


class FakeComponent:
    def __init__(self):
        self.resets = 0
        self.starts = 0

    def reset(self):
        self.resets += 1

    def start(self):
        self.starts += 1


class FakePump(FakeComponent):
    is_running = False


class FakeLightSensor(FakeComponent):
    def __init__(self, name):
        super().__init__()
        self.sensor_name = name
        self.cup_taken = Signal()


class FakeMaintenance:
    def __init__(self):
        self.open_issues = []
        self.schedules = 0
        self.maintenance_check_complete = Signal()

    def full_maintenance_schedule(self):
        self.schedules += 1
        self.maintenance_check_complete.emit()


@pytest.fixture
def rig():
    screen = TouchScreen()
    pump = FakePump()
    valves = [
        Valve(ValveType.WATER),
        Valve(ValveType.STEAM),
        Valve(ValveType.MILK),
        Valve(ValveType.SUPPLY),
    ]
    sim = Simulation(screen, pump, valves[3])
    machine = FakeStateMachine()
    handler = TouchHandler(machine, screen)
    thermoblock = Thermoblock(sim)
    sensors = [FakeLightSensor(name) for name in SensorName]
    maintenance = FakeMaintenance()
    parts = {
        name: FakeComponent()
        for name in (
            "brewing_unit",
            "coffee_selection",
            "coffee_waiter",
            "coin_checker",
            "grinder",
            "milk_unit",
            "payment",
            "pump_control",
        )
    }
    manager = StartUpManager(
        state_machine=machine,
        light_sensors=sensors,
        maintenance=maintenance,
        pump=pump,
        simulation=sim,
        thermoblock=thermoblock,
        touch_handler=handler,
        touch_screen=screen,
        valves=valves,
        **parts,
    )
    return SimpleNamespace(
        manager=manager,
        sim=sim,
        machine=machine,
        screen=screen,
        handler=handler,
        thermoblock=thermoblock,
        sensors=sensors,
        maintenance=maintenance,
        parts=parts,
        pump=pump,
        valves=valves,
    )


def test_start_up_triggers_start_event_after_reset(rig):
    rig.manager.start_up()
    assert rig.machine.events == []
    rig.sim.scheduler.advance(500)
    assert rig.machine.events == [Event.START_UP]
    assert rig.manager.reset_done is False
    rig.sim.scheduler.advance(2000)
    assert rig.machine.events == [Event.START_UP]


def test_start_up_starts_components(rig):
    rig.thermoblock.mode = Mode.BREWING
    rig.manager.start_up()
    assert rig.parts["coin_checker"].starts == 1
    assert rig.parts["pump_control"].starts == 1
    assert all(sensor.starts == 1 for sensor in rig.sensors)
    assert rig.thermoblock.mode is Mode.STANDBY


def test_reset_all_resets_components(rig):
    rig.sim.current_temperature = 95
    rig.sim.current_pressure = 9000
    rig.manager.reset_all()
    assert all(part.resets == 1 for name, part in rig.parts.items() if name != "coin_checker")
    assert rig.parts["coin_checker"].resets == 0
    assert rig.pump.resets == 1
    assert all(sensor.resets == 1 for sensor in rig.sensors)
    assert rig.sim.current_temperature == 60
    assert rig.sim.current_pressure == 0
    assert rig.maintenance.schedules == 1
    assert rig.manager.reset_done is True


def test_open_issues_abort(rig):
    rig.maintenance.open_issues = ["milk level"]
    rig.manager.start_up()
    assert rig.machine.events == [Event.ABORT_REQUESTED]
    assert rig.manager.reset_done is False
    rig.sim.scheduler.advance(1500)
    assert Event.START_UP not in rig.machine.events


def test_cup_taken_resets_everything(rig):
    cup = next(s for s in rig.sensors if s.sensor_name is SensorName.CUP_INSERTED)
    other = next(s for s in rig.sensors if s.sensor_name is SensorName.HOPPER)
    cup.cup_taken.emit()
    assert rig.maintenance.schedules == 1
    assert rig.parts["grinder"].resets == 1
    other.cup_taken.emit()
    assert rig.maintenance.schedules == 1


def test_start_button_starts_machine(rig):
    area = KNOWN_BUTTONS[State.PREPARATION_START][0]
    assert area.name is ButtonName.START
    rig.screen.touch(area.begin_x + 1, area.begin_y + 1)
    assert rig.parts["coin_checker"].starts == 1
    assert rig.sim.scheduler.run_until(lambda: bool(rig.machine.events), 1000)
    assert rig.machine.events == [Event.START_UP]


def test_valves_assigned_in_order(rig):
    assert rig.manager.water_valve.type is ValveType.WATER
    assert rig.manager.steam_valve.type is ValveType.STEAM
    assert rig.manager.milk_valve.type is ValveType.MILK
    assert rig.manager.fresh_water_valve.type is ValveType.SUPPLY


def test_wrong_number_of_valves_rejected(rig):
    with pytest.raises(ValueError):
        StartUpManager(
            brewing_unit=FakeComponent(),
            coffee_selection=FakeComponent(),
            state_machine=rig.machine,
            coffee_waiter=FakeComponent(),
            coin_checker=FakeComponent(),
            grinder=FakeComponent(),
            light_sensors=[],
            maintenance=FakeMaintenance(),
            milk_unit=FakeComponent(),
            payment=FakeComponent(),
            pump=FakePump(),
            pump_control=FakeComponent(),
            simulation=rig.sim,
            thermoblock=rig.thermoblock,
            touch_handler=rig.handler,
            touch_screen=rig.screen,
            valves=rig.valves[:2],
        )