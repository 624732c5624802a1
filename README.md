# kaffeepause

Building blocks for a software model of a coffee vending machine. The
physical side of the machine (coin tubes, beans, water, milk, pressure,
temperature, light sensor readings) is simulated, and time runs on a
virtual clock that only moves when told to, so whole sequences can be
driven and checked in tests without waiting.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `kaffeepause.events`
  - `Signal`: `connect(slot)`, `disconnect(slot)` (raises `ValueError` for
    an unknown slot) and `emit(*args)`, which calls the slots in connection
    order.
  - `Scheduler`: the virtual millisecond clock. `call_later(delay_ms,
    callback)` runs a callback once; `advance(ms)` moves the clock and runs
    what falls due; `run_until(predicate, timeout_ms)` runs callbacks until
    the predicate holds or the timeout passes and returns whether it held.
    `now` and `pending` report the clock and the number of waiting calls.
  - `Timer`: a repeating timer on a `Scheduler`; `start(interval_ms)`,
    `stop()`, `active`, and a `timeout` signal.
- `kaffeepause.enums`: `CoinType`, `SensorName`, `Detection`, `Beans`,
  `Coffee`, `Intensity`, `State`, `Event`, `ButtonName`, `ValveType`,
  `ValveState`, `Mode`, `CoinDestination`, `BlockerStatus`, the `CoinData`
  record and `ButtonArea`, whose `contains(x, y)` tells whether a point lies
  strictly inside a button.
- `kaffeepause.valve.Valve`: a valve of a `ValveType`. Setting `state`
  emits `state_changed(type, state)`; `is_open` reads it; `reset()` closes
  the valve without notifying.
- `kaffeepause.touchscreen.TouchScreen`: `touch(x, y)` records a touch and
  emits `touch_event`; `position` returns the last point; `reset()` clears
  it.
- `kaffeepause.simulation.Simulation`: the environment. It holds coin
  levels and the coin return tray, the coin flap blockers, light sensor
  detections, bean containers and grinding, water and milk pumping,
  pressure build-up and release, water and milk temperature and the fresh
  water supply, each step driven by timers on its `scheduler`. Setting an
  impossible coin level raises `SimulationError`, as does touching a button
  with no touch handler attached or running the pump with no pump control
  attached.
- `kaffeepause.thermoblock.Thermoblock`: heats the simulated water by 5 °C
  every second towards the target of its `mode` (brewing 90 °C, steaming
  120 °C, maintenance 100 °C, standby 60 °C), but only with at least 100 ml
  of water in the tank. On reaching the brewing or steaming target it
  returns to standby and emits `water_temperature_ok` or `steaming_ok`.
- `kaffeepause.touchhandler.TouchHandler`: finds which of the buttons shown
  in the machine's current `State` was touched and acts on it: `start_up`,
  `coffee_selected`, `intensity_confirmed`, `shutdown_requested`, or a
  maintenance, decalcification or shutdown `Event` for the state machine.
- `kaffeepause.startup.StartUpManager`: starts every component, resets
  them, runs the maintenance check and triggers `Event.START_UP` once the
  check reports no open issues, or `Event.ABORT_REQUESTED` otherwise.
  Taking out a cup resets everything again.

## Example

```python
from kaffeepause.enums import ValveState, ValveType
from kaffeepause.events import Scheduler, Timer
from kaffeepause.valve import Valve

valve = Valve(ValveType.WATER)
valve.state = ValveState.OPEN
valve.reset()
assert valve.state is ValveState.CLOSED

clock = Scheduler()
ticks = []
timer = Timer(clock, lambda: ticks.append(clock.now))
timer.start(1000)
clock.advance(3000)
assert ticks == [1000, 2000, 3000]
```

## What the package does not include

The package has no coffee state machine, payment, coin checker, coin
sensor, light sensor, grinder, brewing unit, milk unit, pump control or
maintenance component. `TouchHandler`, `Simulation` and `StartUpManager`
work with any objects that offer the attributes and methods they use
(for example `current_state` and `trigger(event)` on the state machine,
`target_pressure` on the pump control), and these have to be supplied by
the caller. There is also no command-line program and no graphical screen.